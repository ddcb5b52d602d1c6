"""
Utility modules for dirsnap.
"""

from .exceptions import (
    BinaryDetectionError,
    FileReadError,
    InvalidPathError,
    OutputError,
    SnapshotError,
    WalkError,
)
from .logging import LoggerMixin, get_logger, setup_logging

__all__ = [
    "SnapshotError",
    "FileReadError",
    "WalkError",
    "InvalidPathError",
    "BinaryDetectionError",
    "OutputError",
    "setup_logging",
    "get_logger",
    "LoggerMixin",
]
