"""
Data models for snapshot configuration and results.
"""

from .entries import FileEntry, SnapshotResult
from .options import BinaryDetection, SnapshotBuilder, SnapshotOptions

__all__ = [
    "BinaryDetection",
    "SnapshotOptions",
    "SnapshotBuilder",
    "FileEntry",
    "SnapshotResult",
]
