"""
dirsnap

Walks a directory tree, applies ignore-file rules, glob exclusions and
hidden/depth/symlink policy, renders a deterministic tree of what survives
and captures the content of every surviving file.
"""

__version__ = "0.1.0"

from .core.engine import SnapshotEngine, SnapshotStream, snapshot
from .models.entries import FileEntry, SnapshotResult
from .models.options import BinaryDetection, SnapshotBuilder, SnapshotOptions
from .utils.exceptions import (
    FileReadError,
    InvalidPathError,
    SnapshotError,
    WalkError,
)

__all__ = [
    "snapshot",
    "SnapshotEngine",
    "SnapshotStream",
    "SnapshotOptions",
    "SnapshotBuilder",
    "BinaryDetection",
    "FileEntry",
    "SnapshotResult",
    "SnapshotError",
    "FileReadError",
    "WalkError",
    "InvalidPathError",
]
