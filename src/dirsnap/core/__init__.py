"""
Core traversal, tree rendering and snapshot orchestration.
"""

from .engine import SnapshotEngine, SnapshotStream, snapshot
from .tree import build_tree_from_entries
from .walker import Walker, compile_glob

__all__ = [
    "snapshot",
    "SnapshotEngine",
    "SnapshotStream",
    "Walker",
    "compile_glob",
    "build_tree_from_entries",
]
