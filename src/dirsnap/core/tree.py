"""
Deterministic tree rendering from a flat list of walked paths.
"""

from collections.abc import Iterable
from pathlib import Path

BRANCH = "├── "
PIPE = "│   "


def _relative_to_root(entry: Path, root: Path) -> Path:
    try:
        return entry.relative_to(root)
    except ValueError:
        return entry


def build_tree_from_entries(root: Path, entries: Iterable[Path]) -> str:
    """
    Build a visual tree string from a root directory and the walked entries.

    The root itself is dropped from ``entries``; everything else is sorted by
    path components (not by raw string, so separators cannot perturb the
    order) and rendered one line per entry with ``│   `` repeated once per
    ancestor level followed by ``├── ``. The first line names the root.

    Args:
        root: Root the entries were walked from
        entries: Files and directories yielded by the walker

    Returns:
        The rendered tree, lines joined with ``\\n``
    """
    root = Path(root)
    relatives = [
        _relative_to_root(Path(entry), root) for entry in entries if Path(entry) != root
    ]
    relatives.sort(key=lambda p: p.parts)

    lines = [f".  # {root}"]
    for relative in relatives:
        depth = len(relative.parts)
        prefix = PIPE * (depth - 1) + BRANCH if depth else ""
        lines.append(f"{prefix}{relative.name}")

    return "\n".join(lines)
