"""
Result models produced by a snapshot.
"""

from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class FileEntry(BaseModel):
    """One regular file captured by a snapshot."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(..., description="Path as yielded by the walker")
    content: str = Field(..., description="File text or a placeholder")
    is_binary: bool = Field(default=False, description="File was classified binary")
    size: Optional[int] = Field(
        default=None, ge=0, description="Size in bytes, when requested"
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dictionary, omitting an absent size."""
        return self.model_dump(mode="json", exclude_none=True)


class SnapshotResult(BaseModel):
    """Tree rendering plus captured files, in discovery order."""

    model_config = ConfigDict(frozen=True)

    tree: str = Field(..., description="Rendered directory tree")
    files: tuple[FileEntry, ...] = Field(
        default=(), description="Captured files in walker discovery order"
    )

    @property
    def paths(self) -> list[Path]:
        """Paths of all captured files."""
        return [entry.path for entry in self.files]

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dictionary."""
        return {
            "tree": self.tree,
            "files": [entry.to_dict() for entry in self.files],
        }
