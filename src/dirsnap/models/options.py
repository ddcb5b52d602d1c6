"""
Configuration models for directory snapshots.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BinaryDetection(str, Enum):
    """Method used to decide whether a file is binary."""

    SIMPLE = "simple"  # zero byte in the probe window
    ACCURATE = "accurate"  # text/binary heuristic over the probe window
    NONE = "none"  # every file is text

    @classmethod
    def from_string(cls, value: str) -> "BinaryDetection":
        """Convert string to BinaryDetection, case-insensitive."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise ValueError(
                f"invalid binary detection method: {value} (expected one of {valid})"
            ) from None


class SnapshotOptions(BaseModel):
    """Resolved, immutable configuration for one snapshot."""

    model_config = ConfigDict(frozen=True)

    root: Path = Field(default=Path("."), description="Directory to start walking from")
    respect_gitignore: bool = Field(
        default=True, description="Apply .gitignore and .git/info/exclude rules"
    )
    max_depth: Optional[int] = Field(
        default=None, ge=0, description="Maximum depth to walk (None is unlimited)"
    )
    include_hidden: bool = Field(
        default=False, description="Include dot-prefixed files and directories"
    )
    follow_links: bool = Field(default=False, description="Follow symbolic links")
    ignore_patterns: tuple[str, ...] = Field(
        default=(), description="Glob patterns matched against the full path"
    )
    file_size_limit: Optional[int] = Field(
        default=None, ge=0, description="Files larger than this (bytes) are omitted"
    )
    binary_detection: BinaryDetection = Field(
        default=BinaryDetection.SIMPLE, description="Binary detection strategy"
    )
    include_file_size: bool = Field(
        default=False, description="Report the size of each file"
    )

    @field_validator("root", mode="before")
    @classmethod
    def convert_root(cls, v):
        """Convert string paths to Path objects, rejecting empty ones."""
        if isinstance(v, str):
            if not v.strip():
                raise ValueError("root path must not be empty")
            return Path(v)
        return v

    @field_validator("binary_detection", mode="before")
    @classmethod
    def convert_binary_detection(cls, v):
        """Accept strategy names in any case."""
        if isinstance(v, str) and not isinstance(v, BinaryDetection):
            return BinaryDetection.from_string(v)
        return v

    @classmethod
    def from_cli_args(cls, args: dict[str, Any]) -> "SnapshotOptions":
        """Create options from parsed CLI arguments."""
        return cls(
            root=args.get("root") or Path("."),
            respect_gitignore=not args.get("no_gitignore", False),
            max_depth=args.get("max_depth"),
            include_hidden=args.get("hidden", False),
            follow_links=args.get("follow_links", False),
            ignore_patterns=tuple(args.get("ignore_patterns") or ()),
            file_size_limit=args.get("file_size_limit"),
            binary_detection=args.get("binary_detection") or BinaryDetection.SIMPLE,
            include_file_size=args.get("include_size", False),
        )


class SnapshotBuilder:
    """Fluent builder for :class:`SnapshotOptions`.

    Example::

        options = (
            SnapshotBuilder("src")
            .include_hidden(True)
            .ignore_patterns(["*.log"])
            .file_size_limit(10 * 1024 * 1024)
            .build()
        )
    """

    def __init__(self, root: Any = "."):
        self._fields: dict[str, Any] = {"root": root}

    def respect_gitignore(self, yes: bool) -> "SnapshotBuilder":
        self._fields["respect_gitignore"] = yes
        return self

    def max_depth(self, depth: int) -> "SnapshotBuilder":
        self._fields["max_depth"] = depth
        return self

    def no_limit_depth(self) -> "SnapshotBuilder":
        self._fields["max_depth"] = None
        return self

    def include_hidden(self, yes: bool) -> "SnapshotBuilder":
        self._fields["include_hidden"] = yes
        return self

    def follow_links(self, yes: bool) -> "SnapshotBuilder":
        self._fields["follow_links"] = yes
        return self

    def ignore_patterns(self, patterns: list[str]) -> "SnapshotBuilder":
        """Set glob patterns matched against the full path, e.g. ``"*.tmp"``."""
        self._fields["ignore_patterns"] = tuple(patterns)
        return self

    def file_size_limit(self, limit: Optional[int]) -> "SnapshotBuilder":
        self._fields["file_size_limit"] = limit
        return self

    def binary_detection(self, method: BinaryDetection) -> "SnapshotBuilder":
        self._fields["binary_detection"] = method
        return self

    def include_file_size(self, yes: bool) -> "SnapshotBuilder":
        self._fields["include_file_size"] = yes
        return self

    def build(self) -> SnapshotOptions:
        """Validate and freeze the collected settings."""
        return SnapshotOptions(**self._fields)
