"""
Content reading with binary detection and a size ceiling.
"""

import codecs
import os
from pathlib import Path
from typing import Optional

import chardet

from ..models.entries import FileEntry
from ..models.options import BinaryDetection, SnapshotOptions
from ..utils.exceptions import BinaryDetectionError, handle_snapshot_error
from ..utils.logging import LoggerMixin

PROBE_SIZE = 4096

TOO_LARGE_PLACEHOLDER = "[File too large, content omitted]"
BINARY_PLACEHOLDER = "[Binary file, content omitted]"

_TEXT_BOMS = (
    codecs.BOM_UTF8,
    codecs.BOM_UTF32_LE,
    codecs.BOM_UTF32_BE,
    codecs.BOM_UTF16_LE,
    codecs.BOM_UTF16_BE,
)
_BINARY_SIGNATURES = (b"%PDF-",)
_TEXT_BYTES = frozenset({7, 8, 9, 10, 12, 13, 27} | set(range(32, 127)))
_NON_TEXT_RATIO = 0.30
_MIN_ENCODING_CONFIDENCE = 0.7


def looks_binary(probe: bytes) -> bool:
    """
    Classify a probe window with a general text/binary heuristic.

    Byte-order marks mark text and known binary signatures or zero bytes
    mark binary. When a large share of the bytes falls outside printable
    ASCII, the window is text only if chardet can name an encoding for it
    with reasonable confidence.
    """
    if not probe:
        return False

    if probe.startswith(_TEXT_BOMS):
        return False

    if probe.startswith(_BINARY_SIGNATURES):
        return True

    if b"\x00" in probe:
        return True

    non_text = sum(b not in _TEXT_BYTES for b in probe)
    if non_text / len(probe) <= _NON_TEXT_RATIO:
        return False

    detection = chardet.detect(probe)
    encoding = detection.get("encoding")
    confidence = detection.get("confidence") or 0.0
    return not (encoding and confidence > _MIN_ENCODING_CONFIDENCE)


class ContentReader(LoggerMixin):
    """Reads file content subject to binary detection and a size ceiling."""

    def __init__(
        self,
        binary_detection: BinaryDetection = BinaryDetection.SIMPLE,
        size_limit: Optional[int] = None,
        include_file_size: bool = False,
    ):
        """Initialise content reader with configuration."""
        self.binary_detection = binary_detection
        self.size_limit = size_limit
        self.include_file_size = include_file_size

    @classmethod
    def from_options(cls, options: SnapshotOptions) -> "ContentReader":
        """Create a reader configured from snapshot options."""
        return cls(
            binary_detection=options.binary_detection,
            size_limit=options.file_size_limit,
            include_file_size=options.include_file_size,
        )

    def is_binary(self, probe: bytes) -> bool:
        """Classify a probe window with the configured strategy."""
        if self.binary_detection is BinaryDetection.SIMPLE:
            return b"\x00" in probe
        elif self.binary_detection is BinaryDetection.ACCURATE:
            return looks_binary(probe)
        elif self.binary_detection is BinaryDetection.NONE:
            return False
        raise BinaryDetectionError(
            f"Unknown binary detection method: {self.binary_detection}"
        )

    def read_file(self, file_path: Path) -> tuple[str, bool]:
        """
        Read a file's content with binary detection and size limit.

        Args:
            file_path: Regular file to read

        Returns:
            Tuple of (content, is_binary). Oversized and binary files yield a
            placeholder instead of their content.

        Raises:
            FileReadError: If the file cannot be stated, opened or read
        """
        operation = "stat"
        try:
            if self.size_limit is not None:
                size = os.stat(file_path).st_size
                if size > self.size_limit:
                    self.log_debug(
                        "File too large, skipping content",
                        file_path=str(file_path),
                        size_bytes=size,
                        limit_bytes=self.size_limit,
                    )
                    return TOO_LARGE_PLACEHOLDER, False

            operation = "open"
            with open(file_path, "rb") as f:
                operation = "read"
                probe = f.read(PROBE_SIZE)

                if self.is_binary(probe):
                    self.log_debug("Binary file detected", file_path=str(file_path))
                    return BINARY_PLACEHOLDER, True

                data = probe + f.read()

        except OSError as e:
            raise handle_snapshot_error(
                e, {"file_path": str(file_path), "operation": operation}
            ) from e

        return data.decode("utf-8", errors="replace"), False

    def file_size(self, file_path: Path) -> int:
        """Return the size of a file in bytes."""
        try:
            return os.stat(file_path).st_size
        except OSError as e:
            raise handle_snapshot_error(
                e, {"file_path": str(file_path), "operation": "stat"}
            ) from e

    def build_entry(self, file_path: Path) -> FileEntry:
        """Read one file into a FileEntry."""
        content, is_binary = self.read_file(file_path)
        size = self.file_size(file_path) if self.include_file_size else None
        return FileEntry(
            path=file_path, content=content, is_binary=is_binary, size=size
        )
