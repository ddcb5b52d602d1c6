"""
Custom exceptions for dirsnap.
"""

from typing import Any, Optional


class SnapshotError(Exception):
    """Base exception for snapshot errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class FileReadError(SnapshotError):
    """Exception raised when opening, stating or reading a file fails."""

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
    ):
        details = {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)
        self.file_path = file_path
        self.operation = operation


class WalkError(SnapshotError):
    """Exception raised for a bad exclusion pattern or a traversal failure."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        pattern: Optional[str] = None,
    ):
        details = {}
        if pattern is not None:
            details["pattern"] = pattern
        super().__init__(message, details)
        self.path = path
        self.pattern = pattern


class InvalidPathError(SnapshotError):
    """Exception raised when the root path is malformed or inaccessible."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class BinaryDetectionError(SnapshotError):
    """Exception raised when binary detection cannot classify a probe window."""

    def __init__(self, message: str, file_path: Optional[str] = None):
        details = {}
        if file_path:
            details["file_path"] = file_path
        super().__init__(message, details)
        self.file_path = file_path


class OutputError(SnapshotError):
    """Exception raised when output generation or writing fails."""

    def __init__(
        self,
        message: str,
        output_path: Optional[str] = None,
        output_format: Optional[str] = None,
    ):
        details = {}
        if output_path:
            details["output_path"] = output_path
        if output_format:
            details["output_format"] = output_format
        super().__init__(message, details)
        self.output_path = output_path
        self.output_format = output_format


def handle_snapshot_error(
    error: Exception, context: Optional[dict[str, Any]] = None
) -> SnapshotError:
    """Convert generic exceptions to SnapshotError with context."""
    if isinstance(error, SnapshotError):
        return error

    error_context = context or {}
    file_path = error_context.get("file_path")
    operation = error_context.get("operation")

    if isinstance(error, FileNotFoundError):
        return FileReadError(
            f"I/O error on {file_path}: file not found ({error})",
            file_path=file_path,
            operation=operation,
        )
    elif isinstance(error, PermissionError):
        return FileReadError(
            f"I/O error on {file_path}: permission denied ({error})",
            file_path=file_path,
            operation=operation,
        )
    elif isinstance(error, OSError):
        return FileReadError(
            f"I/O error on {file_path}: {error}",
            file_path=file_path,
            operation=operation,
        )
    else:
        error_context["original_error"] = str(error)
        error_context["error_type"] = type(error).__name__
        return SnapshotError(f"Unexpected error: {error}", details=error_context)
