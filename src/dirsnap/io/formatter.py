"""
Output formatting for snapshot results: JSON, Markdown and plain text.
"""

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from ..models.entries import FileEntry, SnapshotResult
from ..utils.exceptions import OutputError
from ..utils.logging import LoggerMixin


class OutputFormat(str, Enum):
    """Supported output formats."""

    MARKDOWN = "markdown"
    TEXT = "text"
    JSON = "json"

    @property
    def extension(self) -> str:
        return {
            OutputFormat.MARKDOWN: "md",
            OutputFormat.TEXT: "txt",
            OutputFormat.JSON: "json",
        }[self]


_LANGUAGES = {
    "rs": "rust",
    "toml": "toml",
    "json": "json",
    "md": "markdown",
    "markdown": "markdown",
    "txt": "text",
    "html": "html",
    "htm": "html",
    "css": "css",
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "sh": "bash",
    "bash": "bash",
    "yml": "yaml",
    "yaml": "yaml",
    "xml": "xml",
    "c": "c",
    "h": "c",
    "cpp": "cpp",
    "cc": "cpp",
    "cxx": "cpp",
    "hpp": "cpp",
    "go": "go",
    "rb": "ruby",
    "php": "php",
    "swift": "swift",
    "kt": "kotlin",
    "kts": "kotlin",
    "scala": "scala",
    "dart": "dart",
}


def language_from_extension(ext: str) -> str:
    """Map a file extension (with or without the dot) to a code fence language."""
    return _LANGUAGES.get(ext.lstrip(".").lower(), "")


def _code_block(content: str, lang: str = "") -> str:
    block = f"```{lang}\n{content}"
    if not content.endswith("\n"):
        block += "\n"
    return block + "```\n"


@dataclass
class FormatOptions:
    """Options for JSON output formatting."""

    indent: Optional[int] = 2
    ensure_ascii: bool = False


class OutputFormatter(LoggerMixin):
    """Renders snapshot results and streamed entries as text."""

    def __init__(self, options: Optional[FormatOptions] = None):
        """Initialise formatter with JSON formatting options."""
        self.options = options or FormatOptions()

    def format(
        self, result: SnapshotResult, output_format: OutputFormat, pretty: bool = False
    ) -> str:
        """Format a snapshot result in the requested format."""
        if output_format is OutputFormat.MARKDOWN:
            return self.format_markdown(result)
        elif output_format is OutputFormat.TEXT:
            return self.format_text(result)
        elif output_format is OutputFormat.JSON:
            return self._dumps(result.to_dict(), pretty)
        raise OutputError(
            f"Unsupported output format: {output_format}",
            output_format=str(output_format),
        )

    def format_markdown(self, result: SnapshotResult) -> str:
        """Tree as a code block, then one section per file."""
        parts = [_code_block(result.tree)]
        for entry in result.files:
            parts.append(f"## {entry.path}\n\n")
            lang = language_from_extension(entry.path.suffix)
            parts.append(_code_block(entry.content, lang))
        return "".join(parts)

    def format_text(self, result: SnapshotResult) -> str:
        """Plain text with simple separators."""
        parts = ["Directory Tree:\n", result.tree]
        if not result.tree.endswith("\n"):
            parts.append("\n")
        parts.append("\n\nFiles:\n")

        for entry in result.files:
            parts.append(f"\n--- {entry.path} ---\n")
            parts.append(entry.content)
            if not entry.content.endswith("\n"):
                parts.append("\n")
        return "".join(parts)

    def format_entry(self, entry: FileEntry, pretty: bool = False) -> str:
        """Serialize one streamed entry as JSON."""
        return self._dumps(entry.to_dict(), pretty)

    def write(
        self,
        result: SnapshotResult,
        output_format: OutputFormat,
        output_path: Path,
        pretty: bool = False,
    ) -> None:
        """Write the formatted result to a file."""
        text = self.format(result, output_format, pretty)
        self.write_text(text, output_path, output_format.value)

    def write_text(self, text: str, output_path: Path, output_format: str) -> None:
        """
        Write already rendered output to a file.

        Raises:
            OutputError: If the file cannot be written
        """
        try:
            output_path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise OutputError(
                f"Failed to write output to {output_path}: {e}",
                output_path=str(output_path),
                output_format=output_format,
            ) from e

        self.log_info(
            "Snapshot written",
            output_path=str(output_path),
            format=output_format,
            size_chars=len(text),
        )

    def _dumps(self, data: dict[str, Any], pretty: bool) -> str:
        try:
            if pretty:
                return json.dumps(
                    data,
                    indent=self.options.indent,
                    ensure_ascii=self.options.ensure_ascii,
                )
            return json.dumps(
                data, separators=(",", ":"), ensure_ascii=self.options.ensure_ascii
            )
        except (TypeError, ValueError) as e:
            raise OutputError(
                f"JSON serialization error: {e}", output_format="json"
            ) from e


def format_result(
    result: SnapshotResult, output_format: OutputFormat, pretty: bool = False
) -> str:
    """Formats the snapshot result into a string."""
    return OutputFormatter().format(result, output_format, pretty)


def format_entry_json(entry: FileEntry, pretty: bool = False) -> str:
    """Formats one streamed entry as JSON."""
    return OutputFormatter().format_entry(entry, pretty)


def write_result_to_file(
    result: SnapshotResult,
    output_format: OutputFormat,
    path: Path,
    pretty: bool = False,
) -> None:
    """Writes the formatted result to a file."""
    OutputFormatter().write(result, output_format, Path(path), pretty)


def write_output(text: str, path: Path, output_format: str) -> None:
    """Writes already rendered output to a file."""
    OutputFormatter().write_text(text, Path(path), output_format)
