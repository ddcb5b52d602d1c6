"""
Input/Output modules for reading file content and rendering results.
"""

from .content_reader import (
    BINARY_PLACEHOLDER,
    PROBE_SIZE,
    TOO_LARGE_PLACEHOLDER,
    ContentReader,
    looks_binary,
)
from .formatter import (
    FormatOptions,
    OutputFormat,
    OutputFormatter,
    format_entry_json,
    format_result,
    language_from_extension,
    write_output,
    write_result_to_file,
)

__all__ = [
    # Content reading
    "ContentReader",
    "looks_binary",
    "PROBE_SIZE",
    "BINARY_PLACEHOLDER",
    "TOO_LARGE_PLACEHOLDER",
    # Output
    "OutputFormat",
    "OutputFormatter",
    "FormatOptions",
    "format_result",
    "format_entry_json",
    "write_result_to_file",
    "write_output",
    "language_from_extension",
]
