"""
Snapshot engine: walks, renders the tree and captures file content.
"""

import time
from collections.abc import Iterator
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Union

from ..io.content_reader import ContentReader
from ..models.entries import FileEntry, SnapshotResult
from ..models.options import SnapshotOptions
from ..utils.exceptions import SnapshotError, WalkError
from ..utils.logging import LoggerMixin
from .tree import build_tree_from_entries
from .walker import Walker

StreamItem = Union[FileEntry, SnapshotError]


class SnapshotEngine(LoggerMixin):
    """
    Orchestrates a complete (eager) snapshot.

    The engine:
    1. Walks the root with ignore rules and exclusion globs applied
    2. Renders a tree over every walked entry
    3. Reads each regular file, sequentially or on a thread pool
    4. Returns the tree and files in discovery order
    """

    def __init__(
        self,
        options: SnapshotOptions,
        parallel: bool = False,
        max_workers: Optional[int] = None,
    ):
        """Initialise the engine for one set of options."""
        self.options = options
        self.parallel = parallel
        self.max_workers = max_workers
        self.reader = ContentReader.from_options(options)

    def run(self) -> SnapshotResult:
        """
        Perform the snapshot.

        Returns:
            Tree string and captured files

        Raises:
            InvalidPathError: If the root does not exist
            WalkError: If a glob is malformed, traversal fails or an entry cannot
                be stat'ed
            FileReadError: On the first file that cannot be read
        """
        self.log_operation(
            "snapshot", root=str(self.options.root), parallel=self.parallel
        )
        start_time = time.perf_counter()

        walker = Walker(self.options)
        all_entries = walker.collect_entries()
        tree = build_tree_from_entries(self.options.root, all_entries)

        file_paths = [path for path in all_entries if walker.is_file(path)]

        if self.parallel:
            files = self._process_files_parallel(file_paths)
        else:
            files = self._process_files(file_paths)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        self.log_success(
            "snapshot",
            entries=len(all_entries),
            files=len(files),
            binary=sum(1 for entry in files if entry.is_binary),
            elapsed_ms=f"{elapsed_ms:.1f}",
        )
        return SnapshotResult(tree=tree, files=tuple(files))

    def _process_files(self, paths: list[Path]) -> list[FileEntry]:
        """Process files sequentially."""
        return [self.reader.build_entry(path) for path in paths]

    def _process_files_parallel(self, paths: list[Path]) -> list[FileEntry]:
        """Process files on a thread pool, keeping results in input order."""
        if not paths:
            return []

        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="dirsnap"
        ) as executor:
            futures: list[Future] = [
                executor.submit(self.reader.build_entry, path) for path in paths
            ]
            files = []
            try:
                for future in futures:
                    files.append(future.result())
            except SnapshotError as e:
                for future in futures:
                    future.cancel()
                self.log_error("parallel file processing", e)
                raise
        return files


class SnapshotStream(LoggerMixin):
    """
    Lazy iterator over captured files.

    Each ``next()`` walks to the next regular file and reads it. Per-item
    failures (walk errors, unreadable files) are returned as
    :class:`SnapshotError` instances instead of being raised, so iteration
    can continue past them. The tree is not computed in streaming mode.
    """

    def __init__(self, options: SnapshotOptions):
        """
        Create a stream for the given options.

        Raises:
            InvalidPathError: If the root does not exist
            WalkError: If an exclusion glob is malformed
        """
        self.options = options
        self.reader = ContentReader.from_options(options)
        self._paths: Iterator[Union[Path, WalkError]] = Walker(options).iter_files()

    def __iter__(self) -> "SnapshotStream":
        return self

    def __next__(self) -> StreamItem:
        item = next(self._paths)
        if isinstance(item, WalkError):
            return item
        try:
            return self.reader.build_entry(item)
        except SnapshotError as e:
            self.log_warning("Skipping unreadable file", file_path=str(item), error=e)
            return e

    def close(self) -> None:
        """Stop walking and release any open directory handles."""
        close = getattr(self._paths, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "SnapshotStream":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def snapshot(
    options: SnapshotOptions,
    *,
    parallel: bool = False,
    max_workers: Optional[int] = None,
) -> SnapshotResult:
    """
    Walk ``options.root`` and return its tree and file contents.

    Example::

        options = SnapshotBuilder(".").file_size_limit(10 * 1024 * 1024).build()
        result = snapshot(options)
        print(result.tree)
    """
    return SnapshotEngine(options, parallel=parallel, max_workers=max_workers).run()
