"""
Directory walking with ignore-file rules, glob exclusions and depth limits.
"""

import fnmatch
import os
import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from re import Pattern
from typing import Optional, Union

import pathspec

from ..models.options import SnapshotOptions
from ..utils.exceptions import InvalidPathError, WalkError
from ..utils.logging import LoggerMixin

GITIGNORE_FILENAME = ".gitignore"
GIT_DIRNAME = ".git"

WalkItem = Union[Path, WalkError]


@dataclass(frozen=True)
class _IgnoreFrame:
    """Rules from one ignore file, anchored at the directory holding it."""

    base: Path
    spec: pathspec.PathSpec

    def verdict(self, path: Path, is_dir: bool) -> Optional[bool]:
        """Return True (ignored), False (re-included) or None (no rule matched)."""
        try:
            relative = path.relative_to(self.base).as_posix()
        except ValueError:
            return None
        if is_dir:
            relative += "/"

        result = None
        for pattern in self.spec.patterns:
            if pattern.include is None:
                continue
            if pattern.match_file(relative):
                result = pattern.include
        return result


def _invalid_glob(pattern: str, reason: str) -> WalkError:
    return WalkError(f"Invalid glob pattern '{pattern}': {reason}", pattern=pattern)


def expand_alternates(pattern: str) -> list[str]:
    """
    Expand ``{a,b}`` alternate groups into plain shell globs.

    Braces and commas inside a ``[...]`` class are literal. Groups do not nest.

    Raises:
        WalkError: If a character class or alternate group is left open,
            groups are nested, or a ``}`` has no matching ``{``
    """
    expansions = [""]
    alternatives: Optional[list[str]] = None
    in_class = False
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "\\":
            token = pattern[i : i + 2]
        elif in_class:
            token = char
            in_class = char != "]"
        elif char == "[":
            in_class = True
            # A leading "]" or "!]" is a literal member of the class
            end = i + 1
            if pattern[end : end + 1] in ("!", "^"):
                end += 1
            if pattern[end : end + 1] == "]":
                end += 1
            token = pattern[i:end]
        elif char == "{":
            if alternatives is not None:
                raise _invalid_glob(pattern, "nested alternate groups")
            alternatives = [""]
            token = ""
        elif char == "}":
            if alternatives is None:
                raise _invalid_glob(pattern, "unopened alternate group")
            expansions = [head + alt for head in expansions for alt in alternatives]
            alternatives = None
            token = ""
        elif char == "," and alternatives is not None:
            alternatives.append("")
            token = ""
        else:
            token = char

        i += max(len(token), 1)
        if alternatives is not None:
            alternatives[-1] += token
        else:
            expansions = [head + token for head in expansions]

    if in_class:
        raise _invalid_glob(pattern, "unclosed character class")
    if alternatives is not None:
        raise _invalid_glob(pattern, "unclosed alternate group")
    return list(dict.fromkeys(expansions))


def compile_glob(pattern: str) -> Pattern:
    """
    Compile a shell-style exclusion glob into a regular expression.

    Supports ``*``, ``?``, ``[...]`` and ``{a,b}`` alternation.

    Raises:
        WalkError: If the pattern is malformed
    """
    alternatives = expand_alternates(pattern)
    try:
        return re.compile("|".join(fnmatch.translate(alt) for alt in alternatives))
    except re.error as e:
        raise _invalid_glob(pattern, str(e)) from e


def find_work_tree(path: Path) -> Optional[Path]:
    """Return the nearest directory at or above ``path`` that holds a ``.git`` entry."""
    start = Path(os.path.abspath(path))
    if not os.path.isdir(start):
        start = start.parent
    for candidate in (start, *start.parents):
        if os.path.lexists(candidate / GIT_DIRNAME):
            return candidate
    return None


class Walker(LoggerMixin):
    """Produces the filtered sequence of paths under a snapshot root."""

    def __init__(self, options: SnapshotOptions):
        """
        Initialise the walker and compile exclusion globs.

        Raises:
            InvalidPathError: If the root does not exist
            WalkError: If an exclusion glob is malformed
        """
        self.options = options
        self.root = Path(options.root)

        if not os.path.lexists(self.root):
            raise InvalidPathError(
                f"Invalid path: {self.root} does not exist", path=str(self.root)
            )

        self._compiled_patterns: list[Pattern] = [
            compile_glob(pattern) for pattern in options.ignore_patterns
        ]
        # Ignore files only count inside a git work tree
        self._work_tree = (
            find_work_tree(self.root) if options.respect_gitignore else None
        )

    def __iter__(self) -> Iterator[WalkItem]:
        """Yield the root, then every surviving entry depth-first, or walk errors."""
        self.log_debug(
            "Walking directory tree", root=str(self.root), work_tree=self._work_tree
        )
        yield self.root

        try:
            root_is_dir = self.root.is_dir()
        except OSError as e:
            yield WalkError(f"Walk error: {self.root}: {e}", path=str(self.root))
            return
        if not root_is_dir or not self._should_descend(0):
            return

        frames: list[_IgnoreFrame] = []
        for ignore_file, base in self._inherited_ignore_files():
            frame, error = self._load_ignore_file(ignore_file, base)
            if error is not None:
                yield error
            if frame is not None:
                frames.append(frame)

        ancestors = {os.path.realpath(self.root)}
        yield from self._walk_directory(self.root, 1, frames, ancestors)

    def collect_entries(self) -> list[Path]:
        """
        Collect all walked paths into a list.

        Raises:
            WalkError: The first traversal failure encountered
        """
        entries = []
        for item in self:
            if isinstance(item, WalkError):
                raise item
            entries.append(item)
        return entries

    def is_file(self, path: Path) -> bool:
        """
        Check whether a walked path is a regular file (symlinks are followed).

        Raises:
            WalkError: If the path cannot be stat'ed
        """
        try:
            return path.is_file()
        except OSError as e:
            raise WalkError(f"Walk error: {path}: {e}", path=str(path)) from e

    def iter_files(self) -> Iterator[WalkItem]:
        """Yield only regular files, passing walk errors through as items."""
        for item in self:
            if isinstance(item, WalkError):
                yield item
                continue
            try:
                if self.is_file(item):
                    yield item
            except WalkError as e:
                self.log_warning(f"Cannot stat {item}: {e.__cause__}")
                yield e

    def is_excluded(self, path: Path) -> bool:
        """Check whether a path matches any exclusion glob."""
        text = str(path)
        return any(pattern.match(text) for pattern in self._compiled_patterns)

    def _should_descend(self, depth: int) -> bool:
        max_depth = self.options.max_depth
        return max_depth is None or depth < max_depth

    def _inherited_ignore_files(self) -> list[tuple[Path, Path]]:
        """
        Ignore files above the root that still govern it, lowest precedence first.

        That is ``.git/info/exclude`` of the work tree, then the ``.gitignore``
        of every directory from the work tree down to the root's parent.
        """
        if self._work_tree is None:
            return []

        work_tree = self._work_tree
        root = Path(os.path.abspath(self.root))
        ignore_files = [(work_tree / GIT_DIRNAME / "info" / "exclude", work_tree)]
        for directory in reversed(root.parents):
            if directory == work_tree or work_tree in directory.parents:
                ignore_files.append((directory / GITIGNORE_FILENAME, directory))
        return ignore_files

    def _walk_directory(
        self,
        directory: Path,
        depth: int,
        frames: list[_IgnoreFrame],
        ancestors: set[str],
    ) -> Iterator[WalkItem]:
        """Recursively walk one directory whose children sit at ``depth``."""
        if self._work_tree is not None:
            frame, error = self._load_ignore_file(
                directory / GITIGNORE_FILENAME, directory
            )
            if error is not None:
                yield error
            if frame is not None:
                frames = frames + [frame]

        try:
            with os.scandir(directory) as it:
                children = sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            self.log_warning(f"Cannot access directory {directory}: {e}")
            yield WalkError(f"Walk error: {directory}: {e}", path=str(directory))
            return

        for child in children:
            path = directory / child.name
            try:
                is_dir = child.is_dir(follow_symlinks=self.options.follow_links)
            except OSError as e:
                yield WalkError(f"Walk error: {path}: {e}", path=str(path))
                continue

            if self._should_skip(path, child.name, is_dir, frames):
                continue

            if is_dir and self.options.follow_links and child.is_symlink():
                target = os.path.realpath(path)
                if target in ancestors:
                    yield WalkError(
                        f"Walk error: file system loop found: {path} points to "
                        f"an ancestor {target}",
                        path=str(path),
                    )
                    continue

            yield path

            if is_dir and self._should_descend(depth):
                yield from self._walk_directory(
                    path,
                    depth + 1,
                    frames,
                    ancestors | {os.path.realpath(path)},
                )

    def _should_skip(
        self, path: Path, name: str, is_dir: bool, frames: list[_IgnoreFrame]
    ) -> bool:
        """Apply ignore-file, hidden and glob policy to one entry."""
        if frames and self._is_ignored(path, is_dir, frames):
            return True

        if not self.options.include_hidden and name.startswith("."):
            return True

        return self.is_excluded(path)

    def _is_ignored(self, path: Path, is_dir: bool, frames: list[_IgnoreFrame]) -> bool:
        # The deepest ignore file with a matching rule decides
        absolute = Path(os.path.abspath(path))
        for frame in reversed(frames):
            verdict = frame.verdict(absolute, is_dir)
            if verdict is not None:
                return verdict
        return False

    def _load_ignore_file(
        self, ignore_file: Path, base: Path
    ) -> tuple[Optional[_IgnoreFrame], Optional[WalkError]]:
        """Parse an ignore file if present; report read failures as walk errors."""
        try:
            if not ignore_file.is_file():
                return None, None
            text = ignore_file.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            self.log_warning(f"Cannot read ignore file {ignore_file}: {e}")
            return None, WalkError(
                f"Walk error: {ignore_file}: {e}", path=str(ignore_file)
            )

        spec = pathspec.PathSpec.from_lines("gitwildmatch", text.splitlines())
        if not spec.patterns:
            return None, None
        self.log_debug(
            "Loaded ignore file", path=str(ignore_file), patterns=len(spec.patterns)
        )
        return _IgnoreFrame(base=Path(os.path.abspath(base)), spec=spec), None
