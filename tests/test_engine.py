import sys
from pathlib import Path

import pytest

from dirsnap import (
    BinaryDetection,
    FileEntry,
    FileReadError,
    InvalidPathError,
    SnapshotBuilder,
    SnapshotError,
    SnapshotStream,
    WalkError,
    snapshot,
)
from dirsnap.io.content_reader import ContentReader


def _make_file(p: Path, content="x") -> Path:
    p.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        p.write_bytes(content)
    else:
        p.write_text(content, encoding="utf-8")
    return p


def _fail_on(monkeypatch, name: str) -> None:
    """Make reading any file called ``name`` fail."""
    original = ContentReader.read_file

    def flaky(self, file_path):
        if file_path.name == name:
            raise FileReadError(
                f"I/O error on {file_path}: simulated failure",
                file_path=str(file_path),
                operation="read",
            )
        return original(self, file_path)

    monkeypatch.setattr(ContentReader, "read_file", flaky)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    _make_file(tmp_path / "main.txt", "fn main() {}")
    _make_file(tmp_path / "src" / "lib.txt", "pub fn test() {}")
    return tmp_path


def test_full_flow(project: Path):
    result = snapshot(SnapshotBuilder(project).include_file_size(True).build())

    assert "main.txt" in result.tree
    assert len(result.files) == 2
    assert [f.path for f in result.files] == [
        project / "main.txt",
        project / "src" / "lib.txt",
    ]
    assert result.files[0].content == "fn main() {}"
    assert result.files[1].content == "pub fn test() {}"
    assert all(f.size is not None for f in result.files)


def test_tree_covers_directories_and_files(project: Path):
    result = snapshot(SnapshotBuilder(project).build())
    assert result.tree.splitlines() == [
        f".  # {project}",
        "├── main.txt",
        "├── src",
        "│   ├── lib.txt",
    ]


def test_size_is_omitted_by_default(project: Path):
    result = snapshot(SnapshotBuilder(project).build())
    assert all(f.size is None for f in result.files)


def test_basic_scan_without_detection(tmp_path: Path):
    _make_file(tmp_path / "hello.txt", "hello world")
    result = snapshot(
        SnapshotBuilder(tmp_path).binary_detection(BinaryDetection.NONE).build()
    )
    assert len(result.files) == 1
    assert result.files[0].content == "hello world"


def test_exclusion_glob_removes_file_from_tree_and_files(tmp_path: Path):
    _make_file(tmp_path / "a.txt", "a")
    _make_file(tmp_path / "b.log", "b")

    result = snapshot(SnapshotBuilder(tmp_path).ignore_patterns(["*.log"]).build())

    assert len(result.files) == 1
    assert result.files[0].path.name == "a.txt"
    assert "b.log" not in result.tree


def test_file_size_limit(tmp_path: Path):
    _make_file(tmp_path / "big.txt", "A" * 5000)
    result = snapshot(SnapshotBuilder(tmp_path).file_size_limit(100).build())
    assert "File too large" in result.files[0].content
    assert result.files[0].is_binary is False


def test_binary_detection_simple(tmp_path: Path):
    _make_file(tmp_path / "bin.dat", bytes([0, 1, 2, 3]))
    result = snapshot(
        SnapshotBuilder(tmp_path).binary_detection(BinaryDetection.SIMPLE).build()
    )
    assert result.files[0].is_binary is True
    assert result.files[0].content == "[Binary file, content omitted]"


def test_empty_root_has_header_only(tmp_path: Path):
    result = snapshot(SnapshotBuilder(tmp_path).build())
    assert result.tree == f".  # {tmp_path}"
    assert result.files == ()


def test_snapshot_is_idempotent(project: Path):
    _make_file(project / "data.bin", b"\x00\x01")
    options = SnapshotBuilder(project).include_file_size(True).build()

    first = snapshot(options)
    second = snapshot(options)
    assert first == second
    assert first.to_dict() == second.to_dict()


def test_parallel_matches_sequential(tmp_path: Path):
    for i in range(25):
        _make_file(tmp_path / f"dir{i % 4}" / f"file{i:02}.txt", f"content {i}\n" * i)
    _make_file(tmp_path / "blob.bin", bytes(range(256)))
    options = SnapshotBuilder(tmp_path).include_file_size(True).build()

    sequential = snapshot(options)
    parallel = snapshot(options, parallel=True, max_workers=4)

    assert parallel == sequential
    assert [f.path for f in parallel.files] == [f.path for f in sequential.files]


@pytest.mark.parametrize("parallel", [False, True])
def test_first_read_failure_aborts_eager_scan(tmp_path: Path, monkeypatch, parallel):
    _make_file(tmp_path / "a.txt")
    _make_file(tmp_path / "bad.txt")
    _make_file(tmp_path / "c.txt")
    _fail_on(monkeypatch, "bad.txt")

    with pytest.raises(FileReadError) as excinfo:
        snapshot(SnapshotBuilder(tmp_path).build(), parallel=parallel)
    assert excinfo.value.file_path == str(tmp_path / "bad.txt")


def test_invalid_glob_aborts_before_traversal(tmp_path: Path):
    with pytest.raises(WalkError):
        snapshot(SnapshotBuilder(tmp_path).ignore_patterns(["[oops"]).build())


def test_missing_root(tmp_path: Path):
    with pytest.raises(InvalidPathError):
        snapshot(SnapshotBuilder(tmp_path / "missing").build())


@pytest.mark.skipif(sys.platform.startswith("win"), reason="Symlink creation needs privileges on Windows")
def test_broken_symlink_is_in_tree_but_not_in_files(tmp_path: Path):
    _make_file(tmp_path / "real.txt", "real")
    (tmp_path / "dangling").symlink_to(tmp_path / "nowhere")

    result = snapshot(SnapshotBuilder(tmp_path).build())
    assert "dangling" in result.tree
    assert [f.path.name for f in result.files] == ["real.txt"]


def test_stream_yields_one_entry_per_file(project: Path):
    stream = SnapshotStream(SnapshotBuilder(project).build())
    items = list(stream)

    assert all(isinstance(item, FileEntry) for item in items)
    assert [item.path for item in items] == [
        project / "main.txt",
        project / "src" / "lib.txt",
    ]
    assert not hasattr(stream, "tree")


def test_stream_matches_eager_files(project: Path):
    options = SnapshotBuilder(project).include_file_size(True).build()
    assert tuple(SnapshotStream(options)) == snapshot(options).files


def test_stream_reports_failure_and_continues(tmp_path: Path, monkeypatch):
    _make_file(tmp_path / "a.txt", "a")
    _make_file(tmp_path / "bad.txt", "b")
    _make_file(tmp_path / "c.txt", "c")
    _fail_on(monkeypatch, "bad.txt")

    items = list(SnapshotStream(SnapshotBuilder(tmp_path).build()))

    assert len(items) == 3
    assert isinstance(items[0], FileEntry)
    assert isinstance(items[1], SnapshotError)
    assert items[1].file_path == str(tmp_path / "bad.txt")
    assert isinstance(items[2], FileEntry)
    assert items[2].content == "c"


def _deny_stat(monkeypatch, name: str) -> None:
    """Make ``Path.is_file`` fail with EACCES for any path called ``name``."""
    original = Path.is_file

    def guarded(self, *args, **kwargs):
        if self.name == name:
            raise PermissionError(13, "Permission denied", str(self))
        return original(self, *args, **kwargs)

    monkeypatch.setattr(Path, "is_file", guarded)


def test_unstatable_entry_fails_eager_scan_with_walk_error(tmp_path: Path, monkeypatch):
    _make_file(tmp_path / "a.txt")
    _make_file(tmp_path / "locked.txt")
    _deny_stat(monkeypatch, "locked.txt")

    with pytest.raises(WalkError) as excinfo:
        snapshot(SnapshotBuilder(tmp_path).build())
    assert excinfo.value.path == str(tmp_path / "locked.txt")


def test_stream_reports_unstatable_entry_and_continues(tmp_path: Path, monkeypatch):
    _make_file(tmp_path / "a.txt", "a")
    _make_file(tmp_path / "locked.txt")
    _make_file(tmp_path / "z.txt", "z")
    _deny_stat(monkeypatch, "locked.txt")

    items = list(SnapshotStream(SnapshotBuilder(tmp_path).build()))

    assert [type(item) for item in items] == [FileEntry, WalkError, FileEntry]
    assert items[1].path == str(tmp_path / "locked.txt")
    assert items[2].content == "z"


def test_stream_is_lazy(tmp_path: Path, monkeypatch):
    for name in ("a.txt", "b.txt", "c.txt"):
        _make_file(tmp_path / name)

    reads = []
    original = ContentReader.read_file

    def counting(self, file_path):
        reads.append(file_path.name)
        return original(self, file_path)

    monkeypatch.setattr(ContentReader, "read_file", counting)

    stream = SnapshotStream(SnapshotBuilder(tmp_path).build())
    assert reads == []
    next(stream)
    assert reads == ["a.txt"]


def test_stream_close_stops_iteration(tmp_path: Path):
    for name in ("a.txt", "b.txt"):
        _make_file(tmp_path / name)

    with SnapshotStream(SnapshotBuilder(tmp_path).build()) as stream:
        first = next(stream)
        assert first.path.name == "a.txt"
    with pytest.raises(StopIteration):
        next(stream)


def test_stream_invalid_glob_fails_at_construction(tmp_path: Path):
    with pytest.raises(WalkError):
        SnapshotStream(SnapshotBuilder(tmp_path).ignore_patterns(["[x"]).build())
