from pathlib import Path

from hypothesis import given
from hypothesis import strategies as st

from dirsnap.core.tree import build_tree_from_entries

ROOT = Path("/project")


def test_empty_root_renders_only_header():
    assert build_tree_from_entries(ROOT, []) == ".  # /project"


def test_root_entry_is_dropped():
    out = build_tree_from_entries(ROOT, [ROOT, ROOT / "a.txt"])
    assert out.splitlines() == [".  # /project", "├── a.txt"]


def test_nested_entries_are_prefixed_per_level():
    entries = [
        ROOT / "src",
        ROOT / "src" / "lib",
        ROOT / "src" / "lib" / "mod.rs",
        ROOT / "main.rs",
    ]
    lines = build_tree_from_entries(ROOT, entries).splitlines()
    assert lines[1:] == [
        "├── main.rs",
        "├── src",
        "│   ├── lib",
        "│   │   ├── mod.rs",
    ]


def test_sorting_is_component_wise_not_raw_string():
    # As raw strings "a-b" < "a/b" because "-" sorts before "/"
    entries = [ROOT / "a-b", ROOT / "a" / "b", ROOT / "a"]
    lines = build_tree_from_entries(ROOT, entries).splitlines()
    assert lines[1:] == ["├── a", "│   ├── b", "├── a-b"]


def test_relative_root():
    root = Path("project")
    out = build_tree_from_entries(root, [root, root / "x.txt"])
    assert out.splitlines() == [".  # project", "├── x.txt"]


_ENTRIES = [
    ROOT / "docs",
    ROOT / "docs" / "index.md",
    ROOT / "src",
    ROOT / "src" / "a.py",
    ROOT / "src" / "b.py",
    ROOT / "src" / "pkg",
    ROOT / "src" / "pkg" / "__init__.py",
    ROOT / "README.md",
]


@given(st.permutations(_ENTRIES))
def test_output_is_independent_of_input_order(entries):
    assert build_tree_from_entries(ROOT, entries) == build_tree_from_entries(
        ROOT, _ENTRIES
    )


@given(
    st.lists(
        st.text(alphabet="abcdefghijklmnopqrstuvwxyz_", min_size=1, max_size=8),
        max_size=20,
    )
)
def test_exactly_one_header_line_naming_the_root(names):
    lines = build_tree_from_entries(ROOT, [ROOT / name for name in names]).splitlines()
    headers = [line for line in lines if line.startswith(".  # ")]
    assert headers == [".  # /project"]
    assert lines[0] == ".  # /project"
    assert len(lines) == len(names) + 1
