from pathlib import Path

import pytest
from pydantic import ValidationError

from dirsnap import BinaryDetection, SnapshotBuilder, SnapshotOptions


def test_defaults():
    options = SnapshotOptions()
    assert options.root == Path(".")
    assert options.respect_gitignore is True
    assert options.max_depth is None
    assert options.include_hidden is False
    assert options.follow_links is False
    assert options.ignore_patterns == ()
    assert options.file_size_limit is None
    assert options.binary_detection is BinaryDetection.SIMPLE
    assert options.include_file_size is False


def test_options_are_frozen():
    options = SnapshotOptions(root="src")
    with pytest.raises(ValidationError):
        options.include_hidden = True


def test_builder_sets_every_field():
    options = (
        SnapshotBuilder("src")
        .respect_gitignore(False)
        .max_depth(3)
        .include_hidden(True)
        .follow_links(True)
        .ignore_patterns(["*.log", "*/build"])
        .file_size_limit(1024)
        .binary_detection(BinaryDetection.ACCURATE)
        .include_file_size(True)
        .build()
    )
    assert options.root == Path("src")
    assert options.respect_gitignore is False
    assert options.max_depth == 3
    assert options.include_hidden is True
    assert options.follow_links is True
    assert options.ignore_patterns == ("*.log", "*/build")
    assert options.file_size_limit == 1024
    assert options.binary_detection is BinaryDetection.ACCURATE
    assert options.include_file_size is True


def test_no_limit_depth_clears_depth():
    options = SnapshotBuilder(".").max_depth(2).no_limit_depth().build()
    assert options.max_depth is None


def test_binary_detection_accepts_names_in_any_case():
    assert SnapshotOptions(binary_detection="NONE").binary_detection is BinaryDetection.NONE
    with pytest.raises(ValidationError):
        SnapshotOptions(binary_detection="magic")


@pytest.mark.parametrize(
    "fields",
    [{"max_depth": -1}, {"file_size_limit": -5}, {"root": ""}, {"root": "   "}],
)
def test_invalid_values_are_rejected(fields):
    with pytest.raises(ValidationError):
        SnapshotOptions(**fields)


def test_from_cli_args():
    options = SnapshotOptions.from_cli_args(
        {
            "root": Path("docs"),
            "no_gitignore": True,
            "max_depth": 2,
            "hidden": True,
            "follow_links": False,
            "ignore_patterns": ["*.tmp"],
            "file_size_limit": 10,
            "binary_detection": "accurate",
            "include_size": True,
        }
    )
    assert options.root == Path("docs")
    assert options.respect_gitignore is False
    assert options.max_depth == 2
    assert options.include_hidden is True
    assert options.ignore_patterns == ("*.tmp",)
    assert options.file_size_limit == 10
    assert options.binary_detection is BinaryDetection.ACCURATE
    assert options.include_file_size is True


def test_options_can_be_shared_between_scans():
    options = SnapshotOptions(root="src", ignore_patterns=["*.log"])
    assert options == SnapshotOptions(root=Path("src"), ignore_patterns=("*.log",))
    assert hash(options) == hash(SnapshotOptions(root="src", ignore_patterns=["*.log"]))
