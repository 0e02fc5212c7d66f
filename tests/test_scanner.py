from __future__ import annotations

from pathlib import Path

import pytest

from parabatch.errors import NoTestsDiscovered, PathNotFound
from parabatch.models import SuitePath
from parabatch.scanner import dedupe, scan_path, scan_paths


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")
    return path


def _layout(root: Path) -> None:
    _touch(root / "BTest.py")
    _touch(root / "ATest.py")
    _touch(root / "helpers.py")
    _touch(root / "nested" / "deep" / "CTest.py")
    _touch(root / "nested" / "README.md")


def test_directory_scan_is_recursive_sorted_and_filtered(tmp_path: Path) -> None:
    _layout(tmp_path)

    found = scan_path(str(tmp_path))

    assert found == [
        str(tmp_path / "ATest.py"),
        str(tmp_path / "BTest.py"),
        str(tmp_path / "nested" / "deep" / "CTest.py"),
    ]


def test_explicit_file_is_kept_even_without_test_suffix(tmp_path: Path) -> None:
    helper = _touch(tmp_path / "helpers.py")
    assert scan_path(str(helper)) == [str(helper)]


def test_explicit_non_python_file_is_ignored(tmp_path: Path) -> None:
    readme = _touch(tmp_path / "README.md")
    assert scan_path(str(readme)) == []


def test_suite_path_pattern_overrides_default(tmp_path: Path) -> None:
    _layout(tmp_path)
    _touch(tmp_path / "check_case.py")

    found = scan_path(SuitePath.from_suffix(str(tmp_path), "_case.py"))

    assert found == [str(tmp_path / "check_case.py")]


def test_missing_path_raises(tmp_path: Path) -> None:
    with pytest.raises(PathNotFound, match="not a valid directory or file"):
        scan_path(str(tmp_path / "nope"))


def test_scan_paths_dedupes_overlapping_roots(tmp_path: Path) -> None:
    _layout(tmp_path)
    a = str(tmp_path / "ATest.py")

    found = scan_paths([a, str(tmp_path)])

    assert found[0] == a
    assert found.count(a) == 1
    assert len(found) == 3


def test_scan_paths_with_nothing_matching_raises(tmp_path: Path) -> None:
    _touch(tmp_path / "helpers.py")
    with pytest.raises(NoTestsDiscovered):
        scan_paths([str(tmp_path)])


def test_scan_paths_with_no_roots_raises() -> None:
    with pytest.raises(NoTestsDiscovered):
        scan_paths([])


def test_dedupe_keeps_first_occurrence() -> None:
    assert dedupe(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
