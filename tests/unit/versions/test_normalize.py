"""Tests for tag normalization and version extraction."""

import pytest

from pkgfeeds.core.versions.fake import FakeVersionComparator
from pkgfeeds.core.versions.normalize import (
    NO_MATCH,
    apply_regex_format,
    select_maximum,
    strip_decorations,
)


@pytest.mark.parametrize(
    "raw",
    ["v1.2.3", "1.2.3", "refs/tags/v1.2.3", "V1.2.3", "refs/tags/1.2.3", "v1.2.3\r\n"],
)
def test_strip_decorations(raw: str) -> None:
    assert strip_decorations(raw) == "1.2.3"


def test_strip_decorations_removes_only_one_leading_v() -> None:
    assert strip_decorations("vv1.0") == "v1.0"
    assert strip_decorations("release-1.0") == "release-1.0"


def test_apply_regex_format_substitutes_groups() -> None:
    result = apply_regex_format("release-69-1", r"^release-([0-9]+)-([0-9]+)$", "$1.$2")

    assert result == "69.1"


def test_apply_regex_format_no_match_is_sentinel() -> None:
    result = apply_regex_format("nightly", r"^release-([0-9]+)$", "$1")

    assert result is NO_MATCH
    assert not result


def test_apply_regex_format_is_anchored_at_start() -> None:
    assert apply_regex_format("x-release-1", r"release-([0-9]+)", "$1") is NO_MATCH
    assert apply_regex_format("release-1-extra", r"release-([0-9]+)", "$1") == "1"


def test_missing_and_non_participating_groups_become_empty() -> None:
    assert apply_regex_format("1.2", r"^([0-9]+)\.([0-9]+)(-rc[0-9]+)?$", "$1.$2$3") == "1.2"
    assert apply_regex_format("1.2", r"^([0-9]+)\.([0-9]+)$", "$1.$2.$9") == "1.2."


def test_invalid_regex_is_no_match() -> None:
    assert apply_regex_format("1.2", "([0-9", "$1") is NO_MATCH


def test_select_maximum_uses_comparator() -> None:
    comparator = FakeVersionComparator(order=["1.9", "1.10", "2.0"])

    assert select_maximum(["1.9", "2.0", "1.10"], comparator) == "2.0"
    assert select_maximum(["1.10", "1.9"], comparator) == "1.10"


def test_select_maximum_ignores_blanks_and_handles_empty_input() -> None:
    comparator = FakeVersionComparator(order=["1.0"])

    assert select_maximum(["", "1.0", ""], comparator) == "1.0"
    assert select_maximum([], comparator) == ""
