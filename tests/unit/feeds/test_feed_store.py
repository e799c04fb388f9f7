"""Tests for feed document loading and schema-aware lookups."""

import json
from pathlib import Path

import pytest

from pkgfeeds.core.errors import ConfigError
from pkgfeeds.core.feeds.store import (
    get_field,
    has_package,
    list_package_names,
    load_feed_config,
    parse_feed_document,
    schema_version,
)

V1_DOCUMENT = {
    "packages": [
        {"name": "alpha", "feed": {"type": "github-release", "repo": "o/alpha"}},
        {"name": "beta", "feed": {"type": "pypi", "project": "beta", "allowPrerelease": True}},
    ]
}

V2_DOCUMENT = {
    "schemaVersion": 2,
    "packages": [
        {"name": "alpha", "type": "github-release", "repo": "o/alpha"},
        {"name": "beta", "type": "pypi", "project": "beta", "allowPrerelease": True},
    ],
}


@pytest.mark.parametrize("document", [V1_DOCUMENT, V2_DOCUMENT], ids=["v1", "v2"])
def test_lookups_do_not_depend_on_schema_shape(document: dict) -> None:
    config = parse_feed_document(document)

    assert get_field(config, "alpha", "type") == "github-release"
    assert get_field(config, "alpha", "repo") == "o/alpha"
    assert get_field(config, "beta", "allowPrerelease") == "true"
    assert get_field(config, "alpha", "channel") is None


def test_schema_version_defaults_to_legacy() -> None:
    assert schema_version(parse_feed_document(V1_DOCUMENT)) == 1
    assert schema_version(parse_feed_document(V2_DOCUMENT)) == 2


def test_null_schema_version_is_treated_as_legacy() -> None:
    config = parse_feed_document({"schemaVersion": None, **V1_DOCUMENT})

    assert schema_version(config) == 1
    assert get_field(config, "alpha", "repo") == "o/alpha"


def test_v2_entry_name_is_not_a_parameter() -> None:
    config = parse_feed_document(V2_DOCUMENT)

    assert get_field(config, "alpha", "name") is None


def test_unknown_package_yields_absence() -> None:
    config = parse_feed_document(V2_DOCUMENT)

    assert get_field(config, "missing", "type") is None
    assert not has_package(config, "missing")
    assert has_package(config, "alpha")


def test_list_package_names_deduplicates_and_skips_blank_names() -> None:
    config = parse_feed_document(
        {
            "schemaVersion": 2,
            "packages": [
                {"name": "b", "type": "manual"},
                {"name": "a", "type": "manual"},
                {"name": "b", "type": "npm", "package": "b"},
                {"name": "", "type": "manual"},
                {"type": "manual"},
                "not-an-object",
            ],
        }
    )

    assert list_package_names(config) == {"a", "b"}


def test_first_duplicate_entry_wins_for_lookup() -> None:
    config = parse_feed_document(
        {
            "schemaVersion": 2,
            "packages": [
                {"name": "dup", "type": "manual"},
                {"name": "dup", "type": "npm", "package": "dup"},
            ],
        }
    )

    assert get_field(config, "dup", "type") == "manual"


def test_v1_entry_without_feed_object_has_no_parameters() -> None:
    config = parse_feed_document({"packages": [{"name": "bare"}]})

    assert has_package(config, "bare")
    assert get_field(config, "bare", "type") is None


def test_load_json_document(tmp_path: Path) -> None:
    path = tmp_path / "feeds.json"
    path.write_text(json.dumps(V2_DOCUMENT), encoding="utf-8")

    config = load_feed_config(path)

    assert config.path == path
    assert list_package_names(config) == {"alpha", "beta"}


def test_load_yaml_document(tmp_path: Path) -> None:
    path = tmp_path / "feeds.yaml"
    path.write_text(
        "schemaVersion: 2\n"
        "packages:\n"
        "  - name: gamma\n"
        "    type: npm\n"
        "    package: '@scope/gamma'\n",
        encoding="utf-8",
    )

    config = load_feed_config(path)

    assert get_field(config, "gamma", "package") == "@scope/gamma"


def test_missing_document_is_a_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_feed_config(tmp_path / "feeds.json")


def test_invalid_json_is_a_config_error(tmp_path: Path) -> None:
    path = tmp_path / "feeds.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigError, match="not valid structured data"):
        load_feed_config(path)


@pytest.mark.parametrize(
    "document",
    [["a", "list"], {"packages": {"name": "x"}}, {"schemaVersion": "two", "packages": []}],
    ids=["top-level-list", "packages-object", "bad-schema-version"],
)
def test_structurally_invalid_documents_are_config_errors(document: object) -> None:
    with pytest.raises(ConfigError):
        parse_feed_document(document)
