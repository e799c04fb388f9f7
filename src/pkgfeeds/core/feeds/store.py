"""Feed configuration loading and schema-aware lookups.

The feed document lists, per package, which upstream source to query. Two shapes
exist and are accepted transparently:

Schema v1 (legacy), parameters nested under "feed":
    {"packages": [{"name": "foo", "feed": {"type": "github-release", "repo": "o/r"}}]}

Schema v2 (current), parameters flat on the entry:
    {"schemaVersion": 2, "packages": [{"name": "foo", "type": "github-release", "repo": "o/r"}]}

The document is read fresh on every run; nothing here caches.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from pkgfeeds.core.errors import ConfigError

LEGACY_SCHEMA_VERSION = 1
YAML_SUFFIXES = (".yaml", ".yml")


@dataclass(frozen=True)
class FeedEntry:
    """One package's feed configuration, with the schema shape already flattened.

    Attributes:
        name: Package name, the unique key within a configuration
        parameters: Variant-specific parameters including "type"
    """

    name: str
    parameters: dict[str, Any]

    @property
    def source_type(self) -> str:
        return _stringify(self.parameters.get("type")) or ""


@dataclass(frozen=True)
class FeedConfig:
    """Ordered feed entries plus the document's schema version."""

    schema_version: int
    entries: tuple[FeedEntry, ...]
    path: Path | None = None


def load_feed_config(path: Path) -> FeedConfig:
    """Load and validate a feed document.

    JSON is the canonical format; files ending in .yaml/.yml are parsed as YAML
    with the identical shape.

    Raises:
        ConfigError: If the file is absent, unreadable, or not a valid feed document
    """
    if not path.is_file():
        raise ConfigError(f"Feed configuration not found: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read feed configuration {path}: {e}") from e

    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            data = yaml.safe_load(raw)
        else:
            data = json.loads(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Feed configuration {path} is not valid structured data: {e}") from e

    return parse_feed_document(data, source=path)


def parse_feed_document(data: Any, *, source: Path | None = None) -> FeedConfig:
    """Build a FeedConfig from an already-decoded document.

    Raises:
        ConfigError: If the document is not an object or has a malformed packages list
    """
    label = str(source) if source is not None else "<document>"
    if not isinstance(data, dict):
        raise ConfigError(f"Feed configuration {label} must be an object at the top level")

    # An explicit null counts as absent
    raw_version = data.get("schemaVersion")
    try:
        version = LEGACY_SCHEMA_VERSION if raw_version is None else int(raw_version)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid schemaVersion in {label}: {raw_version!r}") from e

    packages = data.get("packages") or []
    if not isinstance(packages, list):
        raise ConfigError(f"'packages' in {label} must be a list")

    entries: list[FeedEntry] = []
    for item in packages:
        if not isinstance(item, dict):
            continue
        name = _stringify(item.get("name"))
        if not name:
            continue
        entries.append(FeedEntry(name=name, parameters=_entry_parameters(item, version)))

    return FeedConfig(schema_version=version, entries=tuple(entries), path=source)


def schema_version(config: FeedConfig) -> int:
    """Return the document's schema version (1 when the document omits it)."""
    return config.schema_version


def find_entry(config: FeedConfig, package_name: str) -> FeedEntry | None:
    """Return the first entry for `package_name`, or None."""
    for entry in config.entries:
        if entry.name == package_name:
            return entry
    return None


def get_field(config: FeedConfig, package_name: str, field_name: str) -> str | None:
    """Read one parameter of a package's feed, whatever the schema shape.

    Absence (unknown package, missing or null field) is not an error; callers
    apply their own defaults.
    """
    entry = find_entry(config, package_name)
    if entry is None:
        return None
    return _stringify(entry.parameters.get(field_name))


def has_package(config: FeedConfig, name: str) -> bool:
    return find_entry(config, name) is not None


def list_package_names(config: FeedConfig) -> set[str]:
    return {entry.name for entry in config.entries}


def _entry_parameters(item: dict[str, Any], version: int) -> dict[str, Any]:
    if version == LEGACY_SCHEMA_VERSION:
        feed = item.get("feed")
        return dict(feed) if isinstance(feed, dict) else {}
    return {key: value for key, value in item.items() if key != "name"}


def _stringify(value: Any) -> str | None:
    # Booleans lowercase, containers as JSON
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    text = str(value)
    return text if text else None
