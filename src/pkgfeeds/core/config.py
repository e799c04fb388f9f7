"""Global configuration: defaults, ~/.pkgfeeds/config.toml, and environment.

Precedence, lowest to highest: built-in defaults, the config file, environment
variables, then command-line options. The resolved GlobalConfig is immutable
and travels through PkgfeedsContext; nothing reads configuration globally.
"""

import os
import tomllib
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import tomlkit

from pkgfeeds.core.errors import ConfigError
from pkgfeeds.core.fetchers.types import DEFAULT_RELEASE_PAGE_LIMIT, DEFAULT_TAG_PAGE_LIMIT

DEFAULT_FEEDS_PATH = Path("feeds.json")
DEFAULT_PACKAGES_DIR = Path("packages")
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "Package-Update-Bot/1.0"

ENVIRONMENT_KEYS = {
    "FEEDS_JSON": "feeds_path",
    "PKG_DIR": "packages_dir",
    "GITHUB_TOKEN": "github_token",
    "PKGFEEDS_TIMEOUT": "request_timeout",
}


@dataclass(frozen=True)
class GlobalConfig:
    """Immutable effective configuration for one run.

    Attributes:
        feeds_path: Feed document (JSON, or YAML by suffix)
        packages_dir: Directory holding one subdirectory per package
        github_token: Bearer token for api.github.com, if any
        request_timeout: Seconds allowed per HTTP request
        user_agent: User-Agent sent with every request
        release_page_limit: Page ceiling when scanning GitHub releases
        tag_page_limit: Page ceiling when collecting GitHub tags
    """

    feeds_path: Path = DEFAULT_FEEDS_PATH
    packages_dir: Path = DEFAULT_PACKAGES_DIR
    github_token: str | None = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    release_page_limit: int = DEFAULT_RELEASE_PAGE_LIMIT
    tag_page_limit: int = DEFAULT_TAG_PAGE_LIMIT

    def resolve_paths(self, cwd: Path) -> "GlobalConfig":
        """Anchor relative paths at `cwd`."""
        return replace(
            self,
            feeds_path=_anchor(self.feeds_path, cwd),
            packages_dir=_anchor(self.packages_dir, cwd),
        )


def _anchor(path: Path, cwd: Path) -> Path:
    path = path.expanduser()
    return path if path.is_absolute() else cwd / path


def _parse_path(value: Any) -> Path:
    text = str(value).strip()
    if not text:
        raise ValueError("must not be empty")
    return Path(text)


def _parse_optional_str(value: Any) -> str | None:
    text = str(value).strip()
    return text or None


def _parse_str(value: Any) -> str:
    text = str(value).strip()
    if not text:
        raise ValueError("must not be empty")
    return text


def _parse_positive_float(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError("must be a number")
    number = float(value)
    if number <= 0:
        raise ValueError("must be greater than zero")
    return number


def _parse_positive_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("must be an integer")
    number = int(value)
    if number <= 0:
        raise ValueError("must be greater than zero")
    return number


CONFIG_PARSERS: dict[str, Callable[[Any], Any]] = {
    "feeds_path": _parse_path,
    "packages_dir": _parse_path,
    "github_token": _parse_optional_str,
    "request_timeout": _parse_positive_float,
    "user_agent": _parse_str,
    "release_page_limit": _parse_positive_int,
    "tag_page_limit": _parse_positive_int,
}

SECRET_KEYS = frozenset({"github_token"})


def parse_config_value(key: str, value: Any) -> Any:
    """Validate and convert one configuration value.

    Raises:
        ConfigError: If the key is unknown or the value does not parse
    """
    parser = CONFIG_PARSERS.get(key)
    if parser is None:
        valid = ", ".join(sorted(CONFIG_PARSERS))
        raise ConfigError(f"Unknown configuration key '{key}' (valid keys: {valid})")
    try:
        return parser(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for {key}: {value!r} ({e})") from e


def format_config_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class ConfigStore(ABC):
    """Abstract access to the persisted configuration file.

    Provides dependency injection for config access, enabling in-memory
    implementations for tests without touching the filesystem.
    """

    @abstractmethod
    def exists(self) -> bool:
        """Check if the config file exists."""
        ...

    @abstractmethod
    def load_values(self) -> dict[str, Any]:
        """Return the raw key/value pairs stored in the config file.

        Returns an empty mapping when the file does not exist.

        Raises:
            ConfigError: If the file exists but is not valid TOML
        """
        ...

    @abstractmethod
    def set_value(self, key: str, value: Any) -> None:
        """Persist one key, keeping every other key and comment intact.

        Raises:
            PermissionError: If the file or its directory cannot be written
        """
        ...

    @abstractmethod
    def path(self) -> Path:
        """Get the path to the config file (for messages and debugging)."""
        ...


class FilesystemConfigStore(ConfigStore):
    """Production implementation that reads/writes ~/.pkgfeeds/config.toml."""

    def __init__(self, config_path: Path | None = None) -> None:
        self._config_path = config_path

    def exists(self) -> bool:
        return self.path().exists()

    def load_values(self) -> dict[str, Any]:
        config_path = self.path()
        if not config_path.exists():
            return {}
        try:
            return tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    def set_value(self, key: str, value: Any) -> None:
        config_path = self.path()
        parent = config_path.parent

        # Check parent directory permissions BEFORE attempting mkdir
        if parent.exists() and not os.access(parent, os.W_OK):
            raise PermissionError(
                f"Cannot write to directory: {parent}\n"
                f"The directory exists but is not writable.\n\n"
                f"To fix this manually:\n"
                f"  1. Ensure it's writable: chmod 755 {parent}\n"
                f"  2. Run pkgfeeds config set {key} ... again"
            )

        try:
            parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            raise PermissionError(
                f"Cannot create directory: {parent}\n"
                f"Check permissions on your home directory.\n\n"
                f"To fix this manually:\n"
                f"  1. Create the directory: mkdir -p {parent}\n"
                f"  2. Ensure it's writable: chmod 755 {parent}"
            ) from None

        if config_path.exists() and not os.access(config_path, os.W_OK):
            raise PermissionError(
                f"Cannot write to file: {config_path}\n"
                f"The file exists but is not writable.\n\n"
                f"To fix this manually:\n"
                f"  1. Make it writable: chmod 644 {config_path}\n"
                f"  Or edit the file directly to set: {key}"
            )

        if config_path.exists():
            doc = tomlkit.parse(config_path.read_text(encoding="utf-8"))
        else:
            doc = tomlkit.document()
            doc.add(tomlkit.comment("pkgfeeds configuration"))

        doc[key] = str(value) if isinstance(value, Path) else value
        config_path.write_text(tomlkit.dumps(doc), encoding="utf-8")

    def path(self) -> Path:
        if self._config_path is not None:
            return self._config_path
        return Path.home() / ".pkgfeeds" / "config.toml"


class InMemoryConfigStore(ConfigStore):
    """Test implementation that stores config in memory without touching filesystem."""

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        """Initialize in-memory config store.

        Args:
            values: Initial file contents (None = file doesn't exist)
        """
        self._values = dict(values) if values is not None else None

    def exists(self) -> bool:
        return self._values is not None

    def load_values(self) -> dict[str, Any]:
        return dict(self._values or {})

    def set_value(self, key: str, value: Any) -> None:
        if self._values is None:
            self._values = {}
        self._values[key] = str(value) if isinstance(value, Path) else value

    def path(self) -> Path:
        return Path("/fake/pkgfeeds/config.toml")


def resolve_config(
    store: ConfigStore,
    environ: Mapping[str, str],
    overrides: Mapping[str, Any] | None = None,
) -> GlobalConfig:
    """Merge every configuration source into one GlobalConfig.

    `overrides` holds command-line values; None entries are ignored.

    Raises:
        ConfigError: If any source holds an unknown key or an invalid value
    """
    values: dict[str, Any] = {}

    for key, raw in store.load_values().items():
        values[key] = parse_config_value(key, raw)

    for env_name, key in ENVIRONMENT_KEYS.items():
        raw = environ.get(env_name)
        if raw:
            values[key] = parse_config_value(key, raw)

    for key, raw in (overrides or {}).items():
        if raw is not None:
            values[key] = parse_config_value(key, raw)

    return GlobalConfig(**values)


def config_keys() -> list[str]:
    return [field.name for field in fields(GlobalConfig)]
