"""Application context with dependency injection."""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from pkgfeeds.core.config import (
    ConfigStore,
    FilesystemConfigStore,
    GlobalConfig,
    parse_config_value,
    resolve_config,
)
from pkgfeeds.core.fetchers.types import FetchContext
from pkgfeeds.core.versions.comparator import VersionComparator, select_comparator
from pkgfeeds.integrations.http.abc import HttpClient
from pkgfeeds.integrations.http.real import RealHttpClient
from pkgfeeds.integrations.shell.abc import Shell
from pkgfeeds.integrations.shell.real import RealShell
from pkgfeeds.integrations.time.abc import Time
from pkgfeeds.integrations.time.real import RealTime


@dataclass(frozen=True)
class PkgfeedsContext:
    """Immutable context holding all dependencies for pkgfeeds operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    http: HttpClient
    shell: Shell
    time: Time
    comparator: VersionComparator
    config_store: ConfigStore
    config: GlobalConfig
    cwd: Path  # Current working directory at CLI invocation

    def fetch_context(self) -> FetchContext:
        return FetchContext(
            http=self.http,
            comparator=self.comparator,
            github_token=self.config.github_token,
            release_page_limit=self.config.release_page_limit,
            tag_page_limit=self.config.tag_page_limit,
        )

    def with_overrides(self, **overrides: Any) -> "PkgfeedsContext":
        """Return a context whose config has command-line `overrides` applied.

        None values are ignored so unset options keep the lower-precedence value.
        """
        parsed = {
            key: parse_config_value(key, value)
            for key, value in overrides.items()
            if value is not None
        }
        if not parsed:
            return self
        config = replace(self.config, **parsed).resolve_paths(self.cwd)
        return replace(self, config=config)

    @staticmethod
    def for_test(
        http: HttpClient | None = None,
        shell: Shell | None = None,
        time: Time | None = None,
        comparator: VersionComparator | None = None,
        config_store: ConfigStore | None = None,
        config: GlobalConfig | None = None,
        cwd: Path | None = None,
    ) -> "PkgfeedsContext":
        """Create test context with optional pre-configured integration classes.

        Unspecified dependencies get empty fakes; the default config points at
        feeds.json and packages/ under `cwd`.

        Example:
            >>> http = FakeHttpClient(responses={...})
            >>> ctx = PkgfeedsContext.for_test(http=http, cwd=tmp_path)
        """
        from pkgfeeds.core.config import InMemoryConfigStore
        from pkgfeeds.core.versions.fake import FakeVersionComparator
        from pkgfeeds.integrations.http.fake import FakeHttpClient
        from pkgfeeds.integrations.shell.fake import FakeShell
        from pkgfeeds.integrations.time.fake import FakeTime

        if cwd is None:
            cwd = Path("/test/default/cwd")

        if config is None:
            config = GlobalConfig()

        return PkgfeedsContext(
            http=http or FakeHttpClient(),
            shell=shell or FakeShell(),
            time=time or FakeTime(),
            comparator=comparator or FakeVersionComparator(),
            config_store=config_store or InMemoryConfigStore(),
            config=config.resolve_paths(cwd),
            cwd=cwd,
        )


def create_context(*, environ: dict[str, str] | None = None) -> PkgfeedsContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.

    Raises:
        ConfigError: If the config file or environment holds invalid values
    """
    if environ is None:
        environ = dict(os.environ)

    cwd = Path.cwd()
    config_store = FilesystemConfigStore()
    config = resolve_config(config_store, environ).resolve_paths(cwd)
    shell = RealShell()

    return PkgfeedsContext(
        http=RealHttpClient(timeout=config.request_timeout, user_agent=config.user_agent),
        shell=shell,
        time=RealTime(),
        comparator=select_comparator(shell),
        config_store=config_store,
        config=config,
        cwd=cwd,
    )
