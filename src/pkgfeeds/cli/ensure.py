"""CLI error handling utilities with styled output.

This module provides the Ensure class for asserting invariants in CLI commands
with consistent, user-friendly error messages. All errors use red "Error:" prefix
for visual consistency.
"""

from pathlib import Path
from typing import TYPE_CHECKING, NoReturn, TypeVar

import click

from pkgfeeds.cli.output import user_output
from pkgfeeds.core.errors import ConfigError
from pkgfeeds.core.feeds.store import FeedConfig, load_feed_config

if TYPE_CHECKING:
    from pkgfeeds.core.context import PkgfeedsContext

T = TypeVar("T")


def fail(error_message: str) -> NoReturn:
    """Print a red "Error:" message and exit with status 1."""
    user_output(click.style("Error: ", fg="red") + error_message)
    raise SystemExit(1)


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def invariant(condition: bool, error_message: str) -> None:
        """Ensure condition is true, otherwise output styled error and exit.

        Raises:
            SystemExit: If condition is false (with exit code 1)
        """
        if not condition:
            fail(error_message)

    @staticmethod
    def not_none(value: T | None, error_message: str) -> T:
        """Ensure value is not None, otherwise output styled error and exit.

        Provides type narrowing: takes `T | None` and returns `T`.

        Raises:
            SystemExit: If value is None (with exit code 1)
        """
        if value is None:
            fail(error_message)
        return value

    @staticmethod
    def feeds_loaded(path: Path) -> FeedConfig:
        """Load the feed document, exiting with a styled error if it is unusable.

        Raises:
            SystemExit: If the document is missing or invalid (with exit code 1)
        """
        try:
            return load_feed_config(path)
        except ConfigError as e:
            fail(str(e))

    @staticmethod
    def tool_installed(ctx: "PkgfeedsContext", tool_name: str, package_hint: str) -> None:
        """Ensure an external tool is on PATH.

        Example:
            >>> Ensure.tool_installed(ctx, "updpkgsums", "pacman-contrib")
            >>> # Now safe to refresh checksums in apply mode

        Raises:
            SystemExit: If the tool is not found on PATH
        """
        if ctx.shell.which(tool_name) is None:
            fail(
                f"Missing dependency: {tool_name}\n\n"
                f"Install it with: sudo pacman -S {package_hint}"
            )
