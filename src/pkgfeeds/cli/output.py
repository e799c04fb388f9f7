"""Output routing for CLI commands.

user_output() is for humans (stderr); machine_output() is for results that
scripts consume (stdout). Keeping the two apart lets `pkgfeeds check --json`
be piped while progress and warnings still reach the terminal.
"""

from typing import Any

import click


def user_output(message: Any = "", nl: bool = True) -> None:
    """Write a human-oriented message to stderr."""
    click.echo(message, nl=nl, err=True)


def machine_output(message: Any = "", nl: bool = True) -> None:
    """Write machine-readable output to stdout."""
    click.echo(message, nl=nl)


def info(message: str) -> None:
    user_output(click.style("[INFO]", fg="cyan") + f" {message}")


def success(message: str) -> None:
    user_output(click.style("[SUCCESS]", fg="green") + f" {message}")


def warning(message: str) -> None:
    user_output(click.style("[WARNING]", fg="yellow") + f" {message}")


def error(message: str) -> None:
    user_output(click.style("[ERROR]", fg="red") + f" {message}")
