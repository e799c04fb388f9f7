import click

from pkgfeeds.cli.ensure import fail
from pkgfeeds.cli.output import machine_output, user_output
from pkgfeeds.core.config import (
    CONFIG_PARSERS,
    SECRET_KEYS,
    config_keys,
    format_config_value,
    parse_config_value,
)
from pkgfeeds.core.context import PkgfeedsContext
from pkgfeeds.core.errors import ConfigError

MASK = "********"


def _display(key: str, value: object) -> str:
    if key in SECRET_KEYS and value:
        return MASK
    return format_config_value(value)


@click.group("config")
def config_group() -> None:
    """Manage pkgfeeds configuration."""


@config_group.command("list")
@click.pass_obj
def config_list(ctx: PkgfeedsContext) -> None:
    """Print the effective configuration (file, environment and defaults merged)."""
    user_output(click.style("Configuration file: ", bold=True) + str(ctx.config_store.path()))
    if not ctx.config_store.exists():
        user_output("  (not created yet - use 'pkgfeeds config set' to create it)")
    for key in config_keys():
        machine_output(f"{key}={_display(key, getattr(ctx.config, key))}")


@config_group.command("get")
@click.argument("key", metavar="KEY")
@click.pass_obj
def config_get(ctx: PkgfeedsContext, key: str) -> None:
    """Print the effective value of a configuration key."""
    if key not in CONFIG_PARSERS:
        fail(f"Invalid key: {key}")
    machine_output(format_config_value(getattr(ctx.config, key)))


@config_group.command("set")
@click.argument("key", metavar="KEY")
@click.argument("value", metavar="VALUE")
@click.pass_obj
def config_set(ctx: PkgfeedsContext, key: str, value: str) -> None:
    """Store a value for KEY in the configuration file."""
    try:
        parsed = parse_config_value(key, value)
    except ConfigError as e:
        fail(str(e))

    try:
        ctx.config_store.set_value(key, parsed)
    except PermissionError as e:
        fail(str(e))
    user_output(f"Set {key}={_display(key, parsed)}")
