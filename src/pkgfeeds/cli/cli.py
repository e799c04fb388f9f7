import click

from pkgfeeds.cli.commands.check import check_cmd
from pkgfeeds.cli.commands.config import config_group
from pkgfeeds.cli.commands.feeds import feeds_group
from pkgfeeds.cli.debug import debug_requested, enable_debug_logging
from pkgfeeds.cli.ensure import fail
from pkgfeeds.core.context import create_context
from pkgfeeds.core.errors import ConfigError

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="pkgfeeds")
@click.option("--debug", is_flag=True, help="Extra diagnostics (API errors, rate limits)")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Check locally packaged software against upstream release feeds."""
    if debug_requested(debug):
        enable_debug_logging()

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        try:
            ctx.obj = create_context()
        except ConfigError as e:
            fail(str(e))
        ctx.call_on_close(ctx.obj.http.close)


cli.add_command(check_cmd)
cli.add_command(config_group)
cli.add_command(feeds_group)


def main() -> None:
    """CLI entry point used by the `pkgfeeds` console script."""
    cli()
