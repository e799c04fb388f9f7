"""Commands for inspecting the feed document."""

import json
from pathlib import Path

import click

from pkgfeeds.cli import output
from pkgfeeds.cli.ensure import Ensure, fail
from pkgfeeds.cli.json_schemas import FeedSourceRecord
from pkgfeeds.cli.output import machine_output
from pkgfeeds.core.context import PkgfeedsContext
from pkgfeeds.core.errors import InvalidFeedError
from pkgfeeds.core.feeds.sources import UnrecognizedSource, resolve_source
from pkgfeeds.core.feeds.store import FeedConfig, find_entry, list_package_names

feeds_option = click.option(
    "--feeds",
    "feeds_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Feed document (default: feeds.json, or $FEEDS_JSON)",
)


def _load(ctx: PkgfeedsContext, feeds_path: Path | None) -> FeedConfig:
    ctx = ctx.with_overrides(feeds_path=feeds_path)
    return Ensure.feeds_loaded(ctx.config.feeds_path)


@click.group("feeds")
def feeds_group() -> None:
    """Inspect and validate the feed document."""


@feeds_group.command("list")
@feeds_option
@click.pass_obj
def feeds_list(ctx: PkgfeedsContext, feeds_path: Path | None) -> None:
    """Print every package with its feed type."""
    feeds = _load(ctx, feeds_path)
    for name in sorted(list_package_names(feeds)):
        entry = Ensure.not_none(find_entry(feeds, name), f"No feed entry for '{name}'")
        machine_output(f"{name}\t{entry.source_type or '(none)'}")


@feeds_group.command("show")
@click.argument("name")
@feeds_option
@click.pass_obj
def feeds_show(ctx: PkgfeedsContext, name: str, feeds_path: Path | None) -> None:
    """Print the resolved feed parameters of NAME as JSON.

    Defaults (channel, distTag, download URLs) are filled in, so the output
    shows exactly what the checker will query.
    """
    feeds = _load(ctx, feeds_path)
    entry = Ensure.not_none(find_entry(feeds, name), f"'{name}' is not in the feed document")
    try:
        source = resolve_source(feeds, name)
    except InvalidFeedError as e:
        fail(str(e))

    parameters = {} if isinstance(source, UnrecognizedSource) else source.model_dump(by_alias=True)
    record = FeedSourceRecord(package=name, type=entry.source_type, parameters=parameters)
    machine_output(json.dumps(record.model_dump(mode="json"), indent=2))


@feeds_group.command("validate")
@feeds_option
@click.pass_obj
def feeds_validate(ctx: PkgfeedsContext, feeds_path: Path | None) -> None:
    """Check that every feed has the parameters its type requires."""
    feeds = _load(ctx, feeds_path)
    names = sorted(list_package_names(feeds))
    problems = 0
    for name in names:
        try:
            source = resolve_source(feeds, name)
        except InvalidFeedError as e:
            output.error(str(e))
            problems += 1
            continue
        match source:
            case UnrecognizedSource(raw_type=""):
                output.warning(f"{name}: no feed type (treated as manual)")
            case UnrecognizedSource(raw_type=raw_type):
                output.error(f"{name}: unknown feed type '{raw_type}'")
                problems += 1

    if problems:
        fail(f"{problems} of {len(names)} feed(s) are invalid")
    output.success(f"All {len(names)} feed(s) are valid")
