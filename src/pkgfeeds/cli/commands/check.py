"""Check command implementation."""

from pathlib import Path

import click

from pkgfeeds.cli import output
from pkgfeeds.cli.debug import enable_debug_logging
from pkgfeeds.cli.ensure import Ensure
from pkgfeeds.cli.rendering import get_renderer
from pkgfeeds.core.apply import CHECKSUM_TOOL
from pkgfeeds.core.checker import PackageReport, check_package
from pkgfeeds.core.context import PkgfeedsContext
from pkgfeeds.core.feeds.store import list_package_names


@click.command("check")
@click.argument("packages", nargs=-1, metavar="[PACKAGES]...")
@click.option(
    "--feeds",
    "feeds_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Feed document (default: feeds.json, or $FEEDS_JSON)",
)
@click.option(
    "--packages-dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Directory of package subdirectories (default: packages, or $PKG_DIR)",
)
@click.option("--apply", is_flag=True, help="Rewrite pkgver/pkgrel and refresh checksums")
@click.option("--list-outdated", is_flag=True, help="Only print names of packages to update")
@click.option("--json", "as_json", is_flag=True, help="Print one JSON object per package")
@click.option("--debug", is_flag=True, help="Extra diagnostics (API errors, rate limits)")
@click.option("--dry-run", is_flag=True, hidden=True, help="Accepted for compatibility; no effect")
@click.pass_obj
def check_cmd(
    ctx: PkgfeedsContext,
    packages: tuple[str, ...],
    feeds_path: Path | None,
    packages_dir: Path | None,
    apply: bool,
    list_outdated: bool,
    as_json: bool,
    debug: bool,
    dry_run: bool,
) -> None:
    """Compare local package versions with their upstream feeds.

    Without PACKAGES every package in the feed document is checked, in
    name order. Named packages are checked in the order given.

    \b
    JSON Output (--json):
    One object per line, validated by PackageStatusRecord in
    pkgfeeds.cli.json_schemas.
    """
    if debug:
        enable_debug_logging()
    Ensure.invariant(
        not (list_outdated and as_json), "--list-outdated and --json cannot be combined"
    )
    ctx = ctx.with_overrides(feeds_path=feeds_path, packages_dir=packages_dir)
    if apply:
        Ensure.tool_installed(ctx, CHECKSUM_TOOL, "pacman-contrib")
    if ctx.comparator.degraded:
        output.warning(
            "vercmp not found (install pacman-contrib); comparing versions as plain strings"
        )

    feeds = Ensure.feeds_loaded(ctx.config.feeds_path)
    if packages:
        names = list(packages)
    else:
        names = sorted(list_package_names(feeds))
        Ensure.invariant(bool(names), f"No packages found in {ctx.config.feeds_path}")

    renderer = get_renderer(list_outdated=list_outdated, as_json=as_json)
    renderer.begin()

    reports: list[PackageReport] = []
    for name in names:
        report = check_package(ctx, feeds, name, apply=apply)
        if report is None:
            renderer.missing(name)
            continue
        renderer.render(report)
        for message in report.warnings:
            output.warning(f"{name}: {message}")
        reports.append(report)

    renderer.finish(reports, apply=apply)
