"""Renderers for `pkgfeeds check` output.

Every mode writes its results to stdout; the table mode additionally narrates
per-package details and a summary on stderr.
"""

import json
from abc import ABC, abstractmethod
from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from pkgfeeds.cli import output
from pkgfeeds.cli.json_schemas import PackageStatusRecord
from pkgfeeds.cli.output import machine_output
from pkgfeeds.core.checker import PackageReport
from pkgfeeds.core.status import PackageStatus

STATUS_COLUMNS = (("PACKAGE", 30), ("CURRENT", 18), ("UPSTREAM", 18), ("STATUS", 10))


def build_status_table() -> Table:
    table = Table(box=None, show_edge=False, pad_edge=False, header_style="bold")
    for title, width in STATUS_COLUMNS:
        # min_width pads short cells without truncating long package names
        table.add_column(title, min_width=width, no_wrap=True)
    return table


def table_row(report: PackageReport) -> tuple[str, str, str, str]:
    current = report.state.local_version or "n/a"
    return (report.package_name, current, report.upstream_display, report.status.value)


def to_record(report: PackageReport) -> PackageStatusRecord:
    return PackageStatusRecord(
        package=report.package_name,
        current_version=report.state.local_version,
        upstream_version=report.state.upstream_version,
        status=report.status.value,
    )


class ReportRenderer(ABC):
    """Base class for check output modes."""

    def begin(self) -> None:
        """Called once before the first package."""

    @abstractmethod
    def render(self, report: PackageReport) -> None:
        """Emit the result for one package."""
        ...

    def missing(self, package_name: str) -> None:
        """Called for a package whose directory or descriptor does not exist."""

    def finish(self, reports: Sequence[PackageReport], *, apply: bool) -> None:
        """Called once after the last package."""


class TableRenderer(ReportRenderer):
    """Table on stdout with details and a summary on stderr.

    Rows are collected as packages are checked and the table is printed once
    in finish(), so per-package warnings reach stderr first.
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console
        self._table = build_status_table()

    def render(self, report: PackageReport) -> None:
        name = report.package_name
        self._table.add_row(*table_row(report))

        match report.status:
            case PackageStatus.NO_FEED:
                output.warning(f"{name}: Not found in feeds")
            case PackageStatus.UNKNOWN:
                detail = report.probe.error_detail if report.probe is not None else None
                suffix = f" ({detail})" if detail else ""
                output.warning(f"{name}: Could not detect remote version{suffix}")
            case PackageStatus.NEWER:
                output.warning(
                    f"{name}: local version ({report.state.local_version}) is newer "
                    f"than remote ({report.state.upstream_version})"
                )
            case PackageStatus.UPDATE:
                self._render_apply(report)

    def _render_apply(self, report: PackageReport) -> None:
        name = report.package_name
        if report.applied is not None:
            output.info(f"{name}: Updated PKGBUILD to {report.applied.version}")
            if report.apply_error is None:
                output.success(f"{name}: Updated checksums")
            else:
                output.warning(f"{name}: {report.apply_error} (run updpkgsums manually)")
        elif report.apply_error is not None:
            output.error(f"{name}: Failed to update PKGBUILD: {report.apply_error}")

    def missing(self, package_name: str) -> None:
        output.error(f"{package_name}: Directory or PKGBUILD not found")

    def finish(self, reports: Sequence[PackageReport], *, apply: bool) -> None:
        console = self._console or Console(width=200, highlight=False, markup=False, emoji=False)
        machine_output()
        console.print(self._table)

        output.user_output()
        if apply:
            updated = sum(1 for report in reports if report.applied is not None)
            if updated == 0:
                output.success("No packages needed updating")
            else:
                output.success(f"Updated {updated} package(s)")
            return

        outdated = sum(1 for report in reports if report.status is PackageStatus.UPDATE)
        if outdated == 0:
            output.success("All packages are up-to-date")
        else:
            output.info(f"{outdated} package(s) need updates")
            output.info("Apply: pkgfeeds check --apply")


class OutdatedListRenderer(ReportRenderer):
    """Names of packages with an update available, one per line."""

    def render(self, report: PackageReport) -> None:
        if report.status is PackageStatus.UPDATE:
            machine_output(report.package_name)


class JsonLinesRenderer(ReportRenderer):
    """One validated JSON object per package, one per line."""

    def render(self, report: PackageReport) -> None:
        record = to_record(report)
        machine_output(json.dumps(record.model_dump(mode="json")))


def get_renderer(*, list_outdated: bool, as_json: bool) -> ReportRenderer:
    if as_json:
        return JsonLinesRenderer()
    if list_outdated:
        return OutdatedListRenderer()
    return TableRenderer()
