"""Per-package orchestration: read, probe, classify, and optionally apply.

Each package is handled in isolation. Upstream trouble for one package turns
into an UNKNOWN status for that package and never stops the run.
"""

import logging
from dataclasses import dataclass, replace

from pkgfeeds.core.apply import AppliedUpdate, ChecksumRefreshFailure, apply_update
from pkgfeeds.core.context import PkgfeedsContext
from pkgfeeds.core.descriptor import descriptor_path, is_vcs_name, read_local_version
from pkgfeeds.core.errors import ApplyFailure, InvalidFeedError
from pkgfeeds.core.feeds.sources import (
    FeedSource,
    ManualSource,
    UnrecognizedSource,
    VcsSource,
    resolve_source,
)
from pkgfeeds.core.feeds.store import FeedConfig, has_package
from pkgfeeds.core.fetchers.dispatch import probe_upstream
from pkgfeeds.core.fetchers.types import ProbeResult
from pkgfeeds.core.status import PackageStatus, PackageVersionState, classify
from pkgfeeds.core.versions.comparator import has_ordering_hazard

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageReport:
    """Outcome of checking one package.

    Attributes:
        state: Inputs the status was derived from
        status: Classification result
        probe: Upstream probe outcome, None when the feed was not probed
        applied: Rewrite performed in apply mode
        apply_error: Why the rewrite (or checksum refresh) failed in apply mode
        warnings: Per-package problems worth surfacing to the user
    """

    state: PackageVersionState
    status: PackageStatus
    probe: ProbeResult | None = None
    applied: AppliedUpdate | None = None
    apply_error: str | None = None
    warnings: tuple[str, ...] = ()

    @property
    def package_name(self) -> str:
        return self.state.package_name

    @property
    def upstream_display(self) -> str:
        return display_upstream(self.state)


def display_upstream(state: PackageVersionState) -> str:
    """Label for the upstream column.

    Manual packages show "n/a"; VCS packages show their informational stable
    version as "<version> (stable)", or "VCS" when there is none.
    """
    if state.is_manual:
        return "n/a"
    if state.is_vcs or is_vcs_name(state.package_name):
        return f"{state.upstream_version} (stable)" if state.upstream_version else "VCS"
    return state.upstream_version or "n/a"


def check_package(
    ctx: PkgfeedsContext, feeds: FeedConfig, package_name: str, *, apply: bool = False
) -> PackageReport | None:
    """Check one package against its upstream feed.

    Returns None when the package directory or its descriptor does not exist.
    """
    descriptor = descriptor_path(ctx.config.packages_dir, package_name)
    if not descriptor.parent.is_dir() or not descriptor.is_file():
        logger.debug("No descriptor at %s", descriptor)
        return None

    try:
        local_version = read_local_version(descriptor)
    except OSError as e:
        logger.debug("Cannot read %s", descriptor, exc_info=True)
        state = PackageVersionState(
            package_name=package_name,
            local_version="",
            upstream_version="",
            feed_present=has_package(feeds, package_name),
        )
        return PackageReport(
            state=state,
            status=PackageStatus.UNKNOWN,
            warnings=(f"Cannot read {descriptor}: {e}",),
        )

    if not has_package(feeds, package_name):
        state = PackageVersionState(
            package_name=package_name,
            local_version=local_version,
            upstream_version="",
            feed_present=False,
        )
        return PackageReport(state=state, status=PackageStatus.NO_FEED)

    warnings: list[str] = []
    source, probe = _resolve_and_probe(ctx, feeds, package_name, warnings)

    state = PackageVersionState(
        package_name=package_name,
        local_version=local_version,
        upstream_version=probe.normalized_version if probe is not None else "",
        feed_present=True,
        is_vcs=isinstance(source, VcsSource),
        is_manual=isinstance(source, (ManualSource, UnrecognizedSource)),
    )

    try:
        status = classify(state, ctx.comparator)
    except RuntimeError as e:
        logger.debug("Comparison failed for %s", package_name, exc_info=True)
        warnings.append(f"Version comparison failed: {e}")
        status = PackageStatus.UNKNOWN

    if status in (PackageStatus.UPDATE, PackageStatus.OK, PackageStatus.NEWER):
        warnings.extend(_ordering_warnings(ctx, state))

    report = PackageReport(state=state, status=status, probe=probe, warnings=tuple(warnings))
    if apply and status is PackageStatus.UPDATE:
        return _apply(ctx, report)
    return report


def _resolve_and_probe(
    ctx: PkgfeedsContext, feeds: FeedConfig, package_name: str, warnings: list[str]
) -> tuple[FeedSource | None, ProbeResult | None]:
    try:
        source = resolve_source(feeds, package_name)
    except InvalidFeedError as e:
        warnings.append(str(e))
        return None, ProbeResult.failed(str(e))

    match source:
        case ManualSource():
            return source, None
        case UnrecognizedSource(raw_type=""):
            logger.debug("Empty type for %s, treating as manual", package_name)
            return source, None
        case UnrecognizedSource(raw_type=raw_type):
            warnings.append(f"Unknown feed type '{raw_type}' (treating as manual)")
            return source, None

    try:
        probe = probe_upstream(ctx.fetch_context(), source)
    except Exception as e:
        logger.debug("Unexpected error probing %s", package_name, exc_info=True)
        probe = ProbeResult.failed(f"{type(e).__name__}: {e}")

    if not probe.success:
        logger.debug("%s: %s", package_name, probe.error_detail)
    return source, probe


def _ordering_warnings(ctx: PkgfeedsContext, state: PackageVersionState) -> list[str]:
    if not ctx.comparator.degraded:
        return []
    if has_ordering_hazard(state.local_version) or has_ordering_hazard(state.upstream_version):
        return [
            f"Comparing {state.local_version} with {state.upstream_version} without vercmp; "
            "epochs and '~' pre-releases may be mis-ordered"
        ]
    return []


def _apply(ctx: PkgfeedsContext, report: PackageReport) -> PackageReport:
    descriptor = descriptor_path(ctx.config.packages_dir, report.package_name)
    try:
        applied = apply_update(ctx.shell, ctx.time, descriptor, report.state.upstream_version)
    except ChecksumRefreshFailure as e:
        logger.debug("Checksum refresh failed for %s: %s", report.package_name, e)
        return replace(report, applied=e.applied, apply_error=str(e))
    except ApplyFailure as e:
        logger.debug("Apply failed for %s: %s", report.package_name, e)
        return replace(report, apply_error=str(e))
    return replace(report, applied=applied)
