"""Rewriting a package descriptor to a new upstream version.

Only two fields change: pkgver takes the new version and pkgrel resets to 1.
A timestamped backup is written first, and the checksum refresher runs last.
"""

import logging
import os
import re
import shutil
from dataclasses import dataclass
from pathlib import Path

from pkgfeeds.core.errors import ApplyFailure
from pkgfeeds.integrations.shell.abc import Shell
from pkgfeeds.integrations.time.abc import Time

logger = logging.getLogger(__name__)

CHECKSUM_TOOL = "updpkgsums"
BACKUP_TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"
PKGVER_LINE_RE = re.compile(r"^pkgver=(['\"]?)[^\r\n]*", re.MULTILINE)
PKGREL_LINE_RE = re.compile(r"^pkgrel=[^\r\n]*", re.MULTILINE)


@dataclass(frozen=True)
class AppliedUpdate:
    """A descriptor rewritten to a new pkgver, and where its backup went."""

    version: str
    backup_path: Path


class ChecksumRefreshFailure(ApplyFailure):
    """The descriptor was rewritten but its checksums could not be refreshed."""

    def __init__(self, message: str, applied: AppliedUpdate) -> None:
        super().__init__(message)
        self.applied = applied


def sanitize_version(version: str) -> str:
    """Make an upstream version valid as a pkgver.

    A hyphen separates pkgver from pkgrel, so it cannot appear inside pkgver.
    """
    return version.strip().replace("-", "_")


def apply_update(
    shell: Shell, time: Time, descriptor: Path, upstream_version: str
) -> AppliedUpdate:
    """Rewrite `descriptor` to `upstream_version` and refresh its checksums.

    Raises:
        ApplyFailure: If the directory is not writable, or the backup or
            rewrite fails
        ChecksumRefreshFailure: If the checksum refresher fails; the rewrite
            has already happened and stays in place
    """
    version = sanitize_version(upstream_version)
    if not version:
        raise ApplyFailure(f"Refusing to write an empty pkgver to {descriptor}")

    package_dir = descriptor.parent
    if not os.access(package_dir, os.W_OK):
        raise ApplyFailure(f"Not writable: {package_dir}")

    backup_path = write_backup(time, descriptor)
    rewrite_descriptor(descriptor, version)
    logger.debug("Rewrote %s to pkgver=%s (backup %s)", descriptor, version, backup_path)

    applied = AppliedUpdate(version=version, backup_path=backup_path)
    try:
        refresh_checksums(shell, package_dir)
    except ApplyFailure as e:
        raise ChecksumRefreshFailure(str(e), applied) from e
    return applied


def write_backup(time: Time, descriptor: Path) -> Path:
    stamp = time.now().strftime(BACKUP_TIMESTAMP_FORMAT)
    backup_path = descriptor.with_name(f"{descriptor.name}.backup.{stamp}")
    try:
        shutil.copy2(descriptor, backup_path)
    except OSError as e:
        raise ApplyFailure(f"Failed to write backup {backup_path}: {e}") from e
    return backup_path


def rewrite_descriptor(descriptor: Path, version: str) -> None:
    """Set every pkgver= line to `version` and every pkgrel= line to 1.

    The existing quote style of each pkgver line is kept. The version is
    inserted literally, so characters like "&" or "\\1" are not expanded.
    """
    try:
        content = descriptor.read_bytes().decode("utf-8")
    except OSError as e:
        raise ApplyFailure(f"Failed to read {descriptor}: {e}") from e

    content, replaced = PKGVER_LINE_RE.subn(
        lambda match: f"pkgver={match.group(1)}{version}{match.group(1)}", content
    )
    if replaced == 0:
        raise ApplyFailure(f"No pkgver= line in {descriptor}")
    content = PKGREL_LINE_RE.sub(lambda _match: "pkgrel=1", content)

    try:
        descriptor.write_bytes(content.encode("utf-8"))
    except OSError as e:
        raise ApplyFailure(f"Failed to update {descriptor}: {e}") from e


def refresh_checksums(shell: Shell, package_dir: Path) -> None:
    try:
        result = shell.run([CHECKSUM_TOOL], cwd=package_dir)
    except RuntimeError as e:
        raise ApplyFailure(f"Checksums need a manual refresh in {package_dir}: {e}") from e
    if result.returncode != 0:
        detail = result.stderr.strip() or f"exit code {result.returncode}"
        raise ApplyFailure(f"Checksums need a manual refresh in {package_dir}: {detail}")
