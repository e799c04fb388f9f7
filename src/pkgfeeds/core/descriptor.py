"""Reading the local version descriptor (PKGBUILD)."""

import re
from pathlib import Path

DESCRIPTOR_FILENAME = "PKGBUILD"
VCS_NAME_RE = re.compile(r"-(git|hg|svn|bzr)$")


def descriptor_path(packages_dir: Path, package_name: str) -> Path:
    return packages_dir / package_name / DESCRIPTOR_FILENAME


def is_vcs_name(package_name: str) -> bool:
    """Whether the name follows the live-checkout convention (foo-git, foo-hg, ...)."""
    return VCS_NAME_RE.search(package_name) is not None


def read_local_version(path: Path) -> str:
    """Return the pkgver declared in the descriptor at `path`.

    Only the first `pkgver=` line counts; one layer of surrounding quotes is
    removed. A missing file or key yields "".
    """
    if not path.is_file():
        return ""
    for line in path.read_text(encoding="utf-8", errors="replace").splitlines():
        if line.startswith("pkgver="):
            return _unquote(line.split("=", 1)[1].strip())
    return ""


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value.strip("'\"")
