"""Tests for `pkgfeeds check`."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from pkgfeeds.cli.cli import cli
from pkgfeeds.core import checker
from pkgfeeds.core.context import PkgfeedsContext
from pkgfeeds.core.versions.comparator import LexicalComparator
from pkgfeeds.core.versions.fake import FakeVersionComparator
from pkgfeeds.integrations.http.fake import FakeHttpClient, json_response
from pkgfeeds.integrations.shell.fake import FakeShell
from tests.test_utils.package_helpers import latest_release_url, write_feeds, write_pkgbuild

FEEDS = (
    {"name": "neovim", "type": "github-release", "repo": "neovim/neovim"},
    {"name": "ripgrep", "type": "github-release", "repo": "BurntSushi/ripgrep"},
    {"name": "handmade", "type": "manual"},
)
VERSIONS = ["0.10.1", "0.10.2", "14.1.1"]
UPDPKGSUMS = {"updpkgsums": "/usr/bin/updpkgsums"}


def _http() -> FakeHttpClient:
    neovim = latest_release_url("neovim/neovim")
    ripgrep = latest_release_url("BurntSushi/ripgrep")
    return FakeHttpClient(
        responses={
            neovim: json_response(neovim, {"tag_name": "v0.10.2"}),
            ripgrep: json_response(ripgrep, {"tag_name": "14.1.1"}),
        }
    )


def _setup(tmp_path: Path, **overrides: object) -> PkgfeedsContext:
    write_feeds(tmp_path / "feeds.json", *FEEDS)
    packages = tmp_path / "packages"
    write_pkgbuild(packages, "neovim", "0.10.1")
    write_pkgbuild(packages, "ripgrep", "14.1.1")
    write_pkgbuild(packages, "handmade", "3.0")
    values: dict[str, object] = {
        "http": _http(),
        "comparator": FakeVersionComparator(order=VERSIONS),
        "cwd": tmp_path,
    }
    values.update(overrides)
    return PkgfeedsContext.for_test(**values)  # type: ignore[arg-type]


def _table_rows(stdout: str) -> list[list[str]]:
    lines = [line for line in stdout.splitlines() if line.strip()]
    return [line.split() for line in lines[1:]]


def test_table_lists_every_package_in_name_order(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["check"], obj=_setup(tmp_path))

    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines()[1].split() == ["PACKAGE", "CURRENT", "UPSTREAM", "STATUS"]
    assert _table_rows(result.stdout) == [
        ["handmade", "3.0", "n/a", "MANUAL"],
        ["neovim", "0.10.1", "0.10.2", "UPDATE"],
        ["ripgrep", "14.1.1", "14.1.1", "OK"],
    ]
    assert "[INFO] 1 package(s) need updates" in result.stderr
    assert "Apply: pkgfeeds check --apply" in result.stderr


def test_all_up_to_date_summary(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["check", "ripgrep"], obj=_setup(tmp_path))

    assert result.exit_code == 0, result.output
    assert "[SUCCESS] All packages are up-to-date" in result.stderr


def test_named_packages_are_checked_in_given_order(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["check", "ripgrep", "neovim"], obj=_setup(tmp_path))

    assert result.exit_code == 0, result.output
    assert [row[0] for row in _table_rows(result.stdout)] == ["ripgrep", "neovim"]


def test_list_outdated_prints_only_names(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["check", "--list-outdated"], obj=_setup(tmp_path))

    assert result.exit_code == 0, result.output
    assert result.stdout == "neovim\n"


def test_json_prints_one_record_per_package(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["check", "--json"], obj=_setup(tmp_path))

    assert result.exit_code == 0, result.output
    records = [json.loads(line) for line in result.stdout.splitlines()]
    assert records == [
        {
            "package": "handmade",
            "current_version": "3.0",
            "upstream_version": "",
            "status": "MANUAL",
        },
        {
            "package": "neovim",
            "current_version": "0.10.1",
            "upstream_version": "0.10.2",
            "status": "UPDATE",
        },
        {
            "package": "ripgrep",
            "current_version": "14.1.1",
            "upstream_version": "14.1.1",
            "status": "OK",
        },
    ]


def test_list_outdated_and_json_are_exclusive(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["check", "--list-outdated", "--json"], obj=_setup(tmp_path))

    assert result.exit_code == 1
    assert "cannot be combined" in result.stderr


def test_missing_package_directory_is_reported_and_run_continues(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["check", "ghost", "ripgrep"], obj=_setup(tmp_path))

    assert result.exit_code == 0, result.output
    assert "[ERROR] ghost: Directory or PKGBUILD not found" in result.stderr
    assert [row[0] for row in _table_rows(result.stdout)] == ["ripgrep"]


def test_package_without_feed_is_reported(tmp_path: Path) -> None:
    ctx = _setup(tmp_path)
    write_pkgbuild(tmp_path / "packages", "orphan", "1.0")

    runner = CliRunner()
    result = runner.invoke(cli, ["check", "orphan"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert _table_rows(result.stdout) == [["orphan", "1.0", "n/a", "NO_FEED"]]
    assert "orphan: Not found in feeds" in result.stderr


def test_unreachable_upstream_is_unknown_with_reason(tmp_path: Path) -> None:
    ctx = _setup(tmp_path, http=FakeHttpClient())

    runner = CliRunner()
    result = runner.invoke(cli, ["check", "neovim"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert _table_rows(result.stdout) == [["neovim", "0.10.1", "n/a", "UNKNOWN"]]
    assert "neovim: Could not detect remote version (" in result.stderr


def test_missing_feed_document_exits_with_error(tmp_path: Path) -> None:
    ctx = _setup(tmp_path)

    runner = CliRunner()
    result = runner.invoke(cli, ["check", "--feeds", "absent.json"], obj=ctx)

    assert result.exit_code == 1
    assert "Feed configuration not found" in result.stderr
    assert result.stdout == ""


def test_feeds_and_packages_dir_options(tmp_path: Path) -> None:
    other = tmp_path / "other"
    write_feeds(other / "feeds.json", FEEDS[1])
    write_pkgbuild(other / "pkgs", "ripgrep", "14.1.1")
    ctx = _setup(tmp_path)

    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["check", "--feeds", str(other / "feeds.json"), "--packages-dir", str(other / "pkgs")],
        obj=ctx,
    )

    assert result.exit_code == 0, result.output
    assert _table_rows(result.stdout) == [["ripgrep", "14.1.1", "14.1.1", "OK"]]


def test_apply_requires_checksum_tool(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["check", "--apply"], obj=_setup(tmp_path))

    assert result.exit_code == 1
    assert "Missing dependency: updpkgsums" in result.stderr
    assert "sudo pacman -S pacman-contrib" in result.stderr


def test_apply_rewrites_outdated_packages(tmp_path: Path) -> None:
    shell = FakeShell(installed_tools=UPDPKGSUMS)
    ctx = _setup(tmp_path, shell=shell)

    runner = CliRunner()
    result = runner.invoke(cli, ["check", "--apply"], obj=ctx)

    assert result.exit_code == 0, result.output
    descriptor = tmp_path / "packages" / "neovim" / "PKGBUILD"
    assert "pkgver='0.10.2'" in descriptor.read_text(encoding="utf-8")
    assert "pkgrel=1" in descriptor.read_text(encoding="utf-8")
    assert (tmp_path / "packages" / "neovim" / "PKGBUILD.backup.20240115-143000").is_file()
    assert "neovim: Updated PKGBUILD to 0.10.2" in result.stderr
    assert "[SUCCESS] Updated 1 package(s)" in result.stderr
    assert shell.command_calls == [(["updpkgsums"], descriptor.parent)]


def test_apply_with_nothing_to_do(tmp_path: Path) -> None:
    ctx = _setup(tmp_path, shell=FakeShell(installed_tools=UPDPKGSUMS))

    runner = CliRunner()
    result = runner.invoke(cli, ["check", "--apply", "ripgrep"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "[SUCCESS] No packages needed updating" in result.stderr


def test_apply_checksum_failure_is_reported_but_counted(tmp_path: Path) -> None:
    shell = FakeShell(installed_tools=UPDPKGSUMS, command_exit_code=1)
    ctx = _setup(tmp_path, shell=shell)

    runner = CliRunner()
    result = runner.invoke(cli, ["check", "--apply", "neovim"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "(run updpkgsums manually)" in result.stderr
    assert "[SUCCESS] Updated 1 package(s)" in result.stderr


def test_degraded_comparator_warns_once(tmp_path: Path) -> None:
    ctx = _setup(tmp_path, comparator=LexicalComparator())

    runner = CliRunner()
    result = runner.invoke(cli, ["check", "--json"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert result.stderr.count("vercmp not found") == 1
    assert len(result.stdout.splitlines()) == 3


def test_unknown_feed_type_warns(tmp_path: Path) -> None:
    write_feeds(tmp_path / "odd.json", {"name": "handmade", "type": "sourceforge"})
    ctx = _setup(tmp_path)

    runner = CliRunner()
    result = runner.invoke(cli, ["check", "--feeds", "odd.json", "--json"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "handmade: Unknown feed type 'sourceforge' (treating as manual)" in result.stderr
    assert json.loads(result.stdout)["status"] == "MANUAL"


def test_unreadable_descriptor_does_not_stop_the_run(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    ctx = _setup(tmp_path)
    read_local_version = checker.read_local_version

    def read_or_fail(path: Path) -> str:
        if path.parent.name == "handmade":
            raise PermissionError(13, "Permission denied", str(path))
        return read_local_version(path)

    monkeypatch.setattr(checker, "read_local_version", read_or_fail)

    runner = CliRunner()
    result = runner.invoke(cli, ["check"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert _table_rows(result.stdout) == [
        ["handmade", "n/a", "n/a", "UNKNOWN"],
        ["neovim", "0.10.1", "0.10.2", "UPDATE"],
        ["ripgrep", "14.1.1", "14.1.1", "OK"],
    ]
    assert "handmade: Cannot read " in result.stderr
