"""Real shell implementation using subprocess."""

import shutil
from pathlib import Path

from pkgfeeds.integrations.shell.abc import CommandResult, Shell
from pkgfeeds.integrations.subprocess_utils import run_subprocess_with_context

COMMAND_TIMEOUT_SECONDS = 300


class RealShell(Shell):
    """Production implementation backed by PATH lookup and subprocess.run()."""

    def which(self, tool_name: str) -> str | None:
        return shutil.which(tool_name)

    def run(self, command: list[str], *, cwd: Path | None = None) -> CommandResult:
        result = run_subprocess_with_context(
            command,
            operation_context=f"run {command[0]}",
            cwd=cwd,
            check=False,
            timeout=COMMAND_TIMEOUT_SECONDS,
        )
        return CommandResult(
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )
