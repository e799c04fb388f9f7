"""Fake implementation of Shell for testing.

This fake enables testing tool-dependent functionality (version comparison,
checksum refresh) without requiring pacman-contrib to be installed.
"""

from collections.abc import Callable
from pathlib import Path

from pkgfeeds.integrations.shell.abc import CommandResult, Shell


class FakeShell(Shell):
    """In-memory fake implementation of shell operations.

    Constructor Injection:
    - All state is provided via constructor parameters
    - Calls are recorded for assertions

    Examples:
        # updpkgsums installed and succeeding
        >>> shell = FakeShell(installed_tools={"updpkgsums": "/usr/bin/updpkgsums"})

        # vercmp answering from a callback
        >>> shell = FakeShell(
        ...     installed_tools={"vercmp": "/usr/bin/vercmp"},
        ...     handlers={"vercmp": lambda args: CommandResult(0, "1\\n", "")},
        ... )
    """

    def __init__(
        self,
        *,
        installed_tools: dict[str, str] | None = None,
        handlers: dict[str, Callable[[list[str]], CommandResult]] | None = None,
        command_exit_code: int = 0,
    ) -> None:
        """Initialize fake with predetermined tool availability.

        Args:
            installed_tools: Mapping of tool name to executable path. Tools not in
                this mapping return None from which()
            handlers: Per-tool callbacks producing the result of run(); the
                callback receives the arguments after the tool name
            command_exit_code: Exit code for commands without a handler
        """
        self._installed_tools = installed_tools or {}
        self._handlers = handlers or {}
        self._command_exit_code = command_exit_code
        self._command_calls: list[tuple[list[str], Path | None]] = []

    def which(self, tool_name: str) -> str | None:
        return self._installed_tools.get(tool_name)

    def run(self, command: list[str], *, cwd: Path | None = None) -> CommandResult:
        self._command_calls.append((command, cwd))
        handler = self._handlers.get(command[0])
        if handler is not None:
            return handler(command[1:])
        return CommandResult(returncode=self._command_exit_code, stdout="", stderr="")

    @property
    def command_calls(self) -> list[tuple[list[str], Path | None]]:
        """Get the list of run() calls that were made.

        Returns list of (command, cwd) tuples.

        This property is for test assertions only.
        """
        return self._command_calls.copy()
