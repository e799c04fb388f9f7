"""Shell operations abstraction.

Wraps the two things pkgfeeds needs from the host system: discovering whether an
external tool is installed, and running it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class CommandResult:
    """Outcome of an external command."""

    returncode: int
    stdout: str
    stderr: str


class Shell(ABC):
    """Abstract shell operations for dependency injection."""

    @abstractmethod
    def which(self, tool_name: str) -> str | None:
        """Return the absolute path of an installed tool, or None if absent.

        Args:
            tool_name: Executable name (e.g. "vercmp", "updpkgsums")
        """
        ...

    @abstractmethod
    def run(self, command: list[str], *, cwd: Path | None = None) -> CommandResult:
        """Run a command to completion and capture its output.

        Args:
            command: Command and arguments
            cwd: Working directory, or None for the current one

        Returns:
            CommandResult with exit code and decoded output

        Raises:
            RuntimeError: If the command cannot be started or times out
        """
        ...
