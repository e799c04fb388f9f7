from pkgfeeds.integrations.shell.abc import CommandResult, Shell
from pkgfeeds.integrations.shell.real import RealShell

__all__ = ["CommandResult", "RealShell", "Shell"]
