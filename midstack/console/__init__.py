from rich.console import Console as RichConsole

from midstack.console.reporter import StackReporter

console = RichConsole()

__all__ = [
    "StackReporter",
    "console",
]
