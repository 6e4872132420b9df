from __future__ import annotations

import logging
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.pretty import Pretty
from rich.table import Table

from midstack.stack.builder import Builder
from midstack.utils.helpers import pluralize

logger = logging.getLogger(__name__)


class StackReporter:
    """Handles displaying stacks, run results and settings on the console."""

    def __init__(self, rich_console: Console | None = None) -> None:
        if rich_console is None:
            from midstack.console import console as global_midstack_console

            self.console = global_midstack_console
        else:
            self.console = rich_console

    def display_stack(self, builder: Builder, title: str | None = None) -> None:
        if not len(builder):
            self.console.print("[italic]The stack is empty.[/italic]")
            return

        table = Table(
            title=title or f"{len(builder)} {pluralize(len(builder), 'middleware')}",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("#", style="dim", justify="right")
        table.add_column("Kind", style="cyan")
        table.add_column("Middleware", style="bold")
        table.add_column("Arguments", overflow="fold")
        for position, entry in enumerate(builder):
            arguments = [repr(arg) for arg in entry.args]
            arguments += [f"{key}={value!r}" for key, value in entry.kwargs.items()]
            if entry.block is not None:
                arguments.append("block=…")
            table.add_row(
                str(position), entry.kind.value, entry.label, ", ".join(arguments)
            )
        self.console.print(table)

    def display_result(self, result: Any, env: Any) -> None:
        self.console.print(
            Panel(Pretty(result), title="Result", border_style="green", expand=False)
        )
        self.console.print(
            Panel(Pretty(env), title="Environment", border_style="cyan", expand=False)
        )
