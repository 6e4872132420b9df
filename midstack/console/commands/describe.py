from __future__ import annotations

from midstack.console.commands.command import StackCommand


class DescribeCommand(StackCommand):
    name = "describe"
    description = "Lists the middleware of a stack in the order they run."

    def handle(self) -> int:
        builder = self.load_stack()
        self.reporter.display_stack(builder, title=self.argument("stack"))
        return 0
