from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

from cleo.application import Application as BaseApplication
from cleo.events.console_command_event import ConsoleCommandEvent
from cleo.events.console_events import COMMAND
from cleo.events.event_dispatcher import EventDispatcher
from cleo.loaders.factory_command_loader import FactoryCommandLoader

from midstack.__version__ import APP_NAME
from midstack.__version__ import __version__
from midstack.console.commands.command import Command
from midstack.utils.helpers import import_callable

if TYPE_CHECKING:
    from cleo.events.event import Event

# Command name -> import path of its class; imported on first use
COMMANDS = {
    "about": "midstack.console.commands.about:AboutCommand",
    "describe": "midstack.console.commands.describe:DescribeCommand",
    "run": "midstack.console.commands.run:RunCommand",
}


def _create_command(path: str) -> Command:
    return import_callable(path)()


def configure_command_logging(
    event: Event, event_name: str, _: EventDispatcher
) -> None:
    """Lets every midstack command set up console logging for its own IO."""
    if isinstance(event, ConsoleCommandEvent) and isinstance(event.command, Command):
        event.command.configure_logging(event.io)


class MidstackConsole(BaseApplication):
    """The ``midstack`` command line: inspect and run middleware stacks."""

    def __init__(self) -> None:
        super().__init__(APP_NAME, __version__)

        dispatcher = EventDispatcher()
        dispatcher.add_listener(COMMAND, configure_command_logging)
        self.set_event_dispatcher(dispatcher)

        self.set_command_loader(
            FactoryCommandLoader(
                {name: partial(_create_command, path) for name, path in COMMANDS.items()}
            )
        )


def main() -> int:
    exit_code: int = MidstackConsole().run()
    return exit_code
