from __future__ import annotations

import logging
from functools import cached_property
from typing import TYPE_CHECKING

from cleo.commands.command import Command as BaseCommand
from cleo.helpers import argument

from midstack.console.logging.structlog import configure_structlog
from midstack.console.reporter import StackReporter
from midstack.exceptions import CallableImportError
from midstack.exceptions import MidstackConsoleError
from midstack.settings import Settings
from midstack.stack.builder import Builder
from midstack.utils.helpers import import_callable

if TYPE_CHECKING:
    from cleo.io.io import IO


class Command(BaseCommand):
    @cached_property
    def settings(self) -> Settings:
        return Settings.load()

    @cached_property
    def reporter(self) -> StackReporter:
        return StackReporter()

    def log_level(self, io: IO) -> int:
        """Verbosity flags win over the ``log-level`` setting."""
        if io.is_debug():
            return logging.DEBUG
        if io.is_verbose():
            return logging.INFO
        return self.settings.log_level

    def configure_logging(self, io: IO) -> None:
        configure_structlog(
            log_level=self.log_level(io),
            io_for_console=io,
            third_party=io.is_very_verbose(),
        )


class StackCommand(Command):
    arguments = [
        argument(
            "stack",
            "Import path of a builder or a single middleware, e.g. 'app.middleware:stack'.",
        ),
    ]

    def load_stack(self) -> Builder:
        """
        Imports the stack named on the command line. A single middleware is
        wrapped in a builder of its own.
        """
        path = self.argument("stack")
        try:
            target = import_callable(path)
        except CallableImportError as e:
            raise MidstackConsoleError(str(e)) from e

        if isinstance(target, Builder):
            return target
        return Builder().use(target)
