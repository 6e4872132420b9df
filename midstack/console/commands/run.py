from __future__ import annotations

import structlog
from cleo.helpers import option

from midstack.console.commands.command import StackCommand
from midstack.console.environment import load_environment
from midstack.console.logging.structlog import add_json_file_handler
from midstack.console.logging.structlog import remove_json_file_handler
from midstack.exceptions import BuilderOptionsError
from midstack.exceptions import CallableImportError
from midstack.exceptions import EnvironmentLoadError
from midstack.exceptions import MidstackConsoleError
from midstack.exceptions import MiddlewareConfigurationError
from midstack.stack.builder import Builder

log = structlog.get_logger(__name__)


class RunCommand(StackCommand):
    name = "run"
    description = "Runs a stack with an environment and prints the result."

    options = [
        option("env", "e", "Environment as a JSON value.", flag=False),
        option(
            "env-file", "f", "Read the environment from a JSON or YAML file.", flag=False
        ),
        option(
            "runner",
            "r",
            "Import path of the runner class to compile the stack with.",
            flag=False,
        ),
        option("log-file", None, "Also write JSON logs to this file.", flag=False),
    ]

    def handle(self) -> int:
        try:
            env = load_environment(self.option("env"), self.option("env-file"))
        except EnvironmentLoadError as e:
            self.line_error(f"<error>{e}</error>")
            return 1

        stack = self.load_stack()
        # Merging keeps the stack's own entries while compiling with our runner
        try:
            runner_class = self.option("runner") or self.settings.runner_class
            builder = Builder({"runner_class": runner_class}).use(stack)
        except (BuilderOptionsError, CallableImportError) as e:
            raise MidstackConsoleError(f"Invalid runner: {e}") from e

        log_file = self.option("log-file")
        if log_file:
            add_json_file_handler(log_file)

        try:
            log.info("Running stack", stack=self.argument("stack"), entries=len(builder))
            result = builder(env)
        except MiddlewareConfigurationError as e:
            self.line_error(f"<error>Invalid stack: {e}</error>")
            return 1
        finally:
            if log_file:
                remove_json_file_handler()

        self.reporter.display_result(result, env)
        return 0
