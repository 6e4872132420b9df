import io
import logging
from pathlib import Path

import pytest
from cleo.testers.command_tester import CommandTester
from rich.console import Console

from midstack.console.application import MidstackConsole
from midstack.console.logging.structlog import configure_structlog
from midstack.console.reporter import StackReporter

CLI_STACK_MODULE = """
from midstack import Builder
from midstack import Runner


class Tag:
    def __init__(self, app, tag):
        self.app = app
        self.tag = tag

    def __call__(self, env):
        env["data"].append(self.tag)
        return self.app(env)


def finish(env):
    env["done"] = True


class ReturningRunner(Runner):
    def __call__(self, env=None):
        super().__call__(env)
        return "custom runner"


stack = Builder().use(Tag, 2).use(Tag, 1).use(finish)
broken = Builder().use(Tag, 1).use(42)
empty = Builder()
"""


@pytest.fixture
def isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Runs the console against an empty project and user configuration."""
    project_dir = tmp_path / "project"
    config_dir = tmp_path / "config"
    project_dir.mkdir()
    config_dir.mkdir()
    (project_dir / "pyproject.toml").write_text("[project]\nname = 'demo'\n")

    monkeypatch.setenv("MIDSTACK_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("MIDSTACK_RUNNER", raising=False)
    monkeypatch.delenv("MIDSTACK_LOG_LEVEL", raising=False)
    monkeypatch.chdir(project_dir)
    return project_dir


@pytest.fixture
def cli_stack_module(temporary_python_module) -> str:
    return temporary_python_module("cli_stack_module", CLI_STACK_MODULE)


@pytest.fixture
def app(isolated_project):
    application = MidstackConsole()
    yield application
    # drop the console handler bound to the tester's IO
    configure_structlog(log_level=logging.WARNING)


@pytest.fixture
def rich_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def command_tester_factory(app: MidstackConsole, rich_output: io.StringIO):
    """Builds a CommandTester whose rich output is written to ``rich_output``."""

    def _tester(name: str) -> CommandTester:
        command = app.find(name)
        command.reporter = StackReporter(
            Console(file=rich_output, width=200, color_system=None)
        )
        return CommandTester(command)

    return _tester
