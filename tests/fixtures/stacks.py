from typing import Any

import pytest

from midstack import Builder


class Recorder:
    """Records its tag in ``env[key]`` before and after the rest of the chain."""

    def __init__(self, app, tag: Any, key: str = "result") -> None:
        self.app = app
        self.tag = tag
        self.key = key

    def __call__(self, env):
        env[self.key].append(self.tag)
        result = self.app(env)
        env[self.key].append(self.tag)
        return result


class Tag:
    """Appends its tag to ``env["data"]`` and continues."""

    def __init__(self, app, tag: Any) -> None:
        self.app = app
        self.tag = tag

    def __call__(self, env):
        env["data"].append(self.tag)
        return self.app(env)


class Halt:
    """Never calls the rest of the chain."""

    def __init__(self, app, value: Any = "halted") -> None:
        self.app = app
        self.value = value

    def __call__(self, env):
        env["data"].append("halt")
        return self.value


class Recover:
    """Catches any fault raised further down the chain and records it."""

    def __init__(self, app, tag: Any = "recover") -> None:
        self.app = app
        self.tag = tag

    def __call__(self, env):
        try:
            return self.app(env)
        except Exception as e:
            env["errors"].append((self.tag, str(e)))
            return "recovered"


class Configured:
    """Keeps everything it was constructed with so tests can inspect it."""

    instances: list["Configured"] = []

    def __init__(self, app, *args, block=None, **kwargs) -> None:
        self.app = app
        self.args = args
        self.kwargs = kwargs
        self.block = block
        Configured.instances.append(self)

    def __call__(self, env):
        if self.block is not None:
            self.block(env)
        return self.app(env)


def appender(value: Any, key: str = "data"):
    """Returns a new plain callable that appends ``value`` to ``env[key]``."""

    def append(env):
        env[key].append(value)

    return append


def boom(env):
    raise RuntimeError("boom")


@pytest.fixture
def env() -> dict[str, list]:
    return {"data": [], "result": [], "errors": []}


@pytest.fixture
def configured_instances():
    Configured.instances = []
    yield Configured.instances
    Configured.instances = []


@pytest.fixture
def counting_stack() -> Builder:
    """A builder of three tagged steps, 1 to 3."""
    return Builder().use(Tag, 1).use(Tag, 2).use(Tag, 3)
