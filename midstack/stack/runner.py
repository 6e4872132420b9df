from __future__ import annotations

import logging
from collections.abc import Callable
from collections.abc import Iterable
from collections.abc import Sequence
from functools import reduce
from typing import Any

from midstack.exceptions import MiddlewareConfigurationError
from midstack.stack.entry import EntryKind
from midstack.stack.entry import MiddlewareEntry
from midstack.utils.helpers import describe_target
from midstack.utils.helpers import pluralize

logger = logging.getLogger(__name__)

App = Callable[[Any], Any]
"""Signature of every compiled step: takes the environment, returns anything."""


def empty_middleware(env: Any) -> None:
    """A middleware which does nothing."""
    return None


EMPTY_MIDDLEWARE: App = empty_middleware


def forward_to(middleware: App, next_app: App) -> App:
    """Calls a plain callable with the environment, then always continues the chain."""

    def forward(env: Any) -> Any:
        middleware(env)
        return next_app(env)

    return forward


class Runner:
    """
    Compiles a middleware stack into a single callable and runs it.

    The stack is compiled once, at construction. Middleware classes are
    instantiated with the next callable in the chain and are responsible for
    calling it themselves; plain callables are wrapped so that they always
    forward to the next step.

    This class usually doesn't need to be used directly; ``Builder`` creates a
    fresh runner every time it is called.
    """

    def __init__(self, stack: Iterable[Any]) -> None:
        self._stack = [MiddlewareEntry.coerce(item) for item in stack]
        self._kickoff = self.build_call_chain(self._stack)

    def __call__(self, env: Any = None) -> Any:
        return self._kickoff(env)

    @property
    def kickoff(self) -> App:
        return self._kickoff

    def __len__(self) -> int:
        return len(self._stack)

    def __repr__(self) -> str:
        return f"Runner({' → '.join(entry.label for entry in self._stack)})"

    def build_call_chain(self, stack: Sequence[MiddlewareEntry]) -> App:
        """
        Folds the stack from the last entry to the first so that every step
        holds a reference to the step after it. The innermost step is always
        ``EMPTY_MIDDLEWARE``.
        """
        logger.debug(
            f"Building call chain for {len(stack)} {pluralize(len(stack), 'middleware')}"
        )
        return reduce(self.wrap, reversed(stack), EMPTY_MIDDLEWARE)

    def wrap(self, next_app: App, entry: MiddlewareEntry) -> App:
        kind = entry.kind
        if kind is EntryKind.CLASS:
            return self.instantiate(entry, next_app)
        if kind is EntryKind.CALLABLE:
            return forward_to(entry.target, next_app)
        if kind is EntryKind.STACK:
            raise MiddlewareConfigurationError(
                f"Invalid middleware, builders must be merged with `use` "
                f"before compiling: {entry.target!r}",
                target=entry.target,
            )
        raise MiddlewareConfigurationError(
            f"Invalid middleware, doesn't respond to `__call__`: {entry.target!r}",
            target=entry.target,
        )

    @staticmethod
    def instantiate(entry: MiddlewareEntry, next_app: App) -> App:
        kwargs = dict(entry.kwargs)
        if entry.block is not None:
            kwargs["block"] = entry.block

        middleware = entry.target(next_app, *entry.args, **kwargs)
        if not callable(middleware):
            raise MiddlewareConfigurationError(
                f"Invalid middleware, instances of {describe_target(entry.target)} "
                f"don't respond to `__call__`",
                target=entry.target,
            )
        return middleware
