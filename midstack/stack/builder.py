from __future__ import annotations

import logging
from collections.abc import Callable
from collections.abc import Iterator
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import ValidationError
from pydantic import field_validator

from midstack.exceptions import BuilderOptionsError
from midstack.exceptions import MiddlewareConfigurationError
from midstack.exceptions import MiddlewareLookupError
from midstack.stack.entry import MiddlewareEntry
from midstack.stack.runner import Runner
from midstack.utils.helpers import describe_target
from midstack.utils.helpers import import_callable

logger = logging.getLogger(__name__)


class BuilderOptions(BaseModel):
    """
    Options accepted by ``Builder``.

    Attributes:
        runner_class: Factory called with the list of stack entries that returns
            the callable to run. Either the object itself or a dotted import
            path. Defaults to ``Runner``.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    runner_class: Any = None

    @field_validator("runner_class")
    @classmethod
    def resolve_runner_class(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, str):
            return import_callable(value)
        if not callable(value):
            raise ValueError(f"runner_class must be callable, got {value!r}")
        return value


def _is_position(index: Any) -> bool:
    return isinstance(index, int) and not isinstance(index, bool)


class Builder:
    """
    Builds up a stack of middleware which can then be run with an environment.

    Middleware are run in the order they were added. A middleware can be:

    - a class, instantiated with the next callable in the chain followed by any
      extra arguments given to ``use``; the instance is called with the
      environment and decides whether to call the next step.
    - any other callable, called with the environment before the chain always
      continues.
    - another ``Builder``, whose current entries are merged into this one.

    Usage::

        def setup(stack):
            stack.use(Timing).use(audit).use(Auth, "admin")

        app = Builder(setup=setup)
        app({"result": []})
    """

    def __init__(
        self,
        opts: BuilderOptions | Mapping[str, Any] | None = None,
        setup: Callable[[Builder], Any] | None = None,
    ) -> None:
        self._options = self._parse_options(opts)
        self._runner_class = self._options.runner_class or Runner
        self._stack: list[MiddlewareEntry] = []

        if setup is not None:
            setup(self)

    @staticmethod
    def _parse_options(opts: BuilderOptions | Mapping[str, Any] | None) -> BuilderOptions:
        if opts is None:
            return BuilderOptions()
        if isinstance(opts, BuilderOptions):
            return opts
        try:
            return BuilderOptions(**opts)
        except ValidationError as e:
            raise BuilderOptionsError(f"Invalid builder options: {e}") from e

    @property
    def runner_class(self) -> Callable[[list[MiddlewareEntry]], Callable[[Any], Any]]:
        return self._runner_class

    @property
    def entries(self) -> tuple[MiddlewareEntry, ...]:
        return tuple(self._stack)

    def use(self, middleware: Any, *args: Any, block: Callable | None = None, **kwargs: Any) -> Builder:
        """
        Adds a middleware to the end of the stack.

        Any additional args, kwargs and block are saved and passed to the
        middleware class when the stack is compiled. A ``Builder`` has its
        current entries merged into this stack instead.
        """
        if isinstance(middleware, Builder):
            if args or kwargs or block is not None:
                raise MiddlewareConfigurationError(
                    "Arguments can't be given when merging a builder into another",
                    target=middleware,
                )
            logger.debug(f"Merging {len(middleware)} entries from {middleware!r}")
            self._stack.extend(middleware._stack)
        else:
            self._stack.append(self._entry(middleware, args, kwargs, block))

        return self

    append = use

    def index(self, middleware: Any) -> int | None:
        """Returns the position of the first entry added with this exact object."""
        for position, entry in enumerate(self._stack):
            if entry.target is middleware:
                return position
        return None

    def resolve_position(self, index: Any, action: str = "find", allow_end: bool = False) -> int:
        """
        Resolves a position or a middleware object to a position in the stack.

        Integer positions must address an existing entry; ``allow_end`` also
        accepts the position just past the last entry.
        """
        if _is_position(index):
            limit = len(self._stack) + 1 if allow_end else len(self._stack)
            if not 0 <= index < limit:
                raise MiddlewareLookupError(
                    f"no such middleware to {action}: position {index} is out of range",
                    reference=index,
                )
            return index

        position = self.index(index)
        if position is None:
            raise MiddlewareLookupError(
                f"no such middleware to {action}: {index!r}", reference=index
            )
        return position

    def insert(self, index: Any, middleware: Any, *args: Any, block: Callable | None = None, **kwargs: Any) -> Builder:
        """Inserts a middleware at the given position or directly before the given middleware object."""
        position = self.resolve_position(index, "insert before", allow_end=True)
        entry = self._entry(middleware, args, kwargs, block)
        logger.debug(f"Inserting {entry.label} at position {position}")
        self._stack.insert(position, entry)
        return self

    insert_before = insert

    def insert_after(self, index: Any, middleware: Any, *args: Any, block: Callable | None = None, **kwargs: Any) -> Builder:
        """Inserts a middleware after the given position or middleware object."""
        position = self.resolve_position(index, "insert after") + 1
        entry = self._entry(middleware, args, kwargs, block)
        logger.debug(f"Inserting {entry.label} at position {position}")
        self._stack.insert(position, entry)
        return self

    def replace(self, index: Any, middleware: Any, *args: Any, block: Callable | None = None, **kwargs: Any) -> Builder:
        """Replaces the given position or middleware object with the new middleware."""
        position = self.resolve_position(index, "replace")
        entry = self._entry(middleware, args, kwargs, block)
        logger.debug(
            f"Replacing {self._stack[position].label} with {entry.label} at position {position}"
        )
        self._stack[position] = entry
        return self

    def delete(self, index: Any) -> Builder:
        """Deletes the given position or middleware object."""
        position = self.resolve_position(index, "delete")
        removed = self._stack.pop(position)
        logger.debug(f"Deleted {removed.label} from position {position}")
        return self

    def to_app(self) -> Callable[[Any], Any]:
        """Compiles a snapshot of the current stack with the runner class."""
        return self._runner_class(list(self._stack))

    def __call__(self, env: Any = None) -> Any:
        return self.to_app()(env)

    run = __call__

    def as_mergeable(self) -> Callable[[Any], Any]:
        """
        Returns a plain callable that runs this builder.

        Passing the result to ``use`` adds the whole builder as a single
        forwarding step instead of merging its entries.
        """

        def run_stack(env: Any) -> Any:
            return self(env)

        return run_stack

    def __len__(self) -> int:
        return len(self._stack)

    def __iter__(self) -> Iterator[MiddlewareEntry]:
        return iter(tuple(self._stack))

    def __contains__(self, middleware: Any) -> bool:
        return self.index(middleware) is not None

    def __repr__(self) -> str:
        return f"Builder({' → '.join(entry.label for entry in self._stack)})"

    @staticmethod
    def _entry(middleware: Any, args: tuple[Any, ...], kwargs: dict[str, Any], block: Callable | None) -> MiddlewareEntry:
        try:
            return MiddlewareEntry(target=middleware, args=args, kwargs=kwargs, block=block)
        except ValidationError as e:
            raise MiddlewareConfigurationError(
                f"Invalid arguments for middleware {describe_target(middleware)}: {e}",
                target=middleware,
            ) from e
