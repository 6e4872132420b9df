from __future__ import annotations

import enum
import inspect
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError

from midstack.exceptions import MiddlewareConfigurationError
from midstack.utils.helpers import describe_target


class EntryKind(str, enum.Enum):
    CLASS = "class"
    CALLABLE = "callable"
    STACK = "stack"
    INVALID = "invalid"


def classify(target: Any) -> EntryKind:
    """Determines how the runner will treat a middleware target."""
    from midstack.stack.builder import Builder

    # Builders are callable too, so they have to be recognised first.
    if isinstance(target, Builder):
        return EntryKind.STACK
    if inspect.isclass(target):
        return EntryKind.CLASS
    if callable(target):
        return EntryKind.CALLABLE
    return EntryKind.INVALID


class MiddlewareEntry(BaseModel):
    """
    A single unit scheduled to run in a middleware stack.

    Attributes:
        target: The object given to ``Builder.use``. It is stored as-is so that
            identity lookups (``insert``, ``replace``, ``delete``) can find it.
        args: Extra positional arguments for a middleware class, passed after
            the next callable in the chain.
        kwargs: Extra keyword arguments for a middleware class.
        block: Optional configuration callback, passed to a middleware class
            as the ``block`` keyword argument.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    target: Any
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = Field(default_factory=dict)
    block: Callable[..., Any] | None = None

    @property
    def kind(self) -> EntryKind:
        return classify(self.target)

    @property
    def label(self) -> str:
        return describe_target(self.target)

    @classmethod
    def coerce(cls, item: Any) -> MiddlewareEntry:
        """
        Accepts an entry, or a ``(target, args, block)`` sequence where ``args``
        and ``block`` are optional.
        """
        if isinstance(item, MiddlewareEntry):
            return item

        if not isinstance(item, (tuple, list)) or not 1 <= len(item) <= 3:
            raise MiddlewareConfigurationError(
                f"Invalid middleware stack item: {item!r}", target=item
            )

        target, args, block = (*item, None, None)[:3]
        try:
            return cls(target=target, args=tuple(args or ()), block=block)
        except (TypeError, ValidationError) as e:
            raise MiddlewareConfigurationError(
                f"Invalid middleware stack item for {describe_target(target)}: {e}",
                target=target,
            ) from e
