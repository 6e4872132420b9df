from __future__ import annotations

import importlib
import inspect
import logging
from collections.abc import Callable
from typing import Any

from midstack.exceptions import CallableImportError

logger = logging.getLogger(__name__)


def import_callable(fqn: str) -> Callable:
    """
    Imports a callable (function, class or builder instance) given its fully
    qualified name. Both ``package.module.name`` and ``package.module:name``
    are accepted.
    """
    if not isinstance(fqn, str) or not ("." in fqn or ":" in fqn):
        raise CallableImportError(
            f"Invalid fully qualified name: '{fqn}'. Must be a dot-separated string."
        )
    try:
        if ":" in fqn:
            module_name, object_name = fqn.split(":", 1)
        else:
            module_name, object_name = fqn.rsplit(".", 1)
        module = importlib.import_module(module_name)
        callable_obj = module
        for attr in object_name.split("."):
            callable_obj = getattr(callable_obj, attr)
        if not callable(callable_obj):
            raise CallableImportError(f"The object '{fqn}' is not callable.")
        return callable_obj
    except (ImportError, AttributeError, ValueError) as e:
        raise CallableImportError(f"Could not import callable '{fqn}': {e}") from e


def describe_target(target: Any) -> str:
    """Returns a short human readable name for a middleware target."""
    if inspect.isclass(target) or inspect.isfunction(target) or inspect.ismethod(target):
        return getattr(target, "__qualname__", target.__name__)
    if isinstance(target, str):
        return repr(target)
    return type(target).__name__


def pluralize(count: int, word: str = "") -> str:
    if count == 1:
        return word
    return word + "s"
