from midstack.stack.builder import Builder
from midstack.stack.builder import BuilderOptions
from midstack.stack.entry import EntryKind
from midstack.stack.entry import MiddlewareEntry
from midstack.stack.runner import EMPTY_MIDDLEWARE
from midstack.stack.runner import Runner

__all__ = [
    "EMPTY_MIDDLEWARE",
    "Builder",
    "BuilderOptions",
    "EntryKind",
    "MiddlewareEntry",
    "Runner",
]
