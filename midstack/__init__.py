"""
midstack - Build and run middleware stacks around any environment value.
"""

from .__version__ import __version__
from .exceptions import MiddlewareConfigurationError
from .exceptions import MiddlewareLookupError
from .exceptions import MidstackError
from .stack import EMPTY_MIDDLEWARE
from .stack import Builder
from .stack import BuilderOptions
from .stack import EntryKind
from .stack import MiddlewareEntry
from .stack import Runner

__all__ = [
    "EMPTY_MIDDLEWARE",
    "Builder",
    "BuilderOptions",
    "EntryKind",
    "MiddlewareConfigurationError",
    "MiddlewareEntry",
    "MiddlewareLookupError",
    "MidstackError",
    "Runner",
    "__version__",
]
