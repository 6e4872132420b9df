from __future__ import annotations

from typing import Any

from cleo.exceptions import CleoError


class MidstackError(Exception):
    """Base exception for all midstack errors."""

    pass


class MiddlewareConfigurationError(MidstackError):
    """Raised when a stack entry cannot be compiled into the call chain."""

    def __init__(self, message: str, target: Any = None) -> None:
        super().__init__(message)
        self.target = target


class MiddlewareLookupError(MidstackError, LookupError):
    """Raised when a position or middleware reference does not resolve to an entry."""

    def __init__(self, message: str, reference: Any = None) -> None:
        super().__init__(message)
        self.reference = reference


class BuilderOptionsError(MidstackError):
    """Raised when the options given to a builder are invalid."""

    pass


class CallableImportError(MidstackError):
    """Raised when a callable string cannot be imported."""

    pass


class SettingsError(MidstackError):
    """Raised when midstack settings cannot be read or are invalid."""

    pass


class EnvironmentLoadError(MidstackError):
    """Raised when an environment value for a run cannot be parsed."""

    pass


class MidstackConsoleError(MidstackError, CleoError):
    """Custom exception for midstack console errors."""

    pass
