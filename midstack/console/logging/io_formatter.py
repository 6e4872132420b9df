from __future__ import annotations

from typing import Any
from typing import ClassVar

from cleo.formatters.formatter import Formatter

from midstack.console.logging.filters import is_midstack_logger


class IORenderer:
    """
    Final structlog processor for the console: renders an event as a single
    cleo-formatted line, ``[logger] event key=value ...``.

    Everything taken from the event is escaped, so reprs such as
    ``<function ...>`` are not read as cleo tags.
    """

    _level_styles: ClassVar[dict[str, str]] = {
        "critical": "fg=red;options=bold",
        "error": "fg=red",
        "warning": "fg=yellow",
        "info": "fg=blue",
        "debug": "options=dark",
    }

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> str:
        name = str(event_dict.pop("logger", ""))
        level = str(event_dict.pop("level", method_name))
        event = Formatter.escape(str(event_dict.pop("event", "")))
        exception = event_dict.pop("exception", None)
        event_dict.pop("timestamp", None)

        style = self._level_styles.get(level)
        line = f"<{style}>{event}</>" if style else event
        if event_dict:
            pairs = " ".join(
                f"{key}={Formatter.escape(repr(value))}"
                for key, value in sorted(event_dict.items())
            )
            line = f"{line} <fg=cyan>{pairs}</>"

        prefix = f"<fg=yellow>{name}</>" if is_midstack_logger(name) else name
        line = f"[{prefix}] {line}"
        if exception:
            line = f"{line}\n{Formatter.escape(str(exception))}"
        return line
