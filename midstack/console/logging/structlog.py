from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
from structlog.typing import Processor

if TYPE_CHECKING:
    from cleo.io.io import IO


# Run for every record: on structlog events before they are handed to the
# standard library, and on plain ``logging`` records (the stack core) when a
# handler formats them.
SHARED_PROCESSORS: list[Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]

_CONSOLE_HANDLER_REFERENCE: logging.Handler | None = None
_JSON_FILE_HANDLER_REFERENCE: logging.FileHandler | None = None


def _level_number(level: int | str) -> int:
    return level if isinstance(level, int) else logging.getLevelName(level.upper())


def processor_formatter(renderer: Processor) -> structlog.stdlib.ProcessorFormatter:
    """A stdlib formatter that renders structlog and plain records alike."""
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=list(SHARED_PROCESSORS),
    )


def configure_structlog(
    log_level: int | str = logging.INFO,
    io_for_console: IO | None = None,
    third_party: bool = False,
) -> None:
    """
    Configures structlog and the standard Python logging system.
    Called once per console command, before the command runs.
    """
    global _CONSOLE_HANDLER_REFERENCE

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            *SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    level = _level_number(log_level)
    root_logger = logging.getLogger()
    if _CONSOLE_HANDLER_REFERENCE is not None:
        root_logger.removeHandler(_CONSOLE_HANDLER_REFERENCE)
        _CONSOLE_HANDLER_REFERENCE = None

    if io_for_console is not None:
        from midstack.console.logging.filters import MIDSTACK_FILTER
        from midstack.console.logging.io_formatter import IORenderer
        from midstack.console.logging.io_handler import IOHandler

        console_handler = IOHandler(io_for_console)
        console_handler.setFormatter(processor_formatter(IORenderer()))
        console_handler.setLevel(level)
        if not third_party:
            console_handler.addFilter(MIDSTACK_FILTER)
        root_logger.addHandler(console_handler)
        _CONSOLE_HANDLER_REFERENCE = console_handler

    root_logger.setLevel(level)
    structlog.get_logger("midstack.logging").debug(
        "Structlog globally configured.", root_level=logging.getLevelName(level)
    )


def add_json_file_handler(
    log_file_path: str | Path, log_level: int | str = logging.DEBUG
) -> logging.FileHandler:
    """
    Adds a FileHandler to the root logger writing one JSON object per record.
    Keys bound on structlog events become top-level JSON keys.
    """
    global _JSON_FILE_HANDLER_REFERENCE
    log = structlog.get_logger(__name__)

    log_file_p = Path(log_file_path).resolve()
    log_file_p.parent.mkdir(parents=True, exist_ok=True)

    remove_json_file_handler()

    file_handler = logging.FileHandler(str(log_file_p), encoding="utf-8")
    file_handler.setFormatter(
        processor_formatter(structlog.processors.JSONRenderer(sort_keys=True))
    )
    file_handler.setLevel(_level_number(log_level))

    root_logger = logging.getLogger()
    root_logger.addHandler(file_handler)
    if root_logger.level > file_handler.level:
        root_logger.setLevel(file_handler.level)
    _JSON_FILE_HANDLER_REFERENCE = file_handler

    log.info(
        "JSON file logging enabled.",
        path=str(log_file_p),
        handler_level=logging.getLevelName(file_handler.level),
    )
    return file_handler


def remove_json_file_handler() -> None:
    """Removes the JSON file handler if it exists."""
    global _JSON_FILE_HANDLER_REFERENCE
    if _JSON_FILE_HANDLER_REFERENCE:
        _JSON_FILE_HANDLER_REFERENCE.close()
        logging.getLogger().removeHandler(_JSON_FILE_HANDLER_REFERENCE)
        _JSON_FILE_HANDLER_REFERENCE = None
