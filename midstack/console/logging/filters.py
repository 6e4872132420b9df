import logging

MIDSTACK_LOGGER = "midstack"

MIDSTACK_FILTER = logging.Filter(name=MIDSTACK_LOGGER)


def is_midstack_logger(name: str) -> bool:
    return name == MIDSTACK_LOGGER or name.startswith(f"{MIDSTACK_LOGGER}.")
