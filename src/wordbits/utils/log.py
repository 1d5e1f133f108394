import sys

from loguru import logger


def configure_logger(is_logging: bool = False) -> None:
    """Routes wordbits log messages to the console.

    The library is silent until this is called. Readers and writers never touch
    the sinks themselves, so building one does not change logging for another.
    """
    logger.enable("wordbits")
    logger.remove()
    logger.add(sys.stdout, filter=lambda _: is_logging)

    # If a message higher than ERROR is logged while is_logging is False, log it to stderr regardless of the logging flag
    logger.add(sys.stderr, level="ERROR", filter=lambda _: not is_logging)
