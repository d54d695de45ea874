"""Logging helpers used by the Fixtura CLI.

Console logging goes through Rich. Records from other libraries get a short
bracketed prefix so they stand apart from fixtura's own messages.
"""

import logging
from typing import Literal, TypeAlias

from rich.console import Console
from rich.logging import RichHandler

PROJECT_PREFIX = "fixtura"

ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]


class ThirdPartyPrefixFilter(logging.Filter):
    """Annotate third-party log records with a short prefix.

    Records from loggers outside the project get ``record.prefix`` set to a
    token like "[urllib3]"; project records get an empty prefix. Records are
    never filtered out.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not record.name.startswith(PROJECT_PREFIX):
            record.prefix = f"[{record.name.split('.')[0]}]"
        else:
            record.prefix = ""
        return True


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Configure and return a RichHandler writing to stderr.

    Args:
        level: Minimum level for console output (DEBUG in debug_mode).
        debug_mode: Show logger names, timestamps and source paths.
        color: Enable color output when True.

    Returns:
        RichHandler: Handler suitable for the project or root logger.
    """
    color_system: ColorSystem | None = "auto" if color else None
    console = Console(color_system=color_system, stderr=True)

    if debug_mode:
        level = logging.DEBUG

    handler = RichHandler(
        level=level,
        console=console,
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )

    fmt = "%(prefix)s %(message)s" if not debug_mode else "%(asctime)s %(name)s: %(message)s"
    handler.setFormatter(logging.Formatter(fmt=fmt))

    if not debug_mode:
        handler.addFilter(ThirdPartyPrefixFilter())

    return handler


def configure_logging(verbose: bool = False, color: bool = True) -> logging.Logger:
    """Attach a console handler to the project logger.

    Repeated calls replace the previously attached console handler.

    Args:
        verbose: Log at DEBUG instead of WARNING.
        color: Enable color output when True.

    Returns:
        logging.Logger: The configured project logger.
    """
    logger = logging.getLogger(PROJECT_PREFIX)
    for existing in list(logger.handlers):
        if isinstance(existing, RichHandler):
            logger.removeHandler(existing)

    handler = config_console_handler(
        level=logging.WARNING, debug_mode=verbose, color=color
    )
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger
