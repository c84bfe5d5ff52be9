import logging
from typing import Union

import structlog
from structlog.stdlib import add_log_level, add_logger_name


def setup_logging(level: Union[int, str] = logging.INFO) -> None:
    """Configure structlog and standard logging for map generation runs.

    ``level`` is a logging constant or a level name such as ``"debug"``.
    Unknown names raise ``ValueError`` before anything is configured.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    logging.basicConfig(level=level, format="%(message)s")
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_logger_name,
            add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=False),
            structlog.dev.ConsoleRenderer(colors=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
