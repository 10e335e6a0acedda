import logging
import sys

import structlog


def configure_logging(level: int = logging.INFO, json: bool = True) -> None:
    """
    Routes stdlib logging and structlog output to stderr.
    Call once from the embedding application; the library never configures logging itself.
    """
    logging.basicConfig(stream=sys.stderr, level=level, force=True)

    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer(colors=False)
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )
