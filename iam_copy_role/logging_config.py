import logging

import structlog


def configure_logging(log_level: str = "INFO", use_json_logs: bool = False) -> None:
    """Configure stdlib logging and structlog.

    Human-friendly console output in development, JSON in production.

    Args:
        log_level: Name of the logging level, e.g. "DEBUG"
        use_json_logs: Render events as JSON instead of console lines
    """
    logging.basicConfig(level=getattr(logging, log_level.upper(), logging.INFO))
    logging.getLogger().setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # botocore is chatty at DEBUG
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if use_json_logs else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
