"""
Logging configuration for the Cocina Casera order core.

Usage:
    from cocina_casera.logging_config import setup_logging
    setup_logging()  # Call once at application startup

Environment variables:
    LOG_LEVEL: Set to DEBUG, INFO, WARNING, ERROR, or CRITICAL (default: INFO)
    LOG_TRACE_PRICING: Set to true to log every price and grouping decision
                       at DEBUG while the rest of the package stays at LOG_LEVEL
"""
import logging
import os
import sys

# Loggers that explain how a total or a group was reached
TRACE_LOGGERS = (
    "cocina_casera.orders.pricing",
    "cocina_casera.orders.grouping",
)


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


def setup_logging(level: str = None, trace_pricing: bool = None) -> None:
    """
    Configure logging for the application.

    Price computations are logged at DEBUG. Turning on trace_pricing keeps
    those records for the pricing and grouping loggers without lowering the
    level of everything else, which is how a disputed total is usually
    investigated in production.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               If not provided, reads from LOG_LEVEL env var, defaults to INFO.
        trace_pricing: Force DEBUG on the pricing and grouping loggers.
                       If not provided, reads from LOG_TRACE_PRICING.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    level = level.upper()

    valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if level not in valid_levels:
        level = "INFO"

    numeric_level = getattr(logging, level)

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )

    logging.getLogger("cocina_casera").setLevel(numeric_level)

    if trace_pricing is None:
        trace_pricing = _env_flag("LOG_TRACE_PRICING")
    for name in TRACE_LOGGERS:
        # NOTSET defers to the package logger
        logging.getLogger(name).setLevel(logging.DEBUG if trace_pricing else logging.NOTSET)

    logger = logging.getLogger(__name__)
    logger.debug("Logging configured at %s level (pricing trace: %s)", level, trace_pricing)
