"""Logging configuration for the policy service."""

import logging
import sys

from app.core.config import get_settings

# Policy denials are logged at INFO by these modules.
POLICY_LOGGERS = (
    "app.application.services.visibility",
    "app.application.services.mutation_authorizer",
    "app.application.services.activity_workflow",
    "app.application.services.assignment_index",
)


def setup_logging(level: int | None = None) -> None:
    """Configure application-wide logging to stdout.

    Level is DEBUG when settings.debug is True, otherwise INFO, unless level
    is given. SQL statement logging follows settings.database_echo.
    """
    settings = get_settings()
    if level is None:
        level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.database_echo else logging.WARNING
    )
    for name in POLICY_LOGGERS:
        logging.getLogger(name).setLevel(min(level, logging.INFO))


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name (usually __name__)."""
    return logging.getLogger(name)
