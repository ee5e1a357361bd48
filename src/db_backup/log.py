"""Logging setup for the CLI and the API server.

Library modules only call ``logging.getLogger(__name__)``; entry points
call ``configure_logging`` once.
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVEL_ENV = "DB_BACKUP_LOG_LEVEL"


def configure_logging(level: str | int | None = None, console: Console | None = None) -> None:
    """Install a ``RichHandler`` on the root logger.

    Args:
        level: Log level name or number.  Defaults to ``DB_BACKUP_LOG_LEVEL``
            or ``INFO``.
        console: Console to log to (defaults to stderr).
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        level = level.upper()

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]
    logging.captureWarnings(True)

    # boto3/botocore are chatty at DEBUG
    for name in ("botocore", "boto3", "urllib3", "s3transfer"):
        logging.getLogger(name).setLevel(logging.WARNING)
