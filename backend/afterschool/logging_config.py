"""
After School Lessons Backend — Logging Configuration
======================================================

What:  One place that configures the root logger for the API server and
       the command-line tools.
When:  Called first thing in the app lifespan and in each CLI main().

Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
"""

import logging
import sys
from typing import Optional

from afterschool.config import settings


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure stdout logging at LOG_LEVEL (or `level` when given).

    Third-party loggers that log every query or connection are raised
    to WARNING.
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    level_name = (level or settings.log_level).upper()

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,  # Override any existing logging config
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
