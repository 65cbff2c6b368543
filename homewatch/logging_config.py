"""Logging configuration for Homewatch."""

import logging
from datetime import datetime
from pathlib import Path

from homewatch.config import LOG_LEVEL


def setup_logging() -> None:
    """Configure logging with file and console handlers."""
    # Create logs directory at project root
    logs_dir = Path(__file__).parent.parent / "logs"
    logs_dir.mkdir(exist_ok=True)

    log_file = logs_dir / f"homewatch-{datetime.now().strftime('%Y-%m-%d')}.log"

    # Format: timestamp - level - logger - message
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )

    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(formatter)
    file_handler.setLevel(logging.INFO)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, LOG_LEVEL))
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    # Quiet down noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)

    logging.getLogger("homewatch").setLevel(logging.INFO)
    logging.getLogger("homewatch.services").setLevel(logging.INFO)
    logging.getLogger("homewatch.routes").setLevel(logging.INFO)

    logging.info(f"Logging initialized - file: {log_file}")
