import sys
from pathlib import Path

from loguru import logger

# Records logged outside a draw show "-" in the group column.
LOG_FORMAT = "{time} | {level} | group={extra[group_id]} | {module}:{function}:{line} | {message}"


def setup_logging(level: str, log_path: str) -> None:
    Path(log_path).parent.mkdir(parents=True, exist_ok=True)
    logger.remove()
    logger.configure(extra={"group_id": "-"})
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)
    logger.add(
        log_path,
        level="DEBUG",
        format=LOG_FORMAT,
        rotation="100 KB",
        compression="zip",
    )
