"""
Engine Logging
--------------
Every engine module logs through `logging.getLogger(__name__)`, so all of them
sit under the `tradesignals` logger. `setup_engine_logging` attaches handlers
there once; `setup_logger` does the same for any other named logger.
"""
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Union

from tradesignals.config import settings

ENGINE_LOGGER = "tradesignals"

_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Names that already carry our handlers
_configured_loggers = set()

LevelLike = Union[int, str, None]


def resolve_level(level: LevelLike = None) -> int:
    """Numeric level from an int, a level name, or settings.LOG_LEVEL when None."""
    if level is None:
        level = settings.LOG_LEVEL
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def _handlers(log_file: Path, level: int, console: bool) -> List[logging.Handler]:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handlers: List[logging.Handler] = [
        RotatingFileHandler(
            str(log_file),
            maxBytes=settings.LOG_MAX_BYTES,
            backupCount=settings.LOG_BACKUP_COUNT,
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())

    formatter = logging.Formatter(_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
    return handlers


def setup_logger(
    name: str,
    log_file: Optional[Union[str, Path]] = None,
    level: LevelLike = None,
    console: bool = True,
) -> logging.Logger:
    """
    Configure `name` with a rotating file handler and, optionally, a console handler.

    The file defaults to <settings.LOG_DIR>/<name>.log. Calling again for the
    same name only updates the level; handlers are never duplicated.
    """
    level = resolve_level(level)
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if name in _configured_loggers:
        return logger

    logger.propagate = False
    path = Path(log_file) if log_file is not None else Path(settings.LOG_DIR) / f"{name}.log"
    for handler in _handlers(path, level, console):
        logger.addHandler(handler)

    _configured_loggers.add(name)
    return logger


def setup_engine_logging(
    level: LevelLike = None,
    log_file: Optional[Union[str, Path]] = None,
    console: bool = True,
) -> logging.Logger:
    """Handlers for the whole engine: detectors, fusion and aggregation."""
    return setup_logger(ENGINE_LOGGER, log_file=log_file, level=level, console=console)
