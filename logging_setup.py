from __future__ import annotations

import logging
import os
from typing import Any, Optional

LOG_LEVEL_ENV = "RHYTHM_ADVENTURE_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


def parse_level(text: Optional[str]) -> Optional[int]:
    if not text:
        return None
    value = str(text).strip().upper()
    if not value:
        return None
    mapping = {
        "CRITICAL": logging.CRITICAL,
        "ERROR": logging.ERROR,
        "WARNING": logging.WARNING,
        "WARN": logging.WARNING,
        "INFO": logging.INFO,
        "DEBUG": logging.DEBUG,
        "NOTSET": logging.NOTSET,
    }
    return mapping.get(value)


def resolve_level(args: Any = None, *, default_level: Optional[str] = None) -> int:
    """Pick the effective level.

    Priority (highest first):
    - env RHYTHM_ADVENTURE_LOG_LEVEL
    - CLI flags: --quiet / --debug (if present on args)
    - default_level (usually the config file's log_level)
    - INFO
    """
    level = parse_level(default_level)
    if level is None:
        level = logging.INFO

    if args is not None:
        if bool(getattr(args, "quiet", False)):
            level = logging.WARNING
        if bool(getattr(args, "debug", False)):
            level = logging.DEBUG

    env_level = parse_level(os.environ.get(LOG_LEVEL_ENV))
    if env_level is not None:
        level = int(env_level)

    return level


def setup_logging(args: Any = None, *, default_level: Optional[str] = None, name: str = "rhythm_adventure") -> int:
    """Configure python logging once. Returns the effective level."""
    level = resolve_level(args, default_level=default_level)

    root = logging.getLogger()
    if root.handlers:
        return level

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    logging.getLogger(name).debug("logging initialized (level=%s)", logging.getLevelName(level))
    return level
