# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - Structured Logging
structlog setup shared by the service, the loader and the CLI scripts.
Events are snake_case labels with key/value context, e.g.

    log.info("corpus_loaded", path="graphics.json", entries=9421)

Scoring code hands numpy scalars and arrays straight to the logger, so a
processor turns those into plain Python values before rendering.
"""

import logging
import sys
from typing import Any, Optional

import numpy as np
import structlog
from structlog.types import EventDict, Processor

from strokelens.config import get_settings

APP_NAME = "strokelens"


def _add_app_info(
    logger: Any, method: str, event_dict: EventDict
) -> EventDict:
    event_dict["app"] = APP_NAME
    return event_dict


def _coerce_numpy(
    logger: Any, method: str, event_dict: EventDict
) -> EventDict:
    """np.float64 → float, small arrays → lists, large arrays → shape only."""
    for key, value in event_dict.items():
        if isinstance(value, np.generic):
            event_dict[key] = value.item()
        elif isinstance(value, np.ndarray):
            event_dict[key] = value.tolist() if value.size <= 32 else f"ndarray{value.shape}"
    return event_dict


def _drop_color_message_key(
    logger: Any, method: str, event_dict: EventDict
) -> EventDict:
    """uvicorn adds an ANSI-coloured duplicate of the message."""
    event_dict.pop("color_message", None)
    return event_dict


def configure_logging(level: Optional[str] = None) -> None:
    """
    Console renderer at DEBUG, JSON lines otherwise.
    level overrides Settings.log_level (the CLI scripts pass "WARNING").
    """
    level_name = (level or get_settings().log_level).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _add_app_info,
        _coerce_numpy,
        _drop_color_message_key,
    ]

    if level_name == "DEBUG":
        renderer: Processor = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
        processors = shared_processors + [renderer]
    else:
        processors = shared_processors + [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stdout),
        cache_logger_on_first_use=False,
    )

    # uvicorn and fastapi log through stdlib logging
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)


def get_logger(name: str = APP_NAME) -> structlog.BoundLogger:
    """
    Usage:
        log = get_logger(__name__)
        log.info("match_complete", strokes=3, candidates=10)
    """
    return structlog.get_logger(name)
