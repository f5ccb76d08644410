"""Progress events emitted by pipeline stages."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger("osimport")


@dataclass(frozen=True)
class ProgressEvent:
    stage: str
    message: str
    counts: dict[str, int] = field(default_factory=dict)


ProgressCallback = Callable[[ProgressEvent], None]


def log_progress(event: ProgressEvent) -> None:
    if event.counts:
        detail = " ".join(f"{key}={value}" for key, value in event.counts.items())
        logger.info("[%s] %s (%s)", event.stage, event.message, detail)
    else:
        logger.info("[%s] %s", event.stage, event.message)


def discard_progress(event: ProgressEvent) -> None:
    return None
