"""Runtime settings for sorted sequences, read from ``SORTEDSEQ_*`` variables."""
from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class SequenceSettings(BaseModel):
    min_capacity: int = Field(4, ge=0)
    growth_factor: float = Field(2.0, gt=1.0)
    log_level: LogLevel = "WARNING"
    # 0 disables the alert
    growth_alert_threshold: int = Field(0, ge=0)


def load_settings() -> SequenceSettings:
    """Build settings from the environment.

    Unset variables fall back to the model defaults. Invalid values raise
    ``pydantic.ValidationError``.
    """
    values = {
        "min_capacity": os.getenv("SORTEDSEQ_MIN_CAPACITY"),
        "growth_factor": os.getenv("SORTEDSEQ_GROWTH_FACTOR"),
        "log_level": os.getenv("SORTEDSEQ_LOG_LEVEL"),
        "growth_alert_threshold": os.getenv("SORTEDSEQ_GROWTH_ALERT_THRESHOLD"),
    }
    if values["log_level"] is not None:
        values["log_level"] = values["log_level"].upper()
    return SequenceSettings(**{k: v for k, v in values.items() if v is not None})


@lru_cache(maxsize=1)
def get_settings() -> SequenceSettings:
    return load_settings()


__all__ = ["SequenceSettings", "load_settings", "get_settings"]
