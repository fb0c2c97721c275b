"""Pydantic models for the diagnostics report.

Every model is frozen so a report cannot change once assembled.  Field names
are snake_case in Python and serialized as camelCase (``runningOn``,
``thisWeek``, ``averageSize``...) to match what the gallery frontend expects.
"""

import datetime as dt
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ReportModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class MemoryInfo(_ReportModel):
    """Memory reading in bytes."""

    used: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)


class WindowCounts(_ReportModel):
    """Photo counts over the fixed calendar windows."""

    total: int = Field(default=0, ge=0)
    today: int = Field(default=0, ge=0)
    this_week: int = Field(default=0, ge=0)
    this_month: int = Field(default=0, ge=0)


class TrendPoint(_ReportModel):
    date: dt.date
    count: int = Field(default=0, ge=0)


class StorageStats(_ReportModel):
    """Aggregate file sizes in bytes."""

    total_size: int = Field(default=0, ge=0)
    average_size: float = Field(default=0.0, ge=0)
    max_size: int = Field(default=0, ge=0)


class DiagnosticsReport(_ReportModel):
    """Point-in-time system health and usage snapshot."""

    uptime: float = Field(default=0.0, ge=0)
    running_on: str = "unknown"
    memory: MemoryInfo
    photos: WindowCounts
    worker_pool: dict[str, Any] | None = None
    storage: StorageStats
    trends: tuple[TrendPoint, ...]
    timestamp: str
