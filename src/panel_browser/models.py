"""Shared models used across panel-browser."""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class RequestMethod(str, enum.Enum):
    """HTTP methods a scripted step may use."""

    GET = "GET"
    POST = "POST"


class ResultFormat(str, enum.Enum):
    """How the response of a scripted step is interpreted."""

    HTML = "html"
    JSON = "json"


class NotificationLevel(str, enum.Enum):
    """Severity of notification events."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"


class NotificationEvent(BaseModel):
    """Event emitted while a script runs."""

    type: str
    message: str
    level: NotificationLevel = NotificationLevel.INFO
    data: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
