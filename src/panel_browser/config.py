"""Configuration models for panel-browser."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import RequestMethod, ResultFormat


class TransportConfig(BaseModel):
    """Settings handed to the HTTP client of every action."""

    timeout: float = Field(default=30.0, gt=0)
    follow_redirects: bool = True


class NotificationConfig(BaseModel):
    """Notification channel settings."""

    channel: str = Field(default="console")


class StepConfig(BaseModel):
    """One request of a script, run in order against the shared session."""

    name: Optional[str] = None
    method: RequestMethod = RequestMethod.GET
    url: str
    fields: dict[str, Union[str, list[str]]] = Field(default_factory=dict)
    forward_hidden: Optional[bool] = Field(
        default=None,
        description="Send the hidden __ fields of the previous page. Defaults to True for POST.",
    )
    result: ResultFormat = ResultFormat.HTML
    expect_text: Optional[str] = Field(
        default=None,
        description="Text that must appear on an HTML page for the step to succeed.",
    )


class PanelConfig(BaseSettings):
    """Top-level configuration for running a control panel script."""

    model_config = SettingsConfigDict(
        env_prefix="PANEL_BROWSER_",
        env_file=(".env",),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    session_id: Optional[str] = Field(
        default=None,
        description="Resume an existing panel session instead of starting a new one.",
    )
    transport: TransportConfig = Field(default_factory=TransportConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    steps: list[StepConfig] = Field(default_factory=list)


def load_config(
    path: Path | None = None,
    *,
    env_file: Path | None = None,
    **overrides: object,
) -> PanelConfig:
    """Load configuration from an optional YAML file and overrides."""

    data: dict[str, Any] = {}
    if path:
        import yaml

        data = yaml.safe_load(path.read_text()) or {}
    if overrides:
        _deep_update(data, overrides)
    settings_kwargs: dict[str, object] = {}
    if env_file is not None:
        settings_kwargs["_env_file"] = env_file
    config = PanelConfig(**data, **settings_kwargs)
    if not data:
        return config

    merged = config.model_dump(mode="python")
    _deep_update(merged, data)
    return PanelConfig.model_validate(merged)


def _deep_update(target: dict[str, Any], updates: Mapping[str, Any]) -> None:
    """Recursively merge ``updates`` into ``target`` in-place."""

    for key, value in updates.items():
        if (
            isinstance(value, Mapping)
            and isinstance(existing := target.get(key), Mapping)
        ):
            nested: dict[str, Any]
            if isinstance(existing, dict):
                nested = existing
            else:
                nested = dict(existing)
            _deep_update(nested, value)
            target[key] = nested
        else:
            target[key] = value
