"""Factories for constructing components from configuration."""

from __future__ import annotations

from typing import Optional

import httpx

from .actions.requests import FormPostRequest, GetRequest
from .actions.results import HtmlPageResult, JsonPayloadResult
from .config import NotificationConfig, StepConfig, TransportConfig
from .models import RequestMethod, ResultFormat
from .notifications.base import CompositeNotifier, ConsoleNotifier, LoggingNotifier, Notifier
from .session.action import Action, ActionRequester, ActionResulter
from .session.browser import Browser
from .session.info import BrowserInfo


def build_browser(
    config: TransportConfig,
    *,
    transport: Optional[httpx.BaseTransport] = None,
) -> Browser:
    info = BrowserInfo(
        transport=transport,
        timeout=config.timeout,
        follow_redirects=config.follow_redirects,
    )
    return Browser(info)


def build_notifier(config: NotificationConfig) -> Notifier:
    channels: list[Notifier] = []
    for name in config.channel.lower().split(","):
        name = name.strip()
        if name == "console":
            channels.append(ConsoleNotifier())
        elif name == "log":
            channels.append(LoggingNotifier())
        else:
            raise ValueError(f"Unsupported notification channel: {name}")
    if len(channels) == 1:
        return channels[0]
    return CompositeNotifier(channels)


def build_requester(step: StepConfig) -> ActionRequester:
    if step.method == RequestMethod.POST:
        forward = True if step.forward_hidden is None else step.forward_hidden
        return FormPostRequest(step.url, step.fields, forward_hidden=forward)
    return GetRequest(step.url, step.fields, forward_hidden=bool(step.forward_hidden))


def build_result(step: StepConfig) -> ActionResulter:
    if step.result == ResultFormat.JSON:
        return JsonPayloadResult()
    return HtmlPageResult(expect_text=step.expect_text)


def build_action(step: StepConfig) -> Action:
    return Action(request=build_requester(step), result=build_result(step))
