"""Notification channels for script runs."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterable

from rich.console import Console
from rich.text import Text

from ..models import NotificationEvent, NotificationLevel

LOGGER = logging.getLogger(__name__)


class Notifier(ABC):
    """Interface for reporting what a script run is doing."""

    @abstractmethod
    def notify(self, event: NotificationEvent) -> None:
        """Send a notification event."""


class ConsoleNotifier(Notifier):
    """Report script progress on stderr, one line per event.

    The step labels of ``script_started`` are listed beneath it and the
    exception class of ``script_failed`` is appended to the failure line.
    """

    _STYLES = {
        NotificationLevel.INFO: "cyan",
        NotificationLevel.WARNING: "yellow",
        NotificationLevel.ERROR: "bold red",
        NotificationLevel.SUCCESS: "green",
    }

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(stderr=True)

    def notify(self, event: NotificationEvent) -> None:
        line = Text(f"{event.timestamp:%H:%M:%S} ", style="dim")
        line.append(event.type, style=self._STYLES.get(event.level, "white"))
        line.append(f"  {event.message}")
        error = event.data.get("error")
        if error:
            line.append(f" ({error})", style="red")
        self._console.print(line)
        for number, label in enumerate(event.data.get("steps", ()), start=1):
            self._console.print(f"  {number}. {label}", style="dim", markup=False)


class LoggingNotifier(Notifier):
    """Forward events to the standard logging tree."""

    _LEVELS = {
        NotificationLevel.INFO: logging.INFO,
        NotificationLevel.SUCCESS: logging.INFO,
        NotificationLevel.WARNING: logging.WARNING,
        NotificationLevel.ERROR: logging.ERROR,
    }

    def notify(self, event: NotificationEvent) -> None:
        LOGGER.log(self._LEVELS[event.level], "%s: %s", event.type, event.message)


class CompositeNotifier(Notifier):
    """Deliver each event to every configured channel in order."""

    def __init__(self, channels: Iterable[Notifier]) -> None:
        self.channels = tuple(channels)

    def notify(self, event: NotificationEvent) -> None:
        for channel in self.channels:
            channel.notify(event)
