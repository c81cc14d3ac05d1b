"""Run a configured sequence of control panel requests as one queue."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..config import PanelConfig, StepConfig
from ..factory import build_action
from ..models import NotificationEvent, NotificationLevel
from ..notifications.base import Notifier
from ..session.action import Action
from ..session.browser import Browser

LOGGER = logging.getLogger(__name__)


@dataclass
class ScriptStep:
    """A configured step together with the action built for it."""

    config: StepConfig
    action: Action

    @property
    def label(self) -> str:
        return self.config.name or f"{self.config.method.value} {self.config.url}"


class ScriptRunner:
    """Queue every configured step on a browser and run them together."""

    def __init__(
        self,
        config: PanelConfig,
        browser: Browser,
        notifier: Notifier,
        action_builder: Optional[Callable[[StepConfig], Action]] = None,
    ) -> None:
        self._config = config
        self._browser = browser
        self._notifier = notifier
        self._action_builder = action_builder or build_action
        self.steps: List[ScriptStep] = []

    def run(self) -> bool:
        """Run the script; return ``True`` when every step succeeded."""

        if self._config.session_id:
            self._browser.info.fix_sid(self._config.session_id)
            LOGGER.info("Resuming panel session from configuration")

        self.steps = [
            ScriptStep(config=step, action=self._action_builder(step))
            for step in self._config.steps
        ]
        for step in self.steps:
            self._browser.add_action(step.action)

        LOGGER.info("Running %d step(s)", len(self.steps))
        self._notifier.notify(
            NotificationEvent(
                type="script_started",
                message=f"Running {len(self.steps)} step(s)",
                level=NotificationLevel.INFO,
                data={"steps": [step.label for step in self.steps]},
            )
        )
        try:
            self._browser.run()
        except Exception as exc:
            LOGGER.exception("Script aborted")
            self._notifier.notify(
                NotificationEvent(
                    type="script_failed",
                    message=str(exc) or exc.__class__.__name__,
                    level=NotificationLevel.ERROR,
                    data={"error": exc.__class__.__name__},
                )
            )
            return False

        self._notifier.notify(
            NotificationEvent(
                type="script_finished",
                message="All steps completed",
                level=NotificationLevel.SUCCESS,
            )
        )
        return True
