"""Sequential action queue that stands in for a web browser."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .action import Action
from .info import BrowserInfo

LOGGER = logging.getLogger(__name__)


class Browser:
    """Owns one session and runs queued actions as an all-or-nothing batch."""

    def __init__(self, info: Optional[BrowserInfo] = None) -> None:
        self.info = info or BrowserInfo()
        self._actions: List[Action] = []

    @property
    def actions(self) -> Tuple[Action, ...]:
        return tuple(self._actions)

    def add_action(self, action: Action) -> None:
        self._actions.append(action)

    def clear_actions(self) -> None:
        self._actions = []

    def run(self) -> None:
        """Run queued actions in order, stopping at the first failure.

        The queue is emptied whatever the outcome; session changes made by
        actions that completed before a failure are kept.
        """

        try:
            for index, action in enumerate(self._actions):
                LOGGER.debug("Running action %d of %d", index + 1, len(self._actions))
                action.run(self.info)
        finally:
            self.clear_actions()


_browser_instance: Optional[Browser] = None


def get_browser() -> Browser:
    """Return the process-wide browser, creating it on first use."""

    global _browser_instance
    if _browser_instance is None:
        _browser_instance = Browser()
    return _browser_instance
