"""A single control panel request and the routing of its response."""

from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Union

import httpx
from bs4 import BeautifulSoup

from .info import HIDDEN_PREFIX, BrowserInfo, FormValues

LOGGER = logging.getLogger(__name__)


class ActionError(RuntimeError):
    """Base class for failures raised by the action layer itself."""


class ActionConfigurationError(ActionError):
    """Raised when an action is run without a request builder or result sink."""


class UndefinedResultTypeError(ActionError):
    """Raised when a result sink is neither an HTML nor a JSON sink."""


class ResultKind(str, enum.Enum):
    """Shapes of response a result sink can consume."""

    HTML = "html"
    JSON = "json"


class ActionRequester(ABC):
    """Builds the HTTP request for an action."""

    @abstractmethod
    def new_request(self, values: FormValues) -> httpx.Request:
        """Return a request built from the session's current parameters."""


class HtmlActionResulter(ABC):
    """Result sink for pages that answer with an HTML document."""

    kind = ResultKind.HTML

    @abstractmethod
    def populate(self, response: httpx.Response, doc: BeautifulSoup) -> None:
        """Interpret the response and its parsed document."""


class JsonActionResulter(ABC):
    """Result sink for endpoints that answer with a JSON body."""

    kind = ResultKind.JSON

    @abstractmethod
    def populate(self, response: httpx.Response) -> None:
        """Interpret the raw response; the sink decodes the body itself."""


ActionResulter = Union[HtmlActionResulter, JsonActionResulter]


@dataclass
class Action:
    """Pairs a request builder with the sink that receives its result."""

    request: Optional[ActionRequester] = None
    result: Optional[ActionResulter] = None

    def run(self, info: BrowserInfo) -> Optional[FormValues]:
        """Execute one round trip against ``info``.

        For HTML sinks the hidden ``__`` fields of the page replace
        ``info.values`` before the sink is called, and are returned. JSON
        sinks leave the parameters untouched and ``None`` is returned.
        """

        if self.request is None or self.result is None:
            raise ActionConfigurationError("Some fields of Action are undefined.")

        request = self.request.new_request(info.values)
        for key, value in info.headers.items():
            request.headers[key] = value

        _attach_cookies(info, request)

        with info.new_client() as client:
            LOGGER.debug("%s %s", request.method, request.url)
            response = client.send(request)
            try:
                LOGGER.debug("%s %s -> %s", request.method, request.url, response.status_code)
                return self._dispatch(info, response)
            finally:
                response.close()

    def _dispatch(self, info: BrowserInfo, response: httpx.Response) -> Optional[FormValues]:
        kind = getattr(self.result, "kind", None)
        if kind == ResultKind.HTML:
            doc = BeautifulSoup(response.text, "html.parser")
            values = hidden_params(doc)
            info.values = values
            LOGGER.debug("Forwarding %d hidden parameter(s)", len(values))
            self.result.populate(response, doc)
            return values
        if kind == ResultKind.JSON:
            self.result.populate(response)
            return None
        raise UndefinedResultTypeError("Undefined result type.")


def _attach_cookies(info: BrowserInfo, request: httpx.Request) -> None:
    """Append the session jar's cookies after any the builder set itself."""

    jar_cookies = info.cookie_header(request.url)
    if not jar_cookies:
        return
    existing = request.headers.get("Cookie")
    request.headers["Cookie"] = f"{existing}; {jar_cookies}" if existing else jar_cookies


def hidden_params(doc: BeautifulSoup) -> FormValues:
    """Collect hidden inputs whose name starts with ``__`` in document order."""

    values: FormValues = {}
    for node in doc.find_all("input"):
        if str(node.get("type", "")).lower() != "hidden":
            continue
        name = node.get("name")
        if not name or not name.startswith(HIDDEN_PREFIX):
            continue
        values.setdefault(name, []).append(node.get("value", ""))
    return values
