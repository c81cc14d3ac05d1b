"""Reusable result sinks for HTML pages and JSON endpoints."""

from __future__ import annotations

from typing import Any, Generic, Optional, Type, TypeVar

import httpx
from bs4 import BeautifulSoup
from pydantic import BaseModel, ValidationError

from ..session.action import ActionError, HtmlActionResulter, JsonActionResulter

ModelT = TypeVar("ModelT", bound=BaseModel)


class ResultPopulateError(ActionError):
    """Raised when a well-formed response does not contain what the sink expects."""


class HtmlPageResult(HtmlActionResulter):
    """Keep the landing page of an action, optionally checking for a marker text."""

    def __init__(self, expect_text: Optional[str] = None) -> None:
        self.expect_text = expect_text
        self.status_code: Optional[int] = None
        self.url: Optional[str] = None
        self.title: Optional[str] = None
        self.document: Optional[BeautifulSoup] = None

    def populate(self, response: httpx.Response, doc: BeautifulSoup) -> None:
        if response.is_error:
            raise ResultPopulateError(
                f"{response.request.method} {response.url} answered {response.status_code}"
            )
        self.status_code = response.status_code
        self.url = str(response.url)
        self.title = doc.title.get_text(strip=True) if doc.title else None
        self.document = doc
        if self.expect_text and self.expect_text not in doc.get_text():
            raise ResultPopulateError(
                f"Expected text {self.expect_text!r} not found on {self.url}"
            )


class JsonPayloadResult(JsonActionResulter, Generic[ModelT]):
    """Decode a JSON body, optionally validating it into a pydantic model."""

    def __init__(self, model: Optional[Type[ModelT]] = None) -> None:
        self.model = model
        self.status_code: Optional[int] = None
        self.data: Any = None
        self.parsed: Optional[ModelT] = None

    def populate(self, response: httpx.Response) -> None:
        if response.is_error:
            raise ResultPopulateError(
                f"{response.request.method} {response.url} answered {response.status_code}"
            )
        self.status_code = response.status_code
        try:
            self.data = response.json()
        except ValueError as exc:
            raise ResultPopulateError(f"Response from {response.url} is not JSON") from exc
        if self.model is not None:
            try:
                self.parsed = self.model.model_validate(self.data)
            except ValidationError as exc:
                raise ResultPopulateError(str(exc)) from exc
