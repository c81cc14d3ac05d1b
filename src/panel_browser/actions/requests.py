"""Reusable request builders for control panel pages."""

from __future__ import annotations

from typing import Mapping, Optional, Sequence, Union

import httpx

from ..session.action import ActionRequester
from ..session.info import FormValues

FieldValue = Union[str, Sequence[str]]


def merge_fields(
    values: FormValues,
    fields: Optional[Mapping[str, FieldValue]],
    *,
    forward_hidden: bool,
) -> FormValues:
    """Combine forwarded values and explicit fields, keeping value order per name.

    Explicit fields replace forwarded values of the same name.
    """

    merged: FormValues = {}
    if forward_hidden:
        for name, items in values.items():
            merged[name] = list(items)
    for name, value in (fields or {}).items():
        merged[name] = [value] if isinstance(value, str) else list(value)
    return merged


class GetRequest(ActionRequester):
    """GET a page, optionally echoing the forwarded parameters in the query."""

    def __init__(
        self,
        url: str,
        params: Optional[Mapping[str, FieldValue]] = None,
        *,
        forward_hidden: bool = False,
    ) -> None:
        self.url = url
        self.params = dict(params or {})
        self.forward_hidden = forward_hidden

    def new_request(self, values: FormValues) -> httpx.Request:
        merged = merge_fields(values, self.params, forward_hidden=self.forward_hidden)
        return httpx.Request("GET", self.url, params=merged or None)


class FormPostRequest(ActionRequester):
    """POST an urlencoded form, the way a postback from the previous page would."""

    def __init__(
        self,
        url: str,
        fields: Optional[Mapping[str, FieldValue]] = None,
        *,
        forward_hidden: bool = True,
    ) -> None:
        self.url = url
        self.fields = dict(fields or {})
        self.forward_hidden = forward_hidden

    def new_request(self, values: FormValues) -> httpx.Request:
        merged = merge_fields(values, self.fields, forward_hidden=self.forward_hidden)
        return httpx.Request("POST", self.url, data=merged)
