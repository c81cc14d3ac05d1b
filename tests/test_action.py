from __future__ import annotations

import httpx
import pytest
from bs4 import BeautifulSoup

from panel_browser.session.action import (
    Action,
    ActionConfigurationError,
    ActionRequester,
    HtmlActionResulter,
    JsonActionResulter,
    UndefinedResultTypeError,
    hidden_params,
)
from panel_browser.session.info import SESSION_NAME, BrowserInfo, FormValues

LOGIN_PAGE = """
<html><head><title>Login</title></head><body>
<form method="post" action="/Login">
  <input type="hidden" name="__a" value="alpha">
  <input type="HIDDEN" name="__b" value="beta">
  <input type="hidden" name="visible_c" value="gamma">
  <input type="text" name="__typed" value="not hidden">
  <input type="hidden" value="no name">
</form>
</body></html>
"""


class RecordingRequest(ActionRequester):
    def __init__(self, url: str = "https://cp.conoha.jp/Login", headers=None) -> None:
        self.url = url
        self.headers = headers or {}
        self.seen: list[FormValues] = []

    def new_request(self, values: FormValues) -> httpx.Request:
        self.seen.append({name: list(items) for name, items in values.items()})
        return httpx.Request("GET", self.url, headers=self.headers)


class RecordingHtmlResult(HtmlActionResulter):
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[tuple[httpx.Response, BeautifulSoup]] = []

    def populate(self, response: httpx.Response, doc: BeautifulSoup) -> None:
        self.calls.append((response, doc))
        if self.error:
            raise self.error


class RecordingJsonResult(JsonActionResulter):
    def __init__(self) -> None:
        self.payloads: list[object] = []

    def populate(self, response: httpx.Response) -> None:
        self.payloads.append(response.json())


class ShapelessResult:
    def populate(self, response: httpx.Response) -> None:
        raise AssertionError("must not be called")


def _info(handler, requests: list[httpx.Request] | None = None) -> BrowserInfo:
    def recording_handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return handler(request)

    return BrowserInfo(transport=httpx.MockTransport(recording_handler))


def _html(body: str, **kwargs) -> httpx.Response:
    return httpx.Response(200, text=body, headers={"Content-Type": "text/html"}, **kwargs)


@pytest.mark.parametrize(
    "action",
    [
        Action(request=None, result=RecordingHtmlResult()),
        Action(request=RecordingRequest(), result=None),
        Action(),
    ],
)
def test_unset_fields_fail_before_any_request(action: Action) -> None:
    sent: list[httpx.Request] = []
    info = _info(lambda request: _html(LOGIN_PAGE), sent)

    with pytest.raises(ActionConfigurationError):
        action.run(info)

    assert sent == []
    if isinstance(action.request, RecordingRequest):
        assert action.request.seen == []
    if isinstance(action.result, RecordingHtmlResult):
        assert action.result.calls == []


def test_html_action_replaces_parameters_with_prefixed_hidden_fields() -> None:
    info = _info(lambda request: _html(LOGIN_PAGE))
    info.values = {"__OLD": ["stale"], "other": ["x"]}
    request = RecordingRequest()
    result = RecordingHtmlResult()

    returned = Action(request=request, result=result).run(info)

    assert request.seen == [{"__OLD": ["stale"], "other": ["x"]}]
    assert info.values == {"__a": ["alpha"], "__b": ["beta"]}
    assert returned == info.values
    response, doc = result.calls[0]
    assert response.status_code == 200
    assert doc.title.get_text() == "Login"


def test_parameters_are_replaced_before_a_failing_sink() -> None:
    info = _info(lambda request: _html(LOGIN_PAGE))
    info.values = {"__OLD": ["stale"]}
    error = ValueError("unexpected page")

    with pytest.raises(ValueError) as excinfo:
        Action(request=RecordingRequest(), result=RecordingHtmlResult(error)).run(info)

    assert excinfo.value is error
    assert info.values == {"__a": ["alpha"], "__b": ["beta"]}


def test_page_without_hidden_fields_clears_parameters() -> None:
    info = _info(lambda request: _html("<html><body><p>Done</p></body></html>"))
    info.values = {"__VIEWSTATE": ["abc"]}

    Action(request=RecordingRequest(), result=RecordingHtmlResult()).run(info)

    assert info.values == {}


def test_json_action_receives_raw_response_and_keeps_parameters() -> None:
    info = _info(lambda request: httpx.Response(200, json={"servers": ["vps1"]}))
    info.values = {"__VIEWSTATE": ["abc"]}
    result = RecordingJsonResult()

    returned = Action(request=RecordingRequest(), result=result).run(info)

    assert returned is None
    assert result.payloads == [{"servers": ["vps1"]}]
    assert info.values == {"__VIEWSTATE": ["abc"]}


def test_undefined_result_type_is_rejected() -> None:
    info = _info(lambda request: _html(LOGIN_PAGE))

    with pytest.raises(UndefinedResultTypeError):
        Action(request=RecordingRequest(), result=ShapelessResult()).run(info)


def test_session_headers_override_builder_headers() -> None:
    sent: list[httpx.Request] = []
    info = _info(lambda request: _html(LOGIN_PAGE), sent)
    request = RecordingRequest(headers={"User-Agent": "builder", "X-Requested-With": "XMLHttpRequest"})

    Action(request=request, result=RecordingHtmlResult()).run(info)

    assert sent[0].headers["User-Agent"] == info.headers["User-Agent"]
    assert sent[0].headers["Accept-Language"] == "en-US,en;q=0.8,ja;q=0.6"
    assert sent[0].headers["X-Requested-With"] == "XMLHttpRequest"


def test_cookies_from_one_action_are_sent_by_the_next() -> None:
    sent: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/Login":
            return httpx.Response(
                200,
                text=LOGIN_PAGE,
                headers={"Set-Cookie": f"{SESSION_NAME}=XYZ; path=/; HttpOnly"},
            )
        return _html("<html></html>")

    info = _info(handler, sent)

    Action(request=RecordingRequest(), result=RecordingHtmlResult()).run(info)
    Action(
        request=RecordingRequest("https://cp.conoha.jp/Service/VPS/"),
        result=RecordingHtmlResult(),
    ).run(info)

    assert "Cookie" not in sent[0].headers
    assert sent[1].headers["Cookie"] == f"{SESSION_NAME}=XYZ"
    assert info.sid() == "XYZ"


def test_fixed_session_id_is_attached_to_requests() -> None:
    sent: list[httpx.Request] = []
    info = _info(lambda request: _html("<html></html>"), sent)
    info.fix_sid("resumed")

    Action(request=RecordingRequest(), result=RecordingHtmlResult()).run(info)

    assert sent[0].headers["Cookie"] == f"{SESSION_NAME}=resumed"


def test_session_cookies_are_appended_to_builder_cookie() -> None:
    sent: list[httpx.Request] = []
    info = _info(lambda request: _html("<html></html>"), sent)
    info.fix_sid("S")

    request = RecordingRequest(headers={"Cookie": "extra=1"})
    Action(request=request, result=RecordingHtmlResult()).run(info)

    assert sent[0].headers.get_list("Cookie") == [f"extra=1; {SESSION_NAME}=S"]


def test_transport_errors_propagate_unchanged() -> None:
    error = httpx.ConnectError("connection refused")

    def handler(request: httpx.Request) -> httpx.Response:
        raise error

    info = _info(handler)
    result = RecordingHtmlResult()

    with pytest.raises(httpx.ConnectError) as excinfo:
        Action(request=RecordingRequest(), result=result).run(info)

    assert excinfo.value is error
    assert result.calls == []


def test_hidden_params_keeps_repeated_names_in_order() -> None:
    doc = BeautifulSoup(
        '<input type="hidden" name="__list" value="1">'
        '<input type="hidden" name="__list" value="2">'
        '<input type="hidden" name="__empty">',
        "html.parser",
    )

    assert hidden_params(doc) == {"__list": ["1", "2"], "__empty": [""]}
