from __future__ import annotations

import json
from datetime import datetime
from enum import Enum
from typing import Any, Mapping

import requests

from .client import format_timestamp
from .models import Webhook


class Operation(str, Enum):
    """Management Activity API operations, valued by their fixed labels."""

    SUBSCRIPTIONS_LIST = "subscriptions/list"
    SUBSCRIPTIONS_START = "subscriptions/start"
    SUBSCRIPTIONS_STOP = "subscriptions/stop"
    SUBSCRIPTIONS_CONTENT = "subscriptions/content"
    SUBSCRIPTIONS_NOTIFICATIONS = "subscriptions/notifications"
    FETCH_CONTENT = "fetch content"


# Fields in ``{}`` are filled from rendered params; ``error`` is the cause.
_TEMPLATES: dict[Operation, str] = {
    Operation.SUBSCRIPTIONS_LIST: "O365 subscriptions/list {error}",
    Operation.SUBSCRIPTIONS_START: (
        "O365 subscriptions/start error. ContentType = {content_type}, "
        "webhook = {webhook}, error = {error}"
    ),
    Operation.SUBSCRIPTIONS_STOP: (
        "O365 subscriptions/stop error. ContentType = {content_type}, error = {error}"
    ),
    Operation.SUBSCRIPTIONS_CONTENT: (
        "O365 subscriptions/content error. ContentType = {content_type}, "
        "startTs = {start_ts}, endTs = {end_ts}, error = {error}"
    ),
    Operation.SUBSCRIPTIONS_NOTIFICATIONS: (
        "O365 subscriptions/notifications error. ContentType = {content_type}, "
        "startTs = {start_ts}, endTs = {end_ts}, error = {error}"
    ),
    Operation.FETCH_CONTENT: "O365 fetch content error. uri = {content_uri}, error = {error}",
}

# Rendered as plain text; every other param is rendered as JSON.
_TEXT_PARAMS = frozenset({"content_type", "content_uri"})


def _json_default(value: Any) -> Any:
    if isinstance(value, Webhook):
        return value.to_payload()
    if isinstance(value, datetime):
        # Same UTC form the client puts on the wire.
        return format_timestamp(value)
    return str(value)


def render_param(name: str, value: Any) -> str:
    """Render a single input the way it appears in an error message.

    Inputs JSON cannot encode (cycles, non-string keys) fall back to ``repr``.
    """
    if name in _TEXT_PARAMS:
        return str(value.value if isinstance(value, Enum) else value)
    if isinstance(value, Enum):
        value = value.value
    try:
        return json.dumps(value, default=_json_default)
    except (TypeError, ValueError):
        return repr(value)


def render_cause(cause: BaseException) -> str:
    """Render the original error, preferring the API's JSON error body."""
    if isinstance(cause, requests.RequestException) and cause.response is not None:
        try:
            return json.dumps(cause.response.json())
        except ValueError:
            if cause.response.text:
                return cause.response.text
    return str(cause)


class ManagementApiError(Exception):
    """A failed Management Activity API call.

    Carries the operation, the inputs it was called with and the original
    exception. ``str()`` renders the diagnostic message.
    """

    def __init__(
        self,
        operation: Operation,
        params: Mapping[str, Any],
        cause: BaseException,
    ) -> None:
        self.operation = operation
        self.params = dict(params)
        self.cause = cause
        super().__init__(self.render())

    @property
    def request(self) -> Any:
        """The failing HTTP request, if the cause carries one."""
        request = getattr(self.cause, "request", None)
        if request is None and self.response is not None:
            request = getattr(self.response, "request", None)
        return request

    @property
    def response(self) -> Any:
        """The failing HTTP response, if the cause carries one."""
        return getattr(self.cause, "response", None)

    def render(self) -> str:
        rendered = {name: render_param(name, v) for name, v in self.params.items()}
        return _TEMPLATES[self.operation].format(
            error=render_cause(self.cause), **rendered
        )
