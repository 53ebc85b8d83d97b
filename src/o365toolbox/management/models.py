from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, NamedTuple, Union


class ContentType(str, Enum):
    """Audit log streams exposed by the Management Activity API."""

    AZURE_ACTIVE_DIRECTORY = "Audit.AzureActiveDirectory"
    EXCHANGE = "Audit.Exchange"
    SHAREPOINT = "Audit.SharePoint"
    GENERAL = "Audit.General"
    DLP = "DLP.All"


@dataclass
class Webhook:
    """Webhook that receives notifications for a subscription."""

    address: str
    auth_id: str | None = None
    expiration: str | None = None

    def to_payload(self) -> dict[str, str]:
        payload = {"address": self.address}
        if self.auth_id is not None:
            payload["authId"] = self.auth_id
        if self.expiration is not None:
            payload["expiration"] = self.expiration
        return payload


@dataclass
class Subscription:
    """An active (or disabled) subscription to a content type."""

    content_type: str
    status: str | None = None
    webhook: Mapping[str, Any] | None = None
    extra: Mapping[str, Any] | None = None


@dataclass
class ContentBlob:
    """A unit of retrievable audit data, as listed by content or notifications."""

    content_type: str
    content_id: str
    content_uri: str
    content_created: str | None = None
    content_expiration: str | None = None
    extra: Mapping[str, Any] | None = None


class CallResult(NamedTuple):
    """Completion of a facade call: ``(error, result, request, response)``."""

    error: Exception | None
    result: Any
    request: Any
    response: Any


ContentTypeLike = Union[ContentType, str]
WebhookLike = Union[Webhook, Mapping[str, Any]]
Timestamp = Union[datetime, str]
