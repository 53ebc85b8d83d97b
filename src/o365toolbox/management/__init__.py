"""Office 365 Management Activity API client and facade.

Public API:
- O365Management (facade with the six operations), get_management(), reset_management()
- ManagementActivityClient (HTTP client), build_management_client()
- ManagementApiError, Operation
- ContentType, Webhook, Subscription, ContentBlob, CallResult
"""

from .client import ManagementActivityClient
from .context import build_management_client
from .errors import ManagementApiError, Operation
from .facade import O365Management, get_management, reset_management
from .models import CallResult, ContentBlob, ContentType, Subscription, Webhook

__all__ = [
    "O365Management",
    "get_management",
    "reset_management",
    "ManagementActivityClient",
    "build_management_client",
    "ManagementApiError",
    "Operation",
    "CallResult",
    "ContentBlob",
    "ContentType",
    "Subscription",
    "Webhook",
]
