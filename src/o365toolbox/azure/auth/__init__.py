"""Authentication helpers for the Office 365 Management Activity API.

Public API:
- get_credential() → TokenCredential
- AuthConfig (settings)
- Strategy (enum of auth strategies)
- MANAGEMENT_RESOURCE (constant for the Management Activity API)
- scope_from_resource() (scope helper)
"""

from .config import AuthConfig, Strategy
from .factory import get_credential
from .scopes import MANAGEMENT_RESOURCE, scope_from_resource

__all__ = [
    "AuthConfig",
    "Strategy",
    "get_credential",
    "MANAGEMENT_RESOURCE",
    "scope_from_resource",
]
