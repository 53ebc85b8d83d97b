from typing import TYPE_CHECKING

from o365toolbox.azure.auth import AuthConfig, get_credential

from .client import ManagementActivityClient

if TYPE_CHECKING:
    from azure.core.credentials import TokenCredential


def build_management_client(
    auth_config: AuthConfig = None,
) -> tuple["ManagementActivityClient", "TokenCredential"]:
    """Build a Management Activity API client using Azure authentication."""
    cfg = auth_config or AuthConfig()
    cred: TokenCredential = get_credential(cfg)

    client = ManagementActivityClient(
        cred,
        cfg.tenant_id,
        resource=cfg.resource,
        publisher_identifier=cfg.publisher_identifier,
    )
    return client, cred
