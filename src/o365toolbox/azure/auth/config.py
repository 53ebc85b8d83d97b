from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import AliasChoices, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .scopes import MANAGEMENT_RESOURCE


class Strategy(str, Enum):
    """Supported authentication strategies."""

    CLIENT_SECRET = "client_secret"
    CLIENT_CERTIFICATE = "client_certificate"
    MANAGED_IDENTITY = "managed_identity"


class AuthConfig(BaseSettings):
    """Configuration for the Management Activity API application credential.

    Values are read from the environment when not passed explicitly. The
    variable names follow the App Service connection string convention
    (``CUSTOMCONNSTR_`` prefix) with plain aliases as fallbacks.

    Environment variables (first match wins):
        - AUTH_STRATEGY
        - CUSTOMCONNSTR_APP_CLIENT_ID, APP_CLIENT_ID, CLIENT_ID
        - CUSTOMCONNSTR_APP_CLIENT_SECRET, APP_CLIENT_SECRET, CLIENT_SECRET
        - APP_TENANT_ID, TENANT_ID
        - CLIENT_CERTIFICATE_PATH
        - CLIENT_CERTIFICATE_PASSWORD
        - AUTHORITY_HOST
        - MANAGEMENT_RESOURCE
        - PUBLISHER_IDENTIFIER
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )

    # The field name is listed in each AliasChoices so keyword construction
    # keeps working alongside the environment names.

    strategy: Strategy = Field(
        default=Strategy.CLIENT_SECRET,
        validation_alias=AliasChoices("strategy", "AUTH_STRATEGY"),
    )
    tenant_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("tenant_id", "APP_TENANT_ID", "TENANT_ID"),
    )
    client_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "client_id", "CUSTOMCONNSTR_APP_CLIENT_ID", "APP_CLIENT_ID", "CLIENT_ID"
        ),
    )
    client_secret: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "client_secret",
            "CUSTOMCONNSTR_APP_CLIENT_SECRET",
            "APP_CLIENT_SECRET",
            "CLIENT_SECRET",
        ),
    )
    certificate_path: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("certificate_path", "CLIENT_CERTIFICATE_PATH"),
    )
    certificate_password: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "certificate_password", "CLIENT_CERTIFICATE_PASSWORD"
        ),
    )
    authority: str | None = Field(
        default=None,
        validation_alias=AliasChoices("authority", "AUTHORITY_HOST"),
    )
    resource: str = Field(
        default=MANAGEMENT_RESOURCE,
        validation_alias=AliasChoices("resource", "MANAGEMENT_RESOURCE"),
    )
    publisher_identifier: str | None = Field(
        default=None,
        validation_alias=AliasChoices("publisher_identifier", "PUBLISHER_IDENTIFIER"),
    )

    @field_validator("certificate_path")
    @classmethod
    def _ensure_existing_path(cls, v: Path | None) -> Path | None:
        """Ensure configured paths exist if provided."""
        if v is not None and not v.exists():
            raise ValueError(f"Path does not exist: {v}")
        return v

    @model_validator(mode="after")
    def _cross_field_validation(self) -> "AuthConfig":
        """Validate required fields for the selected strategy."""
        # The tenant id is part of every Management Activity API URL.
        if not self.tenant_id:
            raise ValueError("tenant_id is required.")

        s = self.strategy
        if s is Strategy.CLIENT_SECRET:
            if not (self.client_id and self.client_secret):
                raise ValueError(
                    "client_secret requires tenant_id, client_id, and client_secret."
                )
        elif s is Strategy.CLIENT_CERTIFICATE:
            if not (self.client_id and self.certificate_path):
                raise ValueError(
                    "client_certificate requires tenant_id, client_id, and certificate_path."
                )
        # MANAGED_IDENTITY is validated at runtime by azure-identity.
        return self
