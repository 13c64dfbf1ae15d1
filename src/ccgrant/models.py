"""Canonical Pydantic models shared across all ccgrant modules.

This is the single source of truth for data shapes in the project. The
models fall into two groups:

**Protocol models** -- immutable values exchanged by the token client:
    :class:`ClientAuthenticationMethod`, :class:`AuthorizationGrantType`,
    :class:`ClientRegistration`, :class:`ClientCredentialsGrantRequest`,
    :class:`AccessTokenResponse`, and :class:`OAuth2Error`.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig`, :class:`OutputConfig`, :class:`GlobalConfig`,
    and :class:`RegistrationConfig`.

All models use Pydantic v2. Protocol models are frozen so that a single
registration or grant request can be shared between concurrent exchanges.
"""

from __future__ import annotations

import enum
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


MAX_EXPIRES_IN = 100 * 365 * 24 * 60 * 60
"""Largest accepted token lifetime in seconds (about a century)."""


def _split_scopes(value: Any) -> Any:
    """Accept a space-delimited scope string as well as any iterable of scopes."""
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset(value.split())
    return value


# --- Protocol Models ---


class ClientAuthenticationMethod(str, enum.Enum):
    """How a client proves its identity to the token endpoint.

    Only :attr:`CLIENT_SECRET_BASIC` and :attr:`CLIENT_SECRET_POST` are
    supported by :class:`~ccgrant.endpoint.ClientCredentialsTokenResponseClient`.
    The remaining members exist so that registrations read from a shared
    registry still validate; requests for them are rejected at assembly time.
    """

    CLIENT_SECRET_BASIC = "client_secret_basic"
    CLIENT_SECRET_POST = "client_secret_post"
    CLIENT_SECRET_JWT = "client_secret_jwt"
    PRIVATE_KEY_JWT = "private_key_jwt"
    NONE = "none"


_LEGACY_METHODS = {
    "basic": ClientAuthenticationMethod.CLIENT_SECRET_BASIC,
    "post": ClientAuthenticationMethod.CLIENT_SECRET_POST,
}


class AuthorizationGrantType(str, enum.Enum):
    """OAuth 2.0 grant types a registration can declare."""

    CLIENT_CREDENTIALS = "client_credentials"
    AUTHORIZATION_CODE = "authorization_code"
    REFRESH_TOKEN = "refresh_token"


class ClientRegistration(BaseModel):
    """Immutable description of one OAuth 2.0 client.

    Created by whatever registry the application uses (see
    :meth:`RegistrationConfig.to_client_registration` for the one shipped
    with the CLI). The token client only reads from it.

    Example::

        ClientRegistration(
            registration_id="billing",
            client_id="client-id",
            client_secret="client-secret",
            token_uri="https://auth.example.com/oauth2/token",
            scopes={"read:user"},
        )
    """

    model_config = ConfigDict(frozen=True)

    registration_id: str
    client_id: str
    client_secret: str = ""
    client_authentication_method: ClientAuthenticationMethod = (
        ClientAuthenticationMethod.CLIENT_SECRET_BASIC
    )
    authorization_grant_type: AuthorizationGrantType = (
        AuthorizationGrantType.CLIENT_CREDENTIALS
    )
    token_uri: str
    scopes: frozenset[str] = Field(default_factory=frozenset)

    @field_validator("client_authentication_method", mode="before")
    @classmethod
    def normalize_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _LEGACY_METHODS.get(value.lower(), value)
        return value

    @field_validator("scopes", mode="before")
    @classmethod
    def normalize_scopes(cls, value: Any) -> Any:
        return _split_scopes(value)


class ClientCredentialsGrantRequest(BaseModel):
    """A Client Credentials grant request for one registration.

    The grant carries no scope override: the requested scope is taken
    entirely from :attr:`ClientRegistration.scopes`.
    """

    model_config = ConfigDict(frozen=True)

    client_registration: ClientRegistration

    @model_validator(mode="after")
    def check_grant_type(self) -> ClientCredentialsGrantRequest:
        grant_type = self.client_registration.authorization_grant_type
        if grant_type != AuthorizationGrantType.CLIENT_CREDENTIALS:
            raise ValueError(
                "client_registration.authorization_grant_type must be "
                f"'client_credentials', got '{grant_type.value}'"
            )
        return self

    @property
    def grant_type(self) -> AuthorizationGrantType:
        return AuthorizationGrantType.CLIENT_CREDENTIALS


class OAuth2Error(BaseModel):
    """Structured OAuth 2.0 error (:rfc:`6749` section 5.2).

    ``str()`` renders the error as ``[<error_code>] <description>``.
    """

    model_config = ConfigDict(frozen=True)

    error_code: str
    description: Optional[str] = None
    uri: Optional[str] = None

    def __str__(self) -> str:
        text = f"[{self.error_code}]"
        if self.description:
            text += f" {self.description}"
        return text


class AccessTokenResponse(BaseModel):
    """Normalised result of a successful token exchange.

    ``scopes`` holds the scopes granted by the server, or the registration's
    configured scopes when the server did not send a ``scope`` parameter.
    Any response member not modelled explicitly is kept in
    ``additional_parameters``.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(min_length=1)
    token_type: str = "Bearer"
    expires_in: Optional[int] = Field(default=None, ge=0, le=MAX_EXPIRES_IN)
    issued_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    refresh_token: Optional[str] = None
    scopes: frozenset[str] = Field(default_factory=frozenset)
    additional_parameters: dict[str, Any] = Field(default_factory=dict)

    @property
    def expires_at(self) -> Optional[datetime]:
        """Absolute expiry time, or ``None`` when the server sent no lifetime."""
        if self.expires_in is None:
            return None
        return self.issued_at + timedelta(seconds=self.expires_in)


# --- Configuration Models ---


class RequestConfig(BaseModel):
    """HTTP settings for the short-lived client used by the CLI."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/ccgrant/config.json``.

    Loaded and saved by :func:`~ccgrant.config.load_global_config` and
    :func:`~ccgrant.config.save_global_config`.
    """

    default_registration: Optional[str] = None
    request: RequestConfig = Field(default_factory=RequestConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


class RegistrationConfig(BaseModel):
    """A client registration as stored on disk under ``registrations/``.

    The client secret itself is never written to disk. Instead
    ``client_secret_source`` names where to read it from (``env:VAR``,
    ``file:/path`` or ``prompt``), see :func:`~ccgrant.config.resolve_credential`.
    """

    name: str
    token_uri: str
    client_id: str
    client_secret_source: str = Field(
        default="prompt",
        description="Credential source: env:VAR, file:/path, prompt",
    )
    client_authentication_method: ClientAuthenticationMethod = (
        ClientAuthenticationMethod.CLIENT_SECRET_BASIC
    )
    scopes: list[str] = Field(default_factory=list)

    @field_validator("client_authentication_method", mode="before")
    @classmethod
    def normalize_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _LEGACY_METHODS.get(value.lower(), value)
        return value

    def to_client_registration(self, client_secret: str) -> ClientRegistration:
        """Build the immutable :class:`ClientRegistration` for this entry.

        Args:
            client_secret: The secret already resolved from
                ``client_secret_source``.
        """
        return ClientRegistration(
            registration_id=self.name,
            client_id=self.client_id,
            client_secret=client_secret,
            client_authentication_method=self.client_authentication_method,
            token_uri=self.token_uri,
            scopes=frozenset(self.scopes),
        )
