"""Turn a token endpoint response into an access token or an error.

:func:`parse_token_response` never returns a partially populated result:
either every required member of the access token response (:rfc:`6749`
section 5.1) is present and valid, or an :class:`AuthorizationError` is
raised. Error responses (section 5.2) keep the server's own error code;
every other unusable response is reported as ``invalid_token_response``.
"""

from __future__ import annotations

from typing import Any, NoReturn, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ccgrant.exceptions import AuthorizationError
from ccgrant.models import (
    MAX_EXPIRES_IN,
    AccessTokenResponse,
    ClientRegistration,
    OAuth2Error,
)

INVALID_TOKEN_RESPONSE = "invalid_token_response"

_KNOWN_MEMBERS = frozenset(
    {"access_token", "token_type", "expires_in", "refresh_token", "scope"}
)


class TokenResponseBody(BaseModel):
    """Wire shape of a successful token endpoint response."""

    model_config = ConfigDict(extra="allow")

    access_token: str = Field(min_length=1)
    token_type: Optional[str] = None
    expires_in: Optional[int] = Field(default=None, ge=0, le=MAX_EXPIRES_IN)
    refresh_token: Optional[str] = None
    scope: Optional[str] = None


def _invalid(description: str, token_uri: str) -> NoReturn:
    raise AuthorizationError(
        OAuth2Error(error_code=INVALID_TOKEN_RESPONSE, description=description, uri=token_uri)
    )


def _server_error(payload: dict[str, Any], status: int, token_uri: str) -> NoReturn:
    description = payload.get("error_description")
    if not isinstance(description, str) or not description:
        description = f"Token request failed with HTTP status {status}"
    uri = payload.get("error_uri")
    if not isinstance(uri, str) or not uri:
        uri = token_uri
    raise AuthorizationError(
        OAuth2Error(error_code=str(payload["error"]), description=description, uri=uri)
    )


def parse_token_response(
    response: httpx.Response, registration: ClientRegistration
) -> AccessTokenResponse:
    """Parse the token endpoint *response* for *registration*.

    Args:
        response: The fully read HTTP response.
        registration: The registration the token was requested for. Its
            ``scopes`` are used when the server does not return ``scope``,
            and its ``token_uri`` is attached to every error.

    Returns:
        The normalised :class:`~ccgrant.models.AccessTokenResponse`.

    Raises:
        AuthorizationError: For error responses, non-2xx statuses, empty or
            malformed bodies, and unsupported token types.
    """
    status = response.status_code
    token_uri = registration.token_uri

    if not response.content.strip():
        _invalid(f"Empty OAuth 2.0 Access Token Response (HTTP status {status})", token_uri)

    try:
        payload = response.json()
    except ValueError as exc:
        if response.is_success:
            _invalid(
                f"An error occurred parsing the OAuth 2.0 Access Token Response: {exc}",
                token_uri,
            )
        payload = None

    if isinstance(payload, dict) and payload.get("error"):
        _server_error(payload, status, token_uri)

    if not response.is_success:
        _invalid(
            "An error occurred reading the OAuth 2.0 Access Token Response: "
            f"HTTP status {status}: {response.text[:200]}",
            token_uri,
        )

    if not isinstance(payload, dict):
        _invalid(
            "An error occurred parsing the OAuth 2.0 Access Token Response: "
            "expected a JSON object",
            token_uri,
        )

    try:
        body = TokenResponseBody.model_validate(payload)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        _invalid(
            "An error occurred parsing the OAuth 2.0 Access Token Response: "
            f"invalid or missing {fields}",
            token_uri,
        )

    if body.token_type is not None and body.token_type.lower() != "bearer":
        _invalid(f"Unsupported token_type: {body.token_type}", token_uri)

    scopes = frozenset(body.scope.split()) if body.scope else registration.scopes

    return AccessTokenResponse(
        access_token=body.access_token,
        token_type="Bearer",
        expires_in=body.expires_in,
        refresh_token=body.refresh_token,
        scopes=scopes,
        additional_parameters={
            key: value for key, value in payload.items() if key not in _KNOWN_MEMBERS
        },
    )
