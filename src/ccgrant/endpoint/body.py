"""Form body of a Client Credentials token request.

The body is ``application/x-www-form-urlencoded`` with a fixed parameter
order: ``grant_type``, ``scope``, ``client_id``, ``client_secret``. Scopes
are sorted, so the same request always produces the same bytes.
"""

from __future__ import annotations

from urllib.parse import quote

from ccgrant.models import ClientAuthenticationMethod, ClientCredentialsGrantRequest


def form_urlencode(value: str) -> str:
    """Percent-encode *value* for use in a form body or Basic credentials.

    Everything outside the :rfc:`3986` unreserved set is escaped, including
    space (``%20``, never ``+``) and ``:`` (``%3A``).

    Example::

        >>> form_urlencode("read:user")
        'read%3Auser'
    """
    return quote(value, safe="", encoding="utf-8")


def body_parameters(request: ClientCredentialsGrantRequest) -> list[tuple[str, str]]:
    """Return the unencoded body parameters of *request*, in wire order."""
    registration = request.client_registration
    params = [("grant_type", request.grant_type.value)]
    if registration.scopes:
        params.append(("scope", " ".join(sorted(registration.scopes))))
    if (
        registration.client_authentication_method
        == ClientAuthenticationMethod.CLIENT_SECRET_POST
    ):
        params.append(("client_id", registration.client_id))
        params.append(("client_secret", registration.client_secret))
    return params


def encode_body(request: ClientCredentialsGrantRequest) -> bytes:
    """Serialise *request* into its form-encoded body bytes."""
    return "&".join(
        f"{key}={form_urlencode(value)}" for key, value in body_parameters(request)
    ).encode("ascii")
