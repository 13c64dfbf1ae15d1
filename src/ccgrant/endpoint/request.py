"""Assemble the outbound token request.

:func:`assemble_request` joins the composed headers and the encoded body into
a single :class:`httpx.Request` aimed at the registration's token endpoint.
No retries or redirects are handled here; the request is built once and
handed to the transport as-is.
"""

from __future__ import annotations

from collections.abc import Iterable

import httpx

from ccgrant.endpoint.body import encode_body
from ccgrant.endpoint.headers import HeadersConverter, compose_headers
from ccgrant.exceptions import InvalidArgumentError
from ccgrant.models import ClientAuthenticationMethod, ClientCredentialsGrantRequest

SUPPORTED_METHODS = frozenset(
    {
        ClientAuthenticationMethod.CLIENT_SECRET_BASIC,
        ClientAuthenticationMethod.CLIENT_SECRET_POST,
    }
)


def assemble_request(
    request: ClientCredentialsGrantRequest,
    converters: Iterable[HeadersConverter],
) -> httpx.Request:
    """Build the ``POST`` request for *request*.

    Args:
        request: The grant request to send.
        converters: Headers converters applied on top of the baseline
            headers, in order.

    Returns:
        An :class:`httpx.Request` ready for :meth:`httpx.AsyncClient.send`.

    Raises:
        InvalidArgumentError: If the registration uses a client
            authentication method this client cannot perform.
    """
    registration = request.client_registration
    method = registration.client_authentication_method
    if method not in SUPPORTED_METHODS:
        raise InvalidArgumentError(
            f"Unsupported client authentication method '{method.value}' for "
            f"registration '{registration.registration_id}'"
        )
    return httpx.Request(
        "POST",
        registration.token_uri,
        headers=compose_headers(request, converters),
        content=encode_body(request),
    )
