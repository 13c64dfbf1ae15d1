"""Client Credentials token response client.

:class:`ClientCredentialsTokenResponseClient` exchanges a
:class:`~ccgrant.models.ClientCredentialsGrantRequest` for an
:class:`~ccgrant.models.AccessTokenResponse` (:rfc:`6749` section 4.4).
One call to :meth:`~ClientCredentialsTokenResponseClient.get_token_response`
performs exactly one HTTP exchange and has exactly one outcome: a token
response, an :class:`~ccgrant.exceptions.AuthorizationError`, or a
:class:`~ccgrant.exceptions.TransportError`.

Example::

    client = ClientCredentialsTokenResponseClient()
    client.add_headers_converter(lambda request: {"X-Tenant": "acme"})
    token = await client.get_token_response(
        ClientCredentialsGrantRequest(client_registration=registration)
    )

See Also:
    :mod:`ccgrant.endpoint.headers` for the converter contract.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

import httpx

from ccgrant.endpoint.headers import HeadersConverter, client_authentication_headers
from ccgrant.endpoint.request import assemble_request
from ccgrant.endpoint.response import parse_token_response
from ccgrant.exceptions import InvalidArgumentError, TransportError
from ccgrant.models import AccessTokenResponse, ClientCredentialsGrantRequest, RequestConfig
from ccgrant.output import debug


def _require_converter(converter: Optional[HeadersConverter]) -> HeadersConverter:
    if converter is None:
        raise InvalidArgumentError("headers_converter cannot be None")
    return converter


class ClientCredentialsTokenResponseClient:
    """Obtain access tokens with the Client Credentials grant.

    Configure the client once, then share it between concurrent callers.
    The converter chain is held as an immutable tuple that is swapped
    wholesale on reconfiguration, so an in-flight exchange always sees a
    consistent chain.

    Args:
        http_client: Transport used to send token requests. When ``None``,
            a short-lived :class:`httpx.AsyncClient` is opened for each
            exchange using *request_config*.
        request_config: Timeout and TLS settings for those short-lived
            clients. Ignored when *http_client* is given.
    """

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        self._http_client = http_client
        self._request_config = request_config or RequestConfig()
        self._headers_converters: tuple[HeadersConverter, ...] = (
            client_authentication_headers,
        )

    # ------------------------------------------------------------------ #
    # Configuration
    # ------------------------------------------------------------------ #

    @property
    def headers_converters(self) -> tuple[HeadersConverter, ...]:
        """The current converter chain, in invocation order."""
        return self._headers_converters

    def set_http_client(self, http_client: httpx.AsyncClient) -> None:
        """Send token requests through *http_client*.

        Raises:
            InvalidArgumentError: If *http_client* is ``None``.
        """
        if http_client is None:
            raise InvalidArgumentError("http_client cannot be None")
        self._http_client = http_client

    def set_headers_converter(self, headers_converter: HeadersConverter) -> None:
        """Replace the whole converter chain with *headers_converter*.

        This also removes the default Basic credentials converter, so the
        replacement becomes responsible for client authentication headers.

        Raises:
            InvalidArgumentError: If *headers_converter* is ``None``.
        """
        self._headers_converters = (_require_converter(headers_converter),)

    def set_headers_converters(self, headers_converters: Iterable[HeadersConverter]) -> None:
        """Replace the whole converter chain with *headers_converters*.

        Raises:
            InvalidArgumentError: If *headers_converters* or any of its
                entries is ``None``. The existing chain is left untouched.
        """
        if headers_converters is None:
            raise InvalidArgumentError("headers_converters cannot be None")
        self._headers_converters = tuple(
            _require_converter(converter) for converter in headers_converters
        )

    def add_headers_converter(self, headers_converter: HeadersConverter) -> None:
        """Append *headers_converter* to the end of the chain.

        Raises:
            InvalidArgumentError: If *headers_converter* is ``None``.
        """
        self._headers_converters = (
            *self._headers_converters,
            _require_converter(headers_converter),
        )

    # ------------------------------------------------------------------ #
    # Token exchange
    # ------------------------------------------------------------------ #

    async def get_token_response(
        self, grant_request: ClientCredentialsGrantRequest
    ) -> AccessTokenResponse:
        """Exchange *grant_request* for an access token.

        Args:
            grant_request: The grant to perform. Handed unchanged to every
                headers converter.

        Returns:
            The parsed :class:`~ccgrant.models.AccessTokenResponse`.

        Raises:
            InvalidArgumentError: If *grant_request* is ``None`` or uses an
                unsupported client authentication method.
            AuthorizationError: If the token endpoint rejected the request
                or returned an unusable response.
            TransportError: If no response was received.
        """
        if grant_request is None:
            raise InvalidArgumentError("grant_request cannot be None")

        registration = grant_request.client_registration
        request = assemble_request(grant_request, self._headers_converters)
        debug(
            f"Requesting access token for client '{registration.client_id}' "
            f"({registration.client_authentication_method.value}) at {request.url}"
        )

        response = await self._send(request)
        debug(f"Token endpoint answered HTTP {response.status_code}")
        return parse_token_response(response, registration)

    async def _send(self, request: httpx.Request) -> httpx.Response:
        try:
            if self._http_client is not None:
                return await self._http_client.send(request)
            config = self._request_config
            async with httpx.AsyncClient(
                timeout=config.timeout,
                verify=config.verify_ssl,
                follow_redirects=False,
            ) as client:
                return await client.send(request)
        except httpx.RequestError as exc:
            raise TransportError(
                f"Token request to {request.url} failed: {exc}"
            ) from exc
