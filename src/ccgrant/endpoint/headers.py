"""Request headers for the token endpoint.

Every token request starts from the same baseline headers
(:data:`DEFAULT_HEADERS`). A chain of *headers converters* then adds to or
overrides them. A converter is any callable taking the
:class:`~ccgrant.models.ClientCredentialsGrantRequest` and returning a
header mapping: a plain ``dict`` (values may be a string or a sequence of
strings), an :class:`httpx.Headers` instance, or ``None`` for no headers.

Converter outputs are merged left to right. When two converters set the same
header name (compared case-insensitively), the later converter wins and all
values from the earlier one are dropped.
"""

from __future__ import annotations

import base64
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Union

import httpx

from ccgrant.endpoint.body import form_urlencode
from ccgrant.exceptions import InvalidArgumentError
from ccgrant.models import ClientAuthenticationMethod, ClientCredentialsGrantRequest

HeaderValues = Union[str, Sequence[str]]
HeadersConverter = Callable[
    [ClientCredentialsGrantRequest],
    Union[Mapping[str, HeaderValues], httpx.Headers, None],
]

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded;charset=UTF-8"

DEFAULT_HEADERS: tuple[tuple[str, str], ...] = (
    ("Content-Type", FORM_CONTENT_TYPE),
    ("Accept", "application/json"),
)


def basic_credentials(client_id: str, client_secret: str) -> str:
    """Return the ``Basic`` credentials for *client_id* and *client_secret*.

    Both values are form-encoded before they are joined, as required by
    :rfc:`6749` section 2.3.1, so that a ``:`` inside the client id cannot
    be confused with the separator.
    """
    pair = f"{form_urlencode(client_id)}:{form_urlencode(client_secret)}"
    return "Basic " + base64.b64encode(pair.encode("utf-8")).decode("ascii")


def client_authentication_headers(
    request: ClientCredentialsGrantRequest,
) -> dict[str, str]:
    """Default converter: HTTP Basic credentials for ``client_secret_basic``.

    Returns no headers for any other method; ``client_secret_post``
    credentials travel in the request body instead.
    """
    registration = request.client_registration
    if (
        registration.client_authentication_method
        == ClientAuthenticationMethod.CLIENT_SECRET_BASIC
    ):
        return {
            "Authorization": basic_credentials(
                registration.client_id, registration.client_secret
            )
        }
    return {}


def _header_items(headers: Mapping[str, HeaderValues] | httpx.Headers) -> Iterable[tuple[str, str]]:
    if isinstance(headers, httpx.Headers):
        return headers.multi_items()
    items: list[tuple[str, str]] = []
    for key, values in headers.items():
        if isinstance(values, str):
            items.append((key, values))
        else:
            items.extend((key, value) for value in values)
    return items


def merge_headers(
    target: dict[str, list[tuple[str, str]]],
    headers: Mapping[str, HeaderValues] | httpx.Headers,
) -> None:
    """Merge *headers* into *target*, replacing every key *headers* sets.

    *target* maps lower-cased header names to ``(name, value)`` pairs so that
    the spelling used by the winning converter is what goes on the wire.
    """
    incoming: dict[str, list[tuple[str, str]]] = {}
    for key, value in _header_items(headers):
        incoming.setdefault(key.lower(), []).append((key, value))
    target.update(incoming)


def compose_headers(
    request: ClientCredentialsGrantRequest,
    converters: Iterable[HeadersConverter],
) -> httpx.Headers:
    """Build the headers of one token request.

    Args:
        request: The grant request being sent. Passed unchanged to every
            converter.
        converters: Converters to apply, in order. Each is called exactly
            once.

    Returns:
        The merged :class:`httpx.Headers`, baseline first.

    Raises:
        InvalidArgumentError: If a converter returns something other than a
            header mapping or ``None``.
    """
    merged: dict[str, list[tuple[str, str]]] = {}
    merge_headers(merged, dict(DEFAULT_HEADERS))
    for converter in converters:
        headers = converter(request)
        if headers is None:
            continue
        if not isinstance(headers, Mapping):
            raise InvalidArgumentError(
                f"headers converter {converter!r} returned "
                f"{type(headers).__name__}, expected a mapping of headers"
            )
        merge_headers(merged, headers)
    return httpx.Headers([pair for pairs in merged.values() for pair in pairs])
