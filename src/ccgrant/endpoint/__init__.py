"""Token endpoint client for the OAuth 2.0 Client Credentials grant.

Classes and functions:
    :class:`ClientCredentialsTokenResponseClient` -- the asynchronous
    facade that performs one token exchange per call.
    :func:`compose_headers`, :func:`encode_body`, :func:`assemble_request`,
    :func:`parse_token_response` -- the steps it is built from, usable on
    their own (e.g. to preview a request without sending it).
"""

from ccgrant.endpoint.body import encode_body, form_urlencode
from ccgrant.endpoint.client import ClientCredentialsTokenResponseClient
from ccgrant.endpoint.headers import (
    DEFAULT_HEADERS,
    HeadersConverter,
    basic_credentials,
    client_authentication_headers,
    compose_headers,
)
from ccgrant.endpoint.request import assemble_request
from ccgrant.endpoint.response import INVALID_TOKEN_RESPONSE, parse_token_response

__all__ = [
    "ClientCredentialsTokenResponseClient",
    "DEFAULT_HEADERS",
    "HeadersConverter",
    "INVALID_TOKEN_RESPONSE",
    "assemble_request",
    "basic_credentials",
    "client_authentication_headers",
    "compose_headers",
    "encode_body",
    "form_urlencode",
    "parse_token_response",
]
