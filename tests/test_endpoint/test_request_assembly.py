"""Tests for ccgrant.endpoint.request -- assembling the outbound token request."""

from __future__ import annotations

import pytest

from ccgrant.endpoint.headers import client_authentication_headers
from ccgrant.endpoint.request import assemble_request
from ccgrant.exceptions import InvalidArgumentError
from ccgrant.models import (
    ClientAuthenticationMethod,
    ClientCredentialsGrantRequest,
    ClientRegistration,
)

TOKEN_URI = "https://auth.example.com/oauth2/token"


def _with_method(
    registration: ClientRegistration, method: ClientAuthenticationMethod
) -> ClientCredentialsGrantRequest:
    return ClientCredentialsGrantRequest(
        client_registration=registration.model_copy(
            update={"client_authentication_method": method}
        )
    )


def test_basic_request(grant_request: ClientCredentialsGrantRequest) -> None:
    request = assemble_request(grant_request, [client_authentication_headers])

    assert request.method == "POST"
    assert str(request.url) == TOKEN_URI
    assert request.headers["Authorization"] == "Basic Y2xpZW50LWlkOmNsaWVudC1zZWNyZXQ="
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded;charset=UTF-8"
    assert request.headers["Accept"] == "application/json"
    assert request.content == b"grant_type=client_credentials&scope=read%3Auser"


def test_post_request(registration: ClientRegistration) -> None:
    grant = _with_method(registration, ClientAuthenticationMethod.CLIENT_SECRET_POST)
    request = assemble_request(grant, [client_authentication_headers])

    assert "Authorization" not in request.headers
    assert request.content == (
        b"grant_type=client_credentials&scope=read%3Auser"
        b"&client_id=client-id&client_secret=client-secret"
    )


def test_token_uri_is_used_unmodified(registration: ClientRegistration) -> None:
    uri = "https://auth.example.com/tenants/acme/oauth2/token?realm=x"
    grant = ClientCredentialsGrantRequest(
        client_registration=registration.model_copy(update={"token_uri": uri})
    )
    request = assemble_request(grant, [])
    assert str(request.url) == uri


@pytest.mark.parametrize(
    "method",
    [
        ClientAuthenticationMethod.CLIENT_SECRET_JWT,
        ClientAuthenticationMethod.PRIVATE_KEY_JWT,
        ClientAuthenticationMethod.NONE,
    ],
)
def test_unsupported_method_is_rejected(
    registration: ClientRegistration, method: ClientAuthenticationMethod
) -> None:
    grant = _with_method(registration, method)
    with pytest.raises(InvalidArgumentError, match=method.value):
        assemble_request(grant, [client_authentication_headers])
