"""Token command -- request an access token for a stored registration.

``ccgrant token [NAME]`` resolves the registration (see
:func:`~ccgrant.config.resolve_registration_name`), reads the client secret
from its source, performs one Client Credentials exchange and prints the
normalised token response to stdout. Failures exit with the code of the
raised :class:`~ccgrant.exceptions.CcgrantError`, so scripts can tell an
unreachable endpoint (6) from a rejected client (3).

With ``--dry-run`` the request is assembled and printed to stderr, with the
client secret masked, and nothing is sent.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import typer

from ccgrant.exceptions import CcgrantError
from ccgrant.models import AccessTokenResponse
from ccgrant.output import error, format_response, print_request


def token_response_data(token: AccessTokenResponse) -> dict[str, Any]:
    """Flatten *token* into the mapping printed by ``ccgrant token``."""
    expires_at = token.expires_at
    data: dict[str, Any] = {
        "access_token": token.access_token,
        "token_type": token.token_type,
        "expires_in": token.expires_in,
        "expires_at": expires_at.isoformat() if expires_at else None,
        "refresh_token": token.refresh_token,
        "scope": " ".join(sorted(token.scopes)),
    }
    data.update(token.additional_parameters)
    return data


def token_command(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(
        None, help="Registration name (defaults to CCGRANT_REGISTRATION or the configured default)."
    ),
) -> None:
    """Request an access token with the Client Credentials grant.

    Raises:
        typer.Exit: With the error's exit code when the registration cannot
            be loaded or the exchange fails.

    Example::

        ccgrant token billing
        ccgrant --json token billing | jq -r .access_token
    """
    from ccgrant.config import (
        build_client_registration,
        load_global_config,
        load_registration,
        resolve_registration_name,
    )
    from ccgrant.endpoint import ClientCredentialsTokenResponseClient, assemble_request
    from ccgrant.models import ClientCredentialsGrantRequest

    dry_run = bool((ctx.obj or {}).get("dry_run"))

    try:
        config = load_global_config()
        registration_name = resolve_registration_name(name, config)
        registration = build_client_registration(load_registration(registration_name))
        grant_request = ClientCredentialsGrantRequest(client_registration=registration)
        client = ClientCredentialsTokenResponseClient(request_config=config.request)

        if dry_run:
            print_request(assemble_request(grant_request, client.headers_converters))
            return

        token = asyncio.run(client.get_token_response(grant_request))
    except CcgrantError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    format_response(token_response_data(token))
