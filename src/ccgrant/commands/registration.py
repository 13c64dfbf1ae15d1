"""Registration commands -- manage stored OAuth client registrations.

Provides the ``ccgrant registration`` sub-command group. A registration
records the token endpoint, the client id, how the client authenticates,
the default scopes, and *where* the client secret comes from. The secret
itself is resolved only when a token is requested.

Typical workflow::

    ccgrant registration add billing \\
        --token-uri https://auth.example.com/oauth2/token \\
        --client-id billing-svc --secret-source env:BILLING_SECRET \\
        --scope read:invoices
    ccgrant registration list
    ccgrant token billing
"""

from __future__ import annotations

from typing import Optional

import typer

from ccgrant.exceptions import CcgrantError
from ccgrant.models import ClientAuthenticationMethod
from ccgrant.output import error, format_response, get_output, info, success, suggest


registration_app = typer.Typer(no_args_is_help=True)


@registration_app.command("add")
def registration_add(
    name: str = typer.Argument(help="Registration name."),
    token_uri: str = typer.Option(..., "--token-uri", help="Token endpoint URL."),
    client_id: str = typer.Option(..., "--client-id", help="OAuth client id."),
    secret_source: str = typer.Option(
        "prompt",
        "--secret-source",
        "-s",
        help="Client secret source: env:VAR, file:/path, prompt.",
    ),
    method: str = typer.Option(
        ClientAuthenticationMethod.CLIENT_SECRET_BASIC.value,
        "--method",
        "-m",
        help="Client authentication method: client_secret_basic or client_secret_post.",
    ),
    scope: Optional[list[str]] = typer.Option(
        None, "--scope", help="Default scope (repeatable)."
    ),
    default: bool = typer.Option(
        False, "--default", help="Make this the default registration."
    ),
) -> None:
    """Store a client registration.

    Overwrites an existing registration with the same name.

    Raises:
        typer.Exit: With code 2 if the options do not form a valid
            registration.

    Example::

        ccgrant registration add billing --token-uri https://auth.example.com/token \\
            --client-id billing-svc --secret-source env:BILLING_SECRET --method post
    """
    from pydantic import ValidationError

    from ccgrant.config import load_global_config, save_global_config, save_registration
    from ccgrant.models import RegistrationConfig

    try:
        registration = RegistrationConfig(
            name=name,
            token_uri=token_uri,
            client_id=client_id,
            client_secret_source=secret_source,
            client_authentication_method=method,
            scopes=scope or [],
        )
    except ValidationError as exc:
        error(f"Invalid registration: {exc}")
        raise typer.Exit(code=2) from None

    save_registration(registration)
    if default:
        config = load_global_config()
        config.default_registration = name
        save_global_config(config)

    success(
        f'Registration "{name}" saved '
        f"({registration.client_authentication_method.value})."
    )
    suggest(f"Request a token: ccgrant token {name}")


@registration_app.command("list")
def registration_list() -> None:
    """List stored registrations.

    Registrations that fail to load are shown with an ``error`` method.
    """
    from ccgrant.config import list_registrations, load_registration

    names = list_registrations()
    if not names:
        info("No registrations configured.")
        suggest("Create one: ccgrant registration add <name> --token-uri ... --client-id ...")
        return

    rows: list[list[str]] = []
    for name in names:
        try:
            registration = load_registration(name)
        except CcgrantError:
            rows.append([name, "error", "-", "-"])
            continue
        rows.append(
            [
                name,
                registration.client_authentication_method.value,
                registration.token_uri,
                " ".join(registration.scopes),
            ]
        )

    get_output().print_table(
        ["Name", "Method", "Token URI", "Scopes"], rows, title="Registrations"
    )


@registration_app.command("show")
def registration_show(
    name: str = typer.Argument(help="Registration name."),
) -> None:
    """Print a stored registration (the secret source, never the secret)."""
    from ccgrant.config import load_registration

    try:
        registration = load_registration(name)
    except CcgrantError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    format_response(registration.model_dump(mode="json"))


@registration_app.command("remove")
def registration_remove(
    name: str = typer.Argument(help="Registration name."),
) -> None:
    """Delete a stored registration."""
    from ccgrant.config import delete_registration, load_global_config, save_global_config

    try:
        delete_registration(name)
    except CcgrantError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    config = load_global_config()
    if config.default_registration == name:
        config.default_registration = None
        save_global_config(config)
    success(f'Registration "{name}" removed.')
