"""ccgrant -- OAuth 2.0 Client Credentials token client.

Exchanges a registered client's credentials for an access token at an
authorization server's token endpoint (:rfc:`6749` section 4.4), using
either HTTP Basic (``client_secret_basic``) or body credentials
(``client_secret_post``), and reports failures as typed errors that keep
protocol rejections apart from transport problems.

Typical usage::

    from ccgrant import (
        ClientCredentialsGrantRequest,
        ClientCredentialsTokenResponseClient,
        ClientRegistration,
    )

    registration = ClientRegistration(
        registration_id="billing",
        client_id="billing-svc",
        client_secret=secret,
        token_uri="https://auth.example.com/oauth2/token",
        scopes={"read:invoices"},
    )
    client = ClientCredentialsTokenResponseClient()
    token = await client.get_token_response(
        ClientCredentialsGrantRequest(client_registration=registration)
    )

Modules:
    endpoint: Header composition, body encoding, request assembly, response
        parsing, and the client facade.
    models: Pydantic models shared across the package.
    exceptions: Exception hierarchy with exit-code mapping.
    config: XDG-aware storage of client registrations.
    output: stdout/stderr formatting system with Rich support.
    app: Typer CLI (``ccgrant``).
"""

__version__ = "0.1.0"

from ccgrant.endpoint import ClientCredentialsTokenResponseClient  # noqa: E402
from ccgrant.exceptions import (  # noqa: E402
    AuthorizationError,
    CcgrantError,
    ConfigError,
    InvalidArgumentError,
    TransportError,
)
from ccgrant.models import (  # noqa: E402
    AccessTokenResponse,
    ClientAuthenticationMethod,
    ClientCredentialsGrantRequest,
    ClientRegistration,
    OAuth2Error,
)

__all__ = [
    "AccessTokenResponse",
    "AuthorizationError",
    "CcgrantError",
    "ClientAuthenticationMethod",
    "ClientCredentialsGrantRequest",
    "ClientCredentialsTokenResponseClient",
    "ClientRegistration",
    "ConfigError",
    "InvalidArgumentError",
    "OAuth2Error",
    "TransportError",
    "__version__",
]
