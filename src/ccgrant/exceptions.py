"""Exception hierarchy for ccgrant.

All exceptions inherit from :class:`CcgrantError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`ccgrant.exit_codes`.
The CLI entry point catches ``CcgrantError`` and exits with the
appropriate code.

The three failure classes of a token exchange are kept apart:

* configuration errors (:class:`InvalidArgumentError`,
  :class:`ConfigError`) are raised synchronously while setting things up;
* protocol errors (:class:`AuthorizationError`) mean the authorization
  server answered, but not with a usable access token;
* transport errors (:class:`TransportError`) mean no answer was received.

:class:`AuthorizationError` and :class:`TransportError` are siblings, never
subclasses of one another, so callers can apply different retry policies.

Subclass hierarchy::

    CcgrantError (exit 1)
    +-- InvalidArgumentError (exit 2)
    +-- ConfigError          (exit 1)
    +-- AuthorizationError   (exit 3)
    +-- TransportError       (exit 6)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ccgrant.exit_codes import (
    EXIT_AUTHORIZATION_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_TRANSPORT_ERROR,
)

if TYPE_CHECKING:
    from ccgrant.models import OAuth2Error


class CcgrantError(Exception):
    """Base exception for all ccgrant errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidArgumentError(CcgrantError, ValueError):
    """Raised when a setup call receives a missing or unusable argument."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(CcgrantError):
    """Raised for configuration problems (missing registrations, invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE


class AuthorizationError(CcgrantError):
    """Raised when the token endpoint rejects the request or its response is unusable.

    Args:
        error: The structured OAuth 2.0 error describing the failure.
    """

    exit_code = EXIT_AUTHORIZATION_FAILURE

    def __init__(self, error: OAuth2Error):
        super().__init__(str(error))
        self.error = error

    @property
    def error_code(self) -> str:
        """Shortcut for ``self.error.error_code``."""
        return self.error.error_code


class TransportError(CcgrantError):
    """Raised when the token request could not be delivered or answered.

    The original :mod:`httpx` exception is kept as ``__cause__``.
    """

    exit_code = EXIT_TRANSPORT_ERROR
