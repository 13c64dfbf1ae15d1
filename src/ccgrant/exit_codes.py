"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~ccgrant.exceptions.CcgrantError` subclass.
Shell wrappers can inspect the exit code of ``ccgrant token`` to decide
whether a failure is worth retrying without parsing stderr.

Example::

    $ ccgrant token billing
    $ echo $?
    6   # EXIT_TRANSPORT_ERROR -- the token endpoint was unreachable
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or configuration."""

EXIT_AUTHORIZATION_FAILURE = 3
"""The authorization server rejected the request or sent an unusable response."""

EXIT_TRANSPORT_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, TLS, connection refused)."""
