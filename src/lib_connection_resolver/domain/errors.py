"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by the resolver, the adapters, and
consuming applications. The hierarchy lives in the domain layer so outer layers
may depend on it without the domain depending on them.

Contents
--------
* :class:`ConnectionConfigError` – umbrella base class for all resolution
  issues.
* :class:`EmptyUrlError` – a blank connection URL was handed to the decoder.
* :class:`AdapterNotSpecifiedError` – no descriptor, no environment, or a
  resolved configuration without ``adapter``.
* :class:`AdapterNotFoundError` – the adapter module is missing, failed to
  load, or lacks its connection factory.
* :class:`InvalidFormat` – a registry file could not be parsed.
* :class:`NotFound` – a registry file does not exist.

System Role
-----------
Every failure is fatal to the resolution call in progress and is never retried
internally. Callers catch :class:`ConnectionConfigError` to handle all library
failures uniformly. Malformed URLs are the one exception: they surface as the
``ValueError`` raised by :mod:`urllib.parse`.
"""

from __future__ import annotations


class ConnectionConfigError(Exception):
    """Base type for all exceptions emitted by ``lib_connection_resolver``."""


class EmptyUrlError(ConnectionConfigError, ValueError):
    """Raised when the URL decoder receives blank input.

    Also a :class:`ValueError` so callers treating URL problems generically
    (alongside :mod:`urllib.parse` failures) catch it too.
    """


class AdapterNotSpecifiedError(ConnectionConfigError):
    """Signals that resolution could not determine which adapter to use.

    Typical Sources
    ---------------
    * A named reference missing from the registry (the message lists the
      available names).
    * No descriptor and no current environment.
    * A resolved configuration without an ``adapter`` key.
    """


class AdapterNotFoundError(ConnectionConfigError):
    """Signals that the requested adapter cannot be used.

    The message distinguishes a misspelled or uninstalled adapter package from
    an adapter package that is present but whose own dependency failed to
    load. In the latter case the original import error is chained as
    ``__cause__``.
    """


class InvalidFormat(ConnectionConfigError):
    """Raised when a registry file cannot be parsed into a mapping."""


class NotFound(ConnectionConfigError):
    """Represents a missing registry file or an unavailable optional parser."""
