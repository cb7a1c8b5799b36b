"""Environment-variable backed environment provider.

Purpose
-------
Answer "which environment is active?" for the resolver by reading process
environment variables. It implements the
:class:`~lib_connection_resolver.application.ports.EnvironmentProvider` port.

Key behaviours
--------------
* Checks a configurable, ordered list of variable names and returns the first
  non-blank value (stripped).
* Reads from an injected ``environ`` mapping for testability, defaulting to
  :data:`os.environ` at call time.
* Emits structured logging via :mod:`lib_connection_resolver.observability`.
"""

from __future__ import annotations

import os
from typing import Final, Mapping, Sequence

from ...observability import log_debug

DEFAULT_VARIABLES: Final[tuple[str, ...]] = ("APP_ENV", "ENVIRONMENT")
"""Variables consulted, in order, when none are configured."""


def default_env_variable(slug: str) -> str:
    """Return the canonical ``<SLUG>_ENV`` variable name for *slug*.

    Examples
    --------
    >>> default_env_variable('billing-service')
    'BILLING_SERVICE_ENV'
    """

    return f"{slug.replace('-', '_').upper()}_ENV"


class EnvironmentVariables:
    """Report the current environment from process environment variables.

    Examples
    --------
    >>> provider = EnvironmentVariables(environ={"ENVIRONMENT": "staging"})
    >>> provider()
    'staging'
    >>> EnvironmentVariables(environ={"APP_ENV": " "})() is None
    True
    """

    def __init__(
        self,
        variables: Sequence[str] = DEFAULT_VARIABLES,
        *,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Initialise the provider with the variable names to consult.

        Parameters
        ----------
        variables:
            Variable names checked in order; the first non-blank value wins.
        environ:
            Mapping to read from. Defaults to :data:`os.environ`.
        """

        self._variables = tuple(variables)
        self._environ = environ

    @classmethod
    def for_slug(cls, slug: str, *, environ: Mapping[str, str] | None = None) -> EnvironmentVariables:
        """Consult ``<SLUG>_ENV`` before the default variables.

        >>> EnvironmentVariables.for_slug("billing").variables
        ('BILLING_ENV', 'APP_ENV', 'ENVIRONMENT')
        """

        return cls((default_env_variable(slug), *DEFAULT_VARIABLES), environ=environ)

    @property
    def variables(self) -> tuple[str, ...]:
        return self._variables

    def __call__(self) -> str | None:
        """Return the active environment name or ``None`` when unset."""

        environ = self._environ if self._environ is not None else os.environ
        for variable in self._variables:
            value = (environ.get(variable) or "").strip()
            if value:
                log_debug("environment_detected", stage="environment", subject=variable, environment=value)
                return value
        return None
