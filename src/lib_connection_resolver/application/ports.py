"""Application-layer ports describing collaborator responsibilities.

Purpose
-------
Define the structural contracts the resolver depends on so the composition
root can wire concrete adapters without the application layer importing them.

Contents
--------
* :class:`EnvironmentProvider` – returns the current environment name.
* :class:`AdapterStatus` / :class:`AdapterLookup` – typed outcome of probing
  an adapter module.
* :class:`AdapterRegistry` – locates adapter modules and their connection
  factories.
* :class:`RegistryLoader` – parses a structured file into a registry mapping.

System Role
-----------
These protocols keep the resolver free of ambient global state: environment
detection and adapter loading are injected, which makes every component
independently testable.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Protocol, runtime_checkable


@runtime_checkable
class EnvironmentProvider(Protocol):
    """Zero-argument callable returning the active environment name or ``None``."""

    def __call__(self) -> str | None:
        """Return the current environment (for example ``"production"``)."""


class AdapterStatus(str, Enum):
    """Outcome of an adapter module lookup."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    LOAD_FAILED = "load_failed"


@dataclass(frozen=True, slots=True)
class AdapterLookup:
    """Typed result returned by :meth:`AdapterRegistry.load`.

    Attributes
    ----------
    adapter:
        Adapter identifier that was probed.
    status:
        Whether the module was found, missing, or failed while loading.
    location:
        Conventional module path that was probed (``<namespace>.<adapter>_adapter``).
    cause:
        Underlying exception for ``LOAD_FAILED`` (and ``NOT_FOUND`` when one
        exists).
    """

    adapter: str
    status: AdapterStatus
    location: str | None = None
    cause: BaseException | None = None

    @property
    def found(self) -> bool:
        return self.status is AdapterStatus.FOUND


@runtime_checkable
class AdapterRegistry(Protocol):
    """Locate adapter modules and the connection factories they expose.

    Methods
    -------
    :meth:`load`
        Attempt to load the adapter's code module.
    :meth:`has_connection_factory`
        Report whether ``<adapter>_connection`` is available.
    """

    def load(self, adapter: str) -> AdapterLookup:
        """Probe the module for *adapter* and report the outcome."""

    def has_connection_factory(self, method: str) -> bool:
        """Return ``True`` when a factory named *method* is available."""


@runtime_checkable
class RegistryLoader(Protocol):
    """Parse a structured file into a registry of named descriptors."""

    def load(self, path: str) -> Mapping[str, object]:
        """Read *path* and return a mapping or raise ``InvalidFormat``/``NotFound``."""
