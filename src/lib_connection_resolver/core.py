"""Composition root for ``lib_connection_resolver``.

Purpose
-------
Provide the entry points that wire the resolver, the specification builder,
and the default adapters together. Consumers who do not need to customise the
collaborators use these functions; everyone else constructs
:class:`DescriptorResolver` / :class:`SpecificationBuilder` directly.

Contents
--------
* :class:`RegistryLoadError` – raised when a registry file cannot be loaded.
* :func:`load_registry` – parse a TOML/JSON/YAML registry file.
* :func:`decode_url` – expand a single connection URL.
* :func:`resolve_connection` – resolve one descriptor against a registry.
* :func:`resolve_all` – resolve every entry of a registry.
* :func:`build_specification` – resolve, validate, and package a descriptor.

System Role
-----------
This module connects adapters (environment variables, importlib, files) with
the application layer while emitting structured observability signals. It is
the canonical place for adjusting default wiring.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from .adapters.adapter_registry.default import ImportlibAdapterRegistry, StaticAdapterRegistry
from .adapters.env.default import EnvironmentVariables
from .adapters.file_loaders.structured import FILE_LOADERS
from .application.builder import DEFAULT_ADAPTER_NAMESPACE, SpecificationBuilder
from .application.ports import AdapterRegistry, EnvironmentProvider
from .application.resolver import DescriptorResolver
from .application.url_decoder import decode
from .domain.descriptors import ConfigurationMap, NamedReference, PartialMap, UrlString, as_descriptor
from .domain.errors import (
    AdapterNotFoundError,
    AdapterNotSpecifiedError,
    ConnectionConfigError,
    EmptyUrlError,
    InvalidFormat,
    NotFound,
)
from .domain.specification import ConnectionSpecification
from .observability import bind_trace_id, log_debug, make_event


class RegistryLoadError(ConnectionConfigError):
    """Raised when a registry file cannot be materialised.

    Wraps :class:`InvalidFormat` or :class:`NotFound` with the offending path
    so callers catch a single exception family.
    """


def load_registry(path: str | Path) -> dict[str, object]:
    """Load a connection registry from a TOML, JSON, or YAML file.

    Raises
    ------
    RegistryLoadError
        When the suffix is unsupported, the file is missing, or it cannot be
        parsed into a mapping.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> target = Path(tmp.name) / "database.json"
    >>> _ = target.write_text('{"production": "sqlite3:prod.db"}', encoding="utf-8")
    >>> load_registry(target)
    {'production': 'sqlite3:prod.db'}
    >>> tmp.cleanup()
    """

    location = str(path)
    loader = FILE_LOADERS.get(Path(location).suffix.lower())
    if loader is None:
        raise RegistryLoadError(f"Unsupported registry format: {location}")
    try:
        data = loader.load(location)
    except (InvalidFormat, NotFound) as exc:
        raise RegistryLoadError(f"Failed to load registry {location}: {exc}") from exc
    return dict(data)


def decode_url(url: str) -> ConfigurationMap:
    """Return the configuration encoded in *url* (see :func:`application.url_decoder.decode`)."""

    return decode(url)


def resolve_connection(
    descriptor: Any = None,
    registry: Mapping[str, Any] | None = None,
    *,
    environment: EnvironmentProvider | None = None,
) -> ConfigurationMap:
    """Resolve *descriptor* against *registry* into a flat configuration.

    Why
    ----
    Most callers hold either a registry plus an environment name or a single
    URL; this helper accepts the plain values and lifts them into descriptors.

    Parameters
    ----------
    descriptor:
        A descriptor object, a URL string, a mapping, or ``None`` to use the
        current environment.
    registry:
        Named configurations, for example the content of ``database.yml``.
    environment:
        Environment provider; defaults to :class:`EnvironmentVariables`.

    Examples
    --------
    >>> resolve_connection(NamedReference("production"), {"production": "postgres://db.internal/app"})
    {'adapter': 'postgresql', 'database': 'app', 'host': 'db.internal', 'name': 'production'}
    >>> resolve_connection({"adapter": "sqlite3", "database": "app.db", "pool": ""})
    {'adapter': 'sqlite3', 'database': 'app.db'}
    """

    bind_trace_id(None)
    resolver = DescriptorResolver(registry, environment=environment or EnvironmentVariables())
    lifted = as_descriptor(descriptor) if descriptor is not None else None
    config = resolver.resolve(lifted)
    log_debug("connection_resolved", **make_event("resolve", config.get("name"), {"keys": sorted(config)}))
    return config


def resolve_all(
    registry: Mapping[str, Any],
    *,
    environment: EnvironmentProvider | None = None,
    default_environment: EnvironmentProvider | None = None,
) -> dict[str, ConfigurationMap | None]:
    """Resolve every entry of *registry* (see :meth:`DescriptorResolver.resolve_all`)."""

    bind_trace_id(None)
    resolver = DescriptorResolver(
        registry,
        environment=environment or EnvironmentVariables(),
        default_environment=default_environment,
    )
    return resolver.resolve_all()


def build_specification(
    descriptor: Any = None,
    registry: Mapping[str, Any] | None = None,
    *,
    environment: EnvironmentProvider | None = None,
    adapters: AdapterRegistry | None = None,
    namespace: str = DEFAULT_ADAPTER_NAMESPACE,
) -> ConnectionSpecification:
    """Resolve *descriptor* and return a validated :class:`ConnectionSpecification`.

    Examples
    --------
    >>> spec = build_specification(
    ...     "sqlite3:app.db?timeout=500",
    ...     adapters=StaticAdapterRegistry({"sqlite3": dict}),
    ... )
    >>> spec.name, spec.adapter_method, spec.config["timeout"]
    ('primary', 'sqlite3_connection', '500')
    """

    bind_trace_id(None)
    resolver = DescriptorResolver(registry, environment=environment or EnvironmentVariables())
    builder = SpecificationBuilder(resolver, adapters=adapters, namespace=namespace)
    lifted = as_descriptor(descriptor) if descriptor is not None else None
    return builder.build(lifted)


__all__ = [
    "AdapterNotFoundError",
    "AdapterNotSpecifiedError",
    "ConfigurationMap",
    "ConnectionConfigError",
    "ConnectionSpecification",
    "DescriptorResolver",
    "EmptyUrlError",
    "EnvironmentVariables",
    "ImportlibAdapterRegistry",
    "InvalidFormat",
    "NamedReference",
    "NotFound",
    "PartialMap",
    "RegistryLoadError",
    "SpecificationBuilder",
    "StaticAdapterRegistry",
    "UrlString",
    "build_specification",
    "decode_url",
    "load_registry",
    "resolve_all",
    "resolve_connection",
]
