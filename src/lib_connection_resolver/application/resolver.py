"""Descriptor and registry resolution.

Purpose
-------
Turn any accepted descriptor (named reference, URL, partial map) into a flat
:data:`~lib_connection_resolver.domain.descriptors.ConfigurationMap`, and expand
a whole registry of named configurations at once.

Contents
--------
* :data:`DEFAULT_ENVIRONMENT` – fallback name used by :meth:`DescriptorResolver.resolve_all`.
* :data:`JDBC_PREFIX` – marker for ``url`` values that must not be decoded.
* :class:`DescriptorResolver` – ``resolve`` and ``resolve_all``.
* :func:`is_grouping` – detects nested per-environment groups in a registry.

System Role
-----------
Sits between the URL decoder and the specification builder. The registry is
treated as read-only: every call returns freshly built dictionaries.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Final

from ..domain.descriptors import (
    ConfigurationMap,
    Descriptor,
    NamedReference,
    PartialMap,
    UrlString,
    as_descriptor,
    drop_blank,
    is_blank,
)
from ..domain.errors import AdapterNotSpecifiedError
from ..observability import log_debug, log_info, make_event
from .url_decoder import decode

DEFAULT_ENVIRONMENT: Final[str] = "default_env"
JDBC_PREFIX: Final[str] = "jdbc:"

EnvironmentLookup = Callable[[], "str | None"]


def _no_environment() -> str | None:
    return None


def is_grouping(value: object) -> bool:
    """Return ``True`` when *value* groups connections instead of describing one.

    A grouping is a mapping without ``adapter`` or ``url`` whose values are all
    mappings themselves (for example ``{"primary": {...}, "replica": {...}}``).

    Examples
    --------
    >>> is_grouping({"primary": {"adapter": "sqlite3"}})
    True
    >>> is_grouping({"adapter": "sqlite3"})
    False
    >>> is_grouping({"database": "foo"})
    False
    """

    if not isinstance(value, Mapping):
        return False
    if "adapter" in value or "url" in value:
        return False
    return all(isinstance(child, Mapping) for child in value.values())


class DescriptorResolver:
    """Resolve descriptors against a registry of named configurations.

    Why
    ----
    Applications describe connections in several shapes; downstream code wants
    one flat mapping.

    Parameters
    ----------
    registry:
        Mapping from connection/environment name to a URL string, a flat map,
        or a grouping of maps. Never mutated.
    environment:
        Zero-argument callable returning the current environment name; used
        when :meth:`resolve` is called without a descriptor.
    default_environment:
        Zero-argument callable naming the environment whose grouping is
        flattened by :meth:`resolve_all`. Defaults to ``environment`` falling
        back to :data:`DEFAULT_ENVIRONMENT`.

    Examples
    --------
    >>> resolver = DescriptorResolver({"production": {"adapter": "sqlite3", "database": "foo"}})
    >>> resolver.resolve(NamedReference("production"))
    {'adapter': 'sqlite3', 'database': 'foo', 'name': 'production'}
    >>> resolver.resolve(UrlString("postgresql://localhost/foo"))
    {'adapter': 'postgresql', 'database': 'foo', 'host': 'localhost'}
    """

    def __init__(
        self,
        registry: Mapping[str, Any] | None = None,
        *,
        environment: EnvironmentLookup | None = None,
        default_environment: EnvironmentLookup | None = None,
    ) -> None:
        self._registry: Mapping[str, Any] = registry if registry is not None else {}
        self._environment = environment or _no_environment
        self._default_environment = default_environment or self._fallback_environment

    @property
    def registry(self) -> Mapping[str, Any]:
        return self._registry

    def resolve(self, descriptor: Descriptor | None = None) -> ConfigurationMap:
        """Return the fully resolved configuration for *descriptor*.

        Without a descriptor the current environment is resolved as a named
        reference.

        Raises
        ------
        AdapterNotSpecifiedError
            When no descriptor and no environment are available, or a named
            reference is missing from the registry.
        """

        if descriptor is not None:
            return self._resolve_descriptor(descriptor)
        environment = self._environment()
        if is_blank(environment):
            raise AdapterNotSpecifiedError("no database configuration given and no current environment is set")
        return self._resolve_named(NamedReference(str(environment)))

    def resolve_all(self) -> dict[str, ConfigurationMap | None]:
        """Expand every registry entry into a resolved configuration.

        The grouping stored under the default environment (if any) is lifted
        to the top level; all other groupings are dropped since they are not
        connections themselves.

        Examples
        --------
        >>> registry = {
        ...     "development": {"primary": {"adapter": "sqlite3", "database": "dev.db"}},
        ...     "test": {"primary": {"adapter": "sqlite3", "database": "test.db"}},
        ...     "cache": "redis-cache://localhost/0",
        ... }
        >>> resolved = DescriptorResolver(registry, default_environment=lambda: "development").resolve_all()
        >>> sorted(resolved)
        ['cache', 'primary']
        >>> resolved["primary"]["database"]
        'dev.db'
        """

        working: dict[str, Any] = dict(self._registry)
        environment = self._default_environment()
        env_config: Mapping[str, Any] | None = None
        if environment and is_grouping(working.get(environment)):
            env_config = working[environment]

        working = {key: value for key, value in working.items() if not is_grouping(value)}
        if env_config is not None:
            working.update(env_config)

        resolved: dict[str, ConfigurationMap | None] = {}
        for key, value in working.items():
            resolved[key] = self._resolve_descriptor(as_descriptor(value)) if value is not None else None
        log_info("registry_resolved", **make_event("registry", environment, {"entries": sorted(resolved)}))
        return resolved

    def _fallback_environment(self) -> str:
        environment = self._environment()
        return DEFAULT_ENVIRONMENT if is_blank(environment) else str(environment)

    def _resolve_descriptor(self, descriptor: Descriptor) -> ConfigurationMap:
        match descriptor:
            case NamedReference():
                return self._resolve_named(descriptor)
            case UrlString(text=text):
                return decode(text)
            case PartialMap(values=values):
                return self._resolve_partial(values)
            case _:
                raise TypeError(f"unsupported connection descriptor: {type(descriptor).__name__}")

    def _resolve_named(self, reference: NamedReference) -> ConfigurationMap:
        """Look *reference* up in the registry and tag the result with its name."""

        name = reference.name
        if name not in self._registry or self._registry[name] is None:
            raise AdapterNotSpecifiedError(
                f"'{name}' database is not configured. Available: {list(self._registry.keys())!r}"
            )
        config = self._resolve_descriptor(as_descriptor(self._registry[name]))
        config.pop("name", None)
        config["name"] = name
        log_debug("descriptor_resolved", **make_event("named", name, {"keys": sorted(config)}))
        return config

    def _resolve_partial(self, values: Mapping[str, Any]) -> ConfigurationMap:
        """Expand a ``url`` key (unless it is a JDBC URL); URL fields win conflicts."""

        config = dict(values)
        url = config.get("url")
        if isinstance(url, str) and not url.startswith(JDBC_PREFIX):
            del config["url"]
            config.update(decode(url))
        return drop_blank(config)
