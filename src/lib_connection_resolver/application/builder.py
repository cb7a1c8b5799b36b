"""Specification builder.

Purpose
-------
Validate a resolved configuration against the adapter registry and package it
as an immutable :class:`~lib_connection_resolver.domain.specification.ConnectionSpecification`.

Contents
--------
* :data:`DEFAULT_NAME` – name used when the configuration carries none.
* :func:`adapter_method_for` – ``"<adapter>_connection"``.
* :class:`SpecificationBuilder` – resolve, validate, package.
"""

from __future__ import annotations

from functools import cached_property
from typing import Final

from ..domain.descriptors import ConfigurationMap, Descriptor, is_blank
from ..domain.errors import AdapterNotFoundError, AdapterNotSpecifiedError
from ..domain.specification import ConnectionSpecification
from ..observability import log_error, log_info, make_event
from .ports import AdapterLookup, AdapterRegistry, AdapterStatus
from .resolver import DescriptorResolver

DEFAULT_NAME: Final[str] = "primary"
DEFAULT_ADAPTER_NAMESPACE: Final[str] = "lib_connection_resolver.connection_adapters"


def adapter_method_for(adapter: str) -> str:
    """Return the connection factory name for *adapter*.

    >>> adapter_method_for("sqlite3")
    'sqlite3_connection'
    """

    return f"{adapter}_connection"


class SpecificationBuilder:
    """Build validated connection specifications.

    Parameters
    ----------
    resolver:
        Resolver providing the configuration maps.
    adapters:
        Adapter registry consulted for every build. When omitted an
        :class:`~lib_connection_resolver.adapters.adapter_registry.default.ImportlibAdapterRegistry`
        over ``namespace`` is created on first use and reused afterwards.
    namespace:
        Package probed by the default registry.

    Examples
    --------
    >>> from lib_connection_resolver.adapters.adapter_registry.default import StaticAdapterRegistry
    >>> from lib_connection_resolver.domain.descriptors import NamedReference
    >>> builder = SpecificationBuilder(
    ...     DescriptorResolver({"production": {"adapter": "sqlite3", "database": "foo"}}),
    ...     adapters=StaticAdapterRegistry({"sqlite3": dict}),
    ... )
    >>> spec = builder.build(NamedReference("production"))
    >>> spec.name, spec.adapter_method, dict(spec.config)
    ('production', 'sqlite3_connection', {'adapter': 'sqlite3', 'database': 'foo'})
    """

    def __init__(
        self,
        resolver: DescriptorResolver,
        *,
        adapters: AdapterRegistry | None = None,
        namespace: str = DEFAULT_ADAPTER_NAMESPACE,
    ) -> None:
        self._resolver = resolver
        self._explicit_adapters = adapters
        self._namespace = namespace

    @cached_property
    def adapters(self) -> AdapterRegistry:
        """Adapter registry in use, created lazily when none was injected."""

        if self._explicit_adapters is not None:
            return self._explicit_adapters
        from ..adapters.adapter_registry.default import ImportlibAdapterRegistry

        return ImportlibAdapterRegistry(self._namespace)

    def build(self, descriptor: Descriptor | None = None) -> ConnectionSpecification:
        """Resolve *descriptor* and return a validated specification.

        Raises
        ------
        AdapterNotSpecifiedError
            When resolution fails to name an adapter.
        AdapterNotFoundError
            When the adapter module is missing, fails to load, or lacks its
            connection factory.
        """

        config = {str(key): value for key, value in self._resolver.resolve(descriptor).items()}
        return self.build_from_config(config)

    def build_from_config(self, config: ConfigurationMap) -> ConnectionSpecification:
        """Validate an already resolved *config* and package it."""

        config = {str(key): value for key, value in config.items()}
        adapter = config.get("adapter")
        if is_blank(adapter):
            raise AdapterNotSpecifiedError("database configuration does not specify adapter")
        adapter = str(adapter)

        self._ensure_loadable(self.adapters.load(adapter))
        adapter_method = adapter_method_for(adapter)
        if not self.adapters.has_connection_factory(adapter_method):
            log_error("adapter_lookup_failed", **make_event("adapter", adapter, {"reason": "factory_missing"}))
            raise AdapterNotFoundError(f"database configuration specifies nonexistent {adapter} adapter")

        name = config.pop("name", None)
        spec = ConnectionSpecification(str(name) if not is_blank(name) else DEFAULT_NAME, config, adapter_method)
        log_info("specification_built", **make_event("specification", spec.name, {"adapter": adapter}))
        return spec

    def _ensure_loadable(self, lookup: AdapterLookup) -> None:
        """Translate a failed lookup into :class:`AdapterNotFoundError`."""

        if lookup.found:
            return
        adapter = lookup.adapter
        log_error(
            "adapter_lookup_failed",
            **make_event("adapter", adapter, {"reason": lookup.status.value, "location": lookup.location}),
        )
        if lookup.status is AdapterStatus.NOT_FOUND:
            raise AdapterNotFoundError(
                f"Could not load the '{adapter}' database adapter. Ensure that the adapter is spelled "
                "correctly in your database configuration and that the package providing it is installed."
            ) from lookup.cause
        raise AdapterNotFoundError(
            f"Error loading the '{adapter}' database adapter. Missing a package it depends on? {lookup.cause}"
        ) from lookup.cause
