"""Public package surface for ``lib_connection_resolver``.

Re-exports the composition-root helpers, the descriptor and specification
value objects, the error taxonomy, and the logging hooks so consumers only
ever need ``import lib_connection_resolver``.
"""

from __future__ import annotations

from .core import (
    AdapterNotFoundError,
    AdapterNotSpecifiedError,
    ConfigurationMap,
    ConnectionConfigError,
    ConnectionSpecification,
    DescriptorResolver,
    EmptyUrlError,
    EnvironmentVariables,
    ImportlibAdapterRegistry,
    InvalidFormat,
    NamedReference,
    NotFound,
    PartialMap,
    RegistryLoadError,
    SpecificationBuilder,
    StaticAdapterRegistry,
    UrlString,
    build_specification,
    decode_url,
    load_registry,
    resolve_all,
    resolve_connection,
)
from .observability import bind_trace_id, get_logger

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
    "bind_trace_id",
    "build_specification",
    "decode_url",
    "get_logger",
    "load_registry",
    "resolve_all",
    "resolve_connection",
]
