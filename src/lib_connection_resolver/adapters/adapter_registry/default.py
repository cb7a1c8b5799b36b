"""Adapter registry implementations.

Purpose
-------
Answer the two questions the specification builder asks about an adapter:
can its module be loaded, and does it expose ``<adapter>_connection``? The
classes implement :class:`~lib_connection_resolver.application.ports.AdapterRegistry`.

Contents
--------
* :class:`ImportlibAdapterRegistry` – imports ``<namespace>.<adapter>_adapter``
  and inspects the module for connection factories.
* :class:`StaticAdapterRegistry` – in-memory mapping from adapter name to
  connection factory.
"""

from __future__ import annotations

import importlib
from types import ModuleType
from typing import Callable, Mapping

from ...application.ports import AdapterLookup, AdapterStatus
from ...observability import log_debug


def adapter_module_path(namespace: str, adapter: str) -> str:
    """Return the conventional module path for *adapter* under *namespace*.

    >>> adapter_module_path("acme.adapters", "sqlite3")
    'acme.adapters.sqlite3_adapter'
    """

    return f"{namespace}.{adapter}_adapter" if namespace else f"{adapter}_adapter"


class ImportlibAdapterRegistry:
    """Locate adapters as ``<namespace>.<adapter>_adapter`` modules.

    Why
    ----
    A missing adapter package and an adapter whose own dependency is missing
    both surface as :class:`ImportError`; only the module that failed tells
    them apart. The registry makes that comparison once and returns a typed
    :class:`AdapterLookup` instead of leaking the exception.

    What
    ----
    A :class:`ModuleNotFoundError` naming the expected module (or one of its
    parent packages) is ``NOT_FOUND``; any other :class:`ImportError` raised
    while importing is ``LOAD_FAILED``. Connection factories are callables
    named ``<adapter>_connection`` on any module loaded so far.
    """

    def __init__(self, namespace: str) -> None:
        self._namespace = namespace
        self._modules: dict[str, ModuleType] = {}

    @property
    def namespace(self) -> str:
        return self._namespace

    def load(self, adapter: str) -> AdapterLookup:
        location = adapter_module_path(self._namespace, adapter)
        try:
            module = importlib.import_module(location)
        except ModuleNotFoundError as exc:
            status = AdapterStatus.NOT_FOUND if _is_expected_module(exc.name, location) else AdapterStatus.LOAD_FAILED
            log_debug("adapter_import_failed", stage="adapter", subject=adapter, location=location, status=status.value)
            return AdapterLookup(adapter, status, location, exc)
        except ImportError as exc:
            log_debug("adapter_import_failed", stage="adapter", subject=adapter, location=location, status="load_failed")
            return AdapterLookup(adapter, AdapterStatus.LOAD_FAILED, location, exc)
        self._modules[adapter] = module
        return AdapterLookup(adapter, AdapterStatus.FOUND, location)

    def has_connection_factory(self, method: str) -> bool:
        return any(callable(getattr(module, method, None)) for module in self._modules.values())


class StaticAdapterRegistry:
    """Adapter registry backed by an explicit ``{adapter: factory}`` mapping.

    Examples
    --------
    >>> registry = StaticAdapterRegistry({"sqlite3": dict})
    >>> registry.load("sqlite3").found, registry.load("oracle").status.value
    (True, 'not_found')
    >>> registry.has_connection_factory("sqlite3_connection")
    True
    """

    def __init__(self, factories: Mapping[str, Callable[..., object]] | None = None) -> None:
        self._factories: dict[str, Callable[..., object]] = dict(factories or {})

    def register(self, adapter: str, factory: Callable[..., object]) -> None:
        """Add or replace the connection factory for *adapter*."""

        self._factories[adapter] = factory

    def factory(self, adapter: str) -> Callable[..., object]:
        return self._factories[adapter]

    def load(self, adapter: str) -> AdapterLookup:
        status = AdapterStatus.FOUND if adapter in self._factories else AdapterStatus.NOT_FOUND
        return AdapterLookup(adapter, status, adapter)

    def has_connection_factory(self, method: str) -> bool:
        adapter = method.removesuffix("_connection")
        return adapter != method and callable(self._factories.get(adapter))


def _is_expected_module(missing: str | None, location: str) -> bool:
    """Return ``True`` when *missing* is *location* or one of its parent packages."""

    if not missing:
        return False
    return location == missing or location.startswith(missing + ".")
