"""Immutable connection specification value object.

Purpose
-------
Carry the outcome of a successful resolution: the connection name, the
validated configuration, and the adapter method a connection factory should
call. Instances are only produced by
:class:`lib_connection_resolver.application.builder.SpecificationBuilder`.

Contents
--------
* :class:`ConnectionSpecification` – frozen dataclass with a read-only
  configuration view, ``copy`` and ``to_dict`` helpers.
"""

from __future__ import annotations

import copy as _copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True, slots=True)
class ConnectionSpecification:
    """Validated, immutable description of a database connection.

    Why
    ----
    Connection factories need a single value that cannot drift after the
    adapter was validated.

    What
    ----
    Stores the connection ``name``, the resolved ``config`` (wrapped in a
    ``mappingproxy``) and ``adapter_method`` (``"<adapter>_connection"``).
    Instances hash on ``name`` and ``adapter_method``; equality still
    compares the configuration.

    Examples
    --------
    >>> spec = ConnectionSpecification("primary", {"adapter": "sqlite3", "database": "db"}, "sqlite3_connection")
    >>> spec.adapter
    'sqlite3'
    >>> spec.to_dict()
    {'adapter': 'sqlite3', 'database': 'db', 'name': 'primary'}
    >>> spec.config["adapter"] = "mysql2"
    Traceback (most recent call last):
    ...
    TypeError: 'mappingproxy' object does not support item assignment
    """

    name: str
    config: Mapping[str, Any] = field(hash=False)
    adapter_method: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "config", MappingProxyType(dict(self.config)))

    @property
    def adapter(self) -> str:
        """Return the adapter identifier stored in the configuration."""

        return self.config["adapter"]

    def to_dict(self) -> dict[str, Any]:
        """Return a mutable copy of the configuration merged with ``name``."""

        payload = dict(self.config)
        payload["name"] = self.name
        return payload

    def copy(self) -> ConnectionSpecification:
        """Duplicate the specification with its own copy of the configuration.

        Examples
        --------
        >>> spec = ConnectionSpecification("primary", {"adapter": "sqlite3"}, "sqlite3_connection")
        >>> twin = spec.copy()
        >>> twin == spec, twin.config is spec.config
        (True, False)
        """

        return ConnectionSpecification(self.name, dict(self.config), self.adapter_method)

    __copy__ = copy

    def __deepcopy__(self, memo: dict[int, Any]) -> ConnectionSpecification:
        return ConnectionSpecification(self.name, _copy.deepcopy(dict(self.config), memo), self.adapter_method)
