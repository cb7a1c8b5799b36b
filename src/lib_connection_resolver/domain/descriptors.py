"""Raw connection descriptors accepted by the resolver.

Purpose
-------
Model the three input shapes a caller may hand to the resolver as a closed set
of immutable value objects so dispatch happens on type, not on ad-hoc runtime
inspection of strings and dictionaries.

Contents
--------
* :data:`ConfigurationMap` – alias for a flat, resolved connection mapping.
* :class:`NamedReference` – refers to an entry of the registry by name.
* :class:`UrlString` – a connection-string URL.
* :class:`PartialMap` – a flat mapping, optionally carrying a ``url`` key.
* :data:`Descriptor` – union of the three descriptor types.
* :func:`as_descriptor` – lift plain registry values into descriptors.
* :func:`is_blank` / :func:`drop_blank` – blank-value policy shared by the
  decoder and the resolver.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Union

ConfigurationMap = dict[str, Any]
"""Flat connection configuration (``adapter``, ``host``, ``port``, ...)."""


@dataclass(frozen=True, slots=True)
class NamedReference:
    """Reference to a registry entry such as ``"production"``.

    Examples
    --------
    >>> NamedReference("production").name
    'production'
    """

    name: str


@dataclass(frozen=True, slots=True)
class UrlString:
    """Connection-string URL such as ``"postgresql://localhost/app"``."""

    text: str


@dataclass(frozen=True, slots=True)
class PartialMap:
    """Flat connection mapping, possibly carrying a ``url`` key to expand.

    The mapping is copied and wrapped read-only on construction so the caller's
    dictionary is never touched by resolution.

    Examples
    --------
    >>> source = {"adapter": "sqlite3"}
    >>> descriptor = PartialMap(source)
    >>> source["adapter"] = "mysql2"
    >>> descriptor.values["adapter"]
    'sqlite3'
    """

    values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))


Descriptor = Union[NamedReference, UrlString, PartialMap]


def as_descriptor(value: object) -> Descriptor:
    """Lift a plain registry value into its descriptor type.

    Strings are connection URLs, mappings are partial maps, and descriptors
    pass through unchanged.

    Examples
    --------
    >>> as_descriptor("sqlite3:db")
    UrlString(text='sqlite3:db')
    >>> as_descriptor({"adapter": "sqlite3"}).values["adapter"]
    'sqlite3'
    >>> as_descriptor(42)
    Traceback (most recent call last):
    ...
    TypeError: unsupported connection descriptor: int
    """

    if isinstance(value, (NamedReference, UrlString, PartialMap)):
        return value
    if isinstance(value, str):
        return UrlString(value)
    if isinstance(value, Mapping):
        return PartialMap(value)
    raise TypeError(f"unsupported connection descriptor: {type(value).__name__}")


def is_blank(value: object) -> bool:
    """Return ``True`` for ``None`` and whitespace-only strings.

    >>> is_blank(None), is_blank("  "), is_blank(0), is_blank("x")
    (True, True, False, False)
    """

    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def drop_blank(config: Mapping[str, Any]) -> ConfigurationMap:
    """Return a new dict without blank values, preserving key order."""

    return {key: value for key, value in config.items() if not is_blank(value)}
