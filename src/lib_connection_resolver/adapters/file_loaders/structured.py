"""Structured registry file loaders.

Purpose
-------
Convert on-disk connection registries (the ``database.yml`` style file that
maps environment names to URLs or connection maps) into Python mappings the
resolver understands. Adapters are small wrappers around
``tomllib``/``json``/``yaml.safe_load`` so error handling and observability
live in one place.

Contents
--------
* :class:`BaseFileLoader` – shared helpers for reading files and validating
  mapping outputs.
* :class:`TOMLFileLoader` – loader for TOML registries.
* :class:`JSONFileLoader` – minimal JSON loader.
* :class:`YAMLFileLoader` – YAML loader (only available when PyYAML is
  installed).
* :data:`FILE_LOADERS` – mapping of file suffixes to loader instances.

System Role
-----------
Invoked by :func:`lib_connection_resolver.core.load_registry`; the resolver
itself never performs file I/O.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

try:  # Python >= 3.11
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for <3.11
    import tomli as tomllib  # type: ignore[assignment]

from ...domain.errors import InvalidFormat, NotFound
from ...observability import log_debug, log_error

try:
    import yaml  # type: ignore[import-not-found]
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    yaml = None  # type: ignore[assignment]


class BaseFileLoader:
    """Common utilities shared by the structured file loaders."""

    format = "raw"

    def _read(self, path: str) -> bytes:
        """Read *path* as bytes, raising :class:`NotFound` when the file is missing."""

        file_path = Path(path)
        if not file_path.is_file():
            raise NotFound(f"Registry file not found: {path}")
        payload = file_path.read_bytes()
        log_debug("registry_file_read", stage="file", subject=path, size=len(payload))
        return payload

    @staticmethod
    def _ensure_mapping(data: object, *, path: str) -> Mapping[str, object]:
        """Ensure *data* behaves like a mapping, otherwise raise ``InvalidFormat``.

        Examples
        --------
        >>> BaseFileLoader._ensure_mapping({"production": "sqlite3:db"}, path="demo")
        {'production': 'sqlite3:db'}
        >>> BaseFileLoader._ensure_mapping(["sqlite3:db"], path="demo")
        Traceback (most recent call last):
        ...
        lib_connection_resolver.domain.errors.InvalidFormat: File demo did not produce a mapping
        """

        if not isinstance(data, Mapping):
            raise InvalidFormat(f"File {path} did not produce a mapping")
        return data  # type: ignore[return-value]

    def _invalid(self, path: str, exc: Exception) -> InvalidFormat:
        log_error("registry_file_invalid", stage="file", subject=path, format=self.format, error=str(exc))
        return InvalidFormat(f"Invalid {self.format.upper()} in {path}: {exc}")

    def _loaded(self, data: object, path: str) -> Mapping[str, object]:
        result = self._ensure_mapping(data, path=path)
        log_debug("registry_file_loaded", stage="file", subject=path, format=self.format, entries=len(result))
        return result


class TOMLFileLoader(BaseFileLoader):
    """Load TOML registries using the standard library parser.

    Examples
    --------
    >>> from tempfile import NamedTemporaryFile
    >>> tmp = NamedTemporaryFile('w', suffix='.toml', delete=False, encoding='utf-8')
    >>> _ = tmp.write('production = "sqlite3:db"')
    >>> tmp.close()
    >>> TOMLFileLoader().load(tmp.name)["production"]
    'sqlite3:db'
    >>> Path(tmp.name).unlink()
    """

    format = "toml"

    def load(self, path: str) -> Mapping[str, object]:
        try:
            data = tomllib.loads(self._read(path).decode("utf-8"))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:  # type: ignore[attr-defined]
            raise self._invalid(path, exc) from exc
        return self._loaded(data, path)


class JSONFileLoader(BaseFileLoader):
    """Load JSON registries."""

    format = "json"

    def load(self, path: str) -> Mapping[str, object]:
        try:
            data = json.loads(self._read(path))
        except json.JSONDecodeError as exc:
            raise self._invalid(path, exc) from exc
        return self._loaded(data, path)


class YAMLFileLoader(BaseFileLoader):
    """Load YAML registries when PyYAML is available.

    Raises
    ------
    NotFound
        When PyYAML is not installed.
    """

    format = "yaml"

    def load(self, path: str) -> Mapping[str, object]:
        if yaml is None:
            raise NotFound("PyYAML is required for YAML registry support")
        try:
            data = yaml.safe_load(self._read(path))  # type: ignore[operator]
        except yaml.YAMLError as exc:  # type: ignore[attr-defined]
            raise self._invalid(path, exc) from exc
        if data is None:
            data = {}
        return self._loaded(data, path)


FILE_LOADERS: dict[str, BaseFileLoader] = {
    ".toml": TOMLFileLoader(),
    ".json": JSONFileLoader(),
    ".yaml": YAMLFileLoader(),
    ".yml": YAMLFileLoader(),
}
"""Supported registry formats keyed by lowercase file suffix."""
