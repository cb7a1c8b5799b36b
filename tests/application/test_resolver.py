from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lib_connection_resolver.application.resolver import DEFAULT_ENVIRONMENT, DescriptorResolver, is_grouping
from lib_connection_resolver.domain.descriptors import NamedReference, PartialMap, UrlString
from lib_connection_resolver.domain.errors import AdapterNotSpecifiedError, EmptyUrlError


def test_named_reference_adds_name() -> None:
    resolver = DescriptorResolver({"production": {"adapter": "sqlite3", "database": "foo"}})
    assert resolver.resolve(NamedReference("production")) == {
        "adapter": "sqlite3",
        "database": "foo",
        "name": "production",
    }


def test_named_reference_name_wins_over_inner_name() -> None:
    resolver = DescriptorResolver({"production": {"adapter": "sqlite3", "name": "other"}})
    assert resolver.resolve(NamedReference("production"))["name"] == "production"


def test_named_reference_to_url() -> None:
    resolver = DescriptorResolver({"production": "postgresql://db.internal:5433/app?pool=10"})
    assert resolver.resolve(NamedReference("production")) == {
        "pool": "10",
        "adapter": "postgresql",
        "port": 5433,
        "database": "app",
        "host": "db.internal",
        "name": "production",
    }


def test_missing_named_reference_lists_available_names() -> None:
    resolver = DescriptorResolver({"development": {"adapter": "sqlite3"}, "test": "sqlite3:test.db"})
    with pytest.raises(AdapterNotSpecifiedError) as info:
        resolver.resolve(NamedReference("missing"))
    message = str(info.value)
    assert "'missing' database is not configured" in message
    assert "'development'" in message and "'test'" in message


def test_url_descriptor_delegates_to_decoder() -> None:
    assert DescriptorResolver().resolve(UrlString("sqlite3:app.db")) == {"adapter": "sqlite3", "database": "app.db"}


def test_partial_map_expands_url_and_url_wins() -> None:
    registry_value = {"url": "postgresql://localhost/app", "database": "ignored", "pool": 5}
    config = DescriptorResolver().resolve(PartialMap(registry_value))
    assert config == {"database": "app", "pool": 5, "adapter": "postgresql", "host": "localhost"}
    assert "url" in registry_value


def test_partial_map_keeps_jdbc_urls() -> None:
    values = {"adapter": "jdbcpostgresql", "url": "jdbc:postgresql://localhost/app"}
    assert DescriptorResolver().resolve(PartialMap(values)) == values


def test_partial_map_with_blank_url_raises() -> None:
    with pytest.raises(EmptyUrlError):
        DescriptorResolver().resolve(PartialMap({"url": ""}))


def test_partial_map_drops_blank_values() -> None:
    config = DescriptorResolver().resolve(PartialMap({"adapter": "sqlite3", "host": "", "port": None, "url": None}))
    assert config == {"adapter": "sqlite3"}


SCALAR = st.one_of(st.integers(), st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789_.-", min_size=1, max_size=6))
FLAT = st.dictionaries(
    st.sampled_from(["host", "port", "database", "pool", "timeout", "username"]), SCALAR, max_size=5
)


@given(st.sampled_from(["sqlite3", "postgresql", "mysql2"]), FLAT)
def test_resolving_a_resolved_map_is_identity(adapter, extra) -> None:
    config = {"adapter": adapter, **extra}
    assert DescriptorResolver().resolve(PartialMap(config)) == config


def test_resolve_without_descriptor_uses_current_environment() -> None:
    resolver = DescriptorResolver(
        {"staging": "mysql2://localhost/staging"},
        environment=lambda: "staging",
    )
    assert resolver.resolve() == {"adapter": "mysql2", "database": "staging", "host": "localhost", "name": "staging"}


@pytest.mark.parametrize("environment", [None, ""])
def test_resolve_without_descriptor_or_environment_raises(environment) -> None:
    resolver = DescriptorResolver({"production": "sqlite3:db"}, environment=lambda: environment)
    with pytest.raises(AdapterNotSpecifiedError):
        resolver.resolve()


def test_resolve_does_not_mutate_registry() -> None:
    registry = {"production": {"url": "postgresql://localhost/app", "pool": ""}}
    DescriptorResolver(registry).resolve(NamedReference("production"))
    assert registry == {"production": {"url": "postgresql://localhost/app", "pool": ""}}


def test_unknown_descriptor_type_raises() -> None:
    with pytest.raises(TypeError):
        DescriptorResolver().resolve(42)  # type: ignore[arg-type]


def test_is_grouping() -> None:
    assert is_grouping({"primary": {"adapter": "sqlite3"}, "replica": {"url": "sqlite3:r.db"}})
    assert is_grouping({})
    assert not is_grouping({"adapter": "sqlite3"})
    assert not is_grouping({"url": "sqlite3:db"})
    assert not is_grouping({"database": "foo"})
    assert not is_grouping("sqlite3:db")


def test_resolve_all_resolves_each_entry() -> None:
    registry = {
        "development": {"adapter": "sqlite3", "database": "dev.db"},
        "production": "postgresql://db.internal/app",
        "disabled": None,
    }
    resolved = DescriptorResolver(registry).resolve_all()
    assert resolved == {
        "development": {"adapter": "sqlite3", "database": "dev.db"},
        "production": {"adapter": "postgresql", "database": "app", "host": "db.internal"},
        "disabled": None,
    }


def test_resolve_all_lifts_default_environment_group() -> None:
    registry = {
        "development": {
            "primary": {"adapter": "sqlite3", "database": "dev.db"},
            "animals": {"url": "sqlite3:animals.db"},
        },
        "test": {"primary": {"adapter": "sqlite3", "database": "test.db"}},
        "shared": "mysql2://localhost/shared",
    }
    resolved = DescriptorResolver(registry, environment=lambda: "development").resolve_all()
    assert set(resolved) == {"shared", "primary", "animals"}
    assert resolved["primary"] == {"adapter": "sqlite3", "database": "dev.db"}
    assert resolved["animals"] == {"adapter": "sqlite3", "database": "animals.db"}


def test_resolve_all_explicit_default_environment_overrides_current() -> None:
    registry = {
        "development": {"primary": {"adapter": "sqlite3", "database": "dev.db"}},
        "test": {"primary": {"adapter": "sqlite3", "database": "test.db"}},
    }
    resolver = DescriptorResolver(registry, environment=lambda: "development", default_environment=lambda: "test")
    assert resolver.resolve_all() == {"primary": {"adapter": "sqlite3", "database": "test.db"}}


def test_resolve_all_falls_back_to_default_env_name() -> None:
    registry = {
        DEFAULT_ENVIRONMENT: {"primary": {"adapter": "sqlite3", "database": "default.db"}},
        "other": {"primary": {"adapter": "sqlite3", "database": "other.db"}},
    }
    assert DescriptorResolver(registry).resolve_all() == {"primary": {"adapter": "sqlite3", "database": "default.db"}}


def test_resolve_all_drops_groups_when_environment_is_not_grouped() -> None:
    registry = {
        "production": {"adapter": "postgresql", "database": "app"},
        "legacy": {"primary": {"adapter": "sqlite3"}},
    }
    resolver = DescriptorResolver(registry, environment=lambda: "production")
    assert resolver.resolve_all() == {"production": {"adapter": "postgresql", "database": "app"}}
