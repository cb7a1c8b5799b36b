"""End-to-end CLI coverage for the public commands of lib_connection_resolver."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

import lib_cli_exit_tools

from lib_connection_resolver import cli

REGISTRY = {
    "development": {"adapter": "sqlite3", "database": "dev.db"},
    "production": "postgresql://app@db.internal/app?pool=10",
    "legacy": {"primary": {"adapter": "sqlite3", "database": "legacy.db"}},
}
CLEAN_ENV = {"APP_ENV": None, "ENVIRONMENT": None, "BILLING_ENV": None}


@pytest.fixture()
def registry_file(tmp_path: Path) -> Path:
    path = tmp_path / "database.json"
    path.write_text(json.dumps(REGISTRY), encoding="utf-8")
    return path


def _runner() -> CliRunner:
    """Return a fresh CLI runner so each test starts from a clean state."""

    return CliRunner()


def test_cli_decode_outputs_json() -> None:
    result = _runner().invoke(cli.cli, ["decode", "postgres://localhost:5433/app?pool=5"])
    assert result.exit_code == 0
    assert json.loads(result.output) == {"pool": "5", "adapter": "postgresql", "port": 5433, "database": "app", "host": "localhost"}


def test_cli_decode_empty_url_fails() -> None:
    result = _runner().invoke(cli.cli, ["decode", " "])
    assert result.exit_code != 0
    assert "Database URL cannot be empty" in str(result.exception)


def test_cli_resolve_named_entry(registry_file: Path) -> None:
    result = _runner().invoke(
        cli.cli, ["resolve", "--registry", str(registry_file), "--env", "production", "--indent", "2"], env=CLEAN_ENV
    )
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["name"] == "production"
    assert payload["username"] == "app"


def test_cli_resolve_reads_current_environment(registry_file: Path) -> None:
    env = dict(CLEAN_ENV, BILLING_ENV="development")
    result = _runner().invoke(cli.cli, ["resolve", "--registry", str(registry_file), "--slug", "billing"], env=env)
    assert result.exit_code == 0
    assert json.loads(result.output)["database"] == "dev.db"


def test_cli_resolve_url() -> None:
    result = _runner().invoke(cli.cli, ["resolve", "--url", "sqlite3:/var/app.db"], env=CLEAN_ENV)
    assert result.exit_code == 0
    assert json.loads(result.output) == {"adapter": "sqlite3", "database": "/var/app.db"}


def test_cli_resolve_rejects_env_and_url(registry_file: Path) -> None:
    result = _runner().invoke(
        cli.cli, ["resolve", "--registry", str(registry_file), "--env", "production", "--url", "sqlite3:db"]
    )
    assert result.exit_code == 2
    assert "mutually exclusive" in result.output


def test_cli_resolve_all_lifts_default_env(registry_file: Path) -> None:
    result = _runner().invoke(
        cli.cli, ["resolve-all", "--registry", str(registry_file), "--default-env", "legacy"], env=CLEAN_ENV
    )
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert set(payload) == {"development", "production", "primary"}
    assert payload["primary"]["database"] == "legacy.db"


def test_cli_spec_reports_missing_adapter_package(registry_file: Path) -> None:
    result = _runner().invoke(
        cli.cli,
        ["spec", "--registry", str(registry_file), "--env", "development", "--namespace", "acme_cli_missing"],
        env=CLEAN_ENV,
    )
    assert result.exit_code != 0
    assert "Could not load the 'sqlite3' database adapter" in str(result.exception)


def test_cli_spec_builds_specification(tmp_path: Path, registry_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    package = tmp_path / "acme_cli_adapters"
    package.mkdir()
    (package / "__init__.py").write_text("", encoding="utf-8")
    (package / "sqlite3_adapter.py").write_text("def sqlite3_connection(config):\n    return config\n", encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))

    result = _runner().invoke(
        cli.cli,
        ["spec", "--registry", str(registry_file), "--env", "development", "--namespace", "acme_cli_adapters"],
        env=CLEAN_ENV,
    )
    assert result.exit_code == 0
    assert json.loads(result.output) == {
        "name": "development",
        "adapter_method": "sqlite3_connection",
        "config": {"adapter": "sqlite3", "database": "dev.db"},
    }


def test_cli_info_runs() -> None:
    result = _runner().invoke(cli.cli, ["info"])
    assert result.exit_code == 0
    assert "lib_connection_resolver" in result.output


def test_cli_info_handles_missing_metadata(monkeypatch: pytest.MonkeyPatch) -> None:
    def _raise_pkg_not_found(*_args, **_kwargs):
        raise cli.metadata.PackageNotFoundError()

    monkeypatch.setattr(cli.metadata, "metadata", _raise_pkg_not_found)
    result = _runner().invoke(cli.cli, ["info"])
    assert result.exit_code == 0
    assert "metadata unavailable" in result.output


def test_cli_main_restores_traceback_flag() -> None:
    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    assert cli.main(["--traceback", "decode", "sqlite3:app.db"], restore_traceback=True) == 0
    assert getattr(lib_cli_exit_tools.config, "traceback", False) == previous_traceback


def test_cli_main_returns_failure_code_for_resolution_errors() -> None:
    assert cli.main(["decode", " "]) != 0
