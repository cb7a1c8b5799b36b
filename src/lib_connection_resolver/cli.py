"""CLI adapter for ``lib_connection_resolver`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators inspect how a connection registry resolves without writing
Python: decode a URL, resolve one entry or the whole registry, or build the
validated specification.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata for quick diagnostics.
* :func:`cli_decode` – decodes a single connection URL.
* :func:`cli_resolve` – resolves one descriptor against a registry file.
* :func:`cli_resolve_all` – resolves every entry of a registry file.
* :func:`cli_spec` – builds the connection specification.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI lives in the outermost layer. It calls the composition root
(:mod:`lib_connection_resolver.core`) and lets ``lib_cli_exit_tools`` turn
library errors into consistent exit codes.
"""

from __future__ import annotations

import json
import sys
from importlib import metadata
from pathlib import Path
from typing import Any, Final, Mapping, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.env.default import EnvironmentVariables
from .application.builder import DEFAULT_ADAPTER_NAMESPACE
from .core import build_specification, decode_url, load_registry, resolve_all, resolve_connection
from .domain.descriptors import NamedReference, UrlString

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000
_DISTRIBUTION: Final[str] = "lib_connection_resolver"

_REGISTRY_OPTION = click.option(
    "--registry",
    "registry_path",
    type=click.Path(path_type=Path, exists=True, file_okay=True, dir_okay=False, readable=True),
    default=None,
    help="TOML, JSON, or YAML file mapping connection names to URLs or maps",
)
_INDENT_OPTION = click.option(
    "--indent",
    type=int,
    default=None,
    help="Pretty-print JSON output with the provided indent size",
)
_SLUG_OPTION = click.option(
    "--slug",
    default=None,
    help="Also read the current environment from <SLUG>_ENV",
)


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` when not installed."""

    try:
        return metadata.version(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Resolve database connection descriptors into connection specifications",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name=_DISTRIBUTION,
    message="lib_connection_resolver version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command configuring traceback handling for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        click.echo("lib_connection_resolver (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', _DISTRIBUTION)}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("decode", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("url")
@_INDENT_OPTION
def cli_decode(url: str, indent: Optional[int]) -> None:
    """Expand a connection URL into its configuration map.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> result = CliRunner().invoke(cli, ["decode", "sqlite3:app.db"])
    >>> result.output.strip()
    '{"adapter":"sqlite3","database":"app.db"}'
    """

    _echo_json(decode_url(url), indent)


@cli.command("resolve", context_settings=CLICK_CONTEXT_SETTINGS)
@_REGISTRY_OPTION
@click.option("--env", "environment", default=None, help="Registry entry to resolve")
@click.option("--url", default=None, help="Connection URL to resolve instead of a registry entry")
@_SLUG_OPTION
@_INDENT_OPTION
def cli_resolve(
    registry_path: Optional[Path],
    environment: Optional[str],
    url: Optional[str],
    slug: Optional[str],
    indent: Optional[int],
) -> None:
    """Resolve one connection and print its configuration as JSON.

    Without ``--env`` or ``--url`` the current environment is read from
    ``APP_ENV``/``ENVIRONMENT`` (and ``<SLUG>_ENV`` when ``--slug`` is given).
    """

    if environment and url:
        raise click.UsageError("--env and --url are mutually exclusive")
    registry = _load(registry_path)
    descriptor = UrlString(url) if url else NamedReference(environment) if environment else None
    config = resolve_connection(descriptor, registry, environment=_environment(slug))
    _echo_json(config, indent)


@cli.command("resolve-all", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--registry",
    "registry_path",
    type=click.Path(path_type=Path, exists=True, file_okay=True, dir_okay=False, readable=True),
    required=True,
    help="TOML, JSON, or YAML file mapping connection names to URLs or maps",
)
@click.option(
    "--default-env",
    default=None,
    help="Environment whose nested group is lifted to the top level",
)
@_SLUG_OPTION
@_INDENT_OPTION
def cli_resolve_all(
    registry_path: Path,
    default_env: Optional[str],
    slug: Optional[str],
    indent: Optional[int],
) -> None:
    """Resolve every registry entry and print the result as JSON."""

    default_environment = (lambda: default_env) if default_env else None
    resolved = resolve_all(
        _load(registry_path),
        environment=_environment(slug),
        default_environment=default_environment,
    )
    _echo_json(resolved, indent)


@cli.command("spec", context_settings=CLICK_CONTEXT_SETTINGS)
@_REGISTRY_OPTION
@click.option("--env", "environment", default=None, help="Registry entry to build")
@click.option("--url", default=None, help="Connection URL to build instead of a registry entry")
@click.option(
    "--namespace",
    default=DEFAULT_ADAPTER_NAMESPACE,
    show_default=True,
    help="Package holding <adapter>_adapter modules",
)
@_SLUG_OPTION
@_INDENT_OPTION
def cli_spec(
    registry_path: Optional[Path],
    environment: Optional[str],
    url: Optional[str],
    namespace: str,
    slug: Optional[str],
    indent: Optional[int],
) -> None:
    """Build the connection specification and print it as JSON."""

    if environment and url:
        raise click.UsageError("--env and --url are mutually exclusive")
    descriptor = UrlString(url) if url else NamedReference(environment) if environment else None
    spec = build_specification(
        descriptor,
        _load(registry_path),
        environment=_environment(slug),
        namespace=namespace,
    )
    payload = {"name": spec.name, "adapter_method": spec.adapter_method, "config": dict(spec.config)}
    _echo_json(payload, indent)


def _load(path: Optional[Path]) -> dict[str, object]:
    """Load the registry file at *path* or return an empty registry."""

    if path is None:
        return {}
    return load_registry(path)


def _environment(slug: Optional[str]) -> EnvironmentVariables:
    """Return the environment provider, honouring ``--slug`` when supplied."""

    if slug:
        return EnvironmentVariables.for_slug(slug)
    return EnvironmentVariables()


def _echo_json(payload: Mapping[str, Any], indent: Optional[int]) -> None:
    click.echo(json.dumps(payload, indent=indent, separators=(",", ":"), ensure_ascii=False))


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name=_DISTRIBUTION,
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
