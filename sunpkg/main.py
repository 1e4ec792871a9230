"""
sunpkg — CLI entrypoint.

Usage:
    python -m sunpkg.main --help
    python -m sunpkg.main list
    python -m sunpkg.main ensure SUNWfoo --source /var/spool/pkg/foo.pkg
    python -m sunpkg.main apply --dry-run
"""

from __future__ import annotations

import json
import os
import platform
import sys
from pathlib import Path
from typing import NoReturn

import click
from pydantic import ValidationError

from sunpkg import __version__
from sunpkg.adapters.registry import AdapterRegistry
from sunpkg.adapters.shell.command import ShellCommandAdapter
from sunpkg.core.config.loader import ConfigError, ToolPaths, find_manifest_file, load_manifest
from sunpkg.core.errors import PackageError
from sunpkg.core.models.package import DesiredState, Found
from sunpkg.core.observability.logging_config import (
    ENV_FILE,
    ENV_FILE_LEVEL,
    resolve_level,
    setup_logging,
)
from sunpkg.core.services.package_commands import PackageCommands
from sunpkg.core.services.package_query import PackageQuery
from sunpkg.core.services.reconciler import Reconciler


@click.group()
@click.version_option(version=__version__, prog_name="sunpkg")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to sunpkg.yml (default: auto-detect).",
)
@click.option("--dry-run", is_flag=True, help="Query state but don't run pkgadd/pkgrm.")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    dry_run: bool,
) -> None:
    """sunpkg — declarative SVR4 package management."""
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj["dry_run"] = dry_run
    ctx.obj.setdefault("registry", None)

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
    )


# ── Helpers ─────────────────────────────────────────────────────


def _fail(message: str) -> NoReturn:
    click.secho(f"❌ {message}", fg="red", err=True)
    sys.exit(1)


def _tools(ctx: click.Context) -> ToolPaths:
    """Tool paths from the manifest when one is present."""
    path = ctx.obj.get("config_path") or find_manifest_file()
    if path is None:
        return ToolPaths()
    try:
        return load_manifest(path).tools
    except ConfigError as e:
        _fail(str(e))


def _registry(ctx: click.Context, tools: ToolPaths) -> AdapterRegistry:
    registry = ctx.obj.get("registry")
    if registry is None:
        registry = AdapterRegistry()
        registry.register(ShellCommandAdapter(probe=tools.pkginfo))
        ctx.obj["registry"] = registry
    return registry


def _commands(ctx: click.Context) -> PackageCommands:
    tools = _tools(ctx)
    return PackageCommands(_registry(ctx, tools), tools=tools, dry_run=ctx.obj["dry_run"])


# ── Observe ─────────────────────────────────────────────────────


@cli.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_packages(ctx: click.Context, as_json: bool) -> None:
    """List every installed package."""
    try:
        records = PackageQuery(_commands(ctx)).instances()
    except PackageError as e:
        _fail(str(e))

    if as_json:
        click.echo(json.dumps([r.to_dict() for r in records], indent=2))
        return

    for r in records:
        click.echo(f"{r.name:<24} {r.ensure or '?':<28} {r.description or ''}")


@cli.command()
@click.argument("name")
@click.option("--device", "-d", default=None, help="Query a package device or file instead.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def query(ctx: click.Context, name: str, device: str | None, as_json: bool) -> None:
    """Show the state of one package."""
    try:
        result = PackageQuery(_commands(ctx)).query(name, device=device)
    except PackageError as e:
        _fail(str(e))

    data = result.record.to_dict() if isinstance(result, Found) else {"name": name, "ensure": "absent"}
    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    for key, value in data.items():
        click.echo(f"{key:>12}: {value}")


@cli.command()
@click.argument("name")
@click.option("--source", "-s", required=True, help="Package device or file.")
@click.pass_context
def latest(ctx: click.Context, name: str, source: str) -> None:
    """Show the version of NAME available at SOURCE."""
    try:
        version = PackageQuery(_commands(ctx)).latest(name, source)
    except PackageError as e:
        _fail(str(e))
    if version is None:
        _fail(f"{name} is not available from {source}")
    click.echo(version)


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show platform support and tool availability."""
    tools = _tools(ctx)
    system = platform.system()
    color = "green" if system == "SunOS" else "yellow"
    click.secho(f"Platform: {system}", fg=color)

    for name, info in _registry(ctx, tools).adapter_status().items():
        icon = "✅" if info["available"] else "❌"
        click.echo(f"Backend:  {icon} {name} ({info['type']})")

    for tool, path in tools.model_dump().items():
        icon = "✅" if ShellCommandAdapter(probe=path).is_available() else "❌"
        click.echo(f"   {icon} {tool:<8} {path}")


# ── Act ─────────────────────────────────────────────────────────


def _print_result(data: dict, quiet: bool) -> None:
    if data.get("error"):
        click.secho(f"   ❌ {data['name']}: {data['error']}", fg="red")
        return
    if data["action"] == "none":
        if not quiet:
            click.echo(f"   ✓ {data['name']} ({data['current']})")
        return
    prefix = "[dry-run] " if data["dry_run"] else ""
    click.secho(
        f"   {prefix}{data['action']} {data['name']}: {data['previous']} → {data['current']}",
        fg="cyan",
    )


@cli.command()
@click.argument("name")
@click.option("--ensure", "-e", "ensure", default="present", show_default=True,
              help="absent, present, latest, or a version.")
@click.option("--source", "-s", default=None, help="Package device or file.")
@click.option("--adminfile", "-a", default=None, help="Admin file for pkgadd/pkgrm.")
@click.option("--responsefile", "-r", default=None, help="Response file for pkgadd.")
@click.option("--install-option", "install_options", multiple=True,
              help="Extra pkgadd option (repeatable).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def ensure(
    ctx: click.Context,
    name: str,
    ensure: str,
    source: str | None,
    adminfile: str | None,
    responsefile: str | None,
    install_options: tuple[str, ...],
    as_json: bool,
) -> None:
    """Bring package NAME to the requested state."""
    try:
        desired = DesiredState(
            name=name,
            ensure=ensure,
            source=source,
            adminfile=adminfile,
            responsefile=responsefile,
            install_options=list(install_options) or None,
        )
    except ValidationError as e:
        _fail(f"Invalid arguments: {e}")

    commands = _commands(ctx)
    try:
        result = Reconciler(PackageQuery(commands), commands).reconcile(desired)
    except PackageError as e:
        _fail(str(e))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return
    _print_result(result.to_dict(), ctx.obj["quiet"])


@cli.command()
@click.option("--package", "-p", "only", multiple=True, help="Only these packages (repeatable).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def apply(ctx: click.Context, only: tuple[str, ...], as_json: bool) -> None:
    """Reconcile every package declared in sunpkg.yml."""
    from sunpkg.core.use_cases.apply import apply_manifest

    tools = _tools(ctx)
    result = apply_manifest(
        _registry(ctx, tools),
        config_path=ctx.obj.get("config_path"),
        dry_run=ctx.obj["dry_run"],
        only=list(only) or None,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.status == "ok" else 1)

    if result.error:
        _fail(result.error)

    for outcome in result.outcomes:
        _print_result(outcome.to_dict(), ctx.obj["quiet"])

    color = {"ok": "green", "partial": "yellow", "failed": "red"}[result.status]
    click.secho(
        f"\n{result.status}: {result.succeeded}/{len(result.outcomes)} packages, "
        f"{result.changed} changed",
        fg=color,
    )
    if result.status != "ok":
        sys.exit(1)


if __name__ == "__main__":
    cli()
