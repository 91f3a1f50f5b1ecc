"""
viewforge — CLI entrypoint.

Usage:
    python -m viewforge.main --help
    python -m viewforge.main check views/account-table.json
    python -m viewforge.main generate views/account-table.json out/accounts.html
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from viewforge import __version__
from viewforge.core.observability.logging_config import (
    ENV_FILE,
    ENV_FILE_LEVEL,
    gaps_on_console,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="viewforge")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to viewforge.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """viewforge — generate views from configuration, rules and the BUSM."""
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
        quiet_third_party=not debug,
        echo_gaps=gaps_on_console(),
    )

    from viewforge.core.config.loader import ConfigError, find_settings_file, load_settings, settings_root

    settings_path = Path(config_path) if config_path else find_settings_file()
    try:
        settings = load_settings(settings_path)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = settings_path
    ctx.obj["settings"] = settings
    ctx.obj["root"] = settings_root(settings_path)


def gap_log_for(ctx: click.Context):  # type: ignore[no-untyped-def]
    """File-backed gap log at the configured location."""
    from viewforge.core.persistence.gap_log import GapLog

    return GapLog(ctx.obj["root"] / ctx.obj["settings"].gap_log)


# ── Views ───────────────────────────────────────────────────────


@cli.command()
@click.argument("config_file", type=click.Path(path_type=Path))
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def check(config_file: Path, as_json: bool) -> None:
    """Validate a view configuration, listing every problem."""
    from viewforge.core.use_cases.config_check import check_view_config

    result = check_view_config(config_file)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        click.secho("✅ View configuration is valid", fg="green", bold=True)
        click.echo(f"   Entity: {result.entity}")
        click.echo(f"   Layout: {result.layout}")
        click.echo(f"   Fields: {result.field_count}")
    else:
        click.secho("❌ View configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        sys.exit(1)


@cli.command()
@click.argument("config_file", type=click.Path(path_type=Path))
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def fields(config_file: Path, as_json: bool) -> None:
    """Show the enriched fields of a view configuration."""
    from viewforge.core.config.loader import ConfigError, load_document
    from viewforge.core.config.schema import ConfigurationError
    from viewforge.core.services.field_enrichment import component_name, enrich_fields
    from viewforge.core.services.view_parser import parse_configuration

    try:
        config = parse_configuration(load_document(config_file), source=str(config_file))
    except (ConfigError, ConfigurationError) as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    enriched = enrich_fields(config.fields)

    if as_json:
        click.echo(json.dumps({
            "component": component_name(config),
            "fields": [f.model_dump(by_alias=True) for f in enriched],
        }, indent=2))
        return

    click.secho(f"🧩 {component_name(config)}", fg="cyan", bold=True)
    for f in enriched:
        flags = []
        if f.is_sortable:
            flags.append("sortable")
        if f.is_filterable:
            flags.append("filterable")
        suffix = f"  [{', '.join(flags)}]" if flags else ""
        click.echo(f"   • {f.display_path}: {f.ts_type} ({f.field_camel}){suffix}")


@cli.command()
@click.argument("config_file", type=click.Path(path_type=Path))
@click.argument("output", type=click.Path(path_type=Path))
@click.option("--layout", type=click.Choice(["table", "list", "detail", "form"]), default=None,
              help="Override the configured layout.")
@click.option("--rules", "rules_file", type=click.Path(path_type=Path), default=None,
              help="Business rules YAML (required markers, patterns, enum options).")
@click.option("--overwrite", is_flag=True, help="Replace OUTPUT if it exists.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def generate(
    ctx: click.Context,
    config_file: Path,
    output: Path,
    layout: str | None,
    rules_file: Path | None,
    overwrite: bool,
    as_json: bool,
) -> None:
    """Generate an HTML view page from a view configuration."""
    from viewforge.core.use_cases.generate import generate_view

    result = generate_view(
        config_file,
        output,
        layout=layout,
        rules_path=rules_file,
        overwrite=overwrite,
        settings=ctx.obj["settings"],
        gap_log=gap_log_for(ctx),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if not result.ok:
        click.secho("❌ Generation failed:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")
        sys.exit(1)

    click.secho(f"✅ {result.component} ({result.layout})", fg="green", bold=True)
    click.echo(f"   → {result.output_path}")
    if result.gaps:
        click.secho(f"   ⚠️  {result.gaps} gap(s) recorded (see `viewforge gaps list`)", fg="yellow")


# ── Web ─────────────────────────────────────────────────────────


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address.")
@click.option("--port", default=8000, type=int, help="Port number.")
@click.pass_context
def web(ctx: click.Context, host: str, port: int) -> None:
    """Start the CRUD API server (in-memory store)."""
    from viewforge.ui.web.server import create_app, run_server

    app = create_app(settings=ctx.obj["settings"])
    click.secho(f"🌐 API on http://{host}:{port}/api/health", fg="cyan")
    run_server(app, host=host, port=port, debug=ctx.obj.get("debug", False))


from viewforge.ui.cli.busm import busm  # noqa: E402
from viewforge.ui.cli.gaps import gaps  # noqa: E402
from viewforge.ui.cli.rules import rules  # noqa: E402

cli.add_command(rules)
cli.add_command(busm)
cli.add_command(gaps)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
