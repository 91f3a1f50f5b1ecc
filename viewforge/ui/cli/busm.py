"""
CLI commands for the BUSM and module builds.

Thin wrappers over ``viewforge.core.services.busm_reader`` and
``viewforge.core.use_cases.build_module``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click


@click.group()
def busm() -> None:
    """BUSM — summarize the model, list phase fields, build modules."""


def _reader(busm_file: Path):  # type: ignore[no-untyped-def]
    from viewforge.core.config.loader import ConfigError
    from viewforge.core.services.busm_reader import BusmReader

    reader = BusmReader()
    try:
        reader.load_busm(busm_file)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)
    return reader


@busm.command()
@click.argument("busm_file", type=click.Path(path_type=Path))
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def summary(busm_file: Path, as_json: bool) -> None:
    """Entity, relationship and enum counts."""
    info = _reader(busm_file).summary()

    if as_json:
        click.echo(json.dumps(info, indent=2))
        return

    click.secho(f"📘 BUSM {info['version']}", fg="cyan", bold=True)
    click.echo(f"   Entities:      {info['entityCount']}")
    click.echo(f"   Relationships: {info['relationshipCount']}")
    click.echo(f"   Enums:         {info['enumCount']}")
    for name, ent in info["entities"].items():
        click.echo(f"     • {name} ({ent['fieldCount']} fields, pk={ent['primaryKey'] or '?'})")


@busm.command("fields")
@click.argument("busm_file", type=click.Path(path_type=Path))
@click.argument("entity")
@click.option("--phase", type=int, default=None, help="Only fields included in this phase.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def list_fields(busm_file: Path, entity: str, phase: int | None, as_json: bool) -> None:
    """Fields of ENTITY, optionally filtered by phase."""
    from viewforge.core.services.busm_reader import EntityNotFoundError, effective_phase

    reader = _reader(busm_file)
    try:
        selected = (
            reader.filter_fields_for_phase(entity, phase)
            if phase is not None
            else reader.get_fields(entity)
        )
    except EntityNotFoundError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([
            {**f.model_dump(by_alias=True, exclude_none=True), "effectivePhase": effective_phase(f)}
            for f in selected
        ], indent=2))
        return

    label = f" (phase {phase})" if phase is not None else ""
    click.secho(f"📋 {entity}{label}: {len(selected)} field(s)", fg="cyan", bold=True)
    for f in selected:
        req = " *" if f.required else ""
        click.echo(f"   • {f.name}{req}: {f.type}  [phase {effective_phase(f)}]")


@busm.command("module")
@click.argument("busm_file", type=click.Path(path_type=Path))
@click.argument("entity")
@click.argument("out_dir", type=click.Path(path_type=Path))
@click.option("--phase", type=int, default=1, help="Phase to build (default: 1).")
@click.option("--rules", "rules_file", type=click.Path(path_type=Path), default=None,
              help="Business rules YAML supplying state transitions.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def module(
    ctx: click.Context,
    busm_file: Path,
    entity: str,
    out_dir: Path,
    phase: int,
    rules_file: Path | None,
    as_json: bool,
) -> None:
    """Write the module definition of ENTITY for a phase (once)."""
    from viewforge.core.use_cases.build_module import build_module_file
    from viewforge.main import gap_log_for

    result = build_module_file(
        busm_file, entity, out_dir,
        phase=phase, rules_path=rules_file, gap_log=gap_log_for(ctx),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if not result.ok or result.module is None:
        click.secho("❌ Module build failed:", fg="red", bold=True)
        for err in result.errors or ["no module definition was produced"]:
            click.echo(f"   • {err}")
        sys.exit(1)

    click.secho(f"✅ {result.module.module.id} (phase {phase})", fg="green", bold=True)
    click.echo(f"   Fields: {len(result.module.entity.fields)}")
    click.echo(f"   → {result.output_path}")
    if result.gaps:
        click.secho(f"   ⚠️  {result.gaps} gap(s) recorded", fg="yellow")
