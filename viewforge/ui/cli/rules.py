"""
CLI commands for business rule documents.

Thin wrappers over ``viewforge.core.services.business_rules``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click


@click.group()
def rules() -> None:
    """Business rules: validate documents, query transitions."""


def _load(rules_file: Path, gap_log=None):  # type: ignore[no-untyped-def]
    from viewforge.core.config.loader import ConfigError
    from viewforge.core.services.business_rules import BusinessRulesParser, RuleSchemaError

    parser = BusinessRulesParser(gap_log=gap_log)
    try:
        parser.load_rules(rules_file)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)
    except RuleSchemaError as e:
        click.secho(f"❌ Invalid rule document {rules_file}:", fg="red", bold=True, err=True)
        for err in e.errors:
            click.echo(f"   • {err}", err=True)
        sys.exit(1)
    return parser


@rules.command("check")
@click.argument("rules_file", type=click.Path(path_type=Path))
@click.option("--busm", "busm_file", type=click.Path(path_type=Path), default=None,
              help="BUSM JSON to check transition targets against.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def check(ctx: click.Context, rules_file: Path, busm_file: Path | None, as_json: bool) -> None:
    """Validate a rule document and audit its state transitions."""
    from viewforge.core.config.loader import ConfigError
    from viewforge.core.services.busm_reader import BusmReader
    from viewforge.core.services.rule_audit import audit_transition_domains
    from viewforge.main import gap_log_for

    gap_log = gap_log_for(ctx)
    parser = _load(rules_file, gap_log)

    reader = None
    if busm_file is not None:
        reader = BusmReader()
        try:
            reader.load_busm(busm_file)
        except ConfigError as e:
            click.secho(f"❌ {e}", fg="red", err=True)
            sys.exit(1)

    findings = audit_transition_domains(parser, reader, gap_log=gap_log)

    if as_json:
        click.echo(json.dumps({
            "valid": True,
            "entities": parser.entities(),
            "gaps": [g.model_dump(by_alias=True, exclude_none=True) for g in findings],
        }, indent=2))
        return

    click.secho(f"✅ {rules_file} is structurally valid", fg="green", bold=True)
    for entity in parser.entities():
        summary = parser.get_entity_rules(entity) or {}
        click.echo(
            f"   • {entity}: {len(summary.get('required', []))} required, "
            f"{len(summary.get('states', {}))} state(s)"
        )
    if findings:
        click.echo()
        click.secho(f"⚠️  {len(findings)} transition(s) outside the state domain:", fg="yellow")
        for gap in findings:
            click.echo(f"   • {gap.entity}: {gap.assumption}")


@rules.command("transitions")
@click.argument("rules_file", type=click.Path(path_type=Path))
@click.argument("entity")
@click.argument("state")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def transitions(ctx: click.Context, rules_file: Path, entity: str, state: str, as_json: bool) -> None:
    """List the states ENTITY may move to from STATE."""
    from viewforge.main import gap_log_for

    parser = _load(rules_file, gap_log_for(ctx))
    allowed = parser.get_allowed_transitions(entity, state)

    if as_json:
        click.echo(json.dumps({"entity": entity, "state": state, "allowed": allowed}, indent=2))
        return

    if not allowed:
        click.echo(f"{entity}.{state}: no transitions (terminal or undefined)")
        return
    click.echo(f"{entity}.{state} →")
    for target in allowed:
        click.echo(f"   • {target}")
