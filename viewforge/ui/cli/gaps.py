"""
CLI commands for the gap log.
"""

from __future__ import annotations

import json

import click

_IMPACT_COLORS = {"LOW": "white", "MEDIUM": "yellow", "HIGH": "red", "CRITICAL": "magenta"}


@click.group()
def gaps() -> None:
    """Gap log — assumptions recorded during generation."""


def _read(ctx: click.Context):  # type: ignore[no-untyped-def]
    from viewforge.core.persistence.gap_log import read_gap_log

    return read_gap_log(ctx.obj["root"] / ctx.obj["settings"].gap_log)


@gaps.command("list")
@click.option("--impact", type=click.Choice(["LOW", "MEDIUM", "HIGH", "CRITICAL"]), default="LOW",
              help="Minimum impact to show.")
@click.option("-n", "count", default=50, type=int, help="Number of entries (newest last).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_gaps(ctx: click.Context, impact: str, count: int, as_json: bool) -> None:
    """Show recorded gaps."""
    from viewforge.core.models.gap import IMPACT_ORDER

    floor = IMPACT_ORDER[impact]
    entries = [g for g in _read(ctx) if IMPACT_ORDER[g.impact] >= floor][-count:]

    if as_json:
        click.echo(json.dumps(
            [g.model_dump(by_alias=True, exclude_none=True) for g in entries], indent=2,
        ))
        return

    if not entries:
        click.echo("No gaps recorded.")
        return

    for gap in entries:
        click.secho(f"{gap.id:>4} {gap.impact:<8}", fg=_IMPACT_COLORS[gap.impact], nl=False)
        click.echo(f" {gap.summary()}")
        if gap.suggested_fix:
            click.echo(f"      fix: {gap.suggested_fix}")


@gaps.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def summary(ctx: click.Context, as_json: bool) -> None:
    """Gap counts by impact and category."""
    from viewforge.core.models.gap import IMPACT_ORDER

    entries = _read(ctx)
    by_impact = {level: 0 for level in IMPACT_ORDER}
    by_category: dict[str, int] = {}
    for gap in entries:
        by_impact[gap.impact] += 1
        by_category[gap.category] = by_category.get(gap.category, 0) + 1

    if as_json:
        click.echo(json.dumps({
            "total": len(entries),
            "byImpact": by_impact,
            "byCategory": by_category,
        }, indent=2))
        return

    click.secho(f"📝 {len(entries)} gap(s)", fg="cyan", bold=True)
    for level, n in by_impact.items():
        if n:
            click.secho(f"   {level:<8} {n}", fg=_IMPACT_COLORS[level])
    for category, n in sorted(by_category.items()):
        click.echo(f"   • {category}: {n}")
