"""
Generate use case — view configuration file in, HTML page out.

Steps: load the definition, parse it, optionally load business rules,
render the layout and wrap it in a standalone page. The page carries a
``generated-at`` meta tag; everything else depends only on the inputs.
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from viewforge.core.config.loader import ConfigError, load_document
from viewforge.core.config.schema import ConfigurationError
from viewforge.core.models.settings import Settings
from viewforge.core.models.template import GeneratedFile
from viewforge.core.models.view import ViewConfiguration
from viewforge.core.persistence.gap_log import GapLog
from viewforge.core.persistence.output import OutputExistsError, write_generated_file
from viewforge.core.services.business_rules import BusinessRulesParser, RuleSchemaError
from viewforge.core.services.field_enrichment import component_name
from viewforge.core.services.generators import get_generator
from viewforge.core.services.view_parser import parse_configuration

logger = logging.getLogger(__name__)

_PAGE_STYLE = """\
body { font-family: system-ui, sans-serif; margin: 2rem; color: #222; }
table { border-collapse: collapse; }
th, td { border: 1px solid #ccc; padding: 0.3rem 0.6rem; text-align: left; }
th[data-sortable] { cursor: pointer; }
fieldset.related-entity { border-style: dashed; }
.required { color: #b00; }"""


@dataclass
class GenerateResult:
    """Outcome of one generation run."""

    ok: bool = False
    output_path: Path | None = None
    component: str | None = None
    layout: str | None = None
    field_count: int = 0
    generated_at: str | None = None
    errors: list[str] = field(default_factory=list)
    gaps: int = 0

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "output_path": str(self.output_path) if self.output_path else None,
            "component": self.component,
            "layout": self.layout,
            "field_count": self.field_count,
            "generated_at": self.generated_at,
            "errors": self.errors,
            "gaps": self.gaps,
        }


def render_page(config: ViewConfiguration, markup: str, generated_at: str) -> str:
    """Wrap generated markup in a standalone HTML document."""
    title = html.escape(f"{config.entity.primary} {config.layout.type.capitalize()} View")
    return "\n".join([
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="utf-8">',
        f'<meta name="generated-at" content="{html.escape(generated_at)}">',
        f'<meta name="view-path" content="{html.escape(config.scope.path)}">',
        f"<title>{title}</title>",
        "<style>",
        _PAGE_STYLE,
        "</style>",
        "</head>",
        "<body>",
        markup.rstrip("\n"),
        "</body>",
        "</html>",
        "",
    ])


def render_view(
    config: ViewConfiguration,
    settings: Settings | None = None,
    rules: BusinessRulesParser | None = None,
) -> str:
    """Layout markup for a parsed configuration, without the page shell."""
    settings = settings or Settings()
    layout = config.layout.type
    generator = get_generator(
        layout,
        policy=settings.formatting.policy_for(layout),
        row_count=settings.sample_rows,
        rules=rules,
    )
    return generator.generate(config)


def generate_view(
    config_path: Path,
    output_path: Path,
    *,
    layout: str | None = None,
    rules_path: Path | None = None,
    overwrite: bool = False,
    settings: Settings | None = None,
    gap_log: GapLog | None = None,
    now: datetime | None = None,
) -> GenerateResult:
    """Generate one view page from a configuration file.

    Args:
        config_path: JSON or YAML view configuration.
        output_path: HTML file to write.
        layout: Override ``layout.type`` from the configuration.
        rules_path: Optional business rules YAML for form hints.
        overwrite: Replace ``output_path`` if it exists.
        settings: Formatting and sample-row settings.
        gap_log: Where rule gaps are recorded.
        now: Generation time (default: current UTC time).
    """
    result = GenerateResult()
    settings = settings or Settings()
    gap_log = gap_log if gap_log is not None else GapLog()
    gaps_before = len(gap_log)

    try:
        raw = load_document(config_path)
        if layout:
            raw.setdefault("layout", {})
            if isinstance(raw["layout"], dict):
                raw["layout"]["type"] = layout
        config = parse_configuration(raw, source=str(config_path))
    except ConfigError as e:
        result.errors.append(str(e))
        return result
    except ConfigurationError as e:
        result.errors.extend(e.violations)
        return result

    result.layout = config.layout.type
    result.component = component_name(config)
    result.field_count = len(config.fields)

    rules = None
    if rules_path is not None:
        rules = BusinessRulesParser(gap_log=gap_log)
        try:
            rules.load_rules(rules_path)
        except ConfigError as e:
            result.errors.append(str(e))
            return result
        except RuleSchemaError as e:
            result.errors.extend(e.errors)
            return result

    markup = render_view(config, settings, rules)
    generated_at = (now or datetime.now(UTC)).isoformat()
    page = render_page(config, markup, generated_at)

    file = GeneratedFile(
        path=output_path.name,
        content=page,
        overwrite=overwrite,
        reason=f"{result.component} ({result.layout})",
    )
    try:
        result.output_path = write_generated_file(output_path.parent, file)
    except OutputExistsError as e:
        result.errors.append(str(e))
        return result

    result.ok = True
    result.generated_at = generated_at
    result.gaps = len(gap_log) - gaps_before
    logger.info("Generated %s → %s", result.component, result.output_path)
    return result
