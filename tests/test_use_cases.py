"""
Tests for the check, generate and module-build use cases.
"""

import json
from datetime import UTC, datetime
from pathlib import Path

import yaml

from viewforge.core.models.settings import Settings
from viewforge.core.persistence.gap_log import GapLog
from viewforge.core.use_cases.build_module import build_module_file
from viewforge.core.use_cases.config_check import check_view_config
from viewforge.core.use_cases.generate import generate_view

_NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)


def _write_view(tmp_path: Path, raw: dict, name: str = "view.json") -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(raw), encoding="utf-8")
    return path


def _without_timestamp(page: str) -> str:
    return "\n".join(line for line in page.splitlines() if 'name="generated-at"' not in line)


# ═══════════════════════════════════════════════════════════════════
#  check
# ═══════════════════════════════════════════════════════════════════


class TestCheckViewConfig:
    def test_valid(self, fixtures_dir: Path):
        result = check_view_config(fixtures_dir / "view_account_table.json")
        assert result.valid
        assert result.entity == "Account"
        assert result.layout == "table"
        assert result.field_count == 5
        assert result.warnings == []

    def test_reports_every_violation(self, tmp_path: Path):
        path = _write_view(tmp_path, {"fields": [{"field": "x"}], "layout": {"type": "kanban"}})
        result = check_view_config(path)
        assert not result.valid
        assert "Missing version field" in result.errors
        assert "Missing entity field" in result.errors
        assert "Invalid layout type: kanban" in result.errors
        assert len(result.errors) > 3

    def test_missing_file(self, tmp_path: Path):
        result = check_view_config(tmp_path / "nope.json")
        assert not result.valid
        assert result.errors[0].startswith("File not found")

    def test_warnings(self, tmp_path: Path, account_view: dict):
        account_view["fields"][1]["label"] = "Account Name"
        del account_view["layout"]["features"]
        result = check_view_config(_write_view(tmp_path, account_view))
        assert result.valid
        assert result.warnings == [
            "Duplicate field labels: Account Name",
            "No layout.features given; sorting, pagination and filtering are off",
        ]

    def test_to_dict(self, fixtures_dir: Path):
        data = check_view_config(fixtures_dir / "view_account_table.json").to_dict()
        assert data["valid"] is True
        assert data["config_path"].endswith("view_account_table.json")


# ═══════════════════════════════════════════════════════════════════
#  generate
# ═══════════════════════════════════════════════════════════════════


class TestGenerateView:
    def test_writes_page(self, fixtures_dir: Path, tmp_path: Path):
        out = tmp_path / "out" / "accounts.html"
        result = generate_view(fixtures_dir / "view_account_table.json", out, now=_NOW)
        assert result.ok, result.errors
        assert result.component == "AccountList"
        assert result.layout == "table"
        assert result.field_count == 5
        assert result.generated_at == _NOW.isoformat()

        page = out.read_text(encoding="utf-8")
        assert page.startswith("<!DOCTYPE html>")
        assert f'<meta name="generated-at" content="{_NOW.isoformat()}">' in page
        assert "<title>Account Table View</title>" in page
        assert '<meta name="view-path" content="Field Service &gt; Accounts' in page
        assert "<!-- Table View: Account -->" in page

    def test_only_timestamp_differs(self, fixtures_dir: Path, tmp_path: Path):
        source = fixtures_dir / "view_account_table.json"
        first = tmp_path / "a.html"
        second = tmp_path / "b.html"
        generate_view(source, first, now=_NOW)
        generate_view(source, second, now=datetime(2030, 6, 1, tzinfo=UTC))

        a = first.read_text(encoding="utf-8")
        b = second.read_text(encoding="utf-8")
        assert a != b
        assert _without_timestamp(a) == _without_timestamp(b)

    def test_existing_output_kept(self, fixtures_dir: Path, tmp_path: Path):
        out = tmp_path / "accounts.html"
        out.write_text("hand edited")
        result = generate_view(fixtures_dir / "view_account_table.json", out)
        assert not result.ok
        assert "already exists" in result.errors[0]
        assert out.read_text() == "hand edited"

    def test_overwrite(self, fixtures_dir: Path, tmp_path: Path):
        out = tmp_path / "accounts.html"
        out.write_text("hand edited")
        result = generate_view(fixtures_dir / "view_account_table.json", out, overwrite=True)
        assert result.ok
        assert out.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")

    def test_layout_override(self, fixtures_dir: Path, tmp_path: Path):
        out = tmp_path / "detail.html"
        result = generate_view(fixtures_dir / "view_account_table.json", out, layout="detail")
        assert result.ok
        assert result.component == "AccountDetail"
        assert "<legend>Account</legend>" in out.read_text(encoding="utf-8")

    def test_form_with_rules_records_gaps(self, fixtures_dir: Path, tmp_path: Path):
        log = GapLog()
        out = tmp_path / "form.html"
        result = generate_view(
            fixtures_dir / "view_account_table.json",
            out,
            layout="form",
            rules_path=fixtures_dir / "account_rules.yaml",
            gap_log=log,
        )
        assert result.ok
        assert result.gaps == len(log) > 0
        assert 'pattern="^ACC-\\d{3}$"' in out.read_text(encoding="utf-8")

    def test_invalid_config(self, tmp_path: Path):
        source = _write_view(tmp_path, {"fields": []})
        out = tmp_path / "x.html"
        result = generate_view(source, out)
        assert not result.ok
        assert "Missing entity.primary" in result.errors
        assert not out.exists()

    def test_bad_rules(self, fixtures_dir: Path, tmp_path: Path):
        rules = tmp_path / "rules.yaml"
        rules.write_text("module: {name: M}\n")
        out = tmp_path / "x.html"
        result = generate_view(fixtures_dir / "view_account_table.json", out, rules_path=rules)
        assert result.errors == ["No business_rules section found"]
        assert not out.exists()

    def test_settings_apply(self, fixtures_dir: Path, tmp_path: Path):
        out = tmp_path / "x.html"
        settings = Settings.model_validate({"sample_rows": 2})
        generate_view(fixtures_dir / "view_account_table.json", out, settings=settings)
        assert out.read_text(encoding="utf-8").count('<tr data-row="') == 2


# ═══════════════════════════════════════════════════════════════════
#  module build
# ═══════════════════════════════════════════════════════════════════


class TestBuildModuleFile:
    def test_writes_module(self, fixtures_dir: Path, tmp_path: Path):
        result = build_module_file(
            fixtures_dir / "busm_model.json",
            "Account",
            tmp_path,
            phase=1,
            rules_path=fixtures_dir / "account_rules.yaml",
        )
        assert result.ok, result.errors
        assert result.output_path.name == "account-phase1.yaml"
        data = yaml.safe_load(result.output_path.read_text(encoding="utf-8"))
        assert data["businessRules"]["stateTransitions"]["Active"] == ["Inactive", "Suspended"]
        assert result.to_dict()["field_count"] == 3

    def test_unknown_entity(self, fixtures_dir: Path, tmp_path: Path):
        result = build_module_file(fixtures_dir / "busm_model.json", "Invoice", tmp_path)
        assert not result.ok
        assert "Invoice" in result.errors[0]
        assert list(tmp_path.iterdir()) == []

    def test_second_build_refused(self, fixtures_dir: Path, tmp_path: Path):
        busm = fixtures_dir / "busm_model.json"
        assert build_module_file(busm, "Account", tmp_path).ok
        again = build_module_file(busm, "Account", tmp_path)
        assert not again.ok
        assert "already exists" in again.errors[0]

    def test_missing_busm(self, tmp_path: Path):
        result = build_module_file(tmp_path / "none.json", "Account", tmp_path)
        assert result.errors[0].startswith("File not found")
