"""
Tests for document loading and viewforge.yml settings.
"""

import textwrap
from pathlib import Path

import pytest

from viewforge.core.config.loader import (
    ConfigError,
    find_settings_file,
    load_document,
    load_settings,
    settings_root,
)
from viewforge.core.models.settings import Settings


class TestLoadDocument:
    def test_json(self, fixtures_dir: Path):
        data = load_document(fixtures_dir / "view_account_table.json")
        assert data["entity"]["primary"] == "Account"

    def test_yaml(self, fixtures_dir: Path):
        data = load_document(fixtures_dir / "account_rules.yaml")
        assert data["module"]["name"] == "Account Management"

    def test_missing(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="File not found"):
            load_document(tmp_path / "nope.json")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "bad.yml"
        path.write_text("key: [broken")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_document(path)

    def test_top_level_must_be_mapping(self, tmp_path: Path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError, match="Expected a mapping"):
            load_document(path)


class TestSettings:
    def test_defaults_without_file(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        settings = load_settings()
        assert settings == Settings()
        assert settings.output_dir == "generated"
        assert settings.gap_log == ".state/gaps.ndjson"
        assert settings.sample_rows == 5
        assert settings.api.page_size == 20

    def test_load_file(self, tmp_path: Path):
        path = tmp_path / "viewforge.yml"
        path.write_text(textwrap.dedent("""\
            output_dir: out
            sample_rows: 3
            formatting:
              null_placeholder: "-"
              boolean_style:
                table: words
            api:
              page_size: 10
        """))
        settings = load_settings(path)
        assert settings.output_dir == "out"
        assert settings.sample_rows == 3
        assert settings.formatting.policy_for("table").boolean_style == "words"
        assert settings.formatting.policy_for("table").null_placeholder == "-"
        assert settings.api.page_size == 10
        assert settings.api.max_page_size == 100

    def test_invalid_values(self, tmp_path: Path):
        path = tmp_path / "viewforge.yml"
        path.write_text("formatting:\n  boolean_style:\n    table: emoji\n")
        with pytest.raises(ConfigError, match="Invalid settings"):
            load_settings(path)

    def test_explicit_missing_path(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_settings(tmp_path / "viewforge.yml")

    def test_find_walks_up(self, tmp_path: Path):
        (tmp_path / "viewforge.yml").write_text("sample_rows: 2\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_settings_file(nested) == (tmp_path / "viewforge.yml").resolve()

    def test_settings_root(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "viewforge.yml"
        assert settings_root(path) == tmp_path.resolve()
        monkeypatch.chdir(tmp_path)
        assert settings_root(None) == Path.cwd()
