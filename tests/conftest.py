"""
Shared test fixtures and configuration.
"""

import json
from pathlib import Path

import pytest

from viewforge.core.persistence.gap_log import GapLog
from viewforge.core.services.business_rules import BusinessRulesParser
from viewforge.core.services.busm_reader import BusmReader


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def tmp_state_dir(tmp_path: Path) -> Path:
    """Return a temporary directory for state files."""
    state_dir = tmp_path / "state"
    state_dir.mkdir()
    return state_dir


@pytest.fixture
def account_view(fixtures_dir: Path) -> dict:
    """Raw account table view configuration."""
    return json.loads((fixtures_dir / "view_account_table.json").read_text(encoding="utf-8"))


@pytest.fixture
def gap_log() -> GapLog:
    """In-memory gap log."""
    return GapLog()


@pytest.fixture
def rules(fixtures_dir: Path, gap_log: GapLog) -> BusinessRulesParser:
    parser = BusinessRulesParser(gap_log=gap_log)
    parser.load_rules(fixtures_dir / "account_rules.yaml")
    return parser


@pytest.fixture
def busm(fixtures_dir: Path) -> BusmReader:
    reader = BusmReader()
    reader.load_busm(fixtures_dir / "busm_model.json")
    return reader
