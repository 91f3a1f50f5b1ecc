"""
Tests for the gap log and the generated-file writer.
"""

import json
from pathlib import Path

import pytest

from viewforge.core.models.gap import GapRecord
from viewforge.core.models.template import GeneratedFile
from viewforge.core.persistence.gap_log import GapLog, read_gap_log
from viewforge.core.persistence.output import OutputExistsError, write_generated_file


class TestGapLog:
    def test_in_memory(self):
        log = GapLog()
        gap = log.record("MISSING_RULES", impact="MEDIUM", entity="Invoice", expected="Rules")
        assert gap.id == 1
        assert gap.timestamp
        assert log.records == (gap,)
        assert log.path is None

    def test_ids_increase(self):
        log = GapLog()
        ids = [log.record("X").id for _ in range(3)]
        assert ids == [1, 2, 3]

    def test_appends_ndjson(self, tmp_state_dir: Path):
        path = tmp_state_dir / "gaps.ndjson"
        log = GapLog(path)
        log.record("MISSING_STATE", entity="Account", state="Deleted")
        log.record("MISSING_RULES", impact="MEDIUM", entity="Invoice", suggested_fix="Add rules")

        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        second = json.loads(lines[1])
        assert second["category"] == "MISSING_RULES"
        assert second["suggestedFix"] == "Add rules"
        assert "field" not in second

    def test_append_only_across_instances(self, tmp_state_dir: Path):
        path = tmp_state_dir / "gaps.ndjson"
        GapLog(path).record("A")
        gap = GapLog(path).record("B")
        assert gap.id == 2
        assert [g.category for g in read_gap_log(path)] == ["A", "B"]

    def test_creates_parent_dir(self, tmp_path: Path):
        path = tmp_path / "deep" / "dir" / "gaps.ndjson"
        GapLog(path).record("A")
        assert path.is_file()

    def test_filters_and_counts(self):
        log = GapLog()
        log.record("A", impact="LOW")
        log.record("B", impact="HIGH")
        log.record("C", impact="MEDIUM")
        assert [g.category for g in log.at_least("MEDIUM")] == ["B", "C"]
        assert log.counts() == {"LOW": 1, "MEDIUM": 1, "HIGH": 1, "CRITICAL": 0}

    def test_logs_warning(self, caplog):
        with caplog.at_level("WARNING"):
            GapLog().record("MISSING_RULES", entity="Invoice", expected="Business rules")
        assert "[MISSING_RULES] (Invoice) Business rules" in caplog.text

    def test_records_are_immutable(self):
        gap = GapLog().record("A")
        with pytest.raises(Exception):
            gap.category = "B"  # type: ignore[misc]


class TestReadGapLog:
    def test_missing_file(self, tmp_path: Path):
        assert read_gap_log(tmp_path / "none.ndjson") == []

    def test_skips_corrupt_lines(self, tmp_path: Path):
        path = tmp_path / "gaps.ndjson"
        good = GapRecord(id=1, category="A").model_dump_json(by_alias=True)
        path.write_text(f"{good}\nnot json\n\n{{\"id\": 2}}\n", encoding="utf-8")
        gaps = read_gap_log(path)
        assert [g.category for g in gaps] == ["A"]


class TestGapRecord:
    def test_location_and_summary(self):
        gap = GapRecord(category="MISSING_STATE", entity="Account", field="status", assumption="none")
        assert gap.location == "Account.status"
        assert gap.summary() == "[MISSING_STATE] (Account.status) none"
        assert GapRecord(category="X").summary() == "[X]"


class TestWriteGeneratedFile:
    def test_writes(self, tmp_path: Path):
        path = write_generated_file(tmp_path, GeneratedFile(path="out/a.html", content="<p/>"))
        assert path.read_text(encoding="utf-8") == "<p/>"

    def test_refuses_overwrite(self, tmp_path: Path):
        (tmp_path / "a.html").write_text("old")
        with pytest.raises(OutputExistsError):
            write_generated_file(tmp_path, GeneratedFile(path="a.html", content="new"))
        assert (tmp_path / "a.html").read_text() == "old"

    def test_overwrite_flag(self, tmp_path: Path):
        (tmp_path / "a.html").write_text("old")
        write_generated_file(tmp_path, GeneratedFile(path="a.html", content="new", overwrite=True))
        assert (tmp_path / "a.html").read_text() == "new"

    def test_requires_path(self, tmp_path: Path):
        with pytest.raises(ValueError):
            write_generated_file(tmp_path, GeneratedFile(path="", content="x"))
