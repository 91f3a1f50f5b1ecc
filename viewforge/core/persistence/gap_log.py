"""
Gap log — append-only record of assumptions made during generation.

Every gap is kept in memory for the current run and, when the log has a
path, appended as one JSON line to an NDJSON file. Entries are never
modified or deleted; a new run appends to the same file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from viewforge.core.models.gap import IMPACT_ORDER, GapRecord

logger = logging.getLogger(__name__)

# Default gap log location (relative to the workspace root)
DEFAULT_GAP_DIR = ".state"
DEFAULT_GAP_FILE = "gaps.ndjson"


class GapLog:
    """Append-only gap log.

    Each call to ``record()`` creates a GapRecord, logs it at WARNING and,
    if the log is file-backed, appends it to the NDJSON file.
    """

    def __init__(self, path: Path | None = None, log: logging.Logger | None = None):
        self._path = path
        self._log = log or logger
        self._records: list[GapRecord] = []
        self._offset = self._count_persisted()

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def records(self) -> tuple[GapRecord, ...]:
        """Gaps recorded by this instance, oldest first."""
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def record(self, category: str, *, impact: str = "LOW", **details: Any) -> GapRecord:
        """Create and append a gap.

        Args:
            category: Gap category, e.g. ``MISSING_RULES``.
            impact: LOW, MEDIUM, HIGH or CRITICAL.
            **details: Any of entity, field, state, expected, assumption,
                suggested_fix.

        Returns:
            The stored GapRecord.
        """
        gap = GapRecord(
            id=self._offset + len(self._records) + 1,
            category=category,
            impact=impact,
            **details,
        )
        self._records.append(gap)
        self._log.warning("Gap %s", gap.summary())
        self._append(gap)
        return gap

    def at_least(self, impact: str) -> list[GapRecord]:
        """Gaps at or above the given impact level."""
        floor = IMPACT_ORDER[impact]
        return [g for g in self._records if IMPACT_ORDER[g.impact] >= floor]

    def counts(self) -> dict[str, int]:
        """Number of gaps per impact level (all levels present)."""
        totals = {level: 0 for level in IMPACT_ORDER}
        for gap in self._records:
            totals[gap.impact] += 1
        return totals

    def to_dicts(self) -> list[dict[str, Any]]:
        return [g.model_dump(by_alias=True, exclude_none=True) for g in self._records]

    # ── File backing ────────────────────────────────────────────

    def _append(self, gap: GapRecord) -> None:
        if self._path is None:
            return

        self._path.parent.mkdir(parents=True, exist_ok=True)
        line = json.dumps(gap.model_dump(by_alias=True, exclude_none=True), ensure_ascii=False)

        try:
            with self._path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            self._log.error("Failed to write gap log %s: %s", self._path, e)

    def _count_persisted(self) -> int:
        if self._path is None or not self._path.is_file():
            return 0
        try:
            with self._path.open("r", encoding="utf-8") as f:
                return sum(1 for line in f if line.strip())
        except OSError:
            return 0


def read_gap_log(path: Path) -> list[GapRecord]:
    """Read every gap from an NDJSON gap log, oldest first.

    Corrupt lines are skipped with a warning.
    """
    if not path.is_file():
        return []

    gaps: list[GapRecord] = []
    try:
        with path.open("r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    gaps.append(GapRecord.model_validate(json.loads(line)))
                except (json.JSONDecodeError, ValueError) as e:
                    logger.warning("Skipping corrupt gap entry at line %d: %s", line_num, e)
    except OSError as e:
        logger.error("Failed to read gap log %s: %s", path, e)

    return gaps
