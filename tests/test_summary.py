# tests/test_summary.py
"""
Tests for the period summary.
"""

import datetime
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# ruff: noqa: E402
from desglose.core.hours import empty_summary, summarize
from desglose.core.models import BreakdownValue, TimeEntry

DAY = datetime.date(2025, 1, 8)


class TestSummarize:
    """Test summing entries of a period."""

    def test_empty_period(self):
        assert summarize([]) == empty_summary()
        assert summarize([]) == {"total": 0.0, "extra": 0.0, "night": 0.0, "holiday": 0.0, "custom": {}}

    def test_sums_every_column(self):
        entries = [
            TimeEntry(
                date=DAY,
                total_hours=8.0,
                extra_hours=0.0,
                holiday_hours=1.5,
                custom_hours={"night": BreakdownValue(hours=7.5)},
            ),
            TimeEntry(
                date=DAY + datetime.timedelta(days=1),
                total_hours=10.0,
                extra_hours=2.0,
                holiday_hours=0.0,
                custom_hours={"night": BreakdownValue(hours=3.0, manual=True), "reten": BreakdownValue(hours=1.25)},
            ),
        ]
        summary = summarize(entries)
        assert summary["total"] == 18.0
        assert summary["extra"] == 2.0
        assert summary["holiday"] == 1.5
        assert summary["night"] == 0.0
        assert summary["custom"] == {"night": 10.5, "reten": 1.25}

    def test_unassigned_entries_add_nothing(self):
        entries = [TimeEntry(date=DAY), TimeEntry(date=DAY, position="D")]
        summary = summarize(entries)
        assert summary["total"] == 0.0
        assert summary["custom"] == {}

    def test_no_rounding(self):
        entries = [TimeEntry(date=DAY, total_hours=1 / 3) for _ in range(3)]
        assert abs(summarize(entries)["total"] - 1.0) < 1e-9

    def test_empty_summary_is_fresh(self):
        first = empty_summary()
        first["custom"]["x"] = 1.0
        assert empty_summary()["custom"] == {}
