# tests/test_export.py
"""
Tests for the spreadsheet export.

Tests verify column selection, blank zero cells, the totals row and that the
generated bytes are a readable xlsx workbook.
"""

import datetime
import io
import sys
from pathlib import Path

import pytest
from openpyxl import load_workbook

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# ruff: noqa: E402
from conftest import entry_for
from desglose.core import tracker
from desglose.core.config import EXPORT_SHEET_NAME
from desglose.core.constants import BASE_EXPORT_HEADERS, NIGHT_HOURS_BREAKDOWN_ID
from desglose.core.export import (
    EmptyExportSet,
    build_export_table,
    column_has_data,
    export_filename,
    export_workbook,
    worker_display_name,
)
from desglose.core.models import PeriodConfig, WorkerData

DAY = datetime.date(2025, 1, 8)


@pytest.fixture
def export_state(state):
    """CN on DAY, long CM on the day after, DAY+1 is a holiday."""
    state = tracker.update_worker(state, first_name="Ana María", last_name="García")
    state = tracker.assign_position(state, entry_for(state, DAY).id, "CN")
    next_day = DAY + datetime.timedelta(days=1)
    state = tracker.assign_position(state, entry_for(state, next_day).id, "CM")
    state = tracker.edit_work_times(state, entry_for(state, next_day).id, "06:30", "16:30")
    return tracker.toggle_holiday(state, next_day)


def _table(state):
    return build_export_table(
        state.entries,
        tracker.get_summary(state),
        state.worker,
        state.period,
        state.breakdowns,
    )


class TestColumns:
    """Test which optional columns are exported."""

    def test_column_has_data(self, export_state):
        summary = tracker.get_summary(export_state)
        assert column_has_data(export_state.entries, summary, "extra")
        assert column_has_data(export_state.entries, summary, "holiday")
        assert column_has_data(export_state.entries, summary, NIGHT_HOURS_BREAKDOWN_ID)
        assert not column_has_data(export_state.entries, summary, "night")

    def test_headers(self, export_state):
        headers = _table(export_state)["headers"]
        assert headers == [*BASE_EXPORT_HEADERS, "Horas Extras", "Horas Festivas", "Horas Nocturnas"]

    def test_headers_without_optional_data(self, state):
        headers = _table(state)["headers"]
        assert headers == list(BASE_EXPORT_HEADERS)


class TestRows:
    """Test row contents."""

    def test_row_values(self, export_state):
        table = _table(export_state)
        assert len(table["rows"]) == 7

        cn_row = table["rows"][2]
        assert cn_row[:5] == ["08/01/2025", "CN", "22:30 - 06:30", "22:30 - 06:30", 8.0]
        # extra blank, holiday 6.5, night 7.5
        assert cn_row[5:] == ["", 6.5, 7.5]

        cm_row = table["rows"][3]
        assert cm_row[:5] == ["09/01/2025", "CM", "06:30 - 14:30", "06:30 - 16:30", 10.0]
        assert cm_row[5:] == [2.0, 10.0, ""]

    def test_unassigned_rows_are_blank(self, export_state):
        row = _table(export_state)["rows"][0]
        assert row == ["06/01/2025", "", "", "", "", "", "", ""]

    def test_totals_row(self, export_state):
        totals = _table(export_state)["totals"]
        assert totals == ["", "", "", "Σ Total", 18.0, 2.0, 16.5, 7.5]

    def test_title_and_period(self, export_state):
        table = _table(export_state)
        assert table["title"] == "Registro de Horas - Ana María García"
        assert table["period"] == "Período: 06/01/2025 - 12/01/2025"

    def test_no_entries_raises(self, state):
        with pytest.raises(EmptyExportSet):
            build_export_table([], tracker.get_summary(state), state.worker, state.period, state.breakdowns)

    def test_incomplete_period_raises(self, state):
        with pytest.raises(EmptyExportSet):
            build_export_table(
                state.entries,
                tracker.get_summary(state),
                state.worker,
                PeriodConfig(start_date=DAY),
                state.breakdowns,
            )


class TestNames:
    """Test worker name and file name formatting."""

    def test_default_worker_name(self):
        assert worker_display_name(WorkerData()) == "Usuario"

    def test_filename(self, export_state):
        assert export_filename(export_state.worker, export_state.period) == (
            "Ana_María_RegistroHoras_06-01-2025_12-01-2025.xlsx"
        )

    def test_filename_without_worker(self, state):
        assert export_filename(WorkerData(), state.period) == "Usuario_RegistroHoras_06-01-2025_12-01-2025.xlsx"


class TestWorkbook:
    """Test the generated xlsx file."""

    def test_workbook_layout(self, export_state):
        content = export_workbook(
            export_state.entries,
            tracker.get_summary(export_state),
            export_state.worker,
            export_state.period,
            export_state.breakdowns,
        )
        workbook = load_workbook(io.BytesIO(content))
        sheet = workbook[EXPORT_SHEET_NAME]

        assert sheet["A1"].value == "Registro de Horas - Ana María García"
        assert sheet["A2"].value == "Período: 06/01/2025 - 12/01/2025"
        assert sheet["A4"].value == "Fecha"
        assert sheet["H4"].value == "Horas Nocturnas"
        assert sheet["A7"].value == "08/01/2025"
        assert sheet["E7"].value == 8.0
        # 7 rows from row 5, one blank row, totals on row 13
        assert sheet["D13"].value == "Σ Total"
        assert sheet["E13"].value == 18.0
        assert sheet["E13"].number_format == "0.00"
