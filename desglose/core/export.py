"""Exportación del registro de horas a hoja de cálculo."""

import io
import logging
import re
from collections.abc import Sequence
from typing import TypedDict

import pandas as pd
from openpyxl.utils import get_column_letter

from desglose.core.config import (
    DATE_FORMAT_EXPORT,
    DATE_FORMAT_FILENAME,
    EXPORT_DECIMALS,
    EXPORT_SHEET_NAME,
)
from desglose.core.constants import (
    BASE_EXPORT_HEADERS,
    COLUMN_EXTRA,
    COLUMN_HOLIDAY,
    COLUMN_NIGHT,
    OPTIONAL_EXPORT_HEADERS,
)
from desglose.core.models import Breakdown, PeriodConfig, TimeEntry, WorkerData
from desglose.core.types import PeriodSummary

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

Cell = str | float

# Campo de TimeEntry para cada columna fija opcional
_ENTRY_FIELDS: dict[str, str] = {
    COLUMN_EXTRA: "extra_hours",
    COLUMN_NIGHT: "night_hours",
    COLUMN_HOLIDAY: "holiday_hours",
}


class EmptyExportSet(Exception):
    """Nothing to export: no entries or no complete period."""


class ExportTable(TypedDict):
    """Contenido de la hoja, ya decidido qué columnas van."""

    title: str
    period: str
    headers: list[str]
    rows: list[list[Cell]]
    totals: list[Cell]


def _entry_value(entry: TimeEntry, column_key: str) -> float:
    field = _ENTRY_FIELDS.get(column_key)
    if field is not None:
        return getattr(entry, field)
    value = entry.custom_hours.get(column_key)
    return value.hours if value is not None else 0.0


def _summary_value(summary: PeriodSummary, column_key: str) -> float:
    if column_key in _ENTRY_FIELDS:
        return summary[column_key]
    return summary["custom"].get(column_key, 0.0)


def column_has_data(entries: Sequence[TimeEntry], summary: PeriodSummary, column_key: str) -> bool:
    """
    Decide si una columna opcional entra en la exportación.

    Args:
        entries: Entradas del período
        summary: Resumen del período
        column_key: "extra", "night", "holiday" o el id de un desglose

    Returns:
        True si alguna entrada o el resumen tienen un valor positivo
    """
    return any(_entry_value(e, column_key) > 0 for e in entries) or _summary_value(summary, column_key) > 0


def _hours_cell(value: float) -> Cell:
    return round(value, EXPORT_DECIMALS) if value > 0 else ""


def _clock_range(start: str, end: str) -> str:
    return f"{start} - {end}" if start and end else ""


def worker_display_name(worker: WorkerData) -> str:
    return " ".join(p for p in (worker.first_name, worker.last_name, worker.second_last_name) if p) or "Usuario"


def build_export_table(
    entries: Sequence[TimeEntry],
    summary: PeriodSummary,
    worker: WorkerData,
    period: PeriodConfig,
    breakdowns: dict[str, Breakdown],
) -> ExportTable:
    """
    Construye filas y cabeceras de la hoja.

    Las columnas fijas van siempre; extra, nocturnas, festivas y cada desglose
    solo si tienen datos. Los valores a cero quedan en blanco.

    Raises:
        EmptyExportSet: Si no hay entradas o el período no está completo
    """
    if not entries or not period.is_complete:
        raise EmptyExportSet("No hay datos para exportar o no se ha seleccionado un período válido.")

    optional_keys = [key for key in OPTIONAL_EXPORT_HEADERS if column_has_data(entries, summary, key)]
    breakdown_keys = [key for key in breakdowns if column_has_data(entries, summary, key)]
    value_keys = optional_keys + breakdown_keys

    headers = (
        list(BASE_EXPORT_HEADERS)
        + [OPTIONAL_EXPORT_HEADERS[key] for key in optional_keys]
        + [breakdowns[key].name for key in breakdown_keys]
    )

    rows: list[list[Cell]] = []
    for entry in entries:
        row: list[Cell] = [
            entry.date.strftime(DATE_FORMAT_EXPORT),
            entry.position,
            _clock_range(entry.shift_start, entry.shift_end),
            _clock_range(entry.work_start, entry.work_end),
            _hours_cell(entry.total_hours),
        ]
        row.extend(_hours_cell(_entry_value(entry, key)) for key in value_keys)
        rows.append(row)

    totals: list[Cell] = ["", "", "", "Σ Total", round(summary["total"], EXPORT_DECIMALS)]
    totals.extend(_hours_cell(_summary_value(summary, key)) for key in value_keys)

    return {
        "title": f"Registro de Horas - {worker_display_name(worker)}",
        "period": (
            f"Período: {period.start_date.strftime(DATE_FORMAT_EXPORT)} - "
            f"{period.end_date.strftime(DATE_FORMAT_EXPORT)}"
        ),
        "headers": headers,
        "rows": rows,
        "totals": totals,
    }


def export_filename(worker: WorkerData, period: PeriodConfig) -> str:
    name = re.sub(r"\s+", "_", worker.first_name.strip() or "Usuario")
    start = period.start_date.strftime(DATE_FORMAT_FILENAME)
    end = period.end_date.strftime(DATE_FORMAT_FILENAME)
    return f"{name}_RegistroHoras_{start}_{end}.xlsx"


def export_workbook(
    entries: Sequence[TimeEntry],
    summary: PeriodSummary,
    worker: WorkerData,
    period: PeriodConfig,
    breakdowns: dict[str, Breakdown],
) -> bytes:
    """
    Genera el fichero xlsx del período.

    Filas 1-2: título y período, fila 4: cabeceras, después una fila por día,
    una fila vacía y la fila de totales.

    Returns:
        Contenido del fichero xlsx

    Raises:
        EmptyExportSet: Si no hay nada que exportar
    """
    table = build_export_table(entries, summary, worker, period, breakdowns)

    df = pd.DataFrame(table["rows"], columns=table["headers"])

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=EXPORT_SHEET_NAME, startrow=3)

        worksheet = writer.sheets[EXPORT_SHEET_NAME]
        worksheet.cell(row=1, column=1, value=table["title"])
        worksheet.cell(row=2, column=1, value=table["period"])

        totals_row = 4 + len(table["rows"]) + 2
        for column, value in enumerate(table["totals"], start=1):
            worksheet.cell(row=totals_row, column=column, value=value)

        for row in worksheet.iter_rows(min_row=5):
            for cell in row:
                if isinstance(cell.value, float):
                    cell.number_format = "0.00"

        # Ancho de columnas según cabecera y datos
        for index, header in enumerate(table["headers"], start=1):
            max_length = len(header)
            for row in table["rows"]:
                max_length = max(max_length, len(str(row[index - 1])))
            worksheet.column_dimensions[get_column_letter(index)].width = max_length + 2

    logger.info("Exported %d entries with %d columns", len(table["rows"]), len(table["headers"]))
    return output.getvalue()
