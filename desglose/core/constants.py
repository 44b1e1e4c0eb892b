# desglose/core/constants.py
from typing import Final

# ==========================
# Puestos sin horas
# ==========================

#: Descanso.
POSITION_REST: Final[str] = "D"

#: Permiso.
POSITION_LEAVE: Final[str] = "P"

#: Baja.
POSITION_ABSENCE: Final[str] = "B"

#: Vacaciones.
POSITION_VACATION: Final[str] = "V"

#: Sin asignar (elegido explícitamente, distinto de la cadena vacía).
POSITION_UNSET: Final[str] = "--"

#: Puestos que nunca generan cálculo de horas.
NO_HOURS_POSITIONS: Final[tuple[str, ...]] = (
    POSITION_REST,
    POSITION_LEAVE,
    POSITION_ABSENCE,
    POSITION_VACATION,
    POSITION_UNSET,
)

#: Textos para mostrar los puestos sin horas.
NO_HOURS_DESCRIPTIONS: Final[dict[str, str]] = {
    POSITION_REST: "Descanso",
    POSITION_LEAVE: "Permiso",
    POSITION_ABSENCE: "Baja",
    POSITION_VACATION: "Vacaciones",
    POSITION_UNSET: "Sin asignar",
}

# ==========================
# Desgloses
# ==========================

#: Id fijo del desglose de horas nocturnas que se crea por defecto.
NIGHT_HOURS_BREAKDOWN_ID: Final[str] = "default-night-hours"

#: Color por defecto de un desglose sin color propio.
DEFAULT_BREAKDOWN_COLOR: Final[str] = "#6366f1"

# ==========================
# Tiempo
# ==========================

#: Segundos por hora, para convertir timedelta a horas.
SECONDS_PER_HOUR: Final[int] = 3600

# ==========================
# Columnas de la exportación
# ==========================

#: Columnas fijas del resumen que solo se exportan si tienen datos.
COLUMN_EXTRA: Final[str] = "extra"
COLUMN_NIGHT: Final[str] = "night"
COLUMN_HOLIDAY: Final[str] = "holiday"

#: Cabeceras en el orden en que aparecen en la hoja.
BASE_EXPORT_HEADERS: Final[tuple[str, ...]] = (
    "Fecha",
    "Puesto",
    "Turno (oficial)",
    "Jornada",
    "Horas Totales",
)

OPTIONAL_EXPORT_HEADERS: Final[dict[str, str]] = {
    COLUMN_EXTRA: "Horas Extras",
    COLUMN_NIGHT: "Horas Nocturnas",
    COLUMN_HOLIDAY: "Horas Festivas",
}
