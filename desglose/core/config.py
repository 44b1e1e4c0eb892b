# desglose/core/config.py

from typing import Final


# ==========================
# Formatos de fecha y hora
# ==========================

#: Formato de las horas de puestos y desgloses (por ejemplo "22:00").
#: Siempre 24 horas y con ceros a la izquierda.
TIME_FORMAT_HM: Final[str] = "%H:%M"

#: Formato de fecha dentro de la hoja exportada (dd/MM/yyyy).
DATE_FORMAT_EXPORT: Final[str] = "%d/%m/%Y"

#: Formato de fecha en el nombre del fichero exportado.
DATE_FORMAT_FILENAME: Final[str] = "%d-%m-%Y"


# ==========================
# Valores por defecto de horas
# ==========================

#: Umbral de horas extra cuando ni el puesto ni la configuración indican otro.
DEFAULT_STANDARD_DAILY_HOURS: Final[float] = 8.0

#: Intervalo nocturno por defecto (legacy, ahora lo define el desglose nocturno).
DEFAULT_NIGHT_START: Final[str] = "22:00"
DEFAULT_NIGHT_END: Final[str] = "06:00"


# ==========================
# Exportación
# ==========================

#: Nombre de la hoja en el fichero exportado.
EXPORT_SHEET_NAME: Final[str] = "Registro de Horas"

#: Decimales de los valores de horas exportados.
EXPORT_DECIMALS: Final[int] = 2
