# desglose/core/storage.py
"""
Loading of the default catalogs shipped with the application.

Positions, breakdowns and the hours configuration live as JSON files in
desglose/data and are validated with the pydantic models on load.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from desglose.core.models import Breakdown, HoursConfig, Position

logger = logging.getLogger(__name__)

DATA_DIR = Path(os.getenv("DESGLOSE_DATA_DIR", Path(__file__).resolve().parent.parent / "data"))

POSITIONS_FILE = "positions.json"
BREAKDOWNS_FILE = "breakdowns.json"
HOURS_CONFIG_FILE = "hours_config.json"

REQUIRED_DATA_FILES = (POSITIONS_FILE, BREAKDOWNS_FILE, HOURS_CONFIG_FILE)


class StorageError(Exception):
    """General error type for problems loading data files."""

    pass


def _load_json(file_path: Path) -> list[Any] | dict[str, Any]:
    """
    Read and parse JSON with robust error handling.
    Args:
        file_path: Path to the JSON file
    Returns:
        Parsed JSON data as list or dict
    Raises:
        StorageError: If file cannot be read or JSON is invalid
    """
    try:
        raw = file_path.read_text(encoding="utf-8")
    except OSError as e:
        logger.exception("Failed to read JSON file %s", file_path)
        raise StorageError(f"Could not read JSON file {file_path}: {e}") from e

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.exception("Invalid JSON in file %s", file_path)
        raise StorageError(f"Invalid JSON in file {file_path}: {e}") from e


def load_positions(data_dir: Path = DATA_DIR) -> dict[str, Position]:
    """
    Load the default position catalog.
    Returns:
        Dict of position name -> Position
    Raises:
        StorageError: If file cannot be loaded or parsed
    """
    file_path = data_dir / POSITIONS_FILE
    data = _load_json(file_path)
    try:
        if not isinstance(data, dict):
            raise TypeError("Expected dict of positions")
        positions = {name: Position(**item) for name, item in data.items()}
    except (TypeError, ValidationError) as e:
        logger.exception("Failed to parse positions from %s", file_path)
        raise StorageError(f"Could not parse positions from {file_path}: {e}") from e
    return positions


def load_breakdowns(data_dir: Path = DATA_DIR) -> dict[str, Breakdown]:
    """
    Load the default breakdown definitions.
    Returns:
        Dict of breakdown id -> Breakdown
    Raises:
        StorageError: If file cannot be loaded or parsed
    """
    file_path = data_dir / BREAKDOWNS_FILE
    data = _load_json(file_path)
    try:
        if not isinstance(data, dict):
            raise TypeError("Expected dict of breakdowns")
        breakdowns = {breakdown_id: Breakdown(**item) for breakdown_id, item in data.items()}
    except (TypeError, ValidationError) as e:
        logger.exception("Failed to parse breakdowns from %s", file_path)
        raise StorageError(f"Could not parse breakdowns from {file_path}: {e}") from e
    return breakdowns


def load_hours_config(data_dir: Path = DATA_DIR) -> HoursConfig:
    """
    Load the global hours configuration.
    Returns:
        Hours configuration
    Raises:
        StorageError: If file cannot be loaded or parsed
    """
    file_path = data_dir / HOURS_CONFIG_FILE
    data = _load_json(file_path)
    try:
        if not isinstance(data, dict):
            raise TypeError("Expected hours configuration dict")
        hours_config = HoursConfig(**data)
    except (TypeError, ValidationError) as e:
        logger.exception("Failed to parse hours configuration from %s", file_path)
        raise StorageError(f"Could not parse hours configuration from {file_path}: {e}") from e
    return hours_config


def validate_required_data_files(data_dir: Path = DATA_DIR) -> None:
    """
    Validate that all required JSON files exist and contain valid JSON.

    Raises:
        StorageError: If any required file is missing or contains invalid JSON
    """
    for file_name in REQUIRED_DATA_FILES:
        path = data_dir / file_name
        if not path.exists():
            raise StorageError(
                f"Required data file missing: {path}\n"
                f"Set DESGLOSE_DATA_DIR or reinstall the package so the default catalogs are present."
            )
        _load_json(path)

    logger.info(f"All {len(REQUIRED_DATA_FILES)} required data files validated successfully")
