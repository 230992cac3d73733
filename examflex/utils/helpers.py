"""
Utility functions for the application
"""
import math
import secrets
import string
import logging
from pathlib import Path
from datetime import datetime
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

_TEMP_ID_ALPHABET = string.ascii_letters + string.digits


def ensure_directory(path: Union[str, Path]) -> Path:
    """Ensure a directory exists, create if not"""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def generate_timestamp_id(prefix: str = "") -> str:
    """Generate a unique ID based on timestamp"""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    if prefix:
        return f"{prefix}_{timestamp}"
    return timestamp


def generate_temp_id(prefix: str = "temp_", length: int = 12) -> str:
    """Opaque token for a stored mark entry config, e.g. temp_aB3dE5fG7hJ9"""
    return prefix + "".join(secrets.choice(_TEMP_ID_ALPHABET) for _ in range(length))


def safe_filename(filename: str) -> str:
    """Make filename safe for filesystem"""
    unsafe_chars = '<>:"/\\|?*[] '
    for char in unsafe_chars:
        filename = filename.replace(char, "_")
    return filename


def round2(value: float) -> float:
    """Round to two decimals, the precision every reported mark uses"""
    return round(float(value) + 0.0, 2)


def clean_float(value: float) -> float:
    """Drop float noise such as 31.499999999999996 before floor/ceil"""
    return round(float(value), 6)


def to_float(value: Any, default: float = 0.0) -> float:
    """Coerce a loosely typed number; None, '' and garbage become default"""
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number):
        return default
    return number


def non_negative(value: float) -> float:
    """Marks are never negative"""
    return max(0.0, float(value))


def roll_sort_key(roll: Any) -> float:
    """Numeric roll for sorting; missing or non-numeric rolls sort last"""
    return to_float(roll, default=math.inf)


def format_mark(value: float) -> str:
    """3.0 -> '3', 2.5 -> '2.5'"""
    return f"{float(value):g}"


def group_key(value: Optional[Any], unknown: str) -> str:
    """Dictionary key for a grouping attribute"""
    if value is None or value == "":
        return unknown
    return str(value)
