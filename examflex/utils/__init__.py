# Utils package
from .helpers import (
    ensure_directory,
    generate_timestamp_id,
    generate_temp_id,
    safe_filename,
    round2,
    clean_float,
    to_float,
    non_negative,
    roll_sort_key,
    format_mark,
    group_key,
)

__all__ = [
    "ensure_directory",
    "generate_timestamp_id",
    "generate_temp_id",
    "safe_filename",
    "round2",
    "clean_float",
    "to_float",
    "non_negative",
    "roll_sort_key",
    "format_mark",
    "group_key",
]
