"""Utility exports."""

from .helpers import (
    decode_data_uri,
    encode_data_uri,
    format_last_saved,
    format_month_year,
    sanitize_filename_part,
    split_hobbies,
)
from .logger import get_logger

__all__ = [
    "get_logger",
    "format_month_year",
    "format_last_saved",
    "split_hobbies",
    "sanitize_filename_part",
    "encode_data_uri",
    "decode_data_uri",
]
