"""Utility functions for the Fahrplan schedule viewer."""

from fahrplan.utils.logging import configure_logging, get_logger
from fahrplan.utils.time_utils import (
    format_duration,
    format_point,
    parse_duration,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "format_duration",
    "format_point",
    "parse_duration",
]
