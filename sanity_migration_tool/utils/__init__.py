"""
Utility helpers used by the migration tool.

This subpackage exposes structured event logging, the batch report, the
interactive selector, pre-flight checks and id map generation.
"""

from .errors import ERRORS, MigrationReport, report_error, report_ok
from .id_map import generate_id_map_csv
from .prompts import get_user_selection

__all__ = [
    "ERRORS",
    "MigrationReport",
    "report_error",
    "report_ok",
    "generate_id_map_csv",
    "get_user_selection",
]
