"""
Reporting — JSON отчёты ledger и агрегата.
"""

from src.reporting.json_reports import (
    contributions_to_report,
    entries_by_digest,
    entry_to_report,
    save_json,
    save_reports,
)

__all__ = [
    "contributions_to_report",
    "entries_by_digest",
    "entry_to_report",
    "save_json",
    "save_reports",
]
