"""
TDX Export Service
Turns normalized rows into the output spreadsheet

Components:
- ticket_ids.py: Reader/validator for the ticket ID list
- spreadsheet.py: SpreadsheetWriter with busy-file retry
- progress.py: ProgressReporter console line
"""

from .progress import ProgressReporter
from .spreadsheet import SpreadsheetWriter
from .ticket_ids import parse_ticket_ids, read_ticket_ids

__all__ = ["ProgressReporter", "SpreadsheetWriter", "parse_ticket_ids", "read_ticket_ids"]
