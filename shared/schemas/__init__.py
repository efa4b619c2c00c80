"""TDX Export Shared Schemas"""

from .ticket import ROW_COLUMNS, NormalizedRow, ReviewSummary

__all__ = [
    "NormalizedRow",
    "ReviewSummary",
    "ROW_COLUMNS",
]
