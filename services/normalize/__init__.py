"""
TDX Normalize Service
Converts raw TDX ticket payloads to NormalizedRow format

Components:
- normalizer.py: TicketNormalizer for raw -> NormalizedRow conversion
- summary.py: parse_summary for the security SME summary text
"""

from .normalizer import TicketNormalizer, security_task_progress
from .summary import parse_summary

__all__ = ["TicketNormalizer", "security_task_progress", "parse_summary"]
