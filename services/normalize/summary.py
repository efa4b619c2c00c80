"""
Security SME Summary Parser
Pulls reviewer, completion date and notes out of the free-text review summary
"""

import re
from typing import Optional

from shared.schemas.ticket import ReviewSummary

REVIEWED_BY_MARKER = "Reviewed by:"

REVIEWED_BY_PATTERN = re.compile(r"Reviewed by:[ \t]*([^\r\n]*)")
DATE_PATTERN = re.compile(r"Date: (\S*)")

# Signature compaction, applied in order
SLASH_SUFFIX_PATTERN = re.compile(r"([A-Z])/\S*")


def parse_summary(text: Optional[str]) -> ReviewSummary:
    """
    Parse a security SME summary.

    The summary is a free-form note that conventionally ends with a
    "Reviewed by:  NAME" line and may contain a "Date: X" token.
    Each field is extracted independently; anything missing is "".
    """
    if not text:
        return ReviewSummary()

    return ReviewSummary(
        date_completed=_parse_date(text),
        reviewed_by=_parse_reviewer(text),
        notes=_parse_notes(text),
    )


def _parse_notes(text: str) -> str:
    index = text.find(REVIEWED_BY_MARKER)
    if index == -1:
        return ""
    return text[:index].rstrip("\r\n")


def _parse_reviewer(text: str) -> str:
    match = REVIEWED_BY_PATTERN.search(text)
    if not match:
        return ""
    return compact_signature(match.group(1))


def _parse_date(text: str) -> str:
    match = DATE_PATTERN.search(text)
    return match.group(1) if match else ""


def compact_signature(signature: str) -> str:
    """
    Shorten a reviewer signature to initials.

    "John Smith/IT-SA" -> "J. S."
    """
    signature = _collapse_lowercase_runs(signature)
    signature = signature.replace("-SA", "")
    signature = SLASH_SUFFIX_PATTERN.sub(r"\1.", signature)
    return signature.strip()


def _collapse_lowercase_runs(text: str) -> str:
    """Replace each run from a lowercase letter up to the next whitespace with "." """
    parts = []
    index = 0
    while index < len(text):
        if text[index].islower():
            while index < len(text) and not text[index].isspace():
                index += 1
            parts.append(".")
        else:
            parts.append(text[index])
            index += 1
    return "".join(parts)
