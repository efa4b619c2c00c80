"""
Ticket ID list reader
"""

import re
from pathlib import Path
from typing import Optional, Union

import structlog

from shared.errors import InputFileError, TicketIdFormatError

logger = structlog.get_logger()

TICKET_ID_PATTERN = re.compile(r"[0-9]{8}")
LINE_BREAK_PATTERN = re.compile(r"\r?\n")


def validate_ticket_id(value: str, line_number: int, source: Optional[str] = None) -> str:
    """Return the ID if it is exactly 8 digits, else raise TicketIdFormatError"""
    if not TICKET_ID_PATTERN.fullmatch(value):
        raise TicketIdFormatError(line_number, value, source)
    return value


def parse_ticket_ids(text: str, source: Optional[str] = None) -> list[str]:
    """
    Parse one ticket ID per line.

    Works with \\n and \\r\\n line endings. Blank lines are skipped,
    duplicates are kept in order.
    """
    ticket_ids = []
    for line_number, line in enumerate(LINE_BREAK_PATTERN.split(text), start=1):
        value = line.strip()
        if not value:
            continue
        ticket_ids.append(validate_ticket_id(value, line_number, source))

    if not ticket_ids:
        raise InputFileError(f"No ticket IDs found in {source or 'input'}")
    return ticket_ids


def read_ticket_ids(path: Union[str, Path]) -> list[str]:
    """Read and validate the ticket ID file (UTF-8)"""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise InputFileError(f"Ticket ID file not found: {path}")
    except (OSError, UnicodeDecodeError) as e:
        raise InputFileError(f"Could not read {path}: {e}")

    ticket_ids = parse_ticket_ids(text, source=str(path))
    logger.info("Loaded ticket IDs", file=str(path), count=len(ticket_ids))
    return ticket_ids
