"""
TDX Export - Error types
All fatal conditions derive from TicketExportError so the CLI can report them in one place
"""

from typing import Optional


class TicketExportError(Exception):
    """Base class for every fatal export error"""


class ConfigurationError(TicketExportError):
    """Missing or invalid configuration"""


class AuthError(ConfigurationError):
    """No API credential available"""


class HttpError(TicketExportError):
    """Non-success response from the TDX API"""

    def __init__(self, status_code: int, reason: str, path: str):
        self.status_code = status_code
        self.reason = reason
        self.path = path
        super().__init__(f"{status_code} {reason}: {path}")


class InputFileError(TicketExportError):
    """Ticket ID file is missing, unreadable or empty"""


class TicketIdFormatError(InputFileError):
    """A line in the ticket ID file is not an 8-digit ticket ID"""

    def __init__(self, line_number: int, value: str, path: Optional[str] = None):
        self.line_number = line_number
        self.value = value
        self.path = path
        where = f"{path}, line {line_number}" if path else f"line {line_number}"
        super().__init__(f"Invalid ticket ID {value!r} ({where}): expected 8 digits")


class TicketNormalizationError(TicketExportError):
    """Ticket payload could not be converted to a row"""

    def __init__(self, message: str, ticket_id: Optional[str] = None):
        self.ticket_id = ticket_id
        if ticket_id:
            message = f"Ticket {ticket_id}: {message}"
        super().__init__(message)
