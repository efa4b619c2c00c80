"""
TDX Export - Ticket Schemas

Defines the NormalizedRow written to the spreadsheet and the parsed security review summary
"""

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

# Output date format for the spreadsheet
ROW_DATE_FORMAT = "%m/%d/%Y"


class ReviewSummary(BaseModel):
    """Fields parsed from the free-text security SME summary"""
    date_completed: str = ""
    reviewed_by: str = ""
    notes: str = ""


class NormalizedRow(BaseModel):
    """
    One ticket, flattened into the fixed spreadsheet columns.
    Built by TicketNormalizer from a raw TDX ticket payload.
    """
    # Core identifiers
    date: Optional[datetime] = None
    rush: str = ""
    id: Optional[int] = None

    # Request details
    vendor: Optional[str] = None
    status: Optional[str] = None
    product: Optional[str] = None
    description: str = ""

    # Classification
    is_renewal: str = "New"
    sw_type: str = ""
    info_class: str = ""
    quantity: Union[int, float] = 0
    tech_coordinator: str = ""
    requestor: Optional[str] = None
    risk: Optional[str] = None

    # Parsed from the security SME summary
    summary: ReviewSummary = Field(default_factory=ReviewSummary)

    def to_row(self) -> list[Any]:
        """Spreadsheet cells in column order, with the date as local MM/DD/YYYY"""
        return [
            self._local_date(),
            self.rush,
            self.id,
            self.vendor,
            self.status,
            self.product,
            self.description,
            self.is_renewal,
            self.sw_type,
            self.info_class,
            self.quantity,
            self.tech_coordinator,
            self.requestor,
            self.risk,
            self.summary.date_completed,
            self.summary.reviewed_by,
            self.summary.notes,
            "",  # placeholder column
        ]

    def _local_date(self) -> Optional[str]:
        if self.date is None:
            return None
        # naive dates are taken as already local
        date = self.date.astimezone() if self.date.tzinfo else self.date
        return date.strftime(ROW_DATE_FORMAT)


ROW_COLUMNS = [
    "date",
    "rush",
    "id",
    "vendor",
    "status",
    "product",
    "description",
    "is_renewal",
    "sw_type",
    "info_class",
    "quantity",
    "tech_coordinator",
    "requestor",
    "risk",
    "date_completed",
    "reviewed_by",
    "notes",
    "placeholder",
]
