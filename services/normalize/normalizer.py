"""
Ticket Normalizer
Converts raw TDX ticket payloads to NormalizedRow format
"""

import math
import re
from datetime import datetime
from typing import Any, Optional, Union

import structlog
from pydantic import ValidationError

from shared.config import AttributeIds
from shared.errors import TicketNormalizationError
from shared.schemas.ticket import NormalizedRow

from .summary import parse_summary

logger = structlog.get_logger()

# fromisoformat before 3.11 only accepts 3 or 6 fraction digits
FRACTION_PATTERN = re.compile(r"(:\d{2})\.(\d+)")

# Attribute display names
VENDOR = "Vendor"
RENEWAL = "Renewal"
SOFTWARE_TYPE = "Software Type"
INFO_CLASSIFICATION = "Information Classification Standard"
SECURITY_CLASSIFICATION = "DoIT Security Classification"
SECURITY_SUMMARY = "DoIT Security SME Summary"

# Name fallbacks for attributes normally looked up by numeric ID
NUM_STUDENTS = "Number of Students"
NUM_STAFF = "Number of Staff"
NUM_PUBLIC = "Number of Public"
NUM_OTHERS = "Number of Others"
TECH_COORDINATOR = "Technology Coordinator"

SECURITY_TASK_TITLE = "PCR Security"


class TicketNormalizer:
    """
    Normalizes raw TDX ticket data to the NormalizedRow schema.

    Features:
    - Looks up custom attributes by name or numeric ID
    - Remaps software type and information classification
    - Sums the four population counts into a quantity
    - Parses the security SME summary

    Missing attributes never raise; they yield empty values. A payload
    with the wrong overall shape raises TicketNormalizationError.
    """

    # First matching substring wins
    SOFTWARE_TYPE_MAP = [
        ("web application", "SaaS"),
        ("desktop application", "App"),
        ("mobile device application", "App"),
        ("system software", "SaaS"),
    ]

    def __init__(self, attribute_ids: Optional[AttributeIds] = None):
        self.attribute_ids = attribute_ids or AttributeIds()

    def normalize(self, raw: dict) -> NormalizedRow:
        """
        Normalize a raw ticket payload to NormalizedRow.

        Args:
            raw: Raw ticket dict from the TDX API

        Returns:
            Normalized row
        """
        if not isinstance(raw, dict):
            raise TicketNormalizationError(f"expected a JSON object, got {type(raw).__name__}")

        ticket_id = raw.get("ID")
        attributes = raw.get("Attributes") or []
        if not isinstance(attributes, list):
            raise TicketNormalizationError("Attributes is not a list", ticket_id=ticket_id)

        ids = self.attribute_ids
        quantity = _sum_numbers([
            self._value(attributes, ids.num_students, NUM_STUDENTS),
            self._value(attributes, ids.num_staff, NUM_STAFF),
            self._value(attributes, ids.num_public, NUM_PUBLIC),
            self._value(attributes, ids.num_others, NUM_OTHERS),
        ], ticket_id)

        try:
            return NormalizedRow(
                date=self._parse_datetime(raw.get("CreatedDate")),
                rush="",
                id=ticket_id,
                vendor=_value_text(attributes, name=VENDOR),
                status=raw.get("StatusName"),
                product=raw.get("Title"),
                description="",
                is_renewal="Renewal" if _value_text(attributes, name=RENEWAL) == "Yes" else "New",
                sw_type=self.map_software_type(_value_text(attributes, name=SOFTWARE_TYPE)),
                info_class=self._info_class(attributes, ticket_id),
                quantity=quantity,
                tech_coordinator=self._tech_coordinator(attributes, ticket_id),
                requestor=raw.get("RequestorName"),
                risk=_first_char(_value_text(attributes, name=SECURITY_CLASSIFICATION)),
                summary=parse_summary(_value_text(attributes, name=SECURITY_SUMMARY)),
            )
        except ValidationError as e:
            raise TicketNormalizationError(str(e), ticket_id=ticket_id) from e

    def map_software_type(self, text: Optional[str]) -> str:
        """Collapse the software type into SaaS / App, passing unknown text through"""
        if text is None:
            return ""
        lowered = text.lower()
        for needle, label in self.SOFTWARE_TYPE_MAP:
            if needle in lowered:
                return label
        return text

    def _info_class(self, attributes: list, ticket_id: Any) -> str:
        text = _value_text(attributes, name=INFO_CLASSIFICATION)
        if text is None:
            logger.warning("Missing attribute", ticket_id=ticket_id, attribute=INFO_CLASSIFICATION)
            return ""
        return map_info_class(text)

    def _tech_coordinator(self, attributes: list, ticket_id: Any) -> str:
        attr_id = self.attribute_ids.tech_coordinator
        text = _value_text(attributes, attr_id=attr_id, name=None if attr_id else TECH_COORDINATOR)
        if text is None:
            logger.warning("Missing attribute", ticket_id=ticket_id, attribute=TECH_COORDINATOR)
            return ""
        return extract_parenthesized(text)

    def _value(self, attributes: list, attr_id: Optional[int], name: str) -> Any:
        attr = find_attribute(attributes, attr_id=attr_id, name=None if attr_id else name)
        return attr.get("Value") if attr else None

    def _parse_datetime(self, value: Any) -> Optional[datetime]:
        """Parse an ISO timestamp, tolerating a trailing Z"""
        if not value:
            return None
        if isinstance(value, datetime):
            return value
        try:
            text = FRACTION_PATTERN.sub(_pad_fraction, value.replace("Z", "+00:00"))
            return datetime.fromisoformat(text)
        except (ValueError, AttributeError, TypeError):
            logger.warning("Unparseable ticket date", value=value)
            return None


def _pad_fraction(match: re.Match) -> str:
    return f"{match.group(1)}.{match.group(2)[:6].ljust(6, '0')}"


def find_attribute(
    attributes: list,
    attr_id: Optional[int] = None,
    name: Optional[str] = None,
) -> Optional[dict]:
    """Return the first attribute matching the ID (or name), or None"""
    for attr in attributes:
        if not isinstance(attr, dict):
            continue
        if attr_id is not None and attr.get("ID") == attr_id:
            return attr
        if name is not None and attr.get("Name") == name:
            return attr
    return None


def _value_text(attributes: list, attr_id: Optional[int] = None, name: Optional[str] = None) -> Optional[str]:
    attr = find_attribute(attributes, attr_id=attr_id, name=name)
    return attr.get("ValueText") if attr else None


def _first_char(text: Optional[str]) -> Optional[str]:
    return text[0] if text else None


def map_info_class(text: str) -> str:
    """
    Shorten the information classification.

    "No ..." -> "No Level 1,2,3"
    "Level 2 - Confidential" -> "Level 2" (level digit sits at offset 6)
    """
    if text.startswith("No"):
        return "No Level 1,2,3"
    if text.startswith("Level"):
        return ("Level " + text[6:7]).strip()
    return text


def extract_parenthesized(text: str) -> str:
    """Text between the first "(" and the next ")", e.g. "Jane Doe (jdoe)" -> "jdoe" """
    start = text.find("(")
    if start == -1:
        return ""
    end = text.find(")", start + 1)
    if end == -1:
        return ""
    return text[start + 1:end]


def to_number(value: Any) -> Union[int, float, None]:
    """Coerce an attribute value to a number; None when missing or not numeric"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    text = str(value).strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def _sum_numbers(values: list, ticket_id: Any) -> Union[int, float]:
    total = 0
    for value in values:
        number = to_number(value)
        if number is None:
            if value not in (None, ""):
                logger.warning("Non-numeric quantity", ticket_id=ticket_id, value=value)
            continue
        total += number
    return total


def security_task_progress(raw: dict, title: str = SECURITY_TASK_TITLE) -> Optional[int]:
    """PercentComplete of the named ticket task, or None if there is no such task"""
    for task in raw.get("Tasks") or []:
        if isinstance(task, dict) and task.get("Title") == title:
            return task.get("PercentComplete")
    return None
