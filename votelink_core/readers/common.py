"""Helpers shared by the chamber readers."""
import logging
import re
from typing import Any, Iterable, Optional

import xmltodict
from xml.parsers.expat import ExpatError

from votelink_core.exceptions import InvalidInputError, MalformedDocumentError
from votelink_core.bill_ids import BillReference, format_bill_number
from votelink_core.keys import make_bill_key, to_iso_date
from votelink_core.models import VotePosition

logger = logging.getLogger(__name__)

# Elements that repeat in roll-call feeds; parsed as lists even when a
# document carries just one of them
REPEATED_ELEMENTS = ("recorded-vote", "member", "item")

POSITION_SYNONYMS: dict[str, VotePosition] = {
    "yea": VotePosition.YEA,
    "aye": VotePosition.YEA,
    "yes": VotePosition.YEA,
    "y": VotePosition.YEA,
    "guilty": VotePosition.YEA,
    "nay": VotePosition.NAY,
    "no": VotePosition.NAY,
    "n": VotePosition.NAY,
    "not guilty": VotePosition.NAY,
    "present": VotePosition.PRESENT,
    "p": VotePosition.PRESENT,
    "not voting": VotePosition.NOT_VOTING,
    "absent": VotePosition.NOT_VOTING,
}

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

# House Clerk: "15-Feb-2024"
CLERK_DATE = re.compile(r"^(\d{1,2})-([A-Za-z]{3})-(\d{4})$")
# Senate: "February 15, 2024,  01:45 PM"
SENATE_DATE = re.compile(r"^([A-Za-z]+\.?\s+\d{1,2},?\s+\d{4})\b")


def as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def node_text(value: Any) -> str:
    """Text content of an xmltodict node (plain string or {'#text': ...})."""
    if value is None:
        return ""
    if isinstance(value, dict):
        value = value.get("#text", "")
    return str(value).strip()


def first_present(data: dict, *names: str) -> Any:
    """Value of the first key in names that holds something non-empty."""
    for name in names:
        value = data.get(name)
        if value not in (None, ""):
            return value
    return None


def parse_count(data: Optional[dict], *names: str) -> int:
    """First numeric count found under any of names; 0 when absent."""
    if not data:
        return 0
    value = first_present(data, *names)
    text = node_text(value)
    if not text:
        return 0
    try:
        return max(int(text), 0)
    except ValueError:
        logger.debug(f"Ignoring non-numeric count {text!r} for {names[0]}")
        return 0


def parse_optional_int(value: Any) -> Optional[int]:
    """'118' -> 118, '2nd' -> 2, '' -> None."""
    match = re.search(r"\d+", node_text(value))
    if not match:
        return None
    return int(match.group(0)) or None


def require_positive_int(value: Any, label: str, source: str) -> int:
    text = node_text(value)
    if not text.isdigit() or int(text) < 1:
        raise MalformedDocumentError(f"Invalid {label}: {text!r}", source=source)
    return int(text)


def normalize_position(raw: Any) -> VotePosition:
    """Map a raw vote cast to a VotePosition; anything unknown is Not Voting."""
    normalized = re.sub(r"\s+", " ", node_text(raw).lower())
    return POSITION_SYNONYMS.get(normalized, VotePosition.NOT_VOTING)


def parse_chamber_date(text: Any, source: str = "unknown") -> str:
    """
    Parse a chamber feed date to YYYY-MM-DD.

    Clerk tokens ("15-Feb-2024") and Senate prefixes ("February 15, 2024,
    01:45 PM") are read directly; anything else goes through the generic
    date parser.

    Raises:
        MalformedDocumentError: missing or unparsable date
    """
    raw = node_text(text)
    if not raw:
        raise MalformedDocumentError("Missing vote date", source=source)

    match = CLERK_DATE.match(raw)
    if match:
        day, month_name, year = match.groups()
        month = MONTHS.get(month_name.lower())
        if month is None:
            raise MalformedDocumentError(f"Invalid month: {month_name}", source=source)
        raw = f"{year}-{month:02d}-{int(day):02d}"
    else:
        match = SENATE_DATE.match(raw)
        if match:
            raw = match.group(1)

    try:
        return to_iso_date(raw)
    except InvalidInputError as exc:
        raise MalformedDocumentError(f"Invalid vote date: {raw!r}", source=source) from exc


def bill_fields(congress: Optional[int], reference: Optional[BillReference]) -> tuple[Optional[str], Optional[str]]:
    """(display bill number, bill key) for a vote; key needs a known congress."""
    if reference is None:
        return None, None

    display = format_bill_number(reference.bill_type, reference.bill_number)
    if congress is None:
        return display, None
    return display, make_bill_key(congress, reference.bill_type, reference.bill_number)


def decode_document(raw, source: str):
    if not isinstance(raw, bytes):
        return raw
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise MalformedDocumentError(f"Document is not UTF-8: {exc}", source=source) from exc


def load_xml(raw, root_names: Iterable[str], source: str) -> dict:
    """Parse XML text/bytes and return the first root element found in root_names."""
    raw = decode_document(raw, source)
    if not raw or not str(raw).strip():
        raise MalformedDocumentError("Empty document", source=source)

    try:
        parsed = xmltodict.parse(raw, force_list=REPEATED_ELEMENTS)
    except ExpatError as exc:
        raise MalformedDocumentError(f"Invalid XML: {exc}", source=source) from exc

    root_names = tuple(root_names)
    for name in root_names:
        root = parsed.get(name)
        if isinstance(root, dict):
            return root
    raise MalformedDocumentError(f"Missing {root_names[0]} element", source=source)
