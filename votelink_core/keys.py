"""
Deterministic key system for votes and bills.

Vote key:  chamber:YYYY-MM-DD:roll_number   e.g. "house:2024-02-15:50"
Bill key:  congress:bill_type:bill_number   e.g. "118:hr:2766"

Design:
- Keys are plain strings so they can be used directly as dict keys,
  database columns and log fields
- Every input is normalized before formatting, so "House", "HOUSE" and
  "house" (or "15-Feb-2024" and "2024-02-15") produce the same key
- Invalid input raises InvalidInputError instead of producing a key that
  would silently never match
"""
import re
from datetime import date, datetime
from typing import NamedTuple, Optional, Union

from dateutil import parser as date_parser

from votelink_core.exceptions import InvalidInputError

CHAMBERS: tuple[str, ...] = ("house", "senate")

BILL_TYPES: tuple[str, ...] = (
    "hr", "s", "hjres", "sjres", "hconres", "sconres", "hres", "sres",
)

DateLike = Union[str, date, datetime]

# Two defaults that differ in year, month and day; see to_iso_date
PARSER_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))

# Roll call mentions inside BILLSTATUS action text, e.g.
#   "On passage Passed by recorded vote: 300 - 100 (Roll no. 50)."
#   "Passed Senate by Yea-Nay Vote. 67 - 32. Record Vote Number: 45."
ROLL_NUMBER_PATTERNS = [
    re.compile(r"\bRoll\s+no\.?\s*(\d+)", re.IGNORECASE),
    re.compile(r"\bRoll\s+Call\s+(?:no\.?\s*)?(\d+)", re.IGNORECASE),
    re.compile(r"\bRecord\s+Vote\s+(?:(?:no|number)\.?\s*:?\s*)?(\d+)", re.IGNORECASE),
]


class VoteKeyParts(NamedTuple):
    chamber: str
    date: str
    roll_number: int


class BillKeyParts(NamedTuple):
    congress: int
    bill_type: str
    bill_number: int


def to_iso_date(value: DateLike) -> str:
    """
    Normalize a date-like value to a calendar date string (YYYY-MM-DD).

    ISO strings are tried first; anything else goes through dateutil's
    generic parser. Time of day and timezone are dropped without shifting
    the calendar date. Text missing its year, month or day is rejected
    rather than completed from today.

    Raises:
        InvalidInputError: value cannot be read as a date
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"Invalid date: {value!r}")

    text = value.strip()
    try:
        return datetime.fromisoformat(text).date().isoformat()
    except ValueError:
        pass

    try:
        parsed = [date_parser.parse(text, default=default).date() for default in PARSER_DEFAULTS]
    except (ValueError, OverflowError) as exc:
        raise InvalidInputError(f"Invalid date: {value!r}") from exc

    # dateutil fills missing fields from the default; differing results mean
    # the text lacked a year, month or day
    if parsed[0] != parsed[1]:
        raise InvalidInputError(f"Incomplete date: {value!r}")
    return parsed[0].isoformat()


def to_date(value: DateLike) -> date:
    return date.fromisoformat(to_iso_date(value))


def days_between(start: DateLike, end: DateLike) -> int:
    """Signed day difference end - start."""
    return (to_date(end) - to_date(start)).days


def _positive_int(value, label: str) -> int:
    if isinstance(value, bool):
        raise InvalidInputError(f"Invalid {label}: {value!r}")
    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
    else:
        raise InvalidInputError(f"Invalid {label}: {value!r}")

    if number < 1:
        raise InvalidInputError(f"Invalid {label}: {value!r}")
    return number


def normalize_chamber(chamber: str) -> str:
    normalized = str(chamber or "").strip().lower()
    if normalized not in CHAMBERS:
        raise InvalidInputError(
            f"Invalid chamber: {chamber!r}. Must be one of: {', '.join(CHAMBERS)}"
        )
    return normalized


def normalize_bill_type(bill_type: str) -> str:
    """'H.R.' -> 'hr', 'S. J. Res.' -> 'sjres'."""
    normalized = re.sub(r"[^a-z]", "", str(bill_type or "").lower())
    if normalized not in BILL_TYPES:
        raise InvalidInputError(
            f"Invalid bill type: {bill_type!r}. Must be one of: {', '.join(BILL_TYPES)}"
        )
    return normalized


def make_vote_key(chamber: str, vote_date: DateLike, roll_number) -> str:
    """
    Build the canonical vote key.

    Args:
        chamber: 'house' or 'senate' (any case)
        vote_date: date, datetime or date string
        roll_number: positive integer or numeric string

    Returns:
        Key in the form chamber:YYYY-MM-DD:roll_number
    """
    normalized_chamber = normalize_chamber(chamber)
    iso_date = to_iso_date(vote_date)
    roll = _positive_int(roll_number, "roll number")
    return f"{normalized_chamber}:{iso_date}:{roll}"


def make_bill_key(congress, bill_type: str, bill_number) -> str:
    """
    Build the canonical bill key.

    Args:
        congress: positive congress number (e.g. 118)
        bill_type: one of BILL_TYPES, punctuation and case are ignored
        bill_number: positive bill number

    Returns:
        Key in the form congress:bill_type:bill_number
    """
    congress_num = _positive_int(congress, "congress number")
    normalized_type = normalize_bill_type(bill_type)
    number = _positive_int(bill_number, "bill number")
    return f"{congress_num}:{normalized_type}:{number}"


def parse_vote_key(vote_key: str) -> VoteKeyParts:
    parts = str(vote_key or "").split(":")
    if len(parts) != 3:
        raise InvalidInputError(f"Invalid vote key format: {vote_key!r}")

    chamber, iso_date, roll = parts
    try:
        parsed_date = date.fromisoformat(iso_date)
    except ValueError as exc:
        raise InvalidInputError(f"Invalid vote key date: {vote_key!r}") from exc

    return VoteKeyParts(
        chamber=normalize_chamber(chamber),
        date=parsed_date.isoformat(),
        roll_number=_positive_int(roll, "roll number"),
    )


def parse_bill_key(bill_key: str) -> BillKeyParts:
    parts = str(bill_key or "").split(":")
    if len(parts) != 3:
        raise InvalidInputError(f"Invalid bill key format: {bill_key!r}")

    congress, bill_type, number = parts
    return BillKeyParts(
        congress=_positive_int(congress, "congress number"),
        bill_type=normalize_bill_type(bill_type),
        bill_number=_positive_int(number, "bill number"),
    )


def extract_roll_number(text: Optional[str]) -> Optional[int]:
    """Find a roll call number mentioned in free text ("Roll no. 123")."""
    if not text:
        return None

    for pattern in ROLL_NUMBER_PATTERNS:
        match = pattern.search(text)
        if match:
            return int(match.group(1))
    return None
