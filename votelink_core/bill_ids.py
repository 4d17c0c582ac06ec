"""
Bill identifier normalization.

Converts the many ways a bill gets written ("H R 2766", "H.R. 2766",
"HB82", "hr2766-118", "S.J.RES. 12") into one canonical identifier,
plus helpers that pull bill references out of free text.
"""
import logging
import re
from typing import Any, Iterable, NamedTuple, Optional

from votelink_core.keys import BILL_TYPES
from votelink_core.models import BillIdentifier

logger = logging.getLogger(__name__)

# Keys are the lower-cased type letters with dots and spaces removed,
# so "H.R.", "H R" and "hr" all look up "hr"
BILL_TYPE_MAPPINGS: dict[str, str] = {
    # House bills
    "hr": "hr",
    "housebill": "hr",
    # Senate bills
    "s": "s",
    "senatebill": "s",
    # House joint resolutions
    "hjres": "hjres",
    "hjr": "hjres",
    # Senate joint resolutions
    "sjres": "sjres",
    "sjr": "sjres",
    # House concurrent resolutions
    "hconres": "hconres",
    "hcr": "hconres",
    # Senate concurrent resolutions
    "sconres": "sconres",
    "scr": "sconres",
    # House resolutions
    "hres": "hres",
    # Senate resolutions
    "sres": "sres",
}

BILL_DISPLAY_NAMES: dict[str, str] = {
    "hr": "H.R.",
    "s": "S.",
    "hjres": "H.J.Res.",
    "sjres": "S.J.Res.",
    "hconres": "H.Con.Res.",
    "sconres": "S.Con.Res.",
    "hres": "H.Res.",
    "sres": "S.Res.",
}

CONGRESS_SUFFIX = re.compile(r"[- ]+(\d{3})$")
SEPARATORS = re.compile(r"[.\s]+")
COMPACT_FORM = re.compile(r"^([a-z]+)(\d+)$")
# State-style "HB82" / "SB5" used by LegiScan for federal bills
LEGACY_FORM = re.compile(r"^([hs])b(\d+)$")
LEGISCAN_CONGRESS = re.compile(r"(\d{3})(?:th|st|nd|rd)\s+Congress", re.IGNORECASE)

# Free-text bill references, first match wins: joint and concurrent
# resolutions, then simple resolutions, then H.R./S.
BILL_REFERENCE_PATTERNS = [
    (re.compile(r"\bH\s*\.?\s*J\s*\.?\s*Res\s*\.?\s*(\d+)\b", re.IGNORECASE), "hjres"),
    (re.compile(r"\bS\s*\.?\s*J\s*\.?\s*Res\s*\.?\s*(\d+)\b", re.IGNORECASE), "sjres"),
    (re.compile(r"\bH\s*\.?\s*Con\s*\.?\s*Res\s*\.?\s*(\d+)\b", re.IGNORECASE), "hconres"),
    (re.compile(r"\bS\s*\.?\s*Con\s*\.?\s*Res\s*\.?\s*(\d+)\b", re.IGNORECASE), "sconres"),
    (re.compile(r"\bH\s*\.?\s*Res\s*\.?\s*(\d+)\b", re.IGNORECASE), "hres"),
    (re.compile(r"\bS\s*\.?\s*Res\s*\.?\s*(\d+)\b", re.IGNORECASE), "sres"),
    (re.compile(r"\bH\s*\.?\s*R\s*\.?\s*(\d+)\b", re.IGNORECASE), "hr"),
    (re.compile(r"\bS\s*\.?\s*(\d+)\b", re.IGNORECASE), "s"),
]


class BillReference(NamedTuple):
    bill_type: str
    bill_number: int


def _to_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _build_identifier(bill_type: str, number: int, congress: Optional[int]) -> Optional[BillIdentifier]:
    if bill_type not in BILL_TYPES or number < 1:
        return None
    canonical = f"{bill_type}{number}-{congress}" if congress else f"{bill_type}{number}"
    return BillIdentifier(canonical=canonical, type=bill_type, number=number, congress=congress)


def normalize_bill_id(raw: Optional[str], congress=None) -> Optional[BillIdentifier]:
    """
    Normalize a bill reference to a canonical identifier.

    Args:
        raw: Raw reference, e.g. "H R 2766", "HB82", "S. 58", "hr2766-118"
        congress: Congress number; when omitted a trailing "-118" style
            suffix on raw is used instead

    Returns:
        BillIdentifier, or None when raw is not a recognizable bill
    """
    if not raw:
        return None

    congress = _to_int(congress) or None
    cleaned = re.sub(r"\s+", " ", str(raw).lower().strip())

    if congress is None:
        suffix = CONGRESS_SUFFIX.search(cleaned)
        # "h r 118" is bill 118, not an empty bill from the 118th congress
        if suffix and cleaned[: suffix.start()][-1:].isdigit():
            congress = int(suffix.group(1))
            cleaned = cleaned[: suffix.start()]

    compact = SEPARATORS.sub("", cleaned)

    match = COMPACT_FORM.match(compact)
    if not match:
        return None

    letters, number = match.group(1), int(match.group(2))
    if not number:
        return None

    bill_type = BILL_TYPE_MAPPINGS.get(letters)
    if bill_type:
        return _build_identifier(bill_type, number, congress)

    legacy = LEGACY_FORM.match(compact)
    if legacy:
        return _build_identifier("hr" if legacy.group(1) == "h" else "s", number, congress)

    return None


def normalize_bill_ids(raws: Iterable[Optional[str]], congress=None) -> list[BillIdentifier]:
    """Batch form of normalize_bill_id; unrecognized references are dropped."""
    results = []
    for raw in raws:
        identifier = normalize_bill_id(raw, congress)
        if identifier is not None:
            results.append(identifier)
    return results


def parse_congress_api_bill(bill_data: Optional[dict]) -> Optional[BillIdentifier]:
    """Congress.gov API bill object: {"type": "HR", "number": "2766", "congress": 118}."""
    if not bill_data:
        return None

    bill_type = BILL_TYPE_MAPPINGS.get(SEPARATORS.sub("", str(bill_data.get("type") or "").lower()))
    number = _to_int(bill_data.get("number"))
    if not bill_type or not number:
        return None
    return _build_identifier(bill_type, number, _to_int(bill_data.get("congress")))


def parse_legiscan_bill(legiscan_bill: Optional[dict]) -> Optional[BillIdentifier]:
    """LegiScan bill object; congress comes from session.session_name ("118th Congress")."""
    if not legiscan_bill:
        return None

    congress = None
    session = legiscan_bill.get("session") or {}
    session_name = session.get("session_name") if isinstance(session, dict) else None
    if session_name:
        match = LEGISCAN_CONGRESS.search(session_name)
        if match:
            congress = int(match.group(1))

    return normalize_bill_id(legiscan_bill.get("bill_number"), congress)


def parse_clerk_house_bill(vote_metadata: Optional[dict]) -> Optional[BillIdentifier]:
    """House Clerk vote-metadata block: legis-num plus congress."""
    if not vote_metadata:
        return None

    legis_num = vote_metadata.get("legis-num") or vote_metadata.get("legis_num")
    return normalize_bill_id(legis_num, vote_metadata.get("congress"))


def extract_bill_reference(text: Optional[str]) -> Optional[BillReference]:
    """
    Find the first bill reference in free text.

    >>> extract_bill_reference("On Motion to Suspend the Rules and Pass H.R. 2766")
    BillReference(bill_type='hr', bill_number=2766)
    """
    if not text:
        return None

    for pattern, bill_type in BILL_REFERENCE_PATTERNS:
        match = pattern.search(str(text))
        if match:
            number = int(match.group(1))
            if number:
                return BillReference(bill_type=bill_type, bill_number=number)
    return None


def normalize_bill_token(raw: Optional[str]) -> Optional[str]:
    """Compact upper-case token used by identifier tables: "H.R. 15" -> "HR15"."""
    identifier = normalize_bill_id(raw)
    if identifier is None:
        return None
    return f"{identifier.type.upper()}{identifier.number}"


def format_bill_number(bill_type: str, number) -> str:
    """Display form: ("hr", 2766) -> "H.R. 2766"."""
    display = BILL_DISPLAY_NAMES.get(str(bill_type).lower(), str(bill_type).upper())
    return f"{display} {number}"
