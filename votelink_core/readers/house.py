"""
House roll-call readers.

Two feeds carry House votes:
- Clerk XML (clerk.house.gov/evs/YYYY/rollNNN.xml), root <rollcall-vote>
- EVS JSON exports, which have used several field spellings over time

Both produce a NormalizedVote with chamber "house".
"""
import json
import logging
from datetime import date
from typing import Any, Optional

from votelink_core.bill_ids import BillReference, extract_bill_reference, parse_clerk_house_bill
from votelink_core.exceptions import MalformedDocumentError
from votelink_core.keys import make_vote_key
from votelink_core.models import MemberVote, NormalizedVote, VotePosition
from votelink_core.readers.common import (
    as_list,
    bill_fields,
    decode_document,
    first_present,
    load_xml,
    node_text,
    normalize_position,
    parse_chamber_date,
    parse_count,
    parse_optional_int,
    require_positive_int,
)

logger = logging.getLogger(__name__)

HOUSE_XML_SOURCE = "house_xml"
HOUSE_JSON_SOURCE = "house_json"


def _tally(members: list[MemberVote]) -> dict[str, int]:
    counts = {"yea_count": 0, "nay_count": 0, "present_count": 0, "not_voting_count": 0}
    field_for = {
        VotePosition.YEA: "yea_count",
        VotePosition.NAY: "nay_count",
        VotePosition.PRESENT: "present_count",
        VotePosition.NOT_VOTING: "not_voting_count",
    }
    for member in members:
        counts[field_for[member.position]] += 1
    return counts


def _clerk_bill_reference(metadata: dict, congress: Optional[int], question: str) -> Optional[BillReference]:
    legis_num = node_text(metadata.get("legis-num"))
    identifier = parse_clerk_house_bill({"legis-num": legis_num, "congress": congress})
    if identifier is not None:
        return BillReference(bill_type=identifier.type, bill_number=identifier.number)
    return extract_bill_reference(legis_num) or extract_bill_reference(question)


def _clerk_member(recorded: dict) -> Optional[MemberVote]:
    legislator = recorded.get("legislator")
    if not isinstance(legislator, dict):
        return None

    member_id = node_text(legislator.get("@name-id"))
    if not member_id:
        return None

    return MemberVote(
        member_id=member_id,
        position=normalize_position(recorded.get("vote")),
        name=node_text(legislator) or None,
        party=legislator.get("@party"),
        state=legislator.get("@state"),
    )


def parse_house_xml(raw) -> NormalizedVote:
    """
    Parse a House Clerk roll-call XML document.

    Args:
        raw: XML text or bytes

    Returns:
        NormalizedVote with source "house_xml"

    Raises:
        MalformedDocumentError: invalid XML, no <rollcall-vote> root, bad
            roll number or date
    """
    rollcall = load_xml(raw, ("rollcall-vote",), HOUSE_XML_SOURCE)
    metadata = rollcall.get("vote-metadata") or {}

    congress = parse_optional_int(metadata.get("congress"))
    session = parse_optional_int(metadata.get("session"))
    roll_number = require_positive_int(metadata.get("rollcall-num"), "roll call number", HOUSE_XML_SOURCE)
    raw_date = node_text(metadata.get("action-date"))
    vote_date = parse_chamber_date(raw_date, HOUSE_XML_SOURCE)
    question = node_text(metadata.get("vote-question"))

    reference = _clerk_bill_reference(metadata, congress, question)
    bill_number, bill_key = bill_fields(congress, reference)

    vote_data = rollcall.get("vote-data") or {}
    members = [
        member
        for member in (_clerk_member(rv) for rv in as_list(vote_data.get("recorded-vote")) if isinstance(rv, dict))
        if member is not None
    ]

    totals = (metadata.get("vote-totals") or {}).get("totals-by-vote")
    if isinstance(totals, dict):
        counts = {
            "yea_count": parse_count(totals, "yea-total"),
            "nay_count": parse_count(totals, "nay-total"),
            "present_count": parse_count(totals, "present-total"),
            "not_voting_count": parse_count(totals, "not-voting-total"),
        }
    else:
        counts = _tally(members)

    return NormalizedVote(
        vote_key=make_vote_key("house", vote_date, roll_number),
        chamber="house",
        congress=congress,
        session=session,
        roll_number=roll_number,
        vote_date=date.fromisoformat(vote_date),
        question=question,
        bill_number=bill_number,
        bill_key=bill_key,
        result=node_text(metadata.get("vote-result")),
        members=members,
        source=HOUSE_XML_SOURCE,
        metadata={
            "legis_num": node_text(metadata.get("legis-num")) or None,
            "vote_type": node_text(metadata.get("vote-type")) or None,
            "raw_date": raw_date,
        },
        **counts,
    )


def _load_json(raw) -> dict:
    if isinstance(raw, dict):
        return raw
    raw = decode_document(raw, HOUSE_JSON_SOURCE)
    try:
        data = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as exc:
        raise MalformedDocumentError(f"Invalid JSON: {exc}", source=HOUSE_JSON_SOURCE) from exc
    if not isinstance(data, dict):
        raise MalformedDocumentError("Expected a JSON object", source=HOUSE_JSON_SOURCE)
    return data


def _evs_member(record: Any) -> Optional[MemberVote]:
    if not isinstance(record, dict):
        return None

    legislator = record.get("legislator") if isinstance(record.get("legislator"), dict) else {}
    member_id = first_present(record, "bioguide_id", "bioguideId") or legislator.get("bioguide_id")
    if not member_id:
        return None

    return MemberVote(
        member_id=str(member_id),
        position=normalize_position(first_present(record, "vote", "votecast", "voteCast")),
        name=record.get("name") or legislator.get("name"),
        party=record.get("party") or legislator.get("party"),
        state=record.get("state") or legislator.get("state"),
    )


def parse_house_json(raw) -> NormalizedVote:
    """
    Parse a House EVS JSON export (text, bytes or an already decoded dict).

    Raises:
        MalformedDocumentError: invalid JSON, bad roll number or date
    """
    data = _load_json(raw)

    congress = parse_optional_int(first_present(data, "congress", "Congress"))
    session = parse_optional_int(first_present(data, "session", "Session"))
    roll_number = require_positive_int(
        first_present(data, "rollnumber", "rollNumber", "roll-number"), "roll call number", HOUSE_JSON_SOURCE
    )
    raw_date = node_text(first_present(data, "date", "action_date", "actionDate"))
    vote_date = parse_chamber_date(raw_date, HOUSE_JSON_SOURCE)
    question = node_text(first_present(data, "question", "vote_question", "voteQuestion"))
    legis_num = node_text(first_present(data, "legis_num", "legislativeNumber"))

    reference = (
        extract_bill_reference(node_text(first_present(data, "bill_number", "billNumber")))
        or extract_bill_reference(legis_num)
        or extract_bill_reference(question)
    )
    bill_number, bill_key = bill_fields(congress, reference)

    records = first_present(data, "vote_data", "voteData", "recorded_vote", "recordedVote")
    members = [member for member in (_evs_member(r) for r in as_list(records)) if member is not None]

    return NormalizedVote(
        vote_key=make_vote_key("house", vote_date, roll_number),
        chamber="house",
        congress=congress,
        session=session,
        roll_number=roll_number,
        vote_date=date.fromisoformat(vote_date),
        question=question,
        bill_number=bill_number,
        bill_key=bill_key,
        result=node_text(first_present(data, "result", "vote_result", "voteResult")),
        yea_count=parse_count(data, "yea_total", "yeaTotal", "yea", "Yea", "ayes"),
        nay_count=parse_count(data, "nay_total", "nayTotal", "nay", "Nay", "noes"),
        present_count=parse_count(data, "present_total", "presentTotal", "present", "Present"),
        not_voting_count=parse_count(data, "not_voting_total", "notVotingTotal", "not_voting", "not-voting"),
        members=members,
        source=HOUSE_JSON_SOURCE,
        metadata={
            "legis_num": legis_num or None,
            "vote_type": first_present(data, "vote_type", "voteType"),
            "raw_date": raw_date,
        },
    )
