"""
Senate roll-call reader.

Parses senate.gov roll-call XML (root <roll_call_vote>) into a
NormalizedVote with chamber "senate".
"""
import logging
import re
from datetime import date
from typing import Optional

from votelink_core.bill_ids import BillReference, extract_bill_reference
from votelink_core.keys import make_vote_key
from votelink_core.models import MemberVote, NormalizedVote
from votelink_core.readers.common import (
    as_list,
    bill_fields,
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

SENATE_XML_SOURCE = "senate_xml"

# Document types after dots are removed and spacing collapsed
SENATE_DOCUMENT_TYPES: dict[str, str] = {
    "S": "s",
    "H R": "hr",
    "HR": "hr",
    "S Res": "sres",
    "SRes": "sres",
    "H Res": "hres",
    "HRes": "hres",
    "S J Res": "sjres",
    "SJRes": "sjres",
    "H J Res": "hjres",
    "HJRes": "hjres",
    "S Con Res": "sconres",
    "SConRes": "sconres",
    "H Con Res": "hconres",
    "HConRes": "hconres",
}

# Nominations and treaties are voted on but are not bills
NON_BILL_DOCUMENTS = ("PN", "Treaty")


def parse_senate_document(document_type: str, document_number) -> Optional[BillReference]:
    """Map a Senate <document> type/number pair to a bill reference."""
    doc_type = node_text(document_type)
    if not doc_type or doc_type in NON_BILL_DOCUMENTS:
        return None

    number_text = node_text(document_number)
    if not number_text.isdigit() or int(number_text) < 1:
        return None

    normalized = re.sub(r"\s+", " ", doc_type.replace(".", " ")).strip()
    bill_type = SENATE_DOCUMENT_TYPES.get(normalized) or SENATE_DOCUMENT_TYPES.get(normalized.replace(" ", ""))
    if bill_type is None:
        return None
    return BillReference(bill_type=bill_type, bill_number=int(number_text))


def _senate_bill_reference(roll_call: dict, question: str) -> Optional[BillReference]:
    document = roll_call.get("document")
    if isinstance(document, dict) and document.get("document_type") and document.get("document_number"):
        doc_type = node_text(document.get("document_type"))
        if doc_type in NON_BILL_DOCUMENTS:
            return None
        reference = parse_senate_document(doc_type, document.get("document_number"))
        if reference is not None:
            return reference

    return extract_bill_reference(question) or extract_bill_reference(
        node_text(roll_call.get("vote_document_text"))
    )


def _senate_member(member: dict) -> Optional[MemberVote]:
    member_id = node_text(member.get("lis_member_id"))
    if not member_id:
        return None

    name = node_text(member.get("member_full")) or " ".join(
        part for part in (node_text(member.get("first_name")), node_text(member.get("last_name"))) if part
    )
    return MemberVote(
        member_id=member_id,
        position=normalize_position(member.get("vote_cast")),
        name=name or None,
        party=node_text(member.get("party")) or None,
        state=node_text(member.get("state")) or None,
    )


def parse_senate_xml(raw) -> NormalizedVote:
    """
    Parse a Senate roll-call XML document.

    Absent senators are folded into the not-voting count. Nominations (PN)
    and treaties carry no bill reference even when the question text
    mentions one.

    Raises:
        MalformedDocumentError: invalid XML, no <roll_call_vote> root, bad
            vote number or date
    """
    roll_call = load_xml(raw, ("roll_call_vote",), SENATE_XML_SOURCE)

    congress = parse_optional_int(roll_call.get("congress"))
    session = parse_optional_int(roll_call.get("session"))
    roll_number = require_positive_int(roll_call.get("vote_number"), "vote number", SENATE_XML_SOURCE)
    raw_date = node_text(roll_call.get("vote_date"))
    vote_date = parse_chamber_date(raw_date, SENATE_XML_SOURCE)
    question = node_text(first_present(roll_call, "vote_question_text", "vote_question", "question", "vote_title"))

    reference = _senate_bill_reference(roll_call, question)
    bill_number, bill_key = bill_fields(congress, reference)

    count = roll_call.get("count") or {}
    members_block = roll_call.get("members") or {}
    members = [
        member
        for member in (_senate_member(m) for m in as_list(members_block.get("member")) if isinstance(m, dict))
        if member is not None
    ]

    return NormalizedVote(
        vote_key=make_vote_key("senate", vote_date, roll_number),
        chamber="senate",
        congress=congress,
        session=session,
        roll_number=roll_number,
        vote_date=date.fromisoformat(vote_date),
        question=question,
        bill_number=bill_number,
        bill_key=bill_key,
        result=node_text(first_present(roll_call, "vote_result", "result")),
        yea_count=parse_count(count, "yeas", "Yeas"),
        nay_count=parse_count(count, "nays", "Nays"),
        present_count=parse_count(count, "present", "Present"),
        not_voting_count=parse_count(count, "absent", "Absent") + parse_count(count, "not_voting", "not-voting"),
        members=members,
        source=SENATE_XML_SOURCE,
        metadata={
            "question_short": node_text(roll_call.get("question")) or None,
            "document_type": node_text((roll_call.get("document") or {}).get("document_type")) or None,
            "raw_date": raw_date,
        },
    )
