"""
Pytest fixtures and configuration.

Following TDD principles:
- Fixtures provide real-world-like feed documents (trimmed to a few members)
- No network: every document is an inline string
- Each test should be independent and fast
"""
from datetime import date
from typing import Any, Callable

import pytest
from dotenv import load_dotenv

from votelink_core.index import BillStatusIndex, IssuesIndex
from votelink_core.keys import make_vote_key
from votelink_core.models import NormalizedVote

load_dotenv()


# =============================================================================
# HOUSE CLERK FIXTURES
# =============================================================================

HOUSE_ROLL_50_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rollcall-vote>
  <vote-metadata>
    <majority>R</majority>
    <congress>118</congress>
    <session>2nd</session>
    <chamber>U.S. House of Representatives</chamber>
    <rollcall-num>50</rollcall-num>
    <legis-num>H R 2766</legis-num>
    <vote-question>On Motion to Suspend the Rules and Pass, as Amended</vote-question>
    <vote-type>2/3 YEA-AND-NAY</vote-type>
    <vote-result>Passed</vote-result>
    <action-date>15-Feb-2024</action-date>
    <action-time time-etz="13:45">1:45 PM</action-time>
    <vote-desc>Example Energy Act</vote-desc>
    <vote-totals>
      <totals-by-vote>
        <total-stub>Totals</total-stub>
        <yea-total>300</yea-total>
        <nay-total>100</nay-total>
        <present-total>1</present-total>
        <not-voting-total>30</not-voting-total>
      </totals-by-vote>
    </vote-totals>
  </vote-metadata>
  <vote-data>
    <recorded-vote>
      <legislator name-id="A000370" sort-field="Adams" unaccented-name="Adams" party="D" state="NC" role="legislator">Adams</legislator>
      <vote>Yea</vote>
    </recorded-vote>
    <recorded-vote>
      <legislator name-id="B001291" sort-field="Babin" unaccented-name="Babin" party="R" state="TX" role="legislator">Babin</legislator>
      <vote>Nay</vote>
    </recorded-vote>
    <recorded-vote>
      <legislator name-id="C001120" sort-field="Crenshaw" unaccented-name="Crenshaw" party="R" state="TX" role="legislator">Crenshaw</legislator>
      <vote>Not Voting</vote>
    </recorded-vote>
  </vote-data>
</rollcall-vote>
"""

HOUSE_ROLL_51_JSON = {
    "congress": 118,
    "session": 2,
    "rollnumber": 51,
    "date": "15-Feb-2024",
    "question": "On Passage",
    "bill_number": "H.R. 2766",
    "result": "Passed",
    "yea_total": 250,
    "nay_total": 170,
    "present_total": 0,
    "not_voting_total": 11,
    "vote_type": "YEA-AND-NAY",
    "vote_data": [
        {"bioguide_id": "A000370", "vote": "Aye"},
        {"bioguide_id": "B001291", "vote": "No"},
        {"bioguide_id": "C001120", "votecast": "Present"},
    ],
}


@pytest.fixture
def house_xml() -> str:
    """House Clerk roll call 50, H.R. 2766, 118th Congress."""
    return HOUSE_ROLL_50_XML


@pytest.fixture
def house_json() -> dict[str, Any]:
    """House EVS JSON export for roll call 51."""
    return dict(HOUSE_ROLL_51_JSON, vote_data=[dict(v) for v in HOUSE_ROLL_51_JSON["vote_data"]])


# =============================================================================
# SENATE FIXTURES
# =============================================================================

SENATE_VOTE_45_XML = """<?xml version="1.0" encoding="UTF-8"?>
<roll_call_vote>
  <congress>118</congress>
  <session>2</session>
  <congress_year>2024</congress_year>
  <vote_number>45</vote_number>
  <vote_date>February 15, 2024,  01:45 PM</vote_date>
  <modify_date>February 15, 2024,  02:10 PM</modify_date>
  <vote_question_text>On Passage of the Bill H.R. 815</vote_question_text>
  <vote_document_text>A bill making emergency supplemental appropriations</vote_document_text>
  <vote_result_text>Bill Passed (67-32)</vote_result_text>
  <question>On Passage of the Bill</question>
  <vote_title>H.R. 815, as Amended</vote_title>
  <majority_requirement>1/2</majority_requirement>
  <vote_result>Bill Passed</vote_result>
  <document>
    <document_congress>118</document_congress>
    <document_type>H.R.</document_type>
    <document_number>815</document_number>
    <document_name>H.R. 815</document_name>
  </document>
  <count>
    <yeas>67</yeas>
    <nays>32</nays>
    <present/>
    <absent>1</absent>
  </count>
  <members>
    <member>
      <member_full>Baldwin (D-WI)</member_full>
      <last_name>Baldwin</last_name>
      <first_name>Tammy</first_name>
      <party>D</party>
      <state>WI</state>
      <vote_cast>Yea</vote_cast>
      <lis_member_id>S354</lis_member_id>
    </member>
    <member>
      <member_full>Braun (R-IN)</member_full>
      <last_name>Braun</last_name>
      <first_name>Mike</first_name>
      <party>R</party>
      <state>IN</state>
      <vote_cast>Nay</vote_cast>
      <lis_member_id>S397</lis_member_id>
    </member>
    <member>
      <member_full>Vance (R-OH)</member_full>
      <last_name>Vance</last_name>
      <first_name>J. D.</first_name>
      <party>R</party>
      <state>OH</state>
      <vote_cast>Not Voting</vote_cast>
      <lis_member_id>S415</lis_member_id>
    </member>
  </members>
</roll_call_vote>
"""

SENATE_NOMINATION_XML = """<?xml version="1.0" encoding="UTF-8"?>
<roll_call_vote>
  <congress>118</congress>
  <session>2</session>
  <vote_number>46</vote_number>
  <vote_date>February 15, 2024,  03:10 PM</vote_date>
  <vote_question_text>On the Nomination PN 123, relating to H.R. 5</vote_question_text>
  <question>On the Nomination</question>
  <vote_result>Nomination Confirmed</vote_result>
  <document>
    <document_type>PN</document_type>
    <document_number>123</document_number>
  </document>
  <count>
    <yeas>51</yeas>
    <nays>48</nays>
    <present/>
    <absent>1</absent>
  </count>
  <members/>
</roll_call_vote>
"""


@pytest.fixture
def senate_xml() -> str:
    """Senate vote 45, passage of H.R. 815."""
    return SENATE_VOTE_45_XML


@pytest.fixture
def senate_nomination_xml() -> str:
    """Senate vote on a nomination (PN), not a bill."""
    return SENATE_NOMINATION_XML


# =============================================================================
# BILLSTATUS FIXTURES
# =============================================================================

def billstatus_document(
    congress: int = 118,
    bill_type: str = "HR",
    number: int = 2766,
    actions: list[tuple[str, str, str]] = (),
    text_url: str = "",
) -> str:
    """
    Build a BILLSTATUS XML document.

    actions: (action_date, text, source_system_name) tuples
    """
    items = "".join(
        f"""
      <item>
        <actionDate>{action_date}</actionDate>
        <text>{text}</text>
        <type>Floor</type>
        <actionCode>H37300</actionCode>
        <sourceSystem><code>2</code><name>{source}</name></sourceSystem>
      </item>"""
        for action_date, text, source in actions
    )
    text_versions = ""
    if text_url:
        text_versions = f"""
    <textVersions>
      <item>
        <type>Engrossed in House</type>
        <date>2024-02-16T05:00:00Z</date>
        <formats>
          <item><url>{text_url}</url><type>Formatted Text</type></item>
        </formats>
      </item>
    </textVersions>"""

    return f"""<?xml version="1.0" encoding="utf-8"?>
<billStatus>
  <version>3.0.0</version>
  <bill>
    <number>{number}</number>
    <updateDate>2024-03-01T12:00:00Z</updateDate>
    <type>{bill_type}</type>
    <congress>{congress}</congress>
    <title>Example Act</title>
    <actions>{items}
    </actions>{text_versions}
  </bill>
</billStatus>
"""


HR2766_TEXT_URL = "https://www.congress.gov/118/bills/hr2766/BILLS-118hr2766eh.htm"

HR2766_BILLSTATUS_XML = billstatus_document(
    actions=[
        ("2024-01-10", "Introduced in House", "Library of Congress"),
        (
            "2024-02-15",
            "On motion to suspend the rules and pass the bill, as amended Agreed to by the "
            "Yeas and Nays: (2/3 required): 300 - 100 (Roll no. 50).",
            "House floor actions",
        ),
    ],
    text_url=HR2766_TEXT_URL,
)

HR815_BILLSTATUS_XML = billstatus_document(
    number=815,
    actions=[
        (
            "2024-02-15",
            "Passed Senate with an amendment by Yea-Nay Vote. 67 - 32. Record Vote Number: 45.",
            "Senate",
        ),
    ],
)


@pytest.fixture
def make_billstatus() -> Callable[..., str]:
    """Factory for BILLSTATUS documents."""
    return billstatus_document


@pytest.fixture
def billstatus_xml() -> str:
    """BILLSTATUS for H.R. 2766 with roll no. 50 on 2024-02-15."""
    return HR2766_BILLSTATUS_XML


@pytest.fixture
def senate_billstatus_xml() -> str:
    """BILLSTATUS for H.R. 815 with Senate record vote 45 on 2024-02-15."""
    return HR815_BILLSTATUS_XML


@pytest.fixture
def billstatus_index(billstatus_xml, senate_billstatus_xml) -> BillStatusIndex:
    """Index holding H.R. 2766 and H.R. 815."""
    index = BillStatusIndex()
    index.index_document(billstatus_xml)
    index.index_document(senate_billstatus_xml)
    return index


# =============================================================================
# ISSUE FIXTURES
# =============================================================================

@pytest.fixture
def issue_records() -> list[dict[str, Any]]:
    """Issue rows as an application store would return them."""
    return [
        {
            "id": 1,
            "title": "Example Energy Act",
            "bill_id": "H.R. 2766",
            "canonical_bill_id": "hr2766-118",
            "canonical_normalized": None,
            "external_ids": {
                "congressgov_url": "https://www.congress.gov/bill/118th-congress/house-bill/2766",
                "legiscan_url": "https://legiscan.com/US/bill/HB2766/2023",
            },
        },
        {
            "id": 2,
            "title": "Legacy Issue",
            "bill_id": "HB15",
            "canonical_bill_id": None,
            "canonical_normalized": "HR15",
            "external_ids": None,
        },
        {
            "id": 3,
            "title": "Untracked Issue",
            "bill_id": None,
            "canonical_bill_id": None,
            "canonical_normalized": None,
        },
    ]


@pytest.fixture
def issues_index(issue_records) -> IssuesIndex:
    index = IssuesIndex()
    index.index_issues(issue_records)
    return index


# =============================================================================
# VOTE FIXTURES
# =============================================================================

@pytest.fixture
def make_vote() -> Callable[..., NormalizedVote]:
    """Factory for NormalizedVote with House roll 50 defaults."""

    def _make(**overrides) -> NormalizedVote:
        fields: dict[str, Any] = {
            "chamber": "house",
            "congress": 118,
            "roll_number": 50,
            "vote_date": date(2024, 2, 15),
            "question": "On Motion to Suspend the Rules and Pass, as Amended",
            "bill_number": "H.R. 2766",
            "bill_key": "118:hr:2766",
            "result": "Passed",
            "source": "test",
        }
        fields.update(overrides)
        fields.setdefault(
            "vote_key", make_vote_key(fields["chamber"], fields["vote_date"], fields["roll_number"])
        )
        return NormalizedVote(**fields)

    return _make
