# votelink_core/models.py
"""
Data models shared by readers, indexes and the resolver.

Design Decisions:
- Pydantic BaseModel for runtime validation and JSON serialization
- Records that must never change after construction (NormalizedVote,
  IndexedAction, ResolutionResult) are frozen
- Dates are datetime.date values; keys stay plain strings built by
  votelink_core.keys so they can be compared and hashed directly
- VotePosition keeps Present and Not Voting as separate values; merging
  them is left to whoever consumes the counts
"""
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


Chamber = Literal["house", "senate"]

StrategyName = Literal[
    "direct_bill_key", "exact_roll", "bill_same_day", "motion", "amendment", "none"
]

# Order matches the resolver's strategy priority, "none" last
STRATEGY_NAMES: tuple[str, ...] = (
    "direct_bill_key", "exact_roll", "bill_same_day", "motion", "amendment", "none",
)


class VotePosition(str, Enum):
    """Four-valued member position used by every reader."""
    YEA = "Yea"
    NAY = "Nay"
    PRESENT = "Present"
    NOT_VOTING = "Not Voting"


class MemberVote(BaseModel):
    """One member's recorded position on a roll call."""
    model_config = ConfigDict(frozen=True)

    member_id: str = Field(..., min_length=1, description="Bioguide id (House) or LIS id (Senate)")
    position: VotePosition
    name: Optional[str] = None
    party: Optional[str] = None
    state: Optional[str] = None


class NormalizedVote(BaseModel):
    """
    Chamber-independent roll-call vote.

    Every reader produces this shape so the resolver never has to know
    which feed a vote came from.
    """
    model_config = ConfigDict(frozen=True)

    vote_key: str = Field(..., min_length=1)
    chamber: Chamber
    congress: Optional[int] = Field(None, ge=1)
    session: Optional[int] = Field(None, ge=1)
    roll_number: int = Field(..., ge=1)
    vote_date: date
    question: str = ""
    bill_number: Optional[str] = Field(None, description="Display form, e.g. 'H.R. 2766'")
    bill_key: Optional[str] = None
    result: str = ""
    yea_count: int = Field(0, ge=0)
    nay_count: int = Field(0, ge=0)
    present_count: int = Field(0, ge=0)
    not_voting_count: int = Field(0, ge=0)
    members: List[MemberVote] = Field(default_factory=list)
    source: str = Field("unknown", description="Reader that produced this vote")
    metadata: Dict[str, Any] = Field(default_factory=dict)


class IndexedAction(BaseModel):
    """One legislative action extracted from a BILLSTATUS document."""
    model_config = ConfigDict(frozen=True)

    bill_key: str
    action_date: date
    action_text: str = ""
    roll_number: Optional[int] = None
    action_code: str = ""
    chamber: Optional[Chamber] = None


class BillTextUrl(BaseModel):
    """Locator for one published text version of a bill."""
    model_config = ConfigDict(frozen=True)

    url: str
    format: str = "unknown"


class BillIdentifier(BaseModel):
    """
    Canonical bill identifier produced by normalize_bill_id.

    canonical is the compact display form: "hr2766-118", or "hr2766"
    when the congress is unknown.
    """
    canonical: str
    type: str
    number: int = Field(..., ge=1)
    congress: Optional[int] = None

    def bill_key(self) -> Optional[str]:
        if self.congress is None:
            return None
        return f"{self.congress}:{self.type}:{self.number}"


class IssueRecord(BaseModel):
    """Issue row as supplied by the surrounding application's store."""
    model_config = ConfigDict(extra="ignore")

    id: Union[int, str]
    title: str = ""
    bill_id: Optional[str] = None
    canonical_bill_id: Optional[str] = None
    canonical_normalized: Optional[str] = None
    description: Optional[str] = None
    vote_date: Optional[str] = None
    external_ids: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("external_ids", mode="before")
    @classmethod
    def default_external_ids(cls, v):
        """Stores hand back NULL for rows without external ids."""
        return v or {}


class ResolutionResult(BaseModel):
    """
    Outcome of resolving one vote.

    An unresolved vote is still a result: strategy "none", confidence 0.0
    and a semicolon-separated reason.
    """
    model_config = ConfigDict(frozen=True)

    vote_key: str
    bill_key: Optional[str] = None
    strategy: StrategyName = "none"
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    reason: Optional[str] = None
    bill_text_urls: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def resolved(self) -> bool:
        return self.strategy != "none"


class ResolutionLogEntry(BaseModel):
    """Timestamped resolution log record."""
    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    result: ResolutionResult

    def to_record(self) -> Dict[str, Any]:
        """Flat JSON-serializable record: timestamp plus the result fields."""
        return {
            "timestamp": self.timestamp.isoformat(),
            **self.result.model_dump(mode="json"),
        }
