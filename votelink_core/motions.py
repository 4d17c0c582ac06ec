"""
Motion Text Canonicalization.

Roll-call feeds and BILLSTATUS actions describe the same procedural step in
different words ("On Motion to Suspend the Rules and Pass, as Amended" vs
"Motion to suspend the rules and pass the bill, as amended, Agreed to").
This module buckets both into a fixed set of motion families so they can be
compared.

Design rationale:
- Regex families are deterministic and cheap; the resolver runs them once
  per candidate action
- Families are tried in table order, so broader patterns ("Amendment") sit
  after the specific ones they would otherwise shadow
- When no family matches, the simplified text itself stands in for the
  family with medium confidence

Usage:
    canon = canonicalize_motion("On Motion to Suspend the Rules and Pass H.R. 2766")
    canon.family      # "Suspend the Rules"
    canon.confidence  # "high"
"""
import re
from typing import NamedTuple, Optional


class MotionCanonical(NamedTuple):
    family: Optional[str]
    confidence: str  # "high" | "medium" | "low"


class MotionComparison(NamedTuple):
    match: bool
    score: float


class AmendmentRef(NamedTuple):
    type: str
    number: int


# Ordered: first matching pattern wins
MOTION_FAMILIES: dict[str, list[re.Pattern]] = {
    "On Passage": [
        re.compile(r"\bOn Passage\b", re.IGNORECASE),
        re.compile(r"\bPassage of\b", re.IGNORECASE),
        re.compile(r"\bTo Pass\b", re.IGNORECASE),
        re.compile(r"\bFinal Passage\b", re.IGNORECASE),
    ],
    "On Agreeing": [
        re.compile(r"\bOn Agreeing to\b", re.IGNORECASE),
        re.compile(r"\bAgreeing to\b", re.IGNORECASE),
        re.compile(r"\bTo Agree\b", re.IGNORECASE),
    ],
    "Motion to Recommit": [
        re.compile(r"\bMotion to Recommit\b", re.IGNORECASE),
        re.compile(r"\bMTR\b"),
        re.compile(r"\bRecommit\b", re.IGNORECASE),
    ],
    "Previous Question": [
        re.compile(r"\bPrevious Question\b", re.IGNORECASE),
        re.compile(r"\bOrder the Previous Question\b", re.IGNORECASE),
    ],
    "Suspend the Rules": [
        re.compile(r"\bSuspend(?:ing)? the Rules\b", re.IGNORECASE),
        re.compile(r"\bSuspension of the Rules\b", re.IGNORECASE),
    ],
    "On the Amendment": [
        re.compile(r"\bOn the Amendment\b", re.IGNORECASE),
        re.compile(r"\bAmendment\b", re.IGNORECASE),
    ],
    "On the Resolution": [
        re.compile(r"\bOn the Resolution\b", re.IGNORECASE),
        re.compile(r"\bOn Adopting the Resolution\b", re.IGNORECASE),
    ],
    "On the Conference Report": [
        re.compile(r"\bConference Report\b", re.IGNORECASE),
    ],
    "On Concurring": [
        re.compile(r"\bOn Concurring\b", re.IGNORECASE),
        re.compile(r"\bConcur\b", re.IGNORECASE),
    ],
    "On Cloture": [
        re.compile(r"\bCloture\b", re.IGNORECASE),
        re.compile(r"\bMotion to Invoke Cloture\b", re.IGNORECASE),
    ],
    "On the Motion to Proceed": [
        re.compile(r"\bMotion to Proceed\b", re.IGNORECASE),
        re.compile(r"\bTo Proceed\b", re.IGNORECASE),
    ],
    "On the Nomination": [
        re.compile(r"\bOn the Nomination\b", re.IGNORECASE),
        re.compile(r"\bNomination\b", re.IGNORECASE),
    ],
}

# Bill tokens such as "H.R. 2766", "S. 58", "H.J.Res. 5", "HR 12"
BILL_TOKEN_PATTERN = re.compile(
    r"\b(?:"
    r"H\.?\s*J\.?\s*Res\.?|S\.?\s*J\.?\s*Res\.?"
    r"|H\.?\s*Con\.?\s*Res\.?|S\.?\s*Con\.?\s*Res\.?"
    r"|H\.?\s*Res\.?|S\.?\s*Res\.?"
    r"|H\.?\s*R\.?|S\.?"
    r")\s*\d+\b",
    re.IGNORECASE,
)

AS_AMENDED_PATTERN = re.compile(r",?\s*as amended", re.IGNORECASE)

DATE_PATTERNS = [
    re.compile(r"\b\d{1,2}/\d{1,2}/\d{2,4}\b"),
    re.compile(r"\b\d{4}-\d{2}-\d{2}\b"),
    re.compile(
        r"\b(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Sept|Oct|Nov|Dec)[a-z]*\.?\s+\d{1,2},?\s+\d{4}\b",
        re.IGNORECASE,
    ),
]

AMENDMENT_PATTERNS = [
    re.compile(r"\bAmendment\s+(?:No\.?\s*)?(\d+)", re.IGNORECASE),
    re.compile(r"\bAmdt\.?\s*(?:No\.?\s*)?(\d+)", re.IGNORECASE),
]

# Chamber-prefixed amendment tokens: "SA 1234", "HA 56"
PREFIXED_AMENDMENT_PATTERN = re.compile(r"\b(SA|HA)\.?\s*(\d+)\b", re.IGNORECASE)

AMENDMENT_PREFIX_TYPES = {
    "sa": "senate_amendment",
    "ha": "house_amendment",
}

# Scores returned by compare_motions
FAMILY_MATCH_SCORE = 1.0
SIMPLIFIED_MATCH_SCORE = 0.9
SUBSTRING_MATCH_SCORE = 0.7


def simplify_motion_text(text: Optional[str]) -> str:
    """Strip bill references, 'as amended', embedded dates and extra whitespace."""
    if not text:
        return ""

    simplified = BILL_TOKEN_PATTERN.sub("", text)
    simplified = AS_AMENDED_PATTERN.sub("", simplified)
    for pattern in DATE_PATTERNS:
        simplified = pattern.sub("", simplified)
    return re.sub(r"\s+", " ", simplified).strip()


def canonicalize_motion(motion_text: Optional[str]) -> MotionCanonical:
    """
    Map motion text to a canonical family.

    Returns:
        MotionCanonical with confidence "high" for a family match,
        "medium" for the simplified-text fallback, "low" for empty input
    """
    if not motion_text or not motion_text.strip():
        return MotionCanonical(family=None, confidence="low")

    normalized = motion_text.strip()
    for family, patterns in MOTION_FAMILIES.items():
        if any(pattern.search(normalized) for pattern in patterns):
            return MotionCanonical(family=family, confidence="high")

    return MotionCanonical(family=simplify_motion_text(normalized), confidence="medium")


def compare_motions(motion_a: Optional[str], motion_b: Optional[str]) -> MotionComparison:
    """
    Score how closely two motion texts describe the same step.

    Scoring:
    - 1.0: same canonical family
    - 0.9: same simplified text (case-insensitive)
    - 0.7: one simplified text contains the other
    - 0.0: no match

    The decision only depends on the unordered pair, so
    compare_motions(a, b) == compare_motions(b, a).
    """
    canon_a = canonicalize_motion(motion_a)
    canon_b = canonicalize_motion(motion_b)

    if canon_a.family and canon_b.family and canon_a.family == canon_b.family:
        return MotionComparison(match=True, score=FAMILY_MATCH_SCORE)

    simple_a = simplify_motion_text(motion_a).lower()
    simple_b = simplify_motion_text(motion_b).lower()

    # An empty string is a substring of everything
    if not simple_a or not simple_b:
        return MotionComparison(match=False, score=0.0)

    if simple_a == simple_b:
        return MotionComparison(match=True, score=SIMPLIFIED_MATCH_SCORE)

    if simple_a in simple_b or simple_b in simple_a:
        return MotionComparison(match=True, score=SUBSTRING_MATCH_SCORE)

    return MotionComparison(match=False, score=0.0)


def extract_amendment(motion_text: Optional[str]) -> Optional[AmendmentRef]:
    """Find an amendment reference ("Amendment No. 12", "Amdt. 4", "SA 1234")."""
    if not motion_text:
        return None

    for pattern in AMENDMENT_PATTERNS:
        match = pattern.search(motion_text)
        if match:
            return AmendmentRef(type="amendment", number=int(match.group(1)))

    match = PREFIXED_AMENDMENT_PATTERN.search(motion_text)
    if match:
        return AmendmentRef(
            type=AMENDMENT_PREFIX_TYPES[match.group(1).lower()],
            number=int(match.group(2)),
        )
    return None
