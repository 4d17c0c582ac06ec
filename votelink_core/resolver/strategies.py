"""
Resolution strategies, tried in order until one matches.

0. direct_bill_key  vote's bill key is tracked by a bill-keyed index
1. exact_roll       an action carries this chamber's roll number (date +/- window)
2. bill_same_day    the vote's bill has an action on the vote date
3. motion           a same-date action's text matches the vote question
4. amendment        the question names an amendment; link to its parent bill

Each strategy is data: a name, a precondition and a matcher. New strategies
are appended to DEFAULT_STRATEGIES without touching the existing ones.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from votelink_core.bill_ids import extract_bill_reference
from votelink_core.config import ResolverConfig
from votelink_core.exceptions import InvalidInputError
from votelink_core.index.base import ActionIndex
from votelink_core.keys import days_between, make_bill_key
from votelink_core.models import IndexedAction, NormalizedVote
from votelink_core.motions import compare_motions, extract_amendment

logger = logging.getLogger(__name__)


@dataclass
class StrategyMatch:
    """What a matcher found: the bill, how sure it is, and why."""
    bill_key: str
    confidence: float
    metadata: dict[str, Any] = field(default_factory=dict)


Precondition = Callable[[NormalizedVote, ActionIndex], bool]
Matcher = Callable[[NormalizedVote, ActionIndex, ResolverConfig], Optional[StrategyMatch]]


@dataclass(frozen=True)
class ResolutionStrategy:
    name: str
    precondition: Precondition
    matcher: Matcher

    def applies_to(self, vote: NormalizedVote, index: ActionIndex) -> bool:
        return self.precondition(vote, index)

    def match(self, vote: NormalizedVote, index: ActionIndex, config: ResolverConfig) -> Optional[StrategyMatch]:
        return self.matcher(vote, index, config)


def _action_metadata(action: IndexedAction) -> dict[str, Any]:
    return {
        "action_text": action.action_text,
        "action_date": action.action_date.isoformat(),
    }


def _always(vote: NormalizedVote, index: ActionIndex) -> bool:
    return True


def _has_bill_key(vote: NormalizedVote, index: ActionIndex) -> bool:
    return bool(vote.bill_key)


def _has_bill_key_and_lookup(vote: NormalizedVote, index: ActionIndex) -> bool:
    return bool(vote.bill_key) and getattr(index, "supports_bill_key_lookup", False)


def match_direct_bill_key(vote: NormalizedVote, index: ActionIndex, config: ResolverConfig) -> Optional[StrategyMatch]:
    issue = index.find_by_bill_key(vote.bill_key)
    if issue is None:
        return None
    return StrategyMatch(
        bill_key=vote.bill_key,
        confidence=config.direct_bill_key_confidence,
        metadata={"issue_id": issue.id, "issue_title": issue.title},
    )


def match_exact_roll(vote: NormalizedVote, index: ActionIndex, config: ResolverConfig) -> Optional[StrategyMatch]:
    action = index.find_by_exact_roll(vote.chamber, vote.vote_date, vote.roll_number, config.roll_window_days)
    if action is None:
        return None
    return StrategyMatch(
        bill_key=action.bill_key,
        confidence=config.exact_roll_confidence,
        metadata={
            **_action_metadata(action),
            "date_offset": days_between(vote.vote_date, action.action_date),
        },
    )


def match_bill_same_day(vote: NormalizedVote, index: ActionIndex, config: ResolverConfig) -> Optional[StrategyMatch]:
    actions = index.find_by_bill_and_date(vote.bill_key, vote.vote_date)
    if not actions:
        return None
    return StrategyMatch(
        bill_key=actions[0].bill_key,
        confidence=config.bill_same_day_confidence,
        metadata=_action_metadata(actions[0]),
    )


def match_motion(vote: NormalizedVote, index: ActionIndex, config: ResolverConfig) -> Optional[StrategyMatch]:
    """Best-scoring same-date action in the vote's chamber (or of unknown chamber)."""
    best_action = None
    best_score = 0.0

    for action in index.find_by_date(vote.vote_date):
        if action.chamber and action.chamber != vote.chamber:
            continue

        comparison = compare_motions(vote.question, action.action_text)
        # Strictly greater: ties keep the first action seen
        if comparison.match and comparison.score >= config.motion_min_score and comparison.score > best_score:
            best_action = action
            best_score = comparison.score

    if best_action is None:
        return None
    return StrategyMatch(
        bill_key=best_action.bill_key,
        confidence=best_score,
        metadata={**_action_metadata(best_action), "motion_score": best_score},
    )


def _amendment_parent_actions(vote: NormalizedVote, index: ActionIndex) -> list[IndexedAction]:
    if vote.bill_key:
        actions = index.find_by_bill_and_date(vote.bill_key, vote.vote_date)
        if actions:
            return actions

    reference = extract_bill_reference(vote.question)
    if reference is None:
        return []
    try:
        bill_key = make_bill_key(vote.congress, reference.bill_type, reference.bill_number)
    except InvalidInputError as e:
        logger.debug(f"No usable bill key in question for {vote.vote_key}: {e}")
        return []
    return index.find_by_bill_and_date(bill_key, vote.vote_date)


def match_amendment(vote: NormalizedVote, index: ActionIndex, config: ResolverConfig) -> Optional[StrategyMatch]:
    amendment = extract_amendment(vote.question)
    if amendment is None:
        return None

    actions = _amendment_parent_actions(vote, index)
    if not actions:
        return None

    parent = actions[0]
    return StrategyMatch(
        bill_key=parent.bill_key,
        confidence=config.amendment_confidence,
        metadata={
            **_action_metadata(parent),
            "amendment_number": amendment.number,
            "parent_bill": parent.bill_key,
        },
    )


DEFAULT_STRATEGIES: tuple[ResolutionStrategy, ...] = (
    ResolutionStrategy("direct_bill_key", _has_bill_key_and_lookup, match_direct_bill_key),
    ResolutionStrategy("exact_roll", _always, match_exact_roll),
    ResolutionStrategy("bill_same_day", _has_bill_key, match_bill_same_day),
    ResolutionStrategy("motion", _always, match_motion),
    ResolutionStrategy("amendment", _always, match_amendment),
)
