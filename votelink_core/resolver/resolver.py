# votelink_core/resolver/resolver.py
"""
Vote Resolver - matches normalized roll-call votes to bills.

Runs the ordered strategies from resolver.strategies against one action
index and records every outcome, resolved or not, in a ResolutionLog.
An unresolved vote is a normal result (strategy "none") carrying a
semicolon-separated reason code list, never an exception.
"""
import logging
from collections import Counter
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from votelink_core.config import ResolverConfig
from votelink_core.exceptions import InvalidInputError
from votelink_core.index.base import ActionIndex
from votelink_core.models import STRATEGY_NAMES, NormalizedVote, ResolutionResult
from votelink_core.resolver.log import ResolutionLog
from votelink_core.resolver.strategies import DEFAULT_STRATEGIES, ResolutionStrategy

logger = logging.getLogger(__name__)

# Failure reason codes
NO_BILL_REFERENCE = "no_bill_reference_in_vote"
NO_ACTIONS_FOR_DATE = "no_actions_indexed_for_date"
NO_CHAMBER_ACTIONS = "no_chamber_actions_on_date"
NO_MOTION_TEXT = "no_motion_text"
NO_MATCHING_CRITERIA = "no_matching_criteria"


def _percent(count: int, total: int) -> str:
    return f"{(count / total * 100) if total else 0.0:.2f}%"


class VoteResolver:
    """
    Resolve votes against one index.

    Usage:
        resolver = VoteResolver(index)
        result = resolver.resolve(vote)
        resolver.get_stats()["resolution_rate"]  # "87.50%"
    """

    def __init__(
        self,
        index: ActionIndex,
        log: Optional[ResolutionLog] = None,
        config: Optional[ResolverConfig] = None,
        strategies: Optional[Sequence[ResolutionStrategy]] = None,
    ):
        self.index = index
        self.log = log if log is not None else ResolutionLog()
        self.config = config or ResolverConfig()
        self.strategies = tuple(strategies) if strategies is not None else DEFAULT_STRATEGIES

    def resolve(self, vote: NormalizedVote) -> ResolutionResult:
        """
        Resolve one vote to a bill.

        Returns:
            ResolutionResult from the first strategy that matches, or an
            unresolved result with strategy "none"

        Raises:
            InvalidInputError: vote has no vote key
        """
        if vote is None or not getattr(vote, "vote_key", None):
            raise InvalidInputError("Cannot resolve a vote without a vote key")

        for strategy in self.strategies:
            if not strategy.applies_to(vote, self.index):
                continue
            found = strategy.match(vote, self.index, self.config)
            if found is None:
                continue

            result = ResolutionResult(
                vote_key=vote.vote_key,
                bill_key=found.bill_key,
                strategy=strategy.name,
                confidence=found.confidence,
                bill_text_urls=[u.url for u in self.index.get_bill_text_urls(found.bill_key)],
                metadata=found.metadata,
            )
            logger.debug(f"{vote.vote_key} -> {found.bill_key} via {strategy.name} ({found.confidence:.2f})")
            self.log.append(result)
            return result

        reason = self.determine_failure_reason(vote)
        result = ResolutionResult(vote_key=vote.vote_key, reason=reason)
        logger.debug(f"{vote.vote_key} unresolved: {reason}")
        self.log.append(result)
        return result

    def resolve_all(self, votes: Iterable[NormalizedVote]) -> List[ResolutionResult]:
        results = [self.resolve(vote) for vote in votes]
        logger.info(
            f"Resolved {sum(1 for r in results if r.resolved)}/{len(results)} votes"
        )
        return results

    def determine_failure_reason(self, vote: NormalizedVote) -> str:
        reasons = []

        if not vote.bill_key and not vote.bill_number:
            reasons.append(NO_BILL_REFERENCE)

        actions_on_date = self.index.find_by_date(vote.vote_date)
        if not actions_on_date:
            reasons.append(NO_ACTIONS_FOR_DATE)

        if not any(not a.chamber or a.chamber == vote.chamber for a in actions_on_date):
            reasons.append(NO_CHAMBER_ACTIONS)

        if not (vote.question or "").strip():
            reasons.append(NO_MOTION_TEXT)

        return "; ".join(reasons or [NO_MATCHING_CRITERIA])

    def get_stats(self) -> Dict[str, Any]:
        """
        Aggregate counts over everything in the log.

        Returns:
            total, resolved, unresolved, resolution_rate, exact_roll_rate,
            direct_bill_key_rate, by_strategy, rates, unresolved_reasons,
            missing_text_urls
        """
        results = self.log.results()
        total = len(results)

        by_strategy = {name: 0 for name in STRATEGY_NAMES}
        unresolved_reasons: Counter = Counter()
        missing_text_urls = 0

        for result in results:
            by_strategy[result.strategy] += 1
            if result.resolved:
                if not result.bill_text_urls:
                    missing_text_urls += 1
            elif result.reason:
                unresolved_reasons.update(code.strip() for code in result.reason.split(";"))

        resolved = total - by_strategy["none"]
        return {
            "total": total,
            "resolved": resolved,
            "unresolved": by_strategy["none"],
            "resolution_rate": _percent(resolved, total),
            "exact_roll_rate": _percent(by_strategy["exact_roll"], total),
            "direct_bill_key_rate": _percent(by_strategy["direct_bill_key"], total),
            "by_strategy": by_strategy,
            "rates": {name: _percent(count, total) for name, count in by_strategy.items()},
            "unresolved_reasons": dict(unresolved_reasons),
            "missing_text_urls": missing_text_urls,
        }

    def get_unresolved(self) -> List[ResolutionResult]:
        return [result for result in self.log.results() if not result.resolved]

    def export_log(self, path: Union[str, Path]) -> int:
        count = self.log.export_jsonl(path)
        logger.info(f"Exported {count} resolution records to {path}")
        return count
