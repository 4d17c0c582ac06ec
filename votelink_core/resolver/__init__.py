"""
Vote resolution.

- VoteResolver: runs ordered strategies against an action index
- ResolutionLog: append-only, JSONL-exportable record of outcomes
- DEFAULT_STRATEGIES: direct_bill_key, exact_roll, bill_same_day, motion, amendment
"""
from votelink_core.resolver.log import LOG_RECORD_SCHEMA, ResolutionLog
from votelink_core.resolver.resolver import VoteResolver
from votelink_core.resolver.strategies import DEFAULT_STRATEGIES, ResolutionStrategy, StrategyMatch

__all__ = [
    "VoteResolver",
    "ResolutionLog",
    "LOG_RECORD_SCHEMA",
    "ResolutionStrategy",
    "StrategyMatch",
    "DEFAULT_STRATEGIES",
]
