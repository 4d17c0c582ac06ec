# votelink Core Library
# Main entry point: from votelink_core.resolver import VoteResolver

from .config import load_config, ResolverConfig, IssuesConfig

from .exceptions import VoteLinkError, InvalidInputError, MalformedDocumentError

from .keys import (
    make_vote_key,
    make_bill_key,
    parse_vote_key,
    parse_bill_key,
    extract_roll_number,
)

from .bill_ids import normalize_bill_id, extract_bill_reference
from .motions import canonicalize_motion, compare_motions, extract_amendment

from .models import (
    NormalizedVote,
    MemberVote,
    VotePosition,
    IndexedAction,
    BillIdentifier,
    IssueRecord,
    ResolutionResult,
)

from .readers import DocumentSource, parse_document, read_vote_files
from .index import BillStatusIndex, IssuesIndex
from .resolver import VoteResolver, ResolutionLog

__all__ = [
    # Config
    "load_config",
    "ResolverConfig",
    "IssuesConfig",
    # Errors
    "VoteLinkError",
    "InvalidInputError",
    "MalformedDocumentError",
    # Keys
    "make_vote_key",
    "make_bill_key",
    "parse_vote_key",
    "parse_bill_key",
    "extract_roll_number",
    # Normalization
    "normalize_bill_id",
    "extract_bill_reference",
    "canonicalize_motion",
    "compare_motions",
    "extract_amendment",
    # Models
    "NormalizedVote",
    "MemberVote",
    "VotePosition",
    "IndexedAction",
    "BillIdentifier",
    "IssueRecord",
    "ResolutionResult",
    # Pipeline
    "DocumentSource",
    "parse_document",
    "read_vote_files",
    "BillStatusIndex",
    "IssuesIndex",
    "VoteResolver",
    "ResolutionLog",
]
