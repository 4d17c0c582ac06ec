"""
Issues Index.

Looks up tracked issues by bill. An alternative to BILLSTATUS indexing
when the application already stores one issue per bill: it resolves votes
that carry a bill key but knows nothing about floor actions, so every
action query returns "no data".
"""
import logging
from typing import Any, Iterable, Optional, Union

from votelink_core.bill_ids import normalize_bill_id
from votelink_core.config import IssuesConfig
from votelink_core.keys import DateLike
from votelink_core.models import BillTextUrl, IndexedAction, IssueRecord

logger = logging.getLogger(__name__)

# external_ids fields that point at readable bill text
TEXT_URL_FIELDS = ("congressgov_url", "legiscan_url")

IdentifierMapping = Union[tuple[str, Any], dict[str, Any]]


def _is_compact_bill_form(value: str) -> bool:
    """'HR5143', 'HB5143'; URLs and free text are skipped."""
    letters = value.rstrip("0123456789")
    return bool(letters) and letters.isalpha() and letters.isascii() and len(letters) < len(value)


class IssuesIndex:
    """Bill-keyed lookup over issue records."""

    supports_bill_key_lookup = True

    def __init__(self, config: Optional[IssuesConfig] = None):
        self.config = config or IssuesConfig()
        self.issues_by_canonical: dict[str, IssueRecord] = {}
        self.issues_by_bill_key: dict[str, IssueRecord] = {}
        self.issues_by_id: dict[Any, IssueRecord] = {}

    def canonical_to_bill_key(self, canonical: Optional[str]) -> Optional[str]:
        """
        Convert a canonical bill id to a bill key.

        "HR15" -> "119:hr:15" (default congress), "hr2766-118" -> "118:hr:2766".
        """
        identifier = normalize_bill_id(canonical)
        if identifier is None:
            return None
        if identifier.congress is None:
            identifier = identifier.model_copy(update={"congress": self.config.default_congress})
        return identifier.bill_key()

    def _add(self, canonical: str, issue: IssueRecord) -> bool:
        """Index issue under canonical unless already taken. Returns True if a bill key was added."""
        self.issues_by_canonical.setdefault(canonical.upper(), issue)

        bill_key = self.canonical_to_bill_key(canonical)
        if bill_key and bill_key not in self.issues_by_bill_key:
            self.issues_by_bill_key[bill_key] = issue
            return True
        return False

    def index_issues(
        self,
        issues: Iterable[Union[IssueRecord, dict]],
        identifiers: Iterable[IdentifierMapping] = (),
    ) -> dict[str, int]:
        """
        Index issue records and optional identifier mappings.

        canonical_bill_id takes precedence over the legacy canonical_normalized
        field. Identifier mappings (normalized_id, issue_id) only fill in
        entries no issue claimed.

        Returns:
            Counts: total_issues, indexed_by_canonical, indexed_by_bill_key,
            identifier_mappings
        """
        records = [
            issue if isinstance(issue, IssueRecord) else IssueRecord.model_validate(issue)
            for issue in issues
        ]
        records = [r for r in records if r.canonical_bill_id or r.canonical_normalized]

        for issue in records:
            self.issues_by_id[issue.id] = issue

        # Two passes so every canonical_bill_id beats every legacy field
        for issue in records:
            if issue.canonical_bill_id:
                self.issues_by_canonical[issue.canonical_bill_id.upper()] = issue
                bill_key = self.canonical_to_bill_key(issue.canonical_bill_id)
                if bill_key:
                    self.issues_by_bill_key[bill_key] = issue
        for issue in records:
            if issue.canonical_normalized:
                self._add(issue.canonical_normalized, issue)

        identifier_matches = 0
        for mapping in identifiers:
            if isinstance(mapping, dict):
                normalized_id, issue_id = mapping.get("normalized_id"), mapping.get("issue_id")
            else:
                normalized_id, issue_id = mapping
            if not normalized_id:
                continue

            issue = self.issues_by_id.get(issue_id)
            normalized_upper = str(normalized_id).strip().upper()
            if issue is None or not _is_compact_bill_form(normalized_upper):
                continue
            if self._add(normalized_upper, issue):
                identifier_matches += 1

        logger.info(
            f"Indexed {len(records)} issues: {len(self.issues_by_canonical)} canonical forms, "
            f"{len(self.issues_by_bill_key)} bill keys, {identifier_matches} from identifiers"
        )
        return {
            "total_issues": len(records),
            "indexed_by_canonical": len(self.issues_by_canonical),
            "indexed_by_bill_key": len(self.issues_by_bill_key),
            "identifier_mappings": identifier_matches,
        }

    def find_by_canonical(self, canonical_bill_id: Optional[str]) -> Optional[IssueRecord]:
        if not canonical_bill_id:
            return None
        return self.issues_by_canonical.get(canonical_bill_id.upper())

    def find_by_bill_key(self, bill_key: Optional[str]) -> Optional[IssueRecord]:
        if not bill_key:
            return None
        return self.issues_by_bill_key.get(bill_key)

    def get_bill_text_urls(self, bill_key: str) -> list[BillTextUrl]:
        issue = self.find_by_bill_key(bill_key)
        if issue is None:
            return []
        return [
            BillTextUrl(url=issue.external_ids[field], format="html")
            for field in TEXT_URL_FIELDS
            if issue.external_ids.get(field)
        ]

    def get_stats(self) -> dict[str, int]:
        return {
            "total_issues": len(self.issues_by_id),
            "indexed_by_canonical": len(self.issues_by_canonical),
            "indexed_by_bill_key": len(self.issues_by_bill_key),
        }

    # Issues carry no floor action history

    def find_by_exact_roll(
        self, chamber: str, vote_date: DateLike, roll_number: int, window_days: int = 1
    ) -> Optional[IndexedAction]:
        return None

    def find_by_bill_and_date(self, bill_key: str, vote_date: DateLike) -> list[IndexedAction]:
        return []

    def find_by_date(self, vote_date: DateLike) -> list[IndexedAction]:
        return []
