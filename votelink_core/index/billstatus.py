"""
BILLSTATUS Action Index.

Indexes GovInfo BILLSTATUS XML documents by action date, bill key and
floor roll call so roll-call votes can be matched back to bills.

Maps:
- actions_by_date:     YYYY-MM-DD -> [IndexedAction]
- actions_by_bill_key: bill key   -> [IndexedAction]
- actions_by_roll:     chamber:YYYY-MM-DD:roll -> IndexedAction (first wins)
- bill_text_urls:      bill key   -> [BillTextUrl]

Roll lookups tolerate a +/-N day window: BILLSTATUS sometimes dates the
action on the legislative day rather than the calendar day of the vote.
"""
import logging
from collections import defaultdict
from datetime import timedelta
from pathlib import Path
from typing import Optional, Union

from rich.console import Console

from votelink_core.exceptions import InvalidInputError, MalformedDocumentError
from votelink_core.keys import DateLike, extract_roll_number, make_bill_key, normalize_chamber, to_date, to_iso_date
from votelink_core.models import BillTextUrl, IndexedAction
from votelink_core.readers.common import as_list, load_xml, node_text

logger = logging.getLogger(__name__)
console = Console()

DEFAULT_COLLECTION_PATTERN = "**/*BILLSTATUS*.xml"
PROGRESS_EVERY = 100


class BillStatusIndex:
    """In-memory index over BILLSTATUS actions. Build once, then query read-only."""

    supports_bill_key_lookup = False

    def __init__(self):
        self.actions_by_date: dict[str, list[IndexedAction]] = defaultdict(list)
        self.actions_by_bill_key: dict[str, list[IndexedAction]] = defaultdict(list)
        self.actions_by_roll: dict[str, IndexedAction] = {}
        self.bill_text_urls: dict[str, list[BillTextUrl]] = {}

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def index_document(self, doc: Union[str, bytes, dict], source: Optional[str] = None) -> str:
        """
        Index one BILLSTATUS document.

        Args:
            doc: XML text/bytes, or a dict already produced by xmltodict
            source: label used in error messages (usually the file path)

        Returns:
            Bill key of the indexed bill

        Raises:
            MalformedDocumentError: invalid XML, no <bill> element or an
                invalid bill identity
        """
        if isinstance(doc, dict):
            root = doc.get("billStatus") or doc
        else:
            root = load_xml(doc, ("billStatus",), source or "billstatus")
        bill = root.get("bill")
        if not isinstance(bill, dict):
            raise MalformedDocumentError("Invalid BILLSTATUS: missing bill element", source=source)

        bill_type = node_text(bill.get("billType") or bill.get("type")).lower().replace(".", "")
        try:
            bill_key = make_bill_key(
                node_text(bill.get("congress")),
                bill_type,
                node_text(bill.get("billNumber") or bill.get("number")),
            )
        except InvalidInputError as exc:
            raise MalformedDocumentError(f"Invalid bill identity: {exc}", source=source) from exc

        self._index_text_urls(bill_key, bill)

        for action in as_list((bill.get("actions") or {}).get("item")):
            if isinstance(action, dict):
                self._index_action(bill_key, bill_type, action)

        return bill_key

    def _index_action(self, bill_key: str, bill_type: str, action: dict) -> None:
        raw_date = node_text(action.get("actionDate")).split("T")[0]
        if not raw_date:
            return
        try:
            action_date = to_iso_date(raw_date)
        except InvalidInputError:
            logger.debug(f"Skipping action with invalid date {raw_date!r} on {bill_key}")
            return

        action_text = node_text(action.get("text"))
        chamber = self.determine_chamber(action, bill_type)
        roll_number = extract_roll_number(action_text)

        indexed = IndexedAction(
            bill_key=bill_key,
            action_date=to_date(action_date),
            action_text=action_text,
            roll_number=roll_number,
            action_code=node_text(action.get("actionCode") or action.get("type")),
            chamber=chamber,
        )

        self.actions_by_date[action_date].append(indexed)
        self.actions_by_bill_key[bill_key].append(indexed)

        if roll_number and chamber:
            self.actions_by_roll.setdefault(f"{chamber}:{action_date}:{roll_number}", indexed)

    def _index_text_urls(self, bill_key: str, bill: dict) -> None:
        urls = []
        for version in as_list((bill.get("textVersions") or {}).get("item")):
            if not isinstance(version, dict) or not isinstance(version.get("formats"), dict):
                continue
            for item in as_list(version["formats"].get("item")):
                if isinstance(item, dict) and node_text(item.get("url")):
                    urls.append(BillTextUrl(
                        url=node_text(item.get("url")),
                        format=node_text(item.get("type")) or node_text(version.get("type")) or "unknown",
                    ))

        if urls:
            self.bill_text_urls[bill_key] = urls

    @staticmethod
    def determine_chamber(action: dict, bill_type: str) -> Optional[str]:
        """
        Chamber an action happened in.

        Checks the source system name, then the action text, then falls
        back to the bill type prefix.
        """
        source_system = action.get("sourceSystem")
        if isinstance(source_system, dict):
            name = node_text(source_system.get("name")).lower()
            if "house" in name:
                return "house"
            if "senate" in name:
                return "senate"

        text = node_text(action.get("text")).lower()
        if "house floor" in text or "house of representatives" in text:
            return "house"
        if "senate floor" in text or "senate" in text:
            return "senate"

        if bill_type.startswith("h"):
            return "house"
        if bill_type.startswith("s"):
            return "senate"
        return None

    def index_file(self, path: Union[str, Path]) -> str:
        path = Path(path)
        return self.index_document(path.read_bytes(), source=str(path))

    def index_collection(self, path: Union[str, Path], pattern: str = DEFAULT_COLLECTION_PATTERN) -> dict[str, int]:
        """
        Index every BILLSTATUS file under path matching pattern.

        Files that fail to read or parse are logged and counted, not raised.

        Returns:
            {"indexed": n, "errors": m}
        """
        files = sorted(Path(path).glob(pattern))
        console.print(f"[cyan]Indexing {len(files)} BILLSTATUS files from {path}...[/cyan]")

        indexed = 0
        errors = 0
        for file in files:
            try:
                self.index_file(file)
            except (OSError, MalformedDocumentError) as e:
                logger.warning(f"Error indexing {file}: {e}")
                errors += 1
                continue

            indexed += 1
            if indexed % PROGRESS_EVERY == 0:
                console.print(f"[dim]Indexed {indexed}/{len(files)} files...[/dim]")

        stats = self.get_stats()
        console.print(f"[green]Indexing complete: {indexed} files indexed, {errors} errors[/green]")
        logger.info(
            f"BILLSTATUS index: {stats['total_actions']} actions, "
            f"{stats['actions_with_rolls']} with roll numbers, "
            f"{stats['bills_with_text_urls']} bills with text URLs"
        )
        return {"indexed": indexed, "errors": errors}

    def merge(self, other: "BillStatusIndex") -> "BillStatusIndex":
        """Fold an index built elsewhere into this one. Existing roll keys and text URLs win."""
        for day, actions in other.actions_by_date.items():
            self.actions_by_date[day].extend(actions)
        for bill_key, actions in other.actions_by_bill_key.items():
            self.actions_by_bill_key[bill_key].extend(actions)
        for roll_key, action in other.actions_by_roll.items():
            self.actions_by_roll.setdefault(roll_key, action)
        for bill_key, urls in other.bill_text_urls.items():
            self.bill_text_urls.setdefault(bill_key, list(urls))
        return self

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_by_exact_roll(
        self, chamber: str, vote_date: DateLike, roll_number: int, window_days: int = 1
    ) -> Optional[IndexedAction]:
        """
        Action carrying this chamber's roll number on vote_date.

        Tries the exact date first, then +/-1 day, +/-2 days... up to
        window_days, earlier day first at each distance.
        """
        try:
            chamber = normalize_chamber(chamber)
            center = to_date(vote_date)
        except InvalidInputError:
            logger.warning(f"Invalid input for roll lookup: {chamber!r} {vote_date!r}")
            return None

        offsets = [0]
        for distance in range(1, max(window_days, 0) + 1):
            offsets.extend((-distance, distance))

        for offset in offsets:
            day = (center + timedelta(days=offset)).isoformat()
            action = self.actions_by_roll.get(f"{chamber}:{day}:{roll_number}")
            if action is not None:
                return action
        return None

    def find_by_bill_and_date(self, bill_key: str, vote_date: DateLike) -> list[IndexedAction]:
        try:
            day = to_date(vote_date)
        except InvalidInputError:
            logger.warning(f"Invalid date for bill lookup: {vote_date!r}")
            return []
        return [a for a in self.actions_by_bill_key.get(bill_key, []) if a.action_date == day]

    def find_by_date(self, vote_date: DateLike) -> list[IndexedAction]:
        try:
            day = to_iso_date(vote_date)
        except InvalidInputError:
            logger.warning(f"Invalid date for date lookup: {vote_date!r}")
            return []
        return list(self.actions_by_date.get(day, []))

    def get_bill_text_urls(self, bill_key: str) -> list[BillTextUrl]:
        return list(self.bill_text_urls.get(bill_key, []))

    def get_stats(self) -> dict[str, int]:
        return {
            "actions_with_rolls": len(self.actions_by_roll),
            "unique_dates": len(self.actions_by_date),
            "unique_bills": len(self.actions_by_bill_key),
            "bills_with_text_urls": len(self.bill_text_urls),
            "total_actions": sum(len(actions) for actions in self.actions_by_date.values()),
        }
