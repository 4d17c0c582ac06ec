"""Query interface the resolver expects from an action index."""
from typing import Optional, Protocol, runtime_checkable

from votelink_core.keys import DateLike
from votelink_core.models import BillTextUrl, IndexedAction


@runtime_checkable
class ActionIndex(Protocol):
    """
    Read-only lookups over indexed legislative actions.

    An index without data for a query returns None or an empty list; that
    is a "no data" signal, not an error.

    supports_bill_key_lookup marks indexes keyed by bill (issue stores)
    rather than by floor action; the resolver only tries a direct bill key
    match against those.
    """

    supports_bill_key_lookup: bool

    def find_by_exact_roll(
        self, chamber: str, vote_date: DateLike, roll_number: int, window_days: int = 1
    ) -> Optional[IndexedAction]:
        ...

    def find_by_bill_and_date(self, bill_key: str, vote_date: DateLike) -> list[IndexedAction]:
        ...

    def find_by_date(self, vote_date: DateLike) -> list[IndexedAction]:
        ...

    def get_bill_text_urls(self, bill_key: str) -> list[BillTextUrl]:
        ...
