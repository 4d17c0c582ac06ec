"""
Legislative action indexes.

- BillStatusIndex: floor actions from BILLSTATUS XML (date, bill, roll)
- IssuesIndex: issue records keyed by bill, for direct bill key matches

Both satisfy the ActionIndex protocol the resolver queries.
"""
from votelink_core.index.base import ActionIndex
from votelink_core.index.billstatus import BillStatusIndex
from votelink_core.index.issues import IssuesIndex

__all__ = ["ActionIndex", "BillStatusIndex", "IssuesIndex"]
