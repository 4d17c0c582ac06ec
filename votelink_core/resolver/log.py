# votelink_core/resolver/log.py
"""
Resolution Log - append-only record of every resolve() call.

Design Decisions:
- One log per resolver (injected), so parallel workers each own theirs and
  merged() concatenates them afterwards
- Records are flat JSON-serializable dicts with ISO-8601 UTC timestamps
- LOG_RECORD_SCHEMA documents the exported JSONL line format for consumers

Usage:
    log = ResolutionLog()
    log.append(result)
    log.export_jsonl("resolution_log.jsonl")
"""
import json
from pathlib import Path
from typing import Any, Dict, Iterator, List, Union

from votelink_core.models import STRATEGY_NAMES, ResolutionLogEntry, ResolutionResult

LOG_RECORD_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "ResolutionLogRecord",
    "type": "object",
    "required": ["timestamp", "vote_key", "bill_key", "strategy", "confidence", "bill_text_urls", "metadata"],
    "properties": {
        "timestamp": {"type": "string"},
        "vote_key": {"type": "string", "pattern": "^(house|senate):\\d{4}-\\d{2}-\\d{2}:[1-9]\\d*$"},
        "bill_key": {"type": ["string", "null"]},
        "strategy": {"type": "string", "enum": list(STRATEGY_NAMES)},
        "confidence": {"type": "number", "minimum": 0, "maximum": 1},
        "reason": {"type": ["string", "null"]},
        "bill_text_urls": {"type": "array", "items": {"type": "string"}},
        "metadata": {"type": "object"},
    },
    "additionalProperties": False,
}


class ResolutionLog:
    """Append-only sequence of timestamped resolution results."""

    def __init__(self):
        self._entries: List[ResolutionLogEntry] = []

    def append(self, result: ResolutionResult) -> ResolutionLogEntry:
        entry = ResolutionLogEntry(result=result)
        self._entries.append(entry)
        return entry

    def __iter__(self) -> Iterator[ResolutionLogEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def results(self) -> List[ResolutionResult]:
        return [entry.result for entry in self._entries]

    def to_records(self) -> List[Dict[str, Any]]:
        return [entry.to_record() for entry in self._entries]

    def export_jsonl(self, path: Union[str, Path]) -> int:
        """
        Write one JSON record per line.

        Returns:
            Number of records written
        """
        records = self.to_records()
        with open(path, "w", encoding="utf-8") as f:
            for record in records:
                f.write(json.dumps(record) + "\n")
        return len(records)

    @classmethod
    def merged(cls, *logs: "ResolutionLog") -> "ResolutionLog":
        """New log holding the entries of logs, in argument order."""
        combined = cls()
        for log in logs:
            combined._entries.extend(log._entries)
        return combined
