# votelink_core/readers/__init__.py
"""
Roll-call source readers.

Each reader turns one chamber feed into a NormalizedVote:
- parse_house_xml: House Clerk roll-call XML
- parse_house_json: House EVS JSON export
- parse_senate_xml: Senate roll-call XML

parse_document routes by DocumentSource; read_vote_files loads batches
from disk and skips documents that fail to parse.
"""
from votelink_core.readers.common import normalize_position, parse_chamber_date
from votelink_core.readers.files import read_senate_file, read_vote_files
from votelink_core.readers.house import parse_house_json, parse_house_xml
from votelink_core.readers.registry import READERS, DocumentSource, parse_document
from votelink_core.readers.senate import parse_senate_xml

__all__ = [
    "DocumentSource",
    "READERS",
    "parse_document",
    "parse_house_xml",
    "parse_house_json",
    "parse_senate_xml",
    "read_vote_files",
    "read_senate_file",
    "normalize_position",
    "parse_chamber_date",
]
