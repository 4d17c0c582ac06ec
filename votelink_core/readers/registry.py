"""Routes a raw document to the reader for its feed."""
from enum import Enum
from typing import Callable, Union

from votelink_core.exceptions import InvalidInputError
from votelink_core.models import NormalizedVote
from votelink_core.readers.house import parse_house_json, parse_house_xml
from votelink_core.readers.senate import parse_senate_xml


class DocumentSource(str, Enum):
    HOUSE_XML = "house_xml"
    HOUSE_JSON = "house_json"
    SENATE_XML = "senate_xml"


READERS: dict[DocumentSource, Callable[..., NormalizedVote]] = {
    DocumentSource.HOUSE_XML: parse_house_xml,
    DocumentSource.HOUSE_JSON: parse_house_json,
    DocumentSource.SENATE_XML: parse_senate_xml,
}


def parse_document(source: Union[DocumentSource, str], raw) -> NormalizedVote:
    """
    Parse raw with the reader registered for source.

    Raises:
        InvalidInputError: unknown source
        MalformedDocumentError: the reader rejected the document
    """
    try:
        source = DocumentSource(source)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown document source: {source!r}") from exc
    return READERS[source](raw)
