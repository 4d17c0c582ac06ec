"""
Batch loaders for roll-call files on disk.

read_vote_files accepts a single file, a directory, a glob pattern or a
list of paths. Documents that fail to parse are logged and skipped so one
bad download does not stop a batch.
"""
import glob
import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from rich.console import Console

from votelink_core.exceptions import MalformedDocumentError
from votelink_core.models import NormalizedVote
from votelink_core.readers.common import decode_document
from votelink_core.readers.registry import DocumentSource, parse_document
from votelink_core.readers.senate import parse_senate_xml

logger = logging.getLogger(__name__)
console = Console()

VOTE_FILE_SUFFIXES = (".xml", ".json")

PathLike = Union[str, Path]


def _resolve_targets(target: Union[PathLike, Iterable[PathLike]]) -> list[Path]:
    if isinstance(target, (list, tuple, set)):
        return [Path(p) for p in target]

    path = Path(target)
    if path.is_dir():
        return sorted(p for p in path.iterdir() if p.suffix.lower() in VOTE_FILE_SUFFIXES)
    if path.is_file():
        return [path]
    if any(ch in str(target) for ch in "*?["):
        return sorted(Path(p) for p in glob.glob(str(target), recursive=True))

    logger.warning(f"No vote files found at {target}")
    return []


def detect_source(path: Path, content: str) -> Optional[DocumentSource]:
    """Pick a reader from the file extension and, for XML, the root element."""
    suffix = path.suffix.lower()
    if suffix == ".json":
        return DocumentSource.HOUSE_JSON
    if suffix == ".xml":
        if "<roll_call_vote" in content:
            return DocumentSource.SENATE_XML
        return DocumentSource.HOUSE_XML
    return None


def read_vote_files(
    target: Union[PathLike, Iterable[PathLike]],
    source: Optional[Union[DocumentSource, str]] = None,
) -> list[NormalizedVote]:
    """
    Parse every vote document at target.

    Args:
        target: file, directory, glob pattern or list of paths
        source: force one reader for every file instead of detecting it

    Returns:
        Successfully parsed votes, in file order
    """
    votes = []
    skipped = 0

    for path in _resolve_targets(target):
        try:
            content = decode_document(path.read_bytes(), str(path))
        except (OSError, MalformedDocumentError) as e:
            logger.warning(f"Skipping {path}: {e}")
            skipped += 1
            continue

        doc_source = source or detect_source(path, content)
        if doc_source is None:
            logger.warning(f"Unsupported file type: {path}")
            skipped += 1
            continue

        try:
            votes.append(parse_document(doc_source, content))
        except MalformedDocumentError as e:
            logger.warning(f"Skipping {path}: {e}")
            skipped += 1

    logger.info(f"Read {len(votes)} votes ({skipped} skipped)")
    console.print(f"[green]Loaded {len(votes)} votes[/green] [dim]({skipped} skipped)[/dim]")
    return votes


def read_senate_file(path: PathLike) -> NormalizedVote:
    """Parse one Senate roll-call XML file; errors propagate."""
    return parse_senate_xml(Path(path).read_bytes())
