"""
Custom exceptions for the votelink resolution pipeline.

These exceptions carry enough context to log and skip a single bad item
without aborting a batch. An unresolved vote is not an exception: it is a
ResolutionResult with strategy "none".
"""


class VoteLinkError(Exception):
    """Base exception for votelink errors."""
    pass


class InvalidInputError(VoteLinkError, ValueError):
    """A date, number or bill type could not be normalized into a key."""
    pass


class MalformedDocumentError(VoteLinkError):
    """A source document is missing required structure and must be skipped."""

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message)
        self.source = source

    def __str__(self) -> str:
        message = super().__str__()
        if self.source:
            return f"{message} (source: {self.source})"
        return message
