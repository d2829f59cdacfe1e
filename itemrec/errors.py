"""Fatal error types raised while constructing recommendation model data.

Every error here aborts the whole run. They share a common base so callers
can stop on any of them, and each carries the offending source line so the
upstream artifact can be fixed.
"""


class ModelConstructionError(Exception):
    """
    Base class for all fatal model construction errors.

    Attributes:
        kind: Error category ("parse", "assertion" or "lookup")
        source: File the offending line came from (None if unknown)
        line_number: 1-based line number in `source` (None if unknown)
        line: Raw content of the offending line (None if unknown)
    """

    kind = "error"

    def __init__(
        self,
        message: str,
        source: str | None = None,
        line_number: int | None = None,
        line: str | None = None,
    ):
        self.source = source
        self.line_number = line_number
        self.line = line
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        location = self.source or ""
        if self.line_number is not None:
            location = f"{location}:{self.line_number}"
        if location:
            message = f"{message} ({location})"
        if self.line is not None:
            message = f"{message}: {self.line!r}"
        return message


class RecordParseError(ModelConstructionError):
    """A line of an input file cannot be split or converted."""

    kind = "parse"


class DuplicateIndexError(RecordParseError):
    """An index file defines the same index twice (strict mode only)."""


class ScoreFormatError(ModelConstructionError):
    """A score in the serialized prediction output is not a number."""

    kind = "assertion"


class IndexLookupError(ModelConstructionError):
    """A prediction refers to a user index missing from the users index."""

    kind = "lookup"
