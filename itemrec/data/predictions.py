"""Parsing of the serialized prediction output (predicted.tsv)"""

from pathlib import Path
from typing import Iterator

from ..errors import RecordParseError, ScoreFormatError
from .reader import iter_lines, parse_double, parse_int
from .types import PredictionRecord

PAIR_SEPARATOR = ","
SCORE_SEPARATOR = ":"


def parse_predicted_scores(data: str) -> list[tuple[str, float]]:
    """
    Parse a bracketed score list into (item, score) pairs.

    The payload is wrapped in one leading and one trailing character and
    holds comma-separated `item:score` pairs:

        [24:3.2]       => [("24", 3.2)]
        [8:2.5,0:2.5]  => [("8", 2.5), ("0", 2.5)]
        []             => []

    Item indices are returned as strings; converting them is up to the caller.

    Args:
        data: Serialized scores, delimiters included

    Returns:
        List of (item, score) in source order

    Raises:
        RecordParseError: The payload is too short to carry both delimiters
        ScoreFormatError: A pair has no score, or the score is not a finite
                          number
    """
    if len(data) < 2:
        raise RecordParseError(f"Prediction output is not delimited: {data!r}")

    body = data[1:-1]
    if not body:
        return []

    pairs = []
    for piece in body.split(PAIR_SEPARATOR):
        item, sep, raw_score = piece.partition(SCORE_SEPARATOR)
        try:
            if not sep:
                raise ValueError("missing score")
            score = parse_double(raw_score)
        except ValueError as e:
            raise ScoreFormatError(
                f"Cannot convert rating value of item {item} to double: {piece!r}. {e}"
            ) from e
        pairs.append((item, score))

    return pairs


def parse_prediction_line(
    line: str,
    line_number: int | None = None,
    source: str | None = None,
) -> PredictionRecord:
    """
    Parse one `uindex<TAB>[iindex:score,...]` line.

    Args:
        line: Line content without the line ending
        line_number: Position in the file, kept for error reporting
        source: File name, kept for error reporting

    Returns:
        PredictionRecord with integer item indices

    Raises:
        RecordParseError: Missing fields or non-integer user/item index
        ScoreFormatError: A score is not a number
    """
    fields = line.split("\t")
    try:
        uindex, predicted_data = parse_int(fields[0]), fields[1]
    except (IndexError, ValueError) as e:
        raise RecordParseError(
            f"Cannot extract uindex and prediction output from this line. {e}",
            source=source, line_number=line_number, line=line,
        ) from e

    try:
        pairs = parse_predicted_scores(predicted_data)
        items = [(parse_int(item), score) for item, score in pairs]
    except ValueError as e:
        raise RecordParseError(
            f"Cannot convert item index to int. {e}",
            source=source, line_number=line_number, line=line,
        ) from e
    except (RecordParseError, ScoreFormatError) as e:
        # Attach the location the bare payload parser does not know about
        e.source, e.line_number, e.line = source, line_number, line
        raise

    return PredictionRecord(
        user_index=uindex,
        items=items,
        line_number=line_number,
        line=line,
    )


def iter_prediction_lines(path: str | Path) -> Iterator[tuple[int, str]]:
    """
    Yield (line_number, line) for every line of the prediction file.

    Blank lines are included; the caller decides what to do with them.

    Raises:
        RecordParseError: A line is not valid UTF-8
    """
    return iter_lines(path)
