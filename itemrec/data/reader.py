"""Line reading and number parsing shared by the input file loaders"""

import math
from pathlib import Path
from typing import Iterator

from ..errors import RecordParseError


def iter_lines(path: str | Path) -> Iterator[tuple[int, str]]:
    """
    Yield (line_number, line) for every line of a UTF-8 file, line ending removed.

    Lines are decoded one at a time so an undecodable byte is reported with
    the line it sits on.

    Raises:
        RecordParseError: A line is not valid UTF-8
    """
    with open(path, "rb") as f:
        for line_number, raw in enumerate(f, start=1):
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise RecordParseError(
                    f"Line is not valid UTF-8. {e}",
                    source=str(path),
                    line_number=line_number,
                    line=raw.decode("utf-8", errors="backslashreplace").rstrip("\r\n"),
                ) from e
            yield line_number, line.rstrip("\r\n")


def parse_int(value: str) -> int:
    """int() without the digit-group underscores Python alone accepts."""
    if "_" in value:
        raise ValueError(f"invalid literal for int(): {value!r}")
    return int(value)


def parse_double(value: str) -> float:
    """
    Parse a finite floating point number.

    Rejects nan/inf and digit-group underscores, neither of which may reach
    the serving store.
    """
    if "_" in value:
        raise ValueError(f"could not convert string to float: {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"score is not finite: {value!r}")
    return number
