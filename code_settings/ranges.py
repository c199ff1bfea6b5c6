"""Parser for the ``start..end`` line-range mini-language."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from typing import Sequence, TypeVar

T = TypeVar("T")

UNBOUNDED = sys.maxsize
EXPECTED_RANGE_FORMAT = "start..end"
DEFAULT_RANGE_EXPRESSION = ".."

RE_UNSIGNED = re.compile(r"\+?[0-9]+")


class RangeFormatError(ValueError):
    """Raised when a range expression has no delimiter to split on."""

    def __init__(self, field: str, expected: str = EXPECTED_RANGE_FORMAT):
        self.field = field
        self.expected = expected
        super().__init__(f"Invalid {field} format, expected {expected}")


@dataclass(frozen=True, slots=True)
class LineRange:
    """Zero-based half-open ``[start, end)`` selection of lines.

    ``start`` may exceed ``end``; such a range selects nothing.
    """

    start: int = 0
    end: int = UNBOUNDED

    @property
    def is_unbounded(self) -> bool:
        return self.end == UNBOUNDED

    def select(self, items: Sequence[T]) -> Sequence[T]:
        """Return the slice of ``items`` covered by this range."""

        return items[self.start:self.end]


def _parse_unsigned(text: str) -> int | None:
    if not RE_UNSIGNED.fullmatch(text):
        return None
    value = int(text)
    if value > UNBOUNDED:
        return None
    return value


def parse_range(value: str, *, field: str = "range") -> LineRange:
    """Convert a 1-based inclusive ``start<sep>end`` string to a LineRange.

    Any single non-numeric character acts as the separator; bounds are
    read as ASCII digits only. Missing or
    unparsable bounds fall back to the start of the content and to the end
    of the content respectively.
    """

    delimiter = next((char for char in value if not char.isnumeric()), None)
    if delimiter is None:
        raise RangeFormatError(field)

    start_text, _, end_text = value.partition(delimiter)

    start = _parse_unsigned(start_text.replace(delimiter, ""))
    if start is None:
        start = 0
    elif start >= 1:
        start -= 1

    end = _parse_unsigned(end_text.replace(delimiter, ""))
    if end is None:
        end = UNBOUNDED
    else:
        end = min(end + 1, UNBOUNDED)

    return LineRange(start, end)


__all__ = [
    "DEFAULT_RANGE_EXPRESSION",
    "EXPECTED_RANGE_FORMAT",
    "LineRange",
    "RangeFormatError",
    "UNBOUNDED",
    "parse_range",
]
