from __future__ import annotations

import io
from dataclasses import dataclass
from typing import IO, Iterator, List, Union

SYMBOLS = frozenset('+-<>.,[]')

Source = Union[str, bytes, IO]


@dataclass(frozen=True)
class Symbol:
    char: str
    line: int    # 1-based
    column: int  # 1-based


class Scanner:
    """Yields the recognized symbols of a source, skipping everything else.

    The source is read line by line. Every line read is kept in ``lines``
    for error context, so memory grows with the source. Binary sources are
    decoded as latin-1: the symbols are ASCII and any other byte is a comment.
    """

    def __init__(self, source: Source):
        if isinstance(source, str):
            source = io.StringIO(source)
        elif isinstance(source, bytes):
            source = io.BytesIO(source)
        self._stream = source
        self.lines: List[str] = []

    def __iter__(self) -> Iterator[Symbol]:
        for line_no, text in enumerate(self._stream, start=1):
            if isinstance(text, bytes):
                text = text.decode('latin-1')
            self.lines.append(text)
            for col, ch in enumerate(text, start=1):
                if ch in SYMBOLS:
                    yield Symbol(ch, line_no, col)


def scan(source: Source) -> Iterator[Symbol]:
    return iter(Scanner(source))
