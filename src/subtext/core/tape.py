"""Cursor over an immutable string, used by every parser in the engine."""

from __future__ import annotations

from .model import Span


class Tape:
    """
    A forward-only cursor with a single save point.

    The tape tracks three positions inside ``base``:

    - ``current_index``: the next character to read
    - ``rest_index``: where the not-yet-cut token begins
    - ``saved_index``: where ``backtrack()`` returns to

    All operations are total. Reading past the end yields ``None`` and
    advancing past the end is a no-op.

    Args:
        base: Text to scan
        start: First index the tape may read (defaults to 0)
        end: One past the last index the tape may read (defaults to len(base))
    """

    def __init__(self, base: str, start: int = 0, end: int | None = None):
        self.base = base
        self.start_index = start
        self.end_index = len(base) if end is None else end
        self.saved_index = start
        self.current_index = start
        self.rest_index = start

    @classmethod
    def over(cls, span: Span) -> Tape:
        """Tape restricted to ``span``, reporting offsets into its base."""
        return cls(span.base, span.start, span.end)

    @property
    def rest(self) -> str:
        return self.base[self.rest_index : self.end_index]

    def is_exhausted(self) -> bool:
        return self.current_index >= self.end_index

    def is_at_beginning(self) -> bool:
        return self.current_index == self.start_index

    def peek(self, offset: int = 0) -> str | None:
        index = self.current_index + offset
        if offset < 0 or index >= self.end_index:
            return None
        return self.base[index]

    def peek_next(self, count: int) -> str | None:
        end = self.current_index + count
        if end > self.end_index:
            return None
        return self.base[self.current_index : end]

    def advance(self) -> None:
        if self.current_index < self.end_index:
            self.current_index += 1

    def consume(self) -> str | None:
        char = self.peek()
        self.advance()
        return char

    def consume_match(self, literal: str) -> bool:
        if not literal:
            return False
        if self.base.startswith(literal, self.current_index, self.end_index):
            self.current_index += len(literal)
            return True
        return False

    def start(self) -> None:
        self.rest_index = self.current_index

    def cut(self) -> Span:
        span = Span(self.base, self.rest_index, self.current_index)
        self.rest_index = self.current_index
        return span

    def save(self) -> None:
        self.saved_index = self.current_index

    def backtrack(self) -> None:
        self.current_index = self.saved_index
        self.rest_index = self.saved_index
