"""Line-level helpers shared by the header and block parsers."""

from __future__ import annotations

from .model import Span
from .tape import Tape

# Same set str.splitlines() breaks on, minus the ASCII separators.
NEWLINES = frozenset("\n\r\x0b\x0c\x85\u2028\u2029")


def is_newline(char: str | None) -> bool:
    return char is not None and char in NEWLINES


def consume_newline(tape: Tape) -> bool:
    """Consume one line break, treating ``\\r\\n`` as a single break."""
    if tape.consume_match("\r\n"):
        return True
    if is_newline(tape.peek()):
        tape.advance()
        return True
    return False


def discard_spaces(tape: Tape) -> None:
    while tape.peek() == " ":
        tape.advance()
    tape.start()


def parse_line(tape: Tape) -> Span:
    """Cut the current line, line break included."""
    while not tape.is_exhausted():
        if consume_newline(tape):
            break
        tape.advance()
    return tape.cut()


def discard_line(tape: Tape) -> None:
    parse_line(tape)


def parse_empty_line(tape: Tape) -> bool:
    """Consume a blank line if the tape is positioned on one."""
    if consume_newline(tape):
        tape.start()
        return True
    return False


def split_lines(tape: Tape) -> list[Span]:
    """
    Split the remainder of the tape into lines without their line breaks.

    Empty lines are kept, including a trailing one, so ``"a\\n"`` splits into
    ``["a", ""]`` and ``""`` into ``[""]``.
    """
    lines: list[Span] = []
    tape.start()
    while not tape.is_exhausted():
        if is_newline(tape.peek()):
            lines.append(tape.cut())
            consume_newline(tape)
            tape.start()
        else:
            tape.advance()
    lines.append(tape.cut())
    return lines
