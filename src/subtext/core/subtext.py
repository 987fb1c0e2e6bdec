"""Block and inline parser for Subtext markup."""

from __future__ import annotations

from .lines import split_lines
from .model import Block, Document, Inline, Span
from .tape import Tape

SLASHLINK_SIGILS = ("/", "@")

# Punctuation that ends an address when followed by a space or the line end.
ADDRESS_TRAILING_PUNCTUATION = frozenset(".?!,;|'\"(){}[]<>")

_BLOCK_SIGILS = {
    "#": "heading",
    ">": "quote",
    "-": "list",
}

_INLINE_DELIMITERS = {
    "*": "bold",
    "_": "italic",
    "`": "code",
}


def consume_address_body(tape: Tape) -> Span:
    """Consume the body of a URL or slashlink and cut from the token start."""
    while not tape.is_exhausted():
        char = tape.peek()
        if char == " " or char == "\n":
            break
        if char in ADDRESS_TRAILING_PUNCTUATION:
            following = tape.peek(1)
            if following is None or following == " ":
                break
        tape.advance()
    return tape.cut()


def parse_bracketlink(tape: Tape) -> Span | None:
    tape.save()
    while not tape.is_exhausted():
        if tape.consume_match(" "):
            tape.backtrack()
            return None
        if tape.consume_match(">"):
            return tape.cut()
        tape.advance()
    tape.backtrack()
    return None


def parse_wikilink(tape: Tape) -> Span | None:
    tape.save()
    while not tape.is_exhausted():
        if tape.consume_match("["):
            tape.backtrack()
            return None
        if tape.consume_match("]]"):
            return tape.cut()
        tape.advance()
    tape.backtrack()
    return None


def parse_delimited(tape: Tape, closer: str) -> Span | None:
    """Scan to ``closer``; on failure rewind to just past the opener."""
    tape.save()
    while not tape.is_exhausted():
        if tape.consume_match(closer):
            return tape.cut()
        tape.advance()
    tape.backtrack()
    return None


def parse_inline(tape: Tape) -> list[Inline]:
    """Single left-to-right scan of a line for inline markup."""
    inline: list[Inline] = []
    while not tape.is_exhausted():
        tape.start()
        char = tape.peek()
        if tape.is_at_beginning() and char in SLASHLINK_SIGILS:
            tape.advance()
            inline.append(Inline("slashlink", consume_address_body(tape)))
        elif tape.consume_match(" /") or tape.consume_match(" @"):
            span = consume_address_body(tape).drop_first()
            inline.append(Inline("slashlink", span))
        elif tape.consume_match("<"):
            span = parse_bracketlink(tape)
            if span is not None:
                inline.append(Inline("bracketlink", span))
        elif tape.consume_match("[["):
            span = parse_wikilink(tape)
            if span is not None:
                inline.append(Inline("wikilink", span))
        elif tape.consume_match("https://") or tape.consume_match("http://"):
            inline.append(Inline("link", consume_address_body(tape)))
        elif char in _INLINE_DELIMITERS:
            tape.advance()
            span = parse_delimited(tape, char)
            if span is not None:
                inline.append(Inline(_INLINE_DELIMITERS[char], span))
        else:
            tape.advance()
    return inline


def parse_block(line: Span) -> Block:
    if len(line) == 0:
        return Block("empty", line)
    kind = _BLOCK_SIGILS.get(line.base[line.start], "text")
    if kind == "heading":
        return Block("heading", line)
    tape = Tape.over(line)
    if kind != "text":
        tape.advance()
    return Block(kind, line, tuple(parse_inline(tape)))


def parse_document(markup: str) -> Document:
    """
    Parse Subtext markup into a Document.

    Every line becomes exactly one block, blank lines included. Never raises:
    malformed inline markup is left as plain text.
    """
    lines = split_lines(Tape(markup))
    return Document(markup, tuple(parse_block(line) for line in lines))


class SubtextParser:
    """Parser strategy used by the notebook."""

    def parse(self, text: str) -> Document:
        return parse_document(text)
