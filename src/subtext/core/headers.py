"""
Header block parsing and manipulation.

A Subtext file may open with RFC 822 style ``Name: value`` lines terminated
by a blank line. Detection is all-or-nothing on the first line: if it is not
a valid header the whole text is body.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterator

from .lines import NEWLINES, consume_newline, discard_line, discard_spaces, is_newline, parse_empty_line
from .model import Document
from .tape import Tape
from .utils import unslugify

SUBTEXT_CONTENT_TYPE = "text/subtext"
SUBTEXT_EXTENSION = "subtext"

CONTENT_TYPE = "Content-Type"
CREATED = "Created"
MODIFIED = "Modified"
TITLE = "Title"
FILE_EXTENSION = "File-Extension"

_NEWLINE_TO_SPACE = {ord(c): " " for c in NEWLINES}
_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_name(name: str) -> str:
    """
    Normalize a header name to dash-separated capitalized words.

    Examples:
        >>> normalize_name("CONTENT TYPE")
        'Content-Type'
        >>> normalize_name("file-extension")
        'File-Extension'
    """
    dashed = _WHITESPACE_RUN.sub("-", name.strip())
    return "-".join(word.capitalize() for word in dashed.split("-"))


def normalize_value(value: str) -> str:
    return value.translate(_NEWLINE_TO_SPACE)


def format_date(date: datetime) -> str:
    """ISO 8601 in UTC, second precision. Naive datetimes are taken as UTC."""
    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    return date.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_date(text: str | None) -> datetime | None:
    if not text:
        return None
    text = text.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        date = datetime.fromisoformat(text)
    except ValueError:
        return None
    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    return date


@dataclass(frozen=True)
class Header:
    name: str
    value: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", normalize_name(self.name))
        object.__setattr__(self, "value", normalize_value(self.value))

    def __str__(self) -> str:
        return f"{self.name}: {self.value}\n"


@dataclass(frozen=True)
class Headers:
    """Ordered header list. Every operation returns a new value."""

    headers: tuple[Header, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", tuple(self.headers))

    @classmethod
    def parse(cls, markup: str) -> Headers:
        return parse_headers(Tape(markup))

    @classmethod
    def create(
        cls,
        content_type: str = SUBTEXT_CONTENT_TYPE,
        created: datetime | None = None,
        modified: datetime | None = None,
        title: str = "",
        file_extension: str = SUBTEXT_EXTENSION,
    ) -> Headers:
        now = datetime.now(timezone.utc)
        return WellKnownHeaders(
            content_type=content_type,
            created=created or now,
            modified=modified or now,
            title=title,
            file_extension=file_extension,
        ).to_headers()

    def __iter__(self) -> Iterator[Header]:
        return iter(self.headers)

    def __len__(self) -> int:
        return len(self.headers)

    def __getitem__(self, index: int) -> Header:
        return self.headers[index]

    @property
    def text(self) -> str:
        return "".join(str(header) for header in self.headers) + "\n"

    def __str__(self) -> str:
        return self.text

    def get_first(self, name: str) -> str | None:
        name = normalize_name(name)
        for header in self.headers:
            if header.name == name:
                return header.value
        return None

    def get_all(self, name: str) -> list[str]:
        name = normalize_name(name)
        return [header.value for header in self.headers if header.name == name]

    def append(self, name: str, value: str) -> Headers:
        return Headers(self.headers + (Header(name, value),))

    def replace(self, name: str, value: str) -> Headers:
        """Set the first header called ``name``, appending if there is none."""
        new = Header(name, value)
        headers = list(self.headers)
        for i, header in enumerate(headers):
            if header.name == new.name:
                headers[i] = new
                return Headers(headers)
        headers.append(new)
        return Headers(headers)

    def remove_all(self, name: str) -> Headers:
        name = normalize_name(name)
        return Headers(h for h in self.headers if h.name != name)

    def remove_duplicates(self) -> Headers:
        """Keep only the first header of each name."""
        seen: set[str] = set()
        kept = []
        for header in self.headers:
            if header.name in seen:
                continue
            seen.add(header.name)
            kept.append(header)
        return Headers(kept)

    def merge(self, other: Headers) -> Headers:
        """Append ``other`` then drop duplicates; existing headers win."""
        return Headers(self.headers + other.headers).remove_duplicates()

    def to_dict(self) -> dict[str, str]:
        return {h.name: h.value for h in self.remove_duplicates()}

    def content_type(self) -> str | None:
        return self.get_first(CONTENT_TYPE)

    def with_content_type(self, value: str) -> Headers:
        return self.replace(CONTENT_TYPE, value)

    def created(self) -> datetime | None:
        return parse_date(self.get_first(CREATED))

    def with_created(self, date: datetime) -> Headers:
        return self.replace(CREATED, format_date(date))

    def modified(self) -> datetime | None:
        return parse_date(self.get_first(MODIFIED))

    def with_modified(self, date: datetime) -> Headers:
        return self.replace(MODIFIED, format_date(date))

    def title(self) -> str | None:
        return self.get_first(TITLE)

    def with_title(self, value: str) -> Headers:
        return self.replace(TITLE, value)

    def file_extension(self) -> str | None:
        return self.get_first(FILE_EXTENSION)

    def with_file_extension(self, value: str) -> Headers:
        return self.replace(FILE_EXTENSION, value)


@dataclass(frozen=True)
class WellKnownHeaders:
    """The headers every memo is expected to carry, always fully populated."""

    content_type: str
    created: datetime
    modified: datetime
    title: str
    file_extension: str

    @classmethod
    def for_slug(cls, slug: str, now: datetime | None = None) -> WellKnownHeaders:
        now = now or datetime.now(timezone.utc)
        return cls(
            content_type=SUBTEXT_CONTENT_TYPE,
            created=now,
            modified=now,
            title=unslugify(slug),
            file_extension=SUBTEXT_EXTENSION,
        )

    @classmethod
    def from_headers(cls, headers: Headers, fallback: WellKnownHeaders) -> WellKnownHeaders:
        """Read well-known values from ``headers``, using ``fallback`` for gaps."""
        return cls(
            content_type=headers.content_type() or fallback.content_type,
            created=headers.created() or fallback.created,
            modified=headers.modified() or fallback.modified,
            title=headers.title() or fallback.title,
            file_extension=headers.file_extension() or fallback.file_extension,
        )

    def to_headers(self) -> Headers:
        return Headers(
            [
                Header(CONTENT_TYPE, self.content_type),
                Header(CREATED, format_date(self.created)),
                Header(MODIFIED, format_date(self.modified)),
                Header(TITLE, self.title),
                Header(FILE_EXTENSION, self.file_extension),
            ]
        )


def parse_name(tape: Tape) -> str | None:
    """Read ``Name:``; any whitespace or non-ASCII character rejects the line."""
    tape.start()
    while not tape.is_exhausted():
        char = tape.consume()
        if char == ":":
            name = tape.cut().drop_last().text
            return name or None
        if char is None or char.isspace() or is_newline(char) or not char.isascii():
            return None
    return None


def parse_value(tape: Tape) -> str:
    discard_spaces(tape)
    while not tape.is_exhausted():
        end = tape.current_index
        if consume_newline(tape):
            value = tape.base[tape.rest_index : end]
            tape.start()
            return value
        tape.advance()
    return tape.cut().text


def parse_header(tape: Tape) -> Header | None:
    tape.save()
    name = parse_name(tape)
    if name is None:
        tape.backtrack()
        return None
    return Header(name, parse_value(tape))


def parse_headers(tape: Tape) -> Headers:
    """
    Parse a header block from the front of the tape.

    On return ``tape.rest`` is the body. A leading blank line means no headers
    and is consumed; an invalid first line means no headers and nothing is
    consumed. After a valid first line, invalid lines are dropped until a
    blank line ends the block.
    """
    if parse_empty_line(tape):
        return Headers()
    first = parse_header(tape)
    if first is None:
        return Headers()
    headers = [first]
    while not tape.is_exhausted():
        tape.start()
        if parse_empty_line(tape):
            break
        header = parse_header(tape)
        if header is not None:
            headers.append(header)
        else:
            discard_line(tape)
    return Headers(headers)


def parse_headers_and_body(text: str) -> tuple[Headers, str]:
    tape = Tape(text)
    headers = parse_headers(tape)
    return headers, tape.rest


@dataclass(frozen=True)
class HeaderSubtext:
    """A header block wrapping a Subtext body."""

    headers: Headers
    body: Document

    @classmethod
    def parse(cls, markup: str) -> HeaderSubtext:
        headers, body = parse_headers_and_body(markup)
        return cls(headers, Document.parse(body))

    def __str__(self) -> str:
        if not self.headers:
            return self.body.base
        return self.headers.text + self.body.base
