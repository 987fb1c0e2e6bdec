"""
Default slug and slashlink addressing.

The parser only recognizes where shortlinks are; turning their text into
note addresses is done here and can be swapped out by callers of the
derivation and attribute functions.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import parse_qs, urlencode, urlsplit

from .utils import slugify, unslugify

_SLUG = re.compile(r"^[\w-]+(?:/[\w-]+)*$")
_PETNAME = re.compile(r"^[\w-]+(?:\.[\w-]+)*$")

SLASHLINK_URL_SCHEME = "sub"
SLASHLINK_URL_HOST = "slashlink"


@dataclass(frozen=True)
class Slug:
    value: str

    @classmethod
    def parse(cls, text: str) -> Slug | None:
        """Accept ``text`` only if it already is a canonical slug."""
        if text == text.lower() and _SLUG.match(text):
            return cls(text)
        return None

    @classmethod
    def format(cls, text: str) -> Slug | None:
        """Make a slug out of arbitrary text, or None if nothing survives."""
        return cls.parse(slugify(text))

    def to_title(self) -> str:
        return unslugify(self.value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Slashlink:
    """A ``/slug``, ``@petname`` or ``@petname/slug`` address."""

    slug: Slug
    petname: str | None = None

    PROFILE_SLUG = "_profile_"

    @classmethod
    def parse(cls, text: str) -> Slashlink | None:
        text = text.strip().lower()
        petname = None
        if text.startswith("@"):
            petname, sep, rest = text[1:].partition("/")
            if not _PETNAME.match(petname):
                return None
            if not sep:
                return cls(Slug(cls.PROFILE_SLUG), petname)
            text = "/" + rest
        if not text.startswith("/"):
            return None
        slug = Slug.parse(text[1:])
        if slug is None:
            return None
        return cls(slug, petname)

    @property
    def is_profile(self) -> bool:
        return self.slug.value == self.PROFILE_SLUG

    def to_title(self) -> str:
        if self.is_profile and self.petname:
            return self.petname
        return self.slug.to_title()

    def __str__(self) -> str:
        if self.petname is None:
            return f"/{self.slug}"
        if self.is_profile:
            return f"@{self.petname}"
        return f"@{self.petname}/{self.slug}"


@dataclass(frozen=True)
class SlashlinkURL:
    """``sub://slashlink?slashlink=/foo&text=Foo`` navigation target."""

    slashlink: Slashlink
    text: str | None = None

    def to_url(self) -> str:
        query = {"slashlink": str(self.slashlink)}
        if self.text:
            query["text"] = self.text
        return f"{SLASHLINK_URL_SCHEME}://{SLASHLINK_URL_HOST}?{urlencode(query)}"

    @classmethod
    def from_url(cls, url: str) -> SlashlinkURL | None:
        parts = urlsplit(url)
        if parts.scheme != SLASHLINK_URL_SCHEME or parts.netloc != SLASHLINK_URL_HOST:
            return None
        query = parse_qs(parts.query)
        values = query.get("slashlink")
        if not values:
            return None
        slashlink = Slashlink.parse(values[0])
        if slashlink is None:
            return None
        text = query.get("text", [None])[0]
        return cls(slashlink, text)

    @property
    def fallback(self) -> str:
        return self.text or self.slashlink.to_title()


def wikilink_to_slug(text: str) -> Slug | None:
    return Slug.format(text)


def slashlink_to_slug(text: str) -> Slug | None:
    """
    Slug for a slashlink body, the text after its sigil.

    Examples:
        >>> slashlink_to_slug("cats")
        Slug(value='cats')
        >>> slashlink_to_slug("bob/cats")
        Slug(value='bob/cats')
    """
    return Slug.parse(text.lower())
