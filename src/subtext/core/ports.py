from datetime import datetime
from typing import Iterable, Protocol

from .address import Slug
from .headers import Headers
from .model import Document, Memo


class StorageStrategy(Protocol):
    """
    Flat store: one directory, files named <slug>.subtext
    """

    def read_raw(self, slug: str) -> str | None:
        pass

    def write_raw(self, slug: str, contents: str) -> None:
        pass

    def delete_raw(self, slug: str) -> None:
        pass

    def list_all_ids(self) -> Iterable[str]:
        pass

    def modified_time(self, slug: str) -> datetime | None:
        pass


class ParserStrategy(Protocol):
    """
    Parse a memo body into a Document. Must never raise on any text.
    """

    def parse(self, text: str) -> Document:
        pass


class MemoCodec(Protocol):
    """
    Split a file into its header block and body, and join them back.
    """

    def decode_file(self, text: str) -> tuple[Headers, str]:
        pass

    def encode_file(self, memo: Memo) -> str:
        pass


class LinkResolver(Protocol):
    """
    Slug-only resolution. Petnames are not followed.
    """

    def exists(self, slug: Slug) -> bool:
        pass


class Index(Protocol):
    """
    Cache derived state; safe to rebuild at any time.
    """

    def rebuild(self) -> None:
        pass

    def links_out(self, slug: str) -> list[Slug]:
        pass

    def links_in(self, slug: str) -> list[str]:
        pass

    def search(self, query: str) -> list[str]:
        pass
