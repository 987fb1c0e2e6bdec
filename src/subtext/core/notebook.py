import logging
from collections.abc import Iterable
from datetime import datetime, timezone

from .headers import WellKnownHeaders
from .model import Memo
from .ports import MemoCodec, ParserStrategy, StorageStrategy

logger = logging.getLogger(__name__)


class Notebook:
    def __init__(
        self, storage: StorageStrategy, parser: ParserStrategy, codec: MemoCodec
    ):
        self.storage = storage
        self.parser = parser
        self.codec = codec

    def fallback_headers(self, slug: str) -> WellKnownHeaders:
        """Well-known values for a memo file that lacks its own headers."""
        return WellKnownHeaders.for_slug(slug, now=self.storage.modified_time(slug))

    def get(self, slug: str) -> Memo | None:
        raw = self.storage.read_raw(slug)
        if raw is None:
            return None
        headers, body_text = self.codec.decode_file(raw)
        body = self.parser.parse(body_text)
        return Memo(
            slug=slug, headers=headers, body=body, fallback=self.fallback_headers(slug)
        )

    def put(self, memo: Memo) -> None:
        self.storage.write_raw(memo.slug, self.codec.encode_file(memo))

    def delete(self, slug: str) -> None:
        self.storage.delete_raw(slug)

    def list_slugs(self) -> Iterable[str]:
        return self.storage.list_all_ids()

    def mend(self, slug: str, touch: bool = False) -> Memo | None:
        """
        Fill in missing well-known headers and write the memo back.

        Existing headers keep their values and order; missing ones are
        appended from the fallback. With ``touch`` the Modified header is set
        to now.
        """
        memo = self.get(slug)
        if memo is None:
            return None
        headers = memo.headers.merge(memo.well_known.to_headers())
        if touch:
            headers = headers.with_modified(datetime.now(timezone.utc))
        mended = Memo(slug=slug, headers=headers, body=memo.body, fallback=memo.fallback)
        self.put(mended)
        logger.debug("mended headers for %s", slug)
        return mended
