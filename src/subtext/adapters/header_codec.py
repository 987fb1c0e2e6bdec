from ..core.headers import Headers, parse_headers_and_body
from ..core.model import Memo
from ..core.ports import MemoCodec


class HeaderSubtextCodec(MemoCodec):
    def decode_file(self, text: str) -> tuple[Headers, str]:
        return parse_headers_and_body(text)

    def encode_file(self, memo: Memo) -> str:
        # Headers come out normalized; malformed header lines are not restored
        return memo.to_markup()
