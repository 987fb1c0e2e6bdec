from dataclasses import dataclass
from typing import Protocol
from .core.model import Memo, Span
from .core.ports import LinkResolver
from .core.shortlinks import shortlink_to_slug, shortlinks


@dataclass
class Finding:
    severity: str  # "info" | "warn" | "error"
    message: str
    span: Span | None = None


class LintRule(Protocol):
    id: str

    def check(self, memo: Memo, resolver: LinkResolver) -> list[Finding]:
        pass


class DeadLinksRule:
    id = "dead-links"

    def check(self, memo: Memo, resolver: LinkResolver) -> list[Finding]:
        out: list[Finding] = []
        for inline in shortlinks(memo.body):
            slug = shortlink_to_slug(inline)
            if slug is None:
                out.append(
                    Finding("warn", f"Not a valid address: {inline.text}", inline.span)
                )
            elif not resolver.exists(slug):
                out.append(
                    Finding("error", f"Unknown memo {slug}", inline.span)
                )
        return out


class MissingHeadersRule:
    id = "missing-headers"

    required = ("Content-Type", "Title")

    def check(self, memo: Memo, resolver: LinkResolver) -> list[Finding]:
        return [
            Finding("info", f"Missing {name} header")
            for name in self.required
            if memo.headers.get_first(name) is None
        ]
