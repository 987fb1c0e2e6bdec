"""FastAPI application for the subtext local JSON API."""

import secrets
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from .. import __version__
from ..core.address import Slug
from ..core.attributes import project_attributes
from ..core.excerpt import excerpt, summarize
from ..core.headers import HeaderSubtext
from ..core.model import Document
from ..core.shortlinks import collect_links, find_inline_at
from ..format.serialize import (
    attributes_to_list,
    document_to_dict,
    headers_to_dict,
    inline_to_dict,
)


class MarkupRequest(BaseModel):
    text: str


class ExcerptRequest(BaseModel):
    text: str
    fallback: str | None = None


class LookupRequest(BaseModel):
    text: str
    index: int
    kind: str | None = None


def create_app(runtime: Any, token: str | None = None, enable_cors: bool = False) -> FastAPI:
    """
    Create FastAPI application with runtime injected.

    Args:
        runtime: Runtime instance with notebook and index
        token: Bearer token for authentication (None to disable auth)
        enable_cors: Enable CORS middleware

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Subtext API",
        description="Local JSON API for parsing Subtext and browsing a notebook",
        version=__version__,
        docs_url="/docs" if token is None else None,
        redoc_url="/redoc" if token is None else None,
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if token:
        security_scheme = HTTPBearer(auto_error=False)

        async def verify_token(
            credentials: HTTPAuthorizationCredentials | None = Security(security_scheme),  # noqa: B008
        ) -> None:
            """Verify bearer token."""
            if credentials is None or credentials.credentials != token:
                raise HTTPException(status_code=401, detail="Invalid or missing token")
    else:

        async def verify_token() -> None:
            """No-op when auth is disabled."""
            return None

    def _excerpt(document: Document) -> str:
        config = runtime.config.excerpt
        return excerpt(document, fallback=config.fallback, limit=config.limit)

    @app.get("/health")  # type: ignore[misc]
    async def health(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "version": __version__}

    @app.post("/parse")  # type: ignore[misc]
    async def parse(req: MarkupRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Parse headers and body of a Subtext text."""
        envelope = HeaderSubtext.parse(req.text)
        return {
            "headers": headers_to_dict(envelope.headers),
            **document_to_dict(envelope.body),
        }

    @app.post("/excerpt")  # type: ignore[misc]
    async def get_excerpt(req: ExcerptRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Excerpt and title/summary of a Subtext text."""
        config = runtime.config.excerpt
        envelope = HeaderSubtext.parse(req.text)
        fallback = req.fallback if req.fallback is not None else config.fallback
        summary = summarize(envelope.body)
        return {
            "excerpt": excerpt(envelope.body, fallback=fallback, limit=config.limit),
            "title": summary.title,
        }

    @app.post("/attributes")  # type: ignore[misc]
    async def attributes(req: MarkupRequest, auth: None = Depends(verify_token)) -> list[dict[str, Any]]:
        """Display attribute ranges for the body of a Subtext text."""
        envelope = HeaderSubtext.parse(req.text)
        ranges = project_attributes(
            envelope.body, paragraph_spacing=runtime.config.render.paragraph_spacing
        )
        return attributes_to_list(ranges)

    @app.post("/lookup")  # type: ignore[misc]
    async def lookup(req: LookupRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Shortlink ending at a character offset of the body."""
        envelope = HeaderSubtext.parse(req.text)
        inline = find_inline_at(envelope.body, req.index, req.kind)
        if inline is None:
            raise HTTPException(status_code=404, detail=f"No shortlink ends at {req.index}")
        return inline_to_dict(inline)

    @app.get("/notes/{slug:path}")  # type: ignore[misc]
    async def get_note(slug: str, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Get memo headers and body."""
        memo = runtime.notebook.get(slug) if Slug.parse(slug) else None
        if memo is None:
            raise HTTPException(status_code=404, detail=f"Memo {slug} not found")

        well_known = memo.well_known
        return {
            "slug": memo.slug,
            "title": well_known.title,
            "created": well_known.created.isoformat(),
            "modified": well_known.modified.isoformat(),
            "headers": headers_to_dict(memo.headers),
            "excerpt": _excerpt(memo.body),
            "links": [link.value for link in collect_links(memo.body)],
            "body": memo.body.base,
        }

    @app.get("/backlinks")  # type: ignore[misc]
    async def backlinks(
        slug: str = Query(..., description="Target slug"),
        auth: None = Depends(verify_token),
    ) -> list[dict[str, Any]]:
        """Memos linking to a slug."""
        runtime.index.rebuild()
        output = []
        for source in runtime.index.links_in(slug):
            memo = runtime.notebook.get(source)
            if memo is not None:
                output.append({"source": source, "excerpt": _excerpt(memo.body)})
        return output

    @app.get("/graph")  # type: ignore[misc]
    async def graph(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Get graph data."""
        runtime.index.rebuild()
        return runtime.index.graph_data()

    return app


def generate_token() -> str:
    """Generate a random bearer token."""
    return secrets.token_urlsafe(32)
