import logging
from collections import defaultdict
from typing import Any

from ..core.address import Slug
from ..core.notebook import Notebook
from ..core.ports import Index, LinkResolver
from ..core.shortlinks import collect_links

logger = logging.getLogger(__name__)


class DefaultResolver(LinkResolver):
    def __init__(self, notebook: Notebook):
        self.notebook = notebook

    def exists(self, slug: Slug) -> bool:
        return self.notebook.storage.read_raw(slug.value) is not None


class InMemoryIndex(Index):
    def __init__(self, notebook: Notebook):
        self.notebook = notebook
        self._links_out: dict[str, list[Slug]] = defaultdict(list)
        self._links_in: dict[str, list[str]] = defaultdict(list)
        self._titles: dict[str, str] = {}

    def rebuild(self) -> None:
        self._links_out.clear()
        self._links_in.clear()
        self._titles.clear()
        for slug in self.notebook.list_slugs():
            memo = self.notebook.get(slug)
            if not memo:
                continue
            links = collect_links(memo.body)
            self._links_out[slug] = links
            self._titles[slug] = memo.well_known.title
            # One backlink per source, however often it links
            for target in dict.fromkeys(links):
                self._links_in[target.value].append(slug)
        logger.debug("indexed %d memos", len(self._titles))

    def links_out(self, slug: str) -> list[Slug]:
        return self._links_out.get(slug, [])

    def links_in(self, slug: str) -> list[str]:
        return self._links_in.get(slug, [])

    def search(self, query: str) -> list[str]:
        q = query.lower()
        hits = []
        for slug in self.notebook.list_slugs():
            memo = self.notebook.get(slug)
            if not memo:
                continue
            if q in memo.body.base.lower() or q in memo.well_known.title.lower():
                hits.append(slug)
        return hits

    def graph_data(self) -> dict[str, Any]:
        """Nodes and de-duplicated edges, in the shape the graph command prints."""
        nodes = [{"id": slug, "title": title} for slug, title in self._titles.items()]
        edges = []
        for source, links in self._links_out.items():
            for target in dict.fromkeys(links):
                edges.append({"source": source, "target": target.value})
        return {"nodes": nodes, "edges": edges}
