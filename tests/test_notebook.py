"""Tests for the notebook, storage, index and lint rules."""

import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

from subtext.adapters.fs_storage import FsStorage
from subtext.adapters.header_codec import HeaderSubtextCodec
from subtext.adapters.resolver_index import DefaultResolver, InMemoryIndex
from subtext.core.address import Slug
from subtext.core.headers import Header, Headers
from subtext.core.model import Document, Memo
from subtext.core.notebook import Notebook
from subtext.core.subtext import SubtextParser
from subtext.lint import DeadLinksRule, MissingHeadersRule


@pytest.fixture
def notebook():
    """Create a notebook in a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        storage = FsStorage(Path(tmpdir))
        yield Notebook(storage, SubtextParser(), HeaderSubtextCodec())


def _write(notebook: Notebook, slug: str, text: str) -> None:
    notebook.storage.write_raw(slug, text)


def test_get_missing(notebook):
    assert notebook.get("nope") is None


def test_get_parses_headers_and_body(notebook):
    _write(notebook, "floop", "Title: Floop the Pig\n\nOink /mud\n")
    memo = notebook.get("floop")
    assert memo.headers.title() == "Floop the Pig"
    assert memo.body.base == "Oink /mud\n"
    assert memo.well_known.title == "Floop the Pig"
    assert memo.well_known.content_type == "text/subtext"


def test_fallback_title_from_slug(notebook):
    _write(notebook, "frozen-yogurt", "Tasty.\n")
    memo = notebook.get("frozen-yogurt")
    assert len(memo.headers) == 0
    assert memo.well_known.title == "Frozen yogurt"
    assert memo.well_known.file_extension == "subtext"


def test_put_round_trip(notebook):
    headers = Headers([Header("title", "Hi")])
    notebook.put(Memo(slug="hi", headers=headers, body=Document.parse("Body")))
    assert notebook.storage.read_raw("hi") == "Title: Hi\n\nBody"
    assert notebook.get("hi").body.base == "Body"


def test_list_and_delete(notebook):
    _write(notebook, "b", "b")
    _write(notebook, "a", "a")
    _write(notebook, "deep/c", "c")
    assert list(notebook.list_slugs()) == ["a", "b", "deep/c"]
    notebook.delete("a")
    assert list(notebook.list_slugs()) == ["b", "deep/c"]


def test_mend_adds_missing_headers(notebook):
    """Test mend keeps existing headers and appends missing ones."""
    _write(notebook, "pig", "Title: Floop\nColor: pink\n\nOink")
    memo = notebook.mend("pig")
    names = [h.name for h in memo.headers]
    assert names[:2] == ["Title", "Color"]
    assert set(names) >= {"Content-Type", "Created", "Modified", "File-Extension"}
    assert memo.headers.title() == "Floop"

    reread = notebook.get("pig")
    assert reread.headers.content_type() == "text/subtext"
    assert reread.body.base == "Oink"


def test_mend_touch_sets_modified(notebook):
    _write(notebook, "pig", "Modified: 2000-01-01T00:00:00Z\n\nOink")
    memo = notebook.mend("pig", touch=True)
    assert memo.headers.modified() > datetime(2000, 1, 2, tzinfo=timezone.utc)
    assert notebook.mend("missing") is None


def test_index_links_and_backlinks(notebook):
    _write(notebook, "a", "Links to /b and [[B]] and /c\n")
    _write(notebook, "b", "Title: Bee\n\nBack to /a\n")
    index = InMemoryIndex(notebook)
    index.rebuild()

    assert index.links_out("a") == [Slug("b"), Slug("b"), Slug("c")]
    assert index.links_in("b") == ["a"]
    assert index.links_in("a") == ["b"]
    assert index.search("back to") == ["b"]

    graph = index.graph_data()
    assert {"id": "b", "title": "Bee"} in graph["nodes"]
    assert graph["edges"] == [
        {"source": "a", "target": "b"},
        {"source": "a", "target": "c"},
        {"source": "b", "target": "a"},
    ]


def test_dead_links_rule(notebook):
    _write(notebook, "a", "See /b and /missing and /\n")
    _write(notebook, "b", "b")
    resolver = DefaultResolver(notebook)
    findings = DeadLinksRule().check(notebook.get("a"), resolver)
    assert [(f.severity, f.span.text) for f in findings] == [
        ("error", "/missing"),
        ("warn", "/"),
    ]


def test_missing_headers_rule(notebook):
    _write(notebook, "a", "Title: A\n\nbody")
    findings = MissingHeadersRule().check(notebook.get("a"), DefaultResolver(notebook))
    assert [f.message for f in findings] == ["Missing Content-Type header"]


def test_storage_rejects_paths_outside_root():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir) / "notebook"
        root.mkdir()
        (Path(tmpdir) / "secret.subtext").write_text("Secret\n")
        storage = FsStorage(root)
        for slug in ["../secret", "/etc/passwd", "a/../../secret", ""]:
            with pytest.raises(ValueError):
                storage.read_raw(slug)
        with pytest.raises(ValueError):
            storage.write_raw("../escape", "x")


def test_list_skips_files_that_are_not_slugs(notebook):
    _write(notebook, "a", "a")
    (notebook.storage.root / "Not A Slug.subtext").write_text("x")
    assert list(notebook.list_slugs()) == ["a"]


def test_index_lookups_do_not_grow_maps(notebook):
    _write(notebook, "a", "See /b\n")
    index = InMemoryIndex(notebook)
    index.rebuild()
    assert index.links_in("nope") == []
    assert index.links_out("nope") == []
    assert [node["id"] for node in index.graph_data()["nodes"]] == ["a"]
    assert index.graph_data()["edges"] == [{"source": "a", "target": "b"}]
    assert "nope" not in index._links_in
    assert "nope" not in index._links_out
