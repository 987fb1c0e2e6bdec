"""Tests for the subtext CLI."""

import json
import subprocess
import sys
import tempfile
from pathlib import Path

import yaml

NOTE = """Title: Hello
Content-Type: text/subtext

A note about /cats and [[Dogs]].

> Quoted _idea_
"""


def run(*args: str, input: str | None = None) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "subtext", *args],
        capture_output=True,
        text=True,
        input=input,
    )


def test_parse_json():
    """Test parse prints headers and non-empty blocks."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "note.subtext"
        path.write_text(NOTE)

        result = run("--json", "parse", "--skip-empty", str(path))

        assert result.returncode == 0
        data = json.loads(result.stdout)
        assert data["headers"][0] == {"name": "Title", "value": "Hello"}
        assert [b["kind"] for b in data["blocks"]] == ["text", "quote"]
        inline = data["blocks"][0]["inline"]
        assert [(i["kind"], i["body"]) for i in inline] == [
            ("slashlink", "cats"),
            ("wikilink", "Dogs"),
        ]


def test_parse_yaml_from_stdin():
    result = run("--yaml", "parse", "-", input="# Hi\n")
    assert result.returncode == 0
    data = yaml.safe_load(result.stdout)
    assert data["headers"] == []
    assert data["blocks"][0]["kind"] == "heading"
    assert data["blocks"][0]["body"] == "Hi"


def test_excerpt():
    result = run("excerpt", "-", input=NOTE)
    assert result.returncode == 0
    assert result.stdout == "A note about /cats and [[Dogs]].\nQuoted _idea_\n"


def test_excerpt_fallback():
    result = run("excerpt", "--fallback", "Untitled", "-", input="\n\n")
    assert result.stdout.strip() == "Untitled"


def test_headers():
    result = run("headers", "-", input="title: A\ntitle: B\n\nbody")
    assert result.stdout == "Title: A\nTitle: B\n\n"
    result = run("headers", "--dedupe", "-", input="title: A\ntitle: B\n\nbody")
    assert result.stdout == "Title: A\n\n"
    result = run("headers", "--name", "Missing", "-", input="title: A\n\nbody")
    assert result.returncode == 1


def test_links_unique():
    result = run("--json", "links", "--unique", "-", input="/a [[A]] /b /\n")
    data = json.loads(result.stdout)
    assert [(i["span"]["text"], i["slug"]) for i in data] == [
        ("/a", "a"),
        ("/b", "b"),
        ("/", None),
    ]


def test_at():
    result = run("--json", "at", "-", "12", input="[[Some Title]]")
    assert result.returncode == 0
    assert json.loads(result.stdout)["kind"] == "wikilink"

    result = run("at", "-", "0", input="[[Some Title]]")
    assert result.returncode == 1


def test_attrs():
    result = run("--json", "attrs", "-", input="# Hi")
    data = json.loads(result.stdout)
    assert data[0] == {"start": 0, "end": 4, "name": "font", "value": "regular"}
    assert {"start": 0, "end": 4, "name": "font", "value": "bold"} in data


def test_missing_file_is_error():
    result = run("parse", "/nonexistent/file.subtext")
    assert result.returncode == 1
    assert result.stderr.startswith("Error:")


def test_notebook_commands():
    """Test ls, show, backlinks, graph, lint and mend against a notebook."""
    with tempfile.TemporaryDirectory() as tmpdir:
        notebook = Path(tmpdir)
        (notebook / "cats.subtext").write_text("Title: Cats\n\nSee /dogs\n")
        (notebook / "dogs.subtext").write_text("Dogs like /cats and /birds\n")

        result = run("--notebook", str(notebook), "--json", "ls")
        assert json.loads(result.stdout) == [
            {"slug": "cats", "title": "Cats"},
            {"slug": "dogs", "title": "Dogs"},
        ]

        result = run("--notebook", str(notebook), "show", "dogs")
        assert result.stdout == "Dogs like /cats and /birds\n"
        assert run("--notebook", str(notebook), "show", "nope").returncode == 1

        result = run("--notebook", str(notebook), "-q", "backlinks", "cats")
        assert result.stdout.split() == ["dogs"]

        result = run("--notebook", str(notebook), "graph")
        graph = json.loads(result.stdout)
        assert {"source": "dogs", "target": "birds"} in graph["edges"]

        result = run("--notebook", str(notebook), "graph", "--dot")
        assert '"cats" -> "dogs";' in result.stdout

        result = run("--notebook", str(notebook), "--json", "lint")
        assert result.returncode == 1
        findings = json.loads(result.stdout)
        assert any(f["message"] == "Unknown memo birds" for f in findings)

        result = run("--notebook", str(notebook), "-q", "mend", "dogs")
        assert result.returncode == 0
        text = (notebook / "dogs.subtext").read_text()
        assert text.startswith("Content-Type: text/subtext\n")
        assert text.endswith("\n\nDogs like /cats and /birds\n")


def test_notebook_excerpts_follow_config():
    """Test show and backlinks use the configured excerpt limit and fallback."""
    with tempfile.TemporaryDirectory() as tmpdir:
        notebook = Path(tmpdir)
        (notebook / "subtext.toml").write_text('[excerpt]\nlimit = 5\nfallback = "(empty)"\n')
        (notebook / "a.subtext").write_text("Links to /b\n")
        (notebook / "b.subtext").write_text("")

        result = run("--notebook", str(notebook), "--json", "backlinks", "b")
        assert json.loads(result.stdout) == [{"source": "a", "excerpt": "Links"}]

        result = run("--notebook", str(notebook), "--json", "show", "b")
        assert json.loads(result.stdout)["excerpt"] == "(empty)"


def test_show_rejects_paths_outside_notebook():
    with tempfile.TemporaryDirectory() as tmpdir:
        notebook = Path(tmpdir) / "notebook"
        notebook.mkdir()
        (Path(tmpdir) / "secret.subtext").write_text("Secret\n")

        result = run("--notebook", str(notebook), "show", "../secret")
        assert result.returncode == 1
        assert "Secret" not in result.stdout
