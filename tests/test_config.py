"""Tests for configuration loading."""

import os
import tempfile
from pathlib import Path

from subtext.config import load_config


def test_load_config_defaults():
    """Test loading config with defaults when no file exists."""
    with tempfile.TemporaryDirectory() as tmpdir:
        orig_cwd = os.getcwd()
        try:
            os.chdir(tmpdir)
            config = load_config()
        finally:
            os.chdir(orig_cwd)

    assert config.notebook.root == Path("./notebook")
    assert config.notebook.extension == "subtext"
    assert config.excerpt.limit == 512
    assert config.excerpt.fallback == ""
    assert config.render.paragraph_spacing == 4.0


def test_load_config_from_file():
    """Test loading config from a file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "subtext.toml"
        config_path.write_text("""
[notebook]
root = "my-notes"
extension = ".txt"

[excerpt]
limit = 128
fallback = "Untitled"

[render]
paragraph_spacing = 6

""")

        config = load_config(config_path=config_path)

        assert config.notebook.root == Path("my-notes")
        assert config.notebook.extension == "txt"
        assert config.excerpt.limit == 128
        assert config.excerpt.fallback == "Untitled"
        assert config.render.paragraph_spacing == 6.0


def test_load_config_search_cwd():
    """Test config search in current working directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        orig_cwd = os.getcwd()
        try:
            os.chdir(tmpdir)
            config_path = Path(tmpdir) / "subtext.toml"
            config_path.write_text("""
[excerpt]
limit = 10
""")

            config = load_config()
            assert config.excerpt.limit == 10
        finally:
            os.chdir(orig_cwd)


def test_load_config_search_notebook():
    """Test config search in notebook directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        notebook_path = Path(tmpdir) / "notebook"
        notebook_path.mkdir()
        (notebook_path / "subtext.toml").write_text("""
[excerpt]
limit = 12
""")

        orig_cwd = os.getcwd()
        try:
            os.chdir(tmpdir)
            config = load_config(notebook_path=notebook_path)
        finally:
            os.chdir(orig_cwd)

        assert config.excerpt.limit == 12
        assert config.notebook.root == notebook_path
