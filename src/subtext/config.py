"""Configuration loader for subtext.toml."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .core.attributes import DEFAULT_PARAGRAPH_SPACING
from .core.excerpt import EXCERPT_LIMIT


@dataclass
class NotebookConfig:
    """Notebook-specific configuration."""
    root: Path
    extension: str = "subtext"


@dataclass
class ExcerptConfig:
    """Excerpt configuration."""
    limit: int = EXCERPT_LIMIT
    fallback: str = ""


@dataclass
class RenderConfig:
    """Attribute projection configuration."""
    paragraph_spacing: float = DEFAULT_PARAGRAPH_SPACING


@dataclass
class SubtextConfig:
    """Complete subtext configuration."""
    notebook: NotebookConfig
    excerpt: ExcerptConfig
    render: RenderConfig


def load_config(config_path: Path | None = None, notebook_path: Path | None = None) -> SubtextConfig:
    """
    Load configuration from subtext.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/subtext.toml
    3. notebook_path/subtext.toml

    Args:
        config_path: Explicit path to config file
        notebook_path: Notebook root path for fallback search

    Returns:
        SubtextConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / "subtext.toml")
    if notebook_path:
        search_paths.append(notebook_path / "subtext.toml")

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break

    notebook_data = toml_data.get("notebook", {})
    notebook_config = NotebookConfig(
        root=Path(notebook_data.get("root", notebook_path or Path("./notebook"))),
        extension=notebook_data.get("extension", "subtext").lstrip("."),
    )

    excerpt_data = toml_data.get("excerpt", {})
    excerpt_config = ExcerptConfig(
        limit=int(excerpt_data.get("limit", EXCERPT_LIMIT)),
        fallback=excerpt_data.get("fallback", ""),
    )

    render_data = toml_data.get("render", {})
    render_config = RenderConfig(
        paragraph_spacing=float(
            render_data.get("paragraph_spacing", DEFAULT_PARAGRAPH_SPACING)
        )
    )

    return SubtextConfig(
        notebook=notebook_config,
        excerpt=excerpt_config,
        render=render_config,
    )
