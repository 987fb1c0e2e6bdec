"""Runtime wiring helper for CLI applications."""

import logging
from dataclasses import dataclass
from pathlib import Path

from .adapters.fs_storage import FsStorage
from .adapters.header_codec import HeaderSubtextCodec
from .adapters.resolver_index import DefaultResolver, InMemoryIndex
from .config import SubtextConfig, load_config
from .core.notebook import Notebook
from .core.subtext import SubtextParser

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    """Container for all wired components."""
    notebook: Notebook
    index: InMemoryIndex
    resolver: DefaultResolver
    config: SubtextConfig


def build_runtime(
    notebook_path: Path | None = None,
    config_path: Path | None = None,
) -> Runtime:
    """Build and wire all components for a notebook."""
    config = load_config(config_path=config_path, notebook_path=notebook_path)

    # Use config values if CLI args not provided
    if notebook_path is None:
        notebook_path = config.notebook.root
    logger.debug("using notebook at %s", notebook_path)

    storage = FsStorage(notebook_path, extension=config.notebook.extension)
    notebook = Notebook(storage, SubtextParser(), HeaderSubtextCodec())

    return Runtime(
        notebook=notebook,
        index=InMemoryIndex(notebook),
        resolver=DefaultResolver(notebook),
        config=config,
    )
