from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable
from ..core.address import Slug
from ..core.ports import StorageStrategy


class FsStorage(StorageStrategy):
    def __init__(self, root: Path, extension: str = "subtext"):
        self.root = root
        self.extension = extension

    def _path(self, slug: str) -> Path:
        """Path of the memo file for `slug`, which must stay inside `root`."""
        if Slug.parse(slug) is None:
            raise ValueError(f"Invalid slug: {slug!r}")
        path = self.root / f"{slug}.{self.extension}"
        if not path.resolve().is_relative_to(self.root.resolve()):
            raise ValueError(f"Slug {slug!r} is outside the notebook")
        return path

    def read_raw(self, slug: str) -> str | None:
        p = self._path(slug)
        return p.read_text(encoding="utf-8") if p.exists() else None

    def write_raw(self, slug: str, contents: str) -> None:
        p = self._path(slug)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(contents, encoding="utf-8")

    def delete_raw(self, slug: str) -> None:
        p = self._path(slug)
        if p.exists():
            p.unlink()

    def list_all_ids(self) -> Iterable[str]:
        if not self.root.exists():
            return []
        # Nested directories map to deep slugs, e.g. "projects/garden"
        ids = (
            p.relative_to(self.root).with_suffix("").as_posix()
            for p in self.root.rglob(f"*.{self.extension}")
        )
        # Files whose names are not slugs are not memos
        return sorted(i for i in ids if Slug.parse(i) is not None)

    def modified_time(self, slug: str) -> datetime | None:
        p = self._path(slug)
        if not p.exists():
            return None
        return datetime.fromtimestamp(p.stat().st_mtime, tz=timezone.utc)
