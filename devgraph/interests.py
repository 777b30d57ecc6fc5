"""
Interest catalog — the ordered, immutable list of known interest tags.

The catalog is loaded once at startup and passed to every component that
needs it. A tag's position in the catalog is its stable global id, and every
user's interest vector is a list of booleans parallel to it.
"""
import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence

from devgraph.config import settings
from devgraph.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class InterestCatalog:
    def __init__(self, tags: Iterable[str]) -> None:
        cleaned = tuple(t.strip() for t in tags)
        if not cleaned:
            raise ValueError("Interest catalog cannot be empty")
        if any(not t for t in cleaned):
            raise ValueError("Interest tags cannot be blank")
        if len(set(cleaned)) != len(cleaned):
            raise ValueError("Interest tags must be unique")
        self._tags = cleaned
        self._index = {tag: i for i, tag in enumerate(cleaned)}

    @classmethod
    def from_file(cls, path: str | Path) -> "InterestCatalog":
        """One tag per line; blank lines and '#' comments are skipped."""
        lines = Path(path).read_text(encoding="utf-8").splitlines()
        tags = [ln.strip() for ln in lines if ln.strip() and not ln.strip().startswith("#")]
        logger.info("Loaded %d interest tags from %s", len(tags), path)
        return cls(tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __getitem__(self, index: int) -> str:
        return self._tags[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags)

    def __contains__(self, tag: object) -> bool:
        return tag in self._index

    def __repr__(self) -> str:
        return f"InterestCatalog({list(self._tags)!r})"

    @property
    def tags(self) -> tuple[str, ...]:
        return self._tags

    def index_of(self, tag: str) -> int:
        try:
            return self._index[tag]
        except KeyError:
            raise NotFoundError("interest", tag) from None

    def new_vector(self) -> list[bool]:
        return [False] * len(self._tags)

    def vector_from_tags(self, tags: Iterable[str]) -> list[bool]:
        vector = self.new_vector()
        for tag in tags:
            vector[self.index_of(tag)] = True
        return vector

    def tags_of(self, vector: Sequence[bool]) -> list[str]:
        return [tag for tag, flag in zip(self._tags, vector) if flag]


def load_catalog(path: Optional[str] = None) -> InterestCatalog:
    """Build the process-wide catalog from `path`, the configured file, or the defaults."""
    path = path or settings.interests_path
    if path:
        return InterestCatalog.from_file(path)
    return InterestCatalog(settings.default_interests)
