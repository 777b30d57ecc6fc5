"""
User directory — hash index from username to User.

Buckets are chosen with the Jenkins one-at-a-time hash; each bucket is a
short chain of (username, user) pairs. The directory never owns users:
SocialNetwork registers and deregisters them here in lockstep with the graph.
"""
import logging
from typing import Iterator, Optional

from devgraph.config import settings
from devgraph.hashing import jenkins_hash
from devgraph.models import User

logger = logging.getLogger(__name__)

MAX_LOAD_FACTOR = 0.75


class UserDirectory:
    def __init__(self, buckets: Optional[int] = None) -> None:
        buckets = buckets or settings.directory_initial_buckets
        if buckets < 1:
            raise ValueError("Directory needs at least one bucket")
        self._buckets: list[list[tuple[str, User]]] = [[] for _ in range(buckets)]
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __contains__(self, username: object) -> bool:
        return isinstance(username, str) and self.lookup(username) is not None

    def __iter__(self) -> Iterator[User]:
        for bucket in self._buckets:
            for _, user in bucket:
                yield user

    @property
    def bucket_count(self) -> int:
        return len(self._buckets)

    def _bucket(self, username: str) -> list[tuple[str, User]]:
        return self._buckets[jenkins_hash(username) % len(self._buckets)]

    def insert(self, username: str, user: User) -> bool:
        """Add `username` → `user`. Returns False (and changes nothing) if the key exists."""
        bucket = self._bucket(username)
        for key, _ in bucket:
            if key == username:
                logger.warning("Directory already contains '%s' — insert ignored", username)
                return False
        bucket.append((username, user))
        self._size += 1
        if self._size > len(self._buckets) * MAX_LOAD_FACTOR:
            self._grow()
        return True

    def lookup(self, username: str) -> Optional[User]:
        for key, user in self._bucket(username):
            if key == username:
                return user
        return None

    def remove(self, username: str) -> Optional[User]:
        """Detach `username` and return its user (None if absent). The user itself is untouched."""
        bucket = self._bucket(username)
        for i, (key, user) in enumerate(bucket):
            if key == username:
                del bucket[i]
                self._size -= 1
                return user
        return None

    def clear(self) -> None:
        for bucket in self._buckets:
            bucket.clear()
        self._size = 0

    def _grow(self) -> None:
        old = self._buckets
        self._buckets = [[] for _ in range(len(old) * 2)]
        for bucket in old:
            for username, user in bucket:
                self._bucket(username).append((username, user))
        logger.debug("Directory resized to %d buckets", len(self._buckets))
