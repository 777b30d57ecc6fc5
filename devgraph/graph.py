"""
Social graph — user membership plus the weighted follow edges between users.

Every follow is stored twice with one shared weight:
  follower.following  ← Edge(dest=followee, weight)
  followee.followers  ← Edge(dest=follower, weight)

The pair is created and destroyed together; a half without its mirror is an
invariant violation that removal tolerates (logged, never raised).
"""
import logging
from collections import deque
from typing import Iterator, Optional

from devgraph import similarity
from devgraph.exceptions import NotFoundError, SelfReferenceError
from devgraph.interests import InterestCatalog
from devgraph.models import Edge, User
from devgraph.telemetry import INCONSISTENT_EDGES_TOTAL

logger = logging.getLogger(__name__)


def _find(edges: deque[Edge], user: User) -> Optional[Edge]:
    for edge in edges:
        if edge.dest is user:
            return edge
    return None


class SocialGraph:
    def __init__(self) -> None:
        self._members: deque[User] = deque()
        self.user_count = 0

    def __len__(self) -> int:
        return self.user_count

    def __iter__(self) -> Iterator[User]:
        return iter(self._members)

    def __contains__(self, user: object) -> bool:
        return any(member is user for member in self._members)

    # ── Membership ────────────────────────────────────────────────────────

    def add_user(self, user: User) -> None:
        self._members.appendleft(user)
        self.user_count += 1

    def remove_user(self, user: User) -> None:
        """Unlink `user` from the graph, severing any edges it still has first."""
        if user.num_following or user.num_followers:
            self.sever_all_edges(user)
        for i, member in enumerate(self._members):
            if member is user:
                del self._members[i]
                self.user_count -= 1
                return
        raise NotFoundError("user", user.username)

    # ── Edges ─────────────────────────────────────────────────────────────

    def add_edge(self, a: User, b: User, catalog: InterestCatalog) -> Edge:
        """`a` follows `b`; the edge weight is the Jaccard distance of their interests."""
        if a is b:
            raise SelfReferenceError(a.username)
        weight = similarity.distance(a, b, catalog)
        return self._link(a, b, weight)

    def restore_edge(self, a: User, b: User, weight: float) -> Edge:
        """Recreate a follow with a previously computed weight (used when loading)."""
        if a is b:
            raise SelfReferenceError(a.username)
        if not 0.0 <= weight <= 1.0:
            raise ValueError(f"Edge weight {weight} outside [0, 1]")
        return self._link(a, b, weight)

    def _link(self, a: User, b: User, weight: float) -> Edge:
        outgoing = Edge(dest=b, weight=weight)
        incoming = Edge(dest=a, weight=weight)

        a.following.appendleft(outgoing)
        a.num_following += 1

        b.followers.appendleft(incoming)
        b.num_followers += 1

        logger.debug("%s → %s (weight=%.3f)", a.username, b.username, weight)
        return outgoing

    def find_edge(self, a: User, b: User) -> Optional[Edge]:
        """The edge in `a`'s following list pointing at `b`, if any."""
        return _find(a.following, b)

    def is_following(self, a: User, b: User) -> bool:
        return self.find_edge(a, b) is not None

    def remove_edge(self, a: User, b: User) -> bool:
        """
        `a` stops following `b`. Returns False (no-op) when the pair is not
        complete; a one-sided pair is reported as an inconsistent edge.
        """
        outgoing = _find(a.following, b)
        incoming = _find(b.followers, a)
        if outgoing is None or incoming is None:
            if outgoing is not None or incoming is not None:
                INCONSISTENT_EDGES_TOTAL.inc()
                logger.warning(
                    "Inconsistent edge %s → %s (following=%s, followers=%s) — left untouched",
                    a.username, b.username, outgoing is not None, incoming is not None,
                )
            return False

        a.following.remove(outgoing)
        a.num_following -= 1
        b.followers.remove(incoming)
        b.num_followers -= 1
        logger.debug("%s ↛ %s", a.username, b.username)
        return True

    def sever_all_edges(self, user: User) -> int:
        """Remove every follow touching `user`, in both directions. Returns pairs removed."""
        removed = 0
        for edge in list(user.following):
            removed += self.remove_edge(user, edge.dest)
        for edge in list(user.followers):
            removed += self.remove_edge(edge.dest, user)

        if user.num_following or user.num_followers:
            logger.warning(
                "User %s kept %d following / %d followers after severing — resetting",
                user.username, user.num_following, user.num_followers,
            )
        user.following.clear()
        user.followers.clear()
        user.num_following = 0
        user.num_followers = 0
        return removed

    def edges(self) -> Iterator[tuple[User, User, float]]:
        """Every follow as (follower, followee, weight)."""
        for member in self._members:
            for edge in member.following:
                yield member, edge.dest, edge.weight
