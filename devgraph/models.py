"""
In-memory entities of the social network.

  User — profile, interest vector, posts and both adjacency lists
  Post — immutable content owned by its author (most-recent-first)
  Edge — one half of a follow: non-owning reference to the other user + weight

Users and edges are created and destroyed only through SocialGraph /
SocialNetwork; entities compare by identity.
"""
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from devgraph.hashing import jenkins_hash


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(eq=False)
class Post:
    content: str
    author: "User" = field(repr=False)
    created_at: datetime = field(default_factory=_utcnow)
    post_id: int = field(init=False)

    def __post_init__(self) -> None:
        self.post_id = jenkins_hash(self.content)


@dataclass(eq=False)
class Edge:
    dest: "User"
    weight: float

    def __repr__(self) -> str:
        return f"Edge(dest={self.dest.username!r}, weight={self.weight:.3f})"


@dataclass(eq=False)
class User:
    username: str
    password: str = field(repr=False)
    name: str
    # Parallel to the InterestCatalog; length fixed at creation
    interests: list[bool] = field(repr=False)
    created_at: datetime = field(default_factory=_utcnow)
    user_id: int = field(init=False)
    posts: deque[Post] = field(default_factory=deque, repr=False)
    following: deque[Edge] = field(default_factory=deque, repr=False)
    followers: deque[Edge] = field(default_factory=deque, repr=False)
    num_following: int = 0
    num_followers: int = 0

    def __post_init__(self) -> None:
        self.user_id = jenkins_hash(self.username)

    # ── Posts ─────────────────────────────────────────────────────────────

    @property
    def post_count(self) -> int:
        return len(self.posts)

    def add_post(self, content: str, created_at: Optional[datetime] = None) -> Post:
        post = Post(content=content, author=self, created_at=created_at or _utcnow())
        self.posts.appendleft(post)
        return post

    def find_post(self, post_id: int) -> Optional[Post]:
        for post in self.posts:
            if post.post_id == post_id:
                return post
        return None

    def remove_post(self, post_id: int) -> bool:
        post = self.find_post(post_id)
        if post is None:
            return False
        self.posts.remove(post)
        return True

    def clear_posts(self) -> int:
        released = 0
        while self.posts:
            self.posts.popleft()
            released += 1
        return released

    # ── Interests ─────────────────────────────────────────────────────────

    def has_interest(self, index: int) -> bool:
        return self.interests[index]

    def set_interest(self, index: int, value: bool = True) -> None:
        self.interests[index] = value

    def toggle_interest(self, index: int) -> bool:
        self.interests[index] = not self.interests[index]
        return self.interests[index]

    # ── Derived scores ────────────────────────────────────────────────────

    @property
    def popularity(self) -> float:
        """Follower-to-following ratio."""
        return self.num_followers / max(1, self.num_following)

    @property
    def friendliness(self) -> float:
        """Share of this user's edges that are outgoing follows."""
        total = self.num_following + self.num_followers
        if total == 0:
            return 0.0
        return self.num_following / total

    @property
    def category(self) -> str:
        if self.num_following + self.num_followers == 0:
            return "newcomer"
        if self.friendliness >= 0.6:
            return "friendly"
        if self.friendliness <= 0.4:
            return "popular"
        return "balanced"
