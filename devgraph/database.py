"""
JSON persistence for the whole user base plus the login session file.

  save_network │ enumerate users, posts and follows (with frozen weights)
               │ into a NetworkSnapshot and write it atomically
  load_network │ register every user, restore posts, then restore follows
               │ with their stored weights (not recomputed), then put each
               │ followers list back in its saved order

Unknown interest tags, unknown followees and repeated follows are skipped
with a warning so that a snapshot written with another catalog still loads.
"""
import logging
import os
from collections import deque
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from opentelemetry import trace

from devgraph.directory import UserDirectory
from devgraph.exceptions import SelfReferenceError
from devgraph.graph import SocialGraph
from devgraph.interests import InterestCatalog
from devgraph.models import User
from devgraph.network import SocialNetwork
from devgraph.schemas import (
    SNAPSHOT_VERSION,
    FollowRecord,
    NetworkSnapshot,
    PostRecord,
    UserRecord,
)

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def database_exists(path: str | Path) -> bool:
    """True when `path` is a file with content."""
    p = Path(path)
    return p.is_file() and p.stat().st_size > 0


# ─────────────────────────── Snapshot ────────────────────────────────────

def snapshot_network(network: SocialNetwork) -> NetworkSnapshot:
    users = []
    for user in network.users():
        users.append(
            UserRecord(
                username=user.username,
                password=user.password,
                name=user.name,
                created_at=user.created_at,
                interests=network.interests_of(user),
                posts=[
                    PostRecord(post_id=p.post_id, content=p.content, created_at=p.created_at)
                    for p in user.posts
                ],
                following=[
                    FollowRecord(username=e.dest.username, weight=e.weight)
                    for e in user.following
                ],
                followers=[e.dest.username for e in user.followers],
            )
        )
    return NetworkSnapshot(
        saved_at=datetime.now(timezone.utc),
        interests=list(network.catalog),
        users=users,
    )


def restore_network(
    snapshot: NetworkSnapshot,
    catalog: InterestCatalog,
    feed_capacity: Optional[int] = None,
) -> SocialNetwork:
    if snapshot.version != SNAPSHOT_VERSION:
        raise ValueError(f"Unsupported snapshot version {snapshot.version}")

    network = SocialNetwork(
        catalog,
        graph=SocialGraph(),
        directory=UserDirectory(),
        feed_capacity=feed_capacity,
    )

    # Reverse so that prepend-on-insert reproduces the saved membership order
    for record in reversed(snapshot.users):
        known = [t for t in record.interests if t in catalog]
        for tag in set(record.interests) - set(known):
            logger.warning("User %s: unknown interest '%s' skipped", record.username, tag)
        user = network.register(
            record.username,
            record.password,
            record.name,
            interests=known,
            created_at=record.created_at,
        )
        for post in reversed(record.posts):
            restored = user.add_post(post.content, created_at=post.created_at)
            if restored.post_id != post.post_id:
                logger.warning(
                    "Post id mismatch for %s (stored=%s, computed=%s)",
                    record.username, post.post_id, restored.post_id,
                )

    for record in snapshot.users:
        follower = network.get_user(record.username)
        for follow in reversed(record.following):
            followee = network.lookup_user(follow.username)
            if followee is None:
                logger.warning(
                    "User %s follows unknown user '%s' — skipped",
                    record.username, follow.username,
                )
                continue
            if network.graph.is_following(follower, followee):
                logger.warning(
                    "User %s follows '%s' more than once — duplicate skipped",
                    record.username, follow.username,
                )
                continue
            try:
                network.graph.restore_edge(follower, followee, follow.weight)
            except SelfReferenceError as exc:
                logger.warning("Skipped stored follow: %s", exc)

    for record in snapshot.users:
        if record.followers:
            _order_followers(network.get_user(record.username), record.followers)

    return network


def _order_followers(user: User, usernames: list[str]) -> None:
    """Rearrange `user.followers` to the saved order; unlisted edges keep their place at the end."""
    rank = {name: i for i, name in enumerate(usernames)}
    user.followers = deque(
        sorted(user.followers, key=lambda e: rank.get(e.dest.username, len(rank)))
    )


# ─────────────────────────── Files ───────────────────────────────────────

def save_network(network: SocialNetwork, path: str | Path) -> None:
    with tracer.start_as_current_span("save_network") as span:
        snapshot = snapshot_network(network)
        span.set_attribute("users", len(snapshot.users))

        target = Path(path)
        tmp = target.with_name(target.name + ".tmp")
        tmp.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
        os.replace(tmp, target)

    logger.info("Saved %d users to %s", len(snapshot.users), target)


def load_network(
    path: str | Path,
    catalog: InterestCatalog,
    feed_capacity: Optional[int] = None,
) -> SocialNetwork:
    with tracer.start_as_current_span("load_network") as span:
        raw = Path(path).read_text(encoding="utf-8")
        snapshot = NetworkSnapshot.model_validate_json(raw)
        network = restore_network(snapshot, catalog, feed_capacity=feed_capacity)
        span.set_attribute("users", len(network))

    logger.info("Loaded %d users from %s", len(network), path)
    return network


# ─────────────────────────── Session ─────────────────────────────────────

def read_session(path: str | Path) -> Optional[str]:
    p = Path(path)
    if not p.is_file():
        return None
    username = p.read_text(encoding="utf-8").strip()
    return username or None


def write_session(path: str | Path, username: str) -> None:
    Path(path).write_text(username, encoding="utf-8")


def clear_session(path: str | Path) -> bool:
    p = Path(path)
    if not p.exists():
        return False
    p.unlink()
    return True
