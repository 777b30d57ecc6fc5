"""
SocialNetwork — the single entry point for every operation that creates,
mutates or destroys users and edges.

Registration and deletion update the UserDirectory and the SocialGraph
together so the two never fall out of sync:

  register       │ directory.insert + graph.add_user
  delete_account │ graph.sever_all_edges → release posts
                 │ → graph.remove_user → directory.remove(username)
"""
import logging
from datetime import datetime
from typing import Iterable, Iterator, Optional

from opentelemetry import trace

from devgraph.directory import UserDirectory
from devgraph.exceptions import (
    AlreadyFollowingError,
    AuthenticationError,
    DuplicateKeyError,
    NotFoundError,
    SelfReferenceError,
)
from devgraph.feed import FeedEngine
from devgraph.graph import SocialGraph
from devgraph.interests import InterestCatalog
from devgraph.models import Edge, Post, User
from devgraph.ranking import RankedSequence
from devgraph.recommendations import RecommendationEngine
from devgraph.telemetry import (
    FOLLOW_EDGES_TOTAL,
    GRAPH_USERS,
    USERS_DELETED_TOTAL,
    USERS_REGISTERED_TOTAL,
)

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class SocialNetwork:
    def __init__(
        self,
        catalog: InterestCatalog,
        graph: Optional[SocialGraph] = None,
        directory: Optional[UserDirectory] = None,
        feed_capacity: Optional[int] = None,
    ) -> None:
        self.catalog = catalog
        self.graph = graph if graph is not None else SocialGraph()
        self.directory = directory if directory is not None else UserDirectory()
        self.feed_engine = FeedEngine(self.graph, catalog, capacity=feed_capacity)
        self.recommendation_engine = RecommendationEngine(self.graph, catalog)

    def __len__(self) -> int:
        return self.graph.user_count

    # ── Accounts ──────────────────────────────────────────────────────────

    def register(
        self,
        username: str,
        password: str,
        name: str,
        interests: Iterable[str] = (),
        created_at: Optional[datetime] = None,
    ) -> User:
        """Create a user and add it to both the directory and the graph."""
        with tracer.start_as_current_span("register") as span:
            span.set_attribute("user.username", username)

            if not username or not username.strip():
                raise ValueError("Username cannot be empty")
            if self.directory.lookup(username) is not None:
                raise DuplicateKeyError(username)

            vector = self.catalog.vector_from_tags(interests)
            user = User(username=username, password=password, name=name, interests=vector)
            if created_at is not None:
                user.created_at = created_at

            self.directory.insert(username, user)
            self.graph.add_user(user)

            USERS_REGISTERED_TOTAL.inc()
            GRAPH_USERS.set(self.graph.user_count)
            logger.info("Registered user %s (id=%s)", username, user.user_id)
            return user

    def delete_account(self, user: User) -> None:
        """Sever every edge, release posts and deregister `user` from both indexes."""
        with tracer.start_as_current_span("delete_account") as span:
            span.set_attribute("user.username", user.username)

            if self.directory.lookup(user.username) is not user:
                raise NotFoundError("user", user.username)

            severed = self.graph.sever_all_edges(user)
            released = user.clear_posts()
            self.graph.remove_user(user)
            self.directory.remove(user.username)

            USERS_DELETED_TOTAL.inc()
            GRAPH_USERS.set(self.graph.user_count)
            span.set_attribute("edges.severed", severed)
            logger.info(
                "Deleted user %s (%d follows severed, %d posts released)",
                user.username, severed, released,
            )

    def clear(self) -> int:
        """Delete every account. Returns the number of users removed."""
        removed = 0
        for user in list(self.graph):
            self.delete_account(user)
            removed += 1
        return removed

    def lookup_user(self, username: str) -> Optional[User]:
        return self.directory.lookup(username)

    def get_user(self, username: str) -> User:
        user = self.directory.lookup(username)
        if user is None:
            raise NotFoundError("user", username)
        return user

    def authenticate(self, username: str, password: str) -> User:
        user = self.get_user(username)
        if user.password != password:
            logger.warning("Failed login for %s", username)
            raise AuthenticationError(username)
        return user

    def update_profile(
        self,
        user: User,
        name: Optional[str] = None,
        password: Optional[str] = None,
    ) -> None:
        if name:
            user.name = name
        if password:
            user.password = password

    def users(self) -> Iterator[User]:
        return iter(self.graph)

    def edges(self) -> Iterator[tuple[User, User, float]]:
        return self.graph.edges()

    # ── Follows ───────────────────────────────────────────────────────────

    def follow(self, follower: User, followee: User) -> Edge:
        with tracer.start_as_current_span("follow") as span:
            span.set_attribute("follower", follower.username)
            span.set_attribute("followee", followee.username)

            if follower is followee:
                raise SelfReferenceError(follower.username)
            if self.graph.is_following(follower, followee):
                raise AlreadyFollowingError(follower.username, followee.username)

            edge = self.graph.add_edge(follower, followee, self.catalog)
            span.set_attribute("edge.weight", edge.weight)

        FOLLOW_EDGES_TOTAL.labels(action="follow").inc()
        logger.info(
            "%s followed %s (distance=%.3f)",
            follower.username, followee.username, edge.weight,
        )
        return edge

    def unfollow(self, follower: User, followee: User) -> bool:
        """Stop following. Not following is a no-op that returns False."""
        with tracer.start_as_current_span("unfollow"):
            removed = self.graph.remove_edge(follower, followee)

        if removed:
            FOLLOW_EDGES_TOTAL.labels(action="unfollow").inc()
            logger.info("%s unfollowed %s", follower.username, followee.username)
        return removed

    # ── Posts & interests ─────────────────────────────────────────────────

    def publish_post(
        self,
        user: User,
        content: str,
        created_at: Optional[datetime] = None,
    ) -> Post:
        if not content or not content.strip():
            raise ValueError("Post content cannot be empty")
        post = user.add_post(content, created_at=created_at)
        logger.info("Post %s created by %s", post.post_id, user.username)
        return post

    def delete_post(self, user: User, post_id: int) -> bool:
        return user.remove_post(post_id)

    def set_interests(self, user: User, tags: Iterable[str]) -> None:
        """Replace `user`'s interests. Existing edge weights are not recomputed."""
        vector = self.catalog.vector_from_tags(tags)
        for i, flag in enumerate(vector):
            user.set_interest(i, flag)

    def toggle_interest(self, user: User, tag: str) -> bool:
        return user.toggle_interest(self.catalog.index_of(tag))

    def interests_of(self, user: User) -> list[str]:
        return self.catalog.tags_of(user.interests)

    # ── Derived features ──────────────────────────────────────────────────

    def recommend(self, user: User) -> tuple[RankedSequence[User], RankedSequence[User]]:
        return self.recommendation_engine.recommend(user)

    def feed(self, user: User) -> RankedSequence[Post]:
        return self.feed_engine.build(user)
