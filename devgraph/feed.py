"""
Content feed — one ranked sequence of posts built from two sources:

  Following │ every post by a user the requester follows
  Interests │ posts by users the requester does not follow (and who are not
            │ the requester) sharing at least one interest

The sources are disjoint by construction, so no post is pushed twice.
Posts are ranked by recency, newest first, into a bounded sequence.
"""
import logging
import time
from typing import Optional

from opentelemetry import trace

from devgraph import similarity
from devgraph.config import settings
from devgraph.graph import SocialGraph
from devgraph.interests import InterestCatalog
from devgraph.models import Post, User
from devgraph.ranking import RankedSequence
from devgraph.telemetry import FEED_CANDIDATES_TOTAL, FEED_LATENCY

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class FeedEngine:
    def __init__(
        self,
        graph: SocialGraph,
        catalog: InterestCatalog,
        capacity: Optional[int] = None,
    ) -> None:
        self.graph = graph
        self.catalog = catalog
        self.capacity = capacity or settings.feed_capacity

    def build(self, user: User) -> RankedSequence[Post]:
        start_time = time.perf_counter()

        with tracer.start_as_current_span("build_feed") as span:
            span.set_attribute("user.username", user.username)
            ranked: RankedSequence[Post] = RankedSequence(capacity=self.capacity)

            followed = {edge.dest for edge in user.following}
            from_following = 0
            for edge in user.following:
                for post in edge.dest.posts:
                    ranked.push(post, post.created_at.timestamp())
                    from_following += 1

            from_interests = 0
            for member in self.graph:
                if member is user or member in followed:
                    continue
                if similarity.shared_interests(user, member, self.catalog) == 0:
                    continue
                for post in member.posts:
                    ranked.push(post, post.created_at.timestamp())
                    from_interests += 1

            FEED_CANDIDATES_TOTAL.labels(source="following").inc(from_following)
            FEED_CANDIDATES_TOTAL.labels(source="interests").inc(from_interests)
            span.set_attribute("candidates.following", from_following)
            span.set_attribute("candidates.interests", from_interests)
            span.set_attribute("feed.size", len(ranked))

        FEED_LATENCY.observe(time.perf_counter() - start_time)
        logger.info(
            "Feed for %s: %d posts (%d following, %d by interests)",
            user.username, len(ranked), from_following, from_interests,
        )
        return ranked
