"""
Friend recommendations from two independent sources:

  Graph distance │ Dijkstra from the requesting user over the follow edges.
                 │ Every follow is mirrored with one weight, so the traversal
                 │ walks both adjacency lists and behaves as an undirected
                 │ weighted graph. Reachable users not yet followed are ranked
                 │ by cumulative Jaccard distance (closest first); ties keep
                 │ discovery order.
  ───────────────┼────────────────────────────────────────────────────────────
  Interests      │ Users not followed and not reached by the traversal who
                 │ share at least one interest, ranked by how many they share.

The engine never mixes the two sequences; interleaving is the caller's call.
"""
import heapq
import itertools
import logging
import math
import time
from dataclasses import dataclass, field

from opentelemetry import trace

from devgraph import similarity
from devgraph.exceptions import NotFoundError
from devgraph.graph import SocialGraph
from devgraph.interests import InterestCatalog
from devgraph.models import User
from devgraph.ranking import RankedSequence
from devgraph.telemetry import RECOMMENDATION_LATENCY

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


@dataclass
class ShortestPaths:
    """Result of a single-source traversal."""
    source: User
    distances: dict[User, float] = field(default_factory=dict)
    # Users in the order they first received a finite tentative distance
    discovered: list[User] = field(default_factory=list)

    def reached(self, user: User) -> bool:
        return math.isfinite(self.distances.get(user, math.inf))


class RecommendationEngine:
    def __init__(self, graph: SocialGraph, catalog: InterestCatalog) -> None:
        self.graph = graph
        self.catalog = catalog

    def shortest_paths(self, source: User) -> ShortestPaths:
        distances = {member: math.inf for member in self.graph}
        if source not in distances:
            raise NotFoundError("user", source.username)

        result = ShortestPaths(source=source, distances=distances)
        distances[source] = 0.0
        result.discovered.append(source)

        visited: set[User] = set()
        counter = itertools.count()
        frontier: list[tuple[float, int, User]] = [(0.0, next(counter), source)]

        while frontier:
            dist, _, user = heapq.heappop(frontier)
            if user in visited:
                continue
            visited.add(user)

            for edge in itertools.chain(user.following, user.followers):
                neighbour = edge.dest
                if neighbour in visited:
                    continue
                candidate = dist + edge.weight
                current = distances.get(neighbour, math.inf)
                if candidate < current:
                    if math.isinf(current):
                        result.discovered.append(neighbour)
                    distances[neighbour] = candidate
                    heapq.heappush(frontier, (candidate, next(counter), neighbour))

        return result

    def graph_suggestions(
        self, source: User, paths: ShortestPaths | None = None
    ) -> RankedSequence[User]:
        """Reachable, not-yet-followed users; priority is the negated path distance."""
        paths = paths or self.shortest_paths(source)
        followed = {edge.dest for edge in source.following}

        ranked: RankedSequence[User] = RankedSequence()
        for user in paths.discovered:
            if user is source or user in followed:
                continue
            ranked.push(user, -paths.distances[user])
        return ranked

    def interest_suggestions(
        self, source: User, paths: ShortestPaths | None = None
    ) -> RankedSequence[User]:
        """Unreached, not-yet-followed users sharing interests; priority is the shared count."""
        paths = paths or self.shortest_paths(source)
        followed = {edge.dest for edge in source.following}

        ranked: RankedSequence[User] = RankedSequence()
        for user in self.graph:
            if user is source or user in followed or paths.reached(user):
                continue
            shared = similarity.shared_interests(source, user, self.catalog)
            if shared > 0:
                ranked.push(user, shared)
        return ranked

    def recommend(self, source: User) -> tuple[RankedSequence[User], RankedSequence[User]]:
        """(graph-distance suggestions, interest-only suggestions) for `source`."""
        start_time = time.perf_counter()

        with tracer.start_as_current_span("recommend") as span:
            span.set_attribute("user.username", source.username)

            paths = self.shortest_paths(source)
            by_distance = self.graph_suggestions(source, paths)
            by_interest = self.interest_suggestions(source, paths)

            span.set_attribute("suggestions.graph", len(by_distance))
            span.set_attribute("suggestions.interests", len(by_interest))

        RECOMMENDATION_LATENCY.observe(time.perf_counter() - start_time)
        logger.info(
            "Suggestions for %s: %d by graph distance, %d by interests",
            source.username, len(by_distance), len(by_interest),
        )
        return by_distance, by_interest
