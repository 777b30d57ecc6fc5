"""
Interest similarity between two users.

The Jaccard distance over the users' interest vectors is the weight of every
follow edge: 0.0 for identical interest sets, 1.0 for disjoint (or empty) ones.
"""
from devgraph.interests import InterestCatalog
from devgraph.models import User


def _overlap(a: User, b: User, catalog: InterestCatalog) -> tuple[int, int]:
    same = diff = 0
    for i in range(len(catalog)):
        x, y = a.interests[i], b.interests[i]
        if x and y:
            same += 1
        elif x or y:
            diff += 1
    return same, diff


def distance(a: User, b: User, catalog: InterestCatalog) -> float:
    """
    Jaccard distance in [0, 1] between the interests of `a` and `b`.

    Two users with no interests set share no signal and are treated as
    maximally distant (1.0).
    """
    same, diff = _overlap(a, b, catalog)
    if same + diff == 0:
        return 1.0
    return 1.0 - same / (same + diff)


def shared_interests(a: User, b: User, catalog: InterestCatalog) -> int:
    same, _ = _overlap(a, b, catalog)
    return same
