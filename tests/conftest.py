from datetime import datetime, timedelta, timezone

import pytest

from devgraph.interests import InterestCatalog
from devgraph.network import SocialNetwork

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


def at(minutes: int) -> datetime:
    """A fixed timestamp `minutes` after the test epoch."""
    return EPOCH + timedelta(minutes=minutes)


def assert_edges_paired(network: SocialNetwork) -> None:
    """Every following edge has exactly one mirror in the followee's followers list."""
    for user in network.users():
        assert user.num_following == len(user.following)
        assert user.num_followers == len(user.followers)
        for edge in user.following:
            mirrors = [e for e in edge.dest.followers if e.dest is user]
            assert len(mirrors) == 1
            assert mirrors[0].weight == edge.weight


@pytest.fixture
def catalog():
    return InterestCatalog(["rust", "go", "ml"])


@pytest.fixture
def network(catalog):
    return SocialNetwork(catalog)


@pytest.fixture
def trio(network):
    """alice={rust}, bob={rust, go}, carol={ml}."""
    alice = network.register("alice", "pw-a", "Alice Chen", interests=["rust"])
    bob = network.register("bob", "pw-b", "Bob Martinez", interests=["rust", "go"])
    carol = network.register("carol", "pw-c", "Carol Singh", interests=["ml"])
    return alice, bob, carol
