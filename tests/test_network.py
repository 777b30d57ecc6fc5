"""
Unit tests for the SocialNetwork entry points.
"""
import pytest
from conftest import assert_edges_paired, at

from devgraph.directory import UserDirectory
from devgraph.exceptions import (
    AlreadyFollowingError,
    AuthenticationError,
    DuplicateKeyError,
    NotFoundError,
    SelfReferenceError,
)
from devgraph.graph import SocialGraph
from devgraph.hashing import jenkins_hash
from devgraph.network import SocialNetwork


# ================================================================
# Registration
# ================================================================

def test_register_adds_to_directory_and_graph(network):
    user = network.register("alice", "pw", "Alice", interests=["go"])

    assert network.lookup_user("alice") is user
    assert user in network.graph
    assert len(network) == 1
    assert user.user_id == jenkins_hash("alice")
    assert network.interests_of(user) == ["go"]
    assert len(user.interests) == len(network.catalog)


def test_duplicate_username_changes_nothing(network):
    first = network.register("alice", "pw", "Alice")
    with pytest.raises(DuplicateKeyError):
        network.register("alice", "other", "Impostor")

    assert len(network) == 1
    assert len(network.directory) == 1
    assert network.lookup_user("alice") is first


def test_unknown_interest_rejects_registration(network):
    with pytest.raises(NotFoundError):
        network.register("alice", "pw", "Alice", interests=["cobol"])
    assert network.lookup_user("alice") is None
    assert len(network) == 0


def test_blank_username_rejected(network):
    with pytest.raises(ValueError):
        network.register("  ", "pw", "Nobody")


def test_get_user_and_lookup(network, trio):
    alice, _, _ = trio
    assert network.get_user("alice") is alice
    assert network.lookup_user("zed") is None
    with pytest.raises(NotFoundError):
        network.get_user("zed")


def test_authenticate(network, trio):
    alice, _, _ = trio
    assert network.authenticate("alice", "pw-a") is alice
    with pytest.raises(AuthenticationError):
        network.authenticate("alice", "wrong")
    with pytest.raises(NotFoundError):
        network.authenticate("zed", "pw")


def test_update_profile(network, trio):
    alice, _, _ = trio
    network.update_profile(alice, name="Alice C.")
    assert alice.name == "Alice C."
    assert alice.password == "pw-a"

    network.update_profile(alice, password="new")
    assert network.authenticate("alice", "new") is alice


# ================================================================
# Follows
# ================================================================

def test_follow_updates_both_sides(network, trio):
    alice, bob, _ = trio
    edge = network.follow(alice, bob)

    assert edge.weight == pytest.approx(0.5)
    assert alice.num_following == 1
    assert bob.num_followers == 1
    assert alice.following[0].dest is bob
    assert bob.followers[0].dest is alice
    assert alice.following[0].weight == bob.followers[0].weight
    assert_edges_paired(network)


def test_self_follow_rejected(network, trio):
    alice, _, _ = trio
    with pytest.raises(SelfReferenceError):
        network.follow(alice, alice)
    assert alice.num_following == 0


def test_follow_twice_rejected(network, trio):
    alice, bob, _ = trio
    network.follow(alice, bob)
    with pytest.raises(AlreadyFollowingError):
        network.follow(alice, bob)

    assert alice.num_following == 1
    assert bob.num_followers == 1


def test_already_following_is_a_duplicate_key(network, trio):
    alice, bob, _ = trio
    network.follow(alice, bob)
    with pytest.raises(DuplicateKeyError):
        network.follow(alice, bob)


def test_mutual_follows_are_independent(network, trio):
    alice, bob, _ = trio
    network.follow(alice, bob)
    network.follow(bob, alice)

    assert alice.num_following == alice.num_followers == 1
    assert bob.num_following == bob.num_followers == 1
    assert_edges_paired(network)


def test_unfollow(network, trio):
    alice, bob, _ = trio
    network.follow(alice, bob)

    assert network.unfollow(alice, bob) is True
    assert alice.num_following == 0
    assert bob.num_followers == 0
    assert not alice.following and not bob.followers


def test_unfollow_when_not_following_is_a_no_op(network, trio):
    alice, bob, carol = trio
    network.follow(alice, bob)

    assert network.unfollow(alice, carol) is False
    assert network.unfollow(bob, alice) is False
    assert alice.num_following == 1
    assert bob.num_followers == 1
    assert carol.num_followers == 0
    assert_edges_paired(network)


# ================================================================
# Account deletion
# ================================================================

def test_delete_account_severs_and_deregisters(network, trio):
    alice, bob, carol = trio
    network.follow(alice, bob)
    network.follow(carol, alice)
    network.follow(bob, alice)
    network.publish_post(alice, "bye", created_at=at(1))

    network.delete_account(alice)

    assert network.lookup_user("alice") is None
    assert alice not in network.graph
    assert len(network) == 2
    assert bob.num_followers == 0
    assert bob.num_following == 0
    assert carol.num_following == 0
    assert alice.post_count == 0
    assert_edges_paired(network)


def test_delete_unknown_account_raises(network, trio):
    alice, _, _ = trio
    network.delete_account(alice)
    with pytest.raises(NotFoundError):
        network.delete_account(alice)


def test_username_can_be_reused_after_deletion(network, trio):
    alice, bob, _ = trio
    network.follow(bob, alice)
    network.delete_account(alice)

    again = network.register("alice", "pw", "Alice Again")

    assert again is not alice
    assert again.num_followers == 0
    assert network.lookup_user("alice") is again


def test_clear_removes_everyone(network, trio):
    alice, bob, carol = trio
    network.follow(alice, bob)
    network.follow(bob, carol)

    assert network.clear() == 3
    assert len(network) == 0
    assert len(network.directory) == 0
    assert list(network.edges()) == []


# ================================================================
# Posts & interests
# ================================================================

def test_publish_post_prepends(network, trio):
    alice, _, _ = trio
    first = network.publish_post(alice, "first", created_at=at(1))
    second = network.publish_post(alice, "second", created_at=at(2))

    assert list(alice.posts) == [second, first]
    assert first.author is alice
    assert first.post_id == jenkins_hash("first")


def test_empty_post_rejected(network, trio):
    alice, _, _ = trio
    with pytest.raises(ValueError):
        network.publish_post(alice, "   ")
    assert alice.post_count == 0


def test_delete_post(network, trio):
    alice, _, _ = trio
    post = network.publish_post(alice, "oops")

    assert network.delete_post(alice, post.post_id) is True
    assert network.delete_post(alice, post.post_id) is False
    assert alice.post_count == 0


def test_toggle_and_set_interests(network, trio):
    alice, _, _ = trio
    assert network.toggle_interest(alice, "ml") is True
    assert network.interests_of(alice) == ["rust", "ml"]
    assert network.toggle_interest(alice, "rust") is False
    assert network.interests_of(alice) == ["ml"]

    network.set_interests(alice, ["go"])
    assert network.interests_of(alice) == ["go"]

    with pytest.raises(NotFoundError):
        network.toggle_interest(alice, "cobol")


def test_interest_change_does_not_reweigh_edges(network, trio):
    alice, bob, _ = trio
    network.follow(alice, bob)

    network.set_interests(alice, ["rust", "go"])

    assert alice.following[0].weight == pytest.approx(0.5)
    assert bob.followers[0].weight == pytest.approx(0.5)


# ================================================================
# Derived scores
# ================================================================

def test_derived_scores(network, trio):
    alice, bob, carol = trio
    assert alice.category == "newcomer"
    assert alice.friendliness == 0.0

    network.follow(alice, bob)
    network.follow(alice, carol)
    assert alice.friendliness == 1.0
    assert alice.category == "friendly"
    assert bob.popularity == 1.0
    assert bob.category == "popular"

    network.follow(bob, alice)
    assert bob.category == "balanced"
    assert alice.popularity == pytest.approx(0.5)


# ================================================================
# Assembly
# ================================================================

def test_injected_empty_graph_and_directory_are_used(catalog):
    graph = SocialGraph()
    directory = UserDirectory()
    network = SocialNetwork(catalog, graph=graph, directory=directory)

    alice = network.register("alice", "pw", "Alice")

    assert network.graph is graph
    assert network.directory is directory
    assert alice in graph
    assert directory.lookup("alice") is alice
