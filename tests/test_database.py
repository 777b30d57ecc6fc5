"""
Unit tests for JSON persistence and the session file.
"""
import pytest
from conftest import assert_edges_paired, at

from devgraph.database import (
    clear_session,
    database_exists,
    load_network,
    read_session,
    restore_network,
    save_network,
    snapshot_network,
    write_session,
)
from devgraph.interests import InterestCatalog
from devgraph.schemas import FollowRecord


@pytest.fixture
def populated(network, trio):
    alice, bob, carol = trio
    network.follow(alice, bob)
    network.follow(carol, alice)
    network.publish_post(alice, "first", created_at=at(1))
    network.publish_post(alice, "second", created_at=at(2))
    network.publish_post(bob, "bob says hi", created_at=at(3))
    return network


def test_round_trip_preserves_users_posts_and_edges(tmp_path, populated, catalog):
    path = tmp_path / "db.json"
    save_network(populated, path)

    loaded = load_network(path, catalog)

    assert [u.username for u in loaded.users()] == [u.username for u in populated.users()]
    alice = loaded.get_user("alice")
    bob = loaded.get_user("bob")
    carol = loaded.get_user("carol")
    assert alice.password == "pw-a"
    assert alice.name == "Alice Chen"
    assert loaded.interests_of(bob) == ["rust", "go"]
    assert [p.content for p in alice.posts] == ["second", "first"]
    assert alice.posts[0].created_at == at(2)
    assert alice.following[0].dest is bob
    assert alice.following[0].weight == pytest.approx(0.5)
    assert carol.following[0].dest is alice
    assert alice.num_followers == 1
    assert bob.num_followers == 1
    assert_edges_paired(loaded)


def test_frozen_weights_survive_reload(tmp_path, populated, catalog):
    alice = populated.get_user("alice")
    populated.set_interests(alice, ["rust", "go"])
    path = tmp_path / "db.json"
    save_network(populated, path)

    loaded = load_network(path, catalog)

    # distance would now be 0.0 if it were recomputed
    assert loaded.get_user("alice").following[0].weight == pytest.approx(0.5)


def test_following_order_is_preserved(tmp_path, network, trio, catalog):
    alice, bob, carol = trio
    network.follow(alice, bob)
    network.follow(alice, carol)
    path = tmp_path / "db.json"
    save_network(network, path)

    loaded = load_network(path, catalog)

    assert [e.dest.username for e in loaded.get_user("alice").following] == ["carol", "bob"]


def test_unknown_followee_is_skipped(populated, catalog, caplog):
    snapshot = snapshot_network(populated)
    record = next(r for r in snapshot.users if r.username == "bob")
    record.following.append(FollowRecord(username="ghost", weight=0.1))

    loaded = restore_network(snapshot, catalog)

    assert loaded.get_user("bob").num_following == 0
    assert "unknown user 'ghost'" in caplog.text


def test_unknown_interest_is_skipped(populated, caplog):
    other = InterestCatalog(["rust", "python"])

    loaded = restore_network(snapshot_network(populated), other)

    assert loaded.interests_of(loaded.get_user("bob")) == ["rust"]
    assert loaded.interests_of(loaded.get_user("carol")) == []
    assert "unknown interest 'go'" in caplog.text


def test_unsupported_version_rejected(populated, catalog):
    snapshot = snapshot_network(populated)
    snapshot.version = 99
    with pytest.raises(ValueError):
        restore_network(snapshot, catalog)


def test_database_exists(tmp_path, network):
    path = tmp_path / "db.json"
    assert not database_exists(path)

    path.write_text("", encoding="utf-8")
    assert not database_exists(path)

    save_network(network, path)
    assert database_exists(path)


def test_session_file(tmp_path):
    path = tmp_path / "session"
    assert read_session(path) is None
    assert clear_session(path) is False

    write_session(path, "alice")
    assert read_session(path) == "alice"

    assert clear_session(path) is True
    assert read_session(path) is None


def test_followers_order_is_preserved(tmp_path, network, trio, catalog):
    alice, bob, carol = trio
    network.follow(alice, bob)
    network.follow(carol, bob)
    path = tmp_path / "db.json"
    save_network(network, path)

    loaded = load_network(path, catalog)

    assert [e.dest.username for e in loaded.get_user("bob").followers] == ["carol", "alice"]


def test_repeated_follow_record_loads_once(populated, catalog, caplog):
    snapshot = snapshot_network(populated)
    record = next(r for r in snapshot.users if r.username == "alice")
    record.following.append(record.following[0].model_copy())

    loaded = restore_network(snapshot, catalog)
    alice = loaded.get_user("alice")
    bob = loaded.get_user("bob")

    assert alice.num_following == 1
    assert bob.num_followers == 1
    assert "more than once" in caplog.text
    assert_edges_paired(loaded)

    assert loaded.unfollow(alice, bob) is True
    assert not loaded.graph.is_following(alice, bob)
