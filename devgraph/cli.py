#!/usr/bin/env python3
"""
DevGraph command line — a single interactive session over the JSON database.

  devgraph register alice --name "Alice Chen" --interests python,rust
  devgraph login alice
  devgraph follow bob
  devgraph feed --limit 10
  devgraph recommend
  devgraph generate 200

The logged-in username lives in the session file; every mutating command
saves the database before exiting.
"""
import argparse
import getpass
import logging
import sys
from dataclasses import dataclass
from typing import Callable, Optional

from devgraph.config import settings
from devgraph.database import (
    clear_session,
    database_exists,
    load_network,
    read_session,
    save_network,
    write_session,
)
from devgraph.exceptions import NotFoundError, SocialGraphError
from devgraph.interests import InterestCatalog, load_catalog
from devgraph.models import Post, User
from devgraph.network import SocialNetwork
from devgraph.seed import generate_network
from devgraph.telemetry import setup_tracing, write_metrics

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


@dataclass
class Session:
    network: SocialNetwork
    database_path: str
    session_path: str

    def save(self) -> None:
        save_network(self.network, self.database_path)

    def current_user(self) -> User:
        username = read_session(self.session_path)
        if username is None:
            raise SocialGraphError("Not logged in. Run 'devgraph login <username>' first.")
        user = self.network.lookup_user(username)
        if user is None:
            clear_session(self.session_path)
            raise NotFoundError("user", username)
        return user


# ─────────────────────────── Output ──────────────────────────────────────

def _print_posts(posts: list[Post]) -> None:
    if not posts:
        print("   No posts")
        return
    for post in posts:
        print(f"   ID: {post.post_id}")
        print(f"   Date: {post.created_at:%Y-%m-%d %H:%M}")
        print(f"   {post.content}")


def _print_user(user: User, network: SocialNetwork, show_password: bool = False) -> None:
    print(f"ID: {user.user_id}")
    print(f"Name: {user.name}")
    print(f"Username: {user.username}")
    if show_password:
        print(f"Password: {user.password}")
    print(f"Interests: {', '.join(network.interests_of(user)) or '-'}")
    print(f"Followers ({user.num_followers}) | Following ({user.num_following})")
    print(
        f"Popularity: {user.popularity:.2f} | Friendliness: {user.friendliness:.2f} "
        f"({user.category})"
    )
    print("Posts:")
    _print_posts(list(user.posts))


def _parse_tags(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    return [t.strip() for t in raw.split(",") if t.strip()]


# ─────────────────────────── Commands ────────────────────────────────────

def cmd_register(args: argparse.Namespace, session: Session) -> int:
    name = args.name or input("Full name: ")
    password = args.password or getpass.getpass("Password: ")
    user = session.network.register(
        args.username, password, name, interests=_parse_tags(args.user_interests)
    )
    session.save()
    print(f"User '{user.username}' registered. Log in with 'devgraph login {user.username}'.")
    return EXIT_OK


def cmd_login(args: argparse.Namespace, session: Session) -> int:
    password = args.password or getpass.getpass("Password: ")
    user = session.network.authenticate(args.username, password)
    write_session(session.session_path, user.username)
    print(f"Welcome, {user.name}!")
    return EXIT_OK


def cmd_logout(args: argparse.Namespace, session: Session) -> int:
    if clear_session(session.session_path):
        print("Logged out.")
    else:
        print("No active session.")
    return EXIT_OK


def cmd_post(args: argparse.Namespace, session: Session) -> int:
    user = session.current_user()
    post = session.network.publish_post(user, " ".join(args.content))
    session.save()
    print(f"Post {post.post_id} published.")
    return EXIT_OK


def cmd_profile(args: argparse.Namespace, session: Session) -> int:
    _print_user(session.current_user(), session.network, show_password=True)
    return EXIT_OK


def cmd_show(args: argparse.Namespace, session: Session) -> int:
    _print_user(session.network.get_user(args.username), session.network)
    return EXIT_OK


def cmd_users(args: argparse.Namespace, session: Session) -> int:
    print(f"Users ({len(session.network)}):")
    for user in session.network.users():
        print(f"- {user.username}")
    return EXIT_OK


def cmd_follow(args: argparse.Namespace, session: Session) -> int:
    user = session.current_user()
    edge = session.network.follow(user, session.network.get_user(args.username))
    session.save()
    print(f"You now follow {args.username} (interest distance {edge.weight:.2f}).")
    return EXIT_OK


def cmd_unfollow(args: argparse.Namespace, session: Session) -> int:
    user = session.current_user()
    if session.network.unfollow(user, session.network.get_user(args.username)):
        session.save()
        print(f"You no longer follow {args.username}.")
    else:
        print(f"You were not following {args.username}.")
    return EXIT_OK


def cmd_delete_account(args: argparse.Namespace, session: Session) -> int:
    user = session.current_user()
    if not args.yes:
        answer = input(f"Delete account '{user.username}'? This cannot be undone [y/N]: ")
        if answer.strip().lower() not in ("y", "yes"):
            print("Cancelled.")
            return EXIT_OK
    session.network.delete_account(user)
    clear_session(session.session_path)
    session.save()
    print("Account deleted.")
    return EXIT_OK


def cmd_clear_database(args: argparse.Namespace, session: Session) -> int:
    print("Preparing, please wait...")
    removed = session.network.clear()
    clear_session(session.session_path)
    session.save()
    print(f"Database cleared ({removed} users removed).")
    return EXIT_OK


def cmd_edit(args: argparse.Namespace, session: Session) -> int:
    user = session.current_user()
    network = session.network
    network.update_profile(user, name=args.name, password=args.password)
    for tag in _parse_tags(args.add_interests):
        if tag not in network.interests_of(user):
            network.toggle_interest(user, tag)
    for tag in _parse_tags(args.remove_interests):
        if tag in network.interests_of(user):
            network.toggle_interest(user, tag)
    session.save()
    _print_user(user, network, show_password=True)
    return EXIT_OK


def cmd_feed(args: argparse.Namespace, session: Session) -> int:
    user = session.current_user()
    posts = session.network.feed(user).drain(args.limit or settings.feed_page_size)
    if not posts:
        print("Your feed is empty. Follow someone or add interests!")
        return EXIT_OK
    for post in posts:
        print(f"@{post.author.username} · {post.created_at:%Y-%m-%d %H:%M}")
        print(f"   {post.content}")
    return EXIT_OK


def cmd_recommend(args: argparse.Namespace, session: Session) -> int:
    user = session.current_user()
    limit = args.limit or settings.recommendation_limit
    by_distance, by_interest = session.network.recommend(user)

    print("Friends of friends:")
    if not by_distance:
        print("   No suggestions")
    for _ in range(min(limit, len(by_distance))):
        suggestion, priority = by_distance.pop_with_priority()
        print(f"- {suggestion.username} (distance {-priority:.2f})")

    print("People with similar interests:")
    if not by_interest:
        print("   No suggestions")
    for _ in range(min(limit, len(by_interest))):
        suggestion, shared = by_interest.pop_with_priority()
        print(f"- {suggestion.username} ({int(shared)} shared interests)")
    return EXIT_OK


def cmd_topics(args: argparse.Namespace, session: Session) -> int:
    print("DevGraph topics:")
    for index, tag in enumerate(session.network.catalog):
        print(f"{index:>3}. {tag}")
    return EXIT_OK


def cmd_followers(args: argparse.Namespace, session: Session) -> int:
    user = session.current_user()
    print(f"Followers of {user.username}:")
    for edge in user.followers:
        print(f"- {edge.dest.username}")
    return EXIT_OK


def cmd_following(args: argparse.Namespace, session: Session) -> int:
    user = session.current_user()
    print(f"Followed by {user.username}:")
    for edge in user.following:
        print(f"- {edge.dest.username}")
    return EXIT_OK


def cmd_generate(args: argparse.Namespace, session: Session) -> int:
    if args.quantity < 1:
        print("ERROR: invalid number of users")
        return EXIT_FAILURE
    if args.quantity > settings.max_generated_users:
        print(
            f"ERROR: generating more than {settings.max_generated_users} users "
            "may cause performance problems. Try fewer users."
        )
        return EXIT_FAILURE

    # Generation always starts from a fresh database
    session.network = SocialNetwork(session.network.catalog)
    created = generate_network(session.network, args.quantity)
    clear_session(session.session_path)
    session.save()
    print(f"{created} users generated successfully.")
    return EXIT_OK


COMMANDS: dict[str, Callable[[argparse.Namespace, Session], int]] = {
    "register": cmd_register,
    "login": cmd_login,
    "logout": cmd_logout,
    "post": cmd_post,
    "profile": cmd_profile,
    "show": cmd_show,
    "users": cmd_users,
    "follow": cmd_follow,
    "unfollow": cmd_unfollow,
    "delete-account": cmd_delete_account,
    "clear-database": cmd_clear_database,
    "edit": cmd_edit,
    "feed": cmd_feed,
    "recommend": cmd_recommend,
    "topics": cmd_topics,
    "followers": cmd_followers,
    "following": cmd_following,
    "generate": cmd_generate,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="devgraph", description="A tiny developer social network")
    parser.add_argument("--database", default=settings.database_path, help="Database file")
    parser.add_argument("--session", default=settings.session_path, help="Session file")
    parser.add_argument("--interests", default=settings.interests_path, help="Interest catalog file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("register", help="Create an account")
    p.add_argument("username")
    p.add_argument("--name")
    p.add_argument("--password")
    p.add_argument("--interests", dest="user_interests", help="Comma-separated tags")

    p = sub.add_parser("login", help="Start a session")
    p.add_argument("username")
    p.add_argument("--password")

    sub.add_parser("logout", help="End the session")

    p = sub.add_parser("post", help="Publish a post")
    p.add_argument("content", nargs="+")

    sub.add_parser("profile", help="Show your profile")

    p = sub.add_parser("show", help="Show another user's profile")
    p.add_argument("username")

    sub.add_parser("users", help="List every user")

    p = sub.add_parser("follow", help="Follow a user")
    p.add_argument("username")

    p = sub.add_parser("unfollow", help="Stop following a user")
    p.add_argument("username")

    p = sub.add_parser("delete-account", help="Delete your account")
    p.add_argument("--yes", action="store_true", help="Skip confirmation")

    sub.add_parser("clear-database", help="Delete every account")

    p = sub.add_parser("edit", help="Edit your profile")
    p.add_argument("--name")
    p.add_argument("--password")
    p.add_argument("--add-interests", help="Comma-separated tags to add")
    p.add_argument("--remove-interests", help="Comma-separated tags to remove")

    p = sub.add_parser("feed", help="Show your ranked feed")
    p.add_argument("--limit", type=int)

    p = sub.add_parser("recommend", help="Suggest people to follow")
    p.add_argument("--limit", type=int)

    sub.add_parser("topics", help="List interest tags")
    sub.add_parser("followers", help="List your followers")
    sub.add_parser("following", help="List who you follow")

    p = sub.add_parser("generate", help="Replace the database with random users")
    p.add_argument("quantity", type=int)

    return parser


def _open_session(args: argparse.Namespace, catalog: InterestCatalog) -> Session:
    if database_exists(args.database) and args.command != "generate":
        network = load_network(args.database, catalog)
    else:
        network = SocialNetwork(catalog)
    return Session(network=network, database_path=args.database, session_path=args.session)


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
    )
    setup_tracing()

    try:
        catalog = load_catalog(args.interests)
        session = _open_session(args, catalog)
        return COMMANDS[args.command](args, session)
    except SocialGraphError as exc:
        print(f"ERROR: {exc.message}")
        return EXIT_FAILURE
    except ValueError as exc:
        print(f"ERROR: {exc}")
        return EXIT_FAILURE
    except OSError as exc:
        print(f"ERROR: {exc}")
        return EXIT_FAILURE
    except MemoryError:
        logger.critical("Not enough memory — aborting")
        return EXIT_FAILURE
    finally:
        write_metrics()


if __name__ == "__main__":
    sys.exit(main())
