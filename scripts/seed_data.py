#!/usr/bin/env python3
"""
Seed script — creates a random dataset for trying out the feed and
recommendation commands.

Creates:
  • N users with 1-4 random interests each
  • A follow graph (each user follows 0-5 others)
  • 0-5 posts per user spread over the last week

Run:
  python scripts/seed_data.py --quantity 200 --database devgraph.json

Pass --seed for a reproducible network.
"""
import argparse
import logging
import random

from devgraph.config import settings
from devgraph.database import save_network
from devgraph.interests import load_catalog
from devgraph.network import SocialNetwork
from devgraph.seed import generate_network


def main(quantity: int, database: str, seed: int | None) -> None:
    network = SocialNetwork(load_catalog())
    rng = random.Random(seed)

    print(f"Generating {quantity} users...")
    created = generate_network(network, quantity, rng=rng)
    save_network(network, database)

    edges = sum(1 for _ in network.edges())
    posts = sum(user.post_count for user in network.users())

    print("\n" + "=" * 60)
    print(f"Seed complete: {created} users, {edges} follows, {posts} posts\n")
    sample = next(network.users())
    print(f"# Log in as '{sample.username}':")
    print(f"  devgraph --database {database} login {sample.username} --password {sample.password}\n")
    print("# Then try:")
    print(f"  devgraph --database {database} feed")
    print(f"  devgraph --database {database} recommend")
    print("=" * 60)


if __name__ == "__main__":
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
    )
    parser = argparse.ArgumentParser(description="Seed the DevGraph database")
    parser.add_argument("--quantity", type=int, default=50, help="Users to create")
    parser.add_argument("--database", default=settings.database_path, help="Database file")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    args = parser.parse_args()
    main(args.quantity, args.database, args.seed)
