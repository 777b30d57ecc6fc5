"""
Synthetic demo data — random developers, interests, follows and posts.

Only used to populate an empty database; pass a seeded random.Random for a
reproducible network.
"""
import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Optional

from devgraph.exceptions import DuplicateKeyError
from devgraph.network import SocialNetwork

logger = logging.getLogger(__name__)

FIRST_NAMES = [
    "Alice", "Bob", "Carol", "Dave", "Eve", "Frank", "Grace", "Henry",
    "Iris", "Jack", "Karen", "Luis", "Maria", "Nico", "Olga", "Pablo",
    "Quinn", "Rosa", "Sam", "Tomas", "Uma", "Victor", "Wendy", "Ximena",
    "Yusuf", "Zoe",
]

LAST_NAMES = [
    "Chen", "Martinez", "Singh", "Kim", "Johnson", "Williams", "Li", "Brown",
    "Davis", "Wilson", "Garcia", "Rojas", "Silva", "Novak", "Tanaka", "Muller",
]

POST_TEMPLATES = [
    "Just shipped a new feature written in {topic}. Zero downtime deploys are beautiful.",
    "Deep dive into {topic} today. Learned more than I expected.",
    "TIL something surprising about {topic}.",
    "Hot take: {topic} is underrated.",
    "Looking for people to pair on a {topic} side project.",
    "Spent the whole weekend debugging {topic}. Worth it.",
    "Reading the docs for {topic} again, always something new.",
    "Gave a talk about {topic} at the local meetup!",
    "What is your favourite resource for learning {topic}?",
    "Refactored our {topic} code and deleted 2k lines.",
]


def random_username(first: str, last: str, rng: random.Random) -> str:
    return f"{first.lower()}_{last.lower()}{rng.randint(1, 9999)}"


def generate_network(
    network: SocialNetwork,
    quantity: int,
    rng: Optional[random.Random] = None,
    max_interests: int = 4,
    max_follows: int = 5,
    max_posts: int = 5,
) -> int:
    """
    Add `quantity` random users to `network`, then random follows and posts.
    Returns the number of users created.
    """
    if quantity < 1:
        raise ValueError("Quantity must be at least 1")
    rng = rng or random.Random()
    tags = list(network.catalog)
    now = datetime.now(timezone.utc)

    created = []
    attempts = 0
    while len(created) < quantity and attempts < quantity * 10:
        attempts += 1
        first, last = rng.choice(FIRST_NAMES), rng.choice(LAST_NAMES)
        interests = rng.sample(tags, k=rng.randint(1, min(max_interests, len(tags))))
        try:
            user = network.register(
                random_username(first, last, rng),
                password=f"pw{rng.randint(1000, 9999)}",
                name=f"{first} {last}",
                interests=interests,
            )
        except DuplicateKeyError:
            continue
        created.append(user)

    # ── Follow graph ──────────────────────────────────────────────────────
    for user in created:
        wanted = rng.randint(0, max_follows)
        picks = rng.sample(created, k=min(wanted + 1, len(created)))
        for followee in [u for u in picks if u is not user][:wanted]:
            network.follow(user, followee)

    # ── Posts ─────────────────────────────────────────────────────────────
    posts = 0
    for user in created:
        topics = network.interests_of(user) or tags
        for _ in range(rng.randint(0, max_posts)):
            content = rng.choice(POST_TEMPLATES).format(topic=rng.choice(topics))
            created_at = now - timedelta(minutes=rng.randint(0, 60 * 24 * 7))
            network.publish_post(user, content, created_at=created_at)
            posts += 1

    logger.info("Generated %d users and %d posts", len(created), posts)
    return len(created)
