"""
DevGraph — a small developer social network.

Components:
- interests: the immutable interest catalog
- directory: username → user hash index
- graph: users and mirrored, Jaccard-weighted follow edges
- recommendations: shortest-path and interest-based friend suggestions
- feed: recency-ranked posts from followees and like-minded users
- network: SocialNetwork, the entry point tying them together
"""

from .exceptions import (
    AlreadyFollowingError,
    AuthenticationError,
    DuplicateKeyError,
    NotFoundError,
    SelfReferenceError,
    SocialGraphError,
)
from .interests import InterestCatalog, load_catalog
from .models import Edge, Post, User
from .network import SocialNetwork
from .ranking import RankedSequence

__all__ = [
    'AlreadyFollowingError',
    'AuthenticationError',
    'DuplicateKeyError',
    'NotFoundError',
    'SelfReferenceError',
    'SocialGraphError',
    'InterestCatalog',
    'load_catalog',
    'Edge',
    'Post',
    'User',
    'SocialNetwork',
    'RankedSequence',
]
