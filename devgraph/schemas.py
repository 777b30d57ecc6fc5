"""
Pydantic schemas for the on-disk snapshot of the social network.
Kept separate from the in-memory entities to avoid coupling storage to the graph.
"""
from datetime import datetime

from pydantic import BaseModel, Field

SNAPSHOT_VERSION = 1


class PostRecord(BaseModel):
    post_id: int
    content: str = Field(..., min_length=1)
    created_at: datetime


class FollowRecord(BaseModel):
    """One outgoing follow; the weight is the Jaccard distance frozen at follow time."""
    username: str
    weight: float = Field(..., ge=0.0, le=1.0)


class UserRecord(BaseModel):
    username: str = Field(..., min_length=1)
    password: str
    name: str
    created_at: datetime
    # Tag names rather than indexes so a reordered catalog still loads
    interests: list[str] = []
    # Most recent first
    posts: list[PostRecord] = []
    # Most recent first
    following: list[FollowRecord] = []
    # Usernames of followers, most recent first; only fixes the order on load
    followers: list[str] = []


class NetworkSnapshot(BaseModel):
    version: int = SNAPSHOT_VERSION
    saved_at: datetime
    interests: list[str]
    users: list[UserRecord]
