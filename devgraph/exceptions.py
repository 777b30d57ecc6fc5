"""
Social network exceptions.

Every recoverable failure of the core raises a subclass of SocialGraphError;
the CLI reports them and leaves state untouched.
"""


class SocialGraphError(Exception):
    """Base exception for social network errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class DuplicateKeyError(SocialGraphError):
    """Raised when a username is already registered."""

    def __init__(self, username: str, message: str | None = None):
        self.username = username
        super().__init__(message or f"Username '{username}' already taken")


class AlreadyFollowingError(DuplicateKeyError):
    """Raised when a follow edge between two users already exists."""

    def __init__(self, follower: str, followee: str):
        self.follower = follower
        self.followee = followee
        super().__init__(
            follower, f"User '{follower}' already follows '{followee}'"
        )


class SelfReferenceError(SocialGraphError):
    """
    Raised when an operation targets the same user twice.

    The canonical case is a user trying to follow themselves.
    """

    def __init__(self, username: str, operation: str = "follow"):
        self.username = username
        self.operation = operation
        super().__init__(f"User '{username}' cannot {operation} themselves")


class NotFoundError(SocialGraphError):
    """Raised when a lookup misses (user, post, interest tag...)."""

    def __init__(self, kind: str, key):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind.capitalize()} '{key}' not found")


class AuthenticationError(SocialGraphError):
    """Raised when a login password does not match."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Wrong password for user '{username}'")
