"""
Jenkins one-at-a-time hash.

Used for the user directory buckets and to derive numeric user / post ids.
Ids are not identity: two usernames may share an id, usernames stay the key.
"""

MASK_32 = 0xFFFFFFFF


def jenkins_hash(key: str) -> int:
    """Return the unsigned 32-bit one-at-a-time hash of the UTF-8 bytes of `key`."""
    h = 0
    for byte in key.encode("utf-8"):
        h = (h + byte) & MASK_32
        h = (h + (h << 10)) & MASK_32
        h ^= h >> 6
    h = (h + (h << 3)) & MASK_32
    h ^= h >> 11
    h = (h + (h << 15)) & MASK_32
    return h
