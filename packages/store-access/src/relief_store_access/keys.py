"""Key patterns for the backing store.

Cache entries live under ``cache:<cache key>``; records under
``rec:<table>:<id>`` with a per-table sorted set (score = created_at) for
most-recent-first listing. Key functions are pure: they compute names and
never touch Redis.
"""

import base64


def cache_key(tag: str, payload: str) -> str:
    """Logical cache key: ``tag + ":" + base64(payload)``.

    The tag separates operation types sharing one namespace ("location",
    "image_verify"). Base64 keeps arbitrary input text and URLs from
    colliding with the ":" delimiter. This is the only thing compared on
    lookup; there is no fuzzy matching.
    """
    encoded = base64.b64encode(payload.encode("utf-8")).decode("ascii")
    return f"{tag}:{encoded}"


def cache_entry_key(key: str) -> str:
    """Storage key of a cache entry."""
    return f"cache:{key}"


def record_key(table: str, record_id: str) -> str:
    """One stored record, JSON-encoded."""
    return f"rec:{table}:{record_id}"


def record_idx_recent(table: str) -> str:
    """Sorted set of record IDs in ``table`` (score = created_at timestamp)."""
    return f"rec:{table}:idx:recent"
