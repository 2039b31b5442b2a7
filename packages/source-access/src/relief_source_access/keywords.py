"""Disaster keyword extraction for social posts."""

DISASTER_KEYWORDS: tuple[str, ...] = (
    "disaster",
    "earthquake",
    "flood",
    "hurricane",
    "wildfire",
    "emergency",
    "evacuation",
    "warning",
    "alert",
    "damage",
    "rescue",
    "relief",
)


def extract_disaster_keywords(text: str) -> list[str]:
    """Return the vocabulary words contained in ``text``, in vocabulary order.

    Matching is a case-insensitive substring test, so "Flooding" matches
    "flood" and "alerts" matches "alert".
    """
    lowered = text.lower()
    return [keyword for keyword in DISASTER_KEYWORDS if keyword in lowered]
