"""Project-wide constant values."""
from __future__ import annotations

INTEREST_CATALOGUE: tuple[str, ...] = (
    "Acting",
    "Abacus",
    "Art",
    "Baking",
    "Beauty",
    "Calligraphy",
    "Coding",
    "Cooking",
    "Comedy",
    "Dance",
    "Design",
    "DIY",
    "Gaming",
    "Fitness",
    "Gardening",
    "Music",
    "Poetry",
    "Photography",
    "Reading",
    "Singing",
    "Sports",
    "Tech",
    "Travel",
    "Writing",
)

MIN_INTERESTS = 3
MAX_INTERESTS = 5

FEED_CHANNEL = "feed"


def user_channel(profile_id: object) -> str:
    return f"user:{profile_id}"


def notification_channel(profile_id: object) -> str:
    return f"notifications:{profile_id}"


def conversation_channel(conversation_id: object) -> str:
    return f"conversation:{conversation_id}"


__all__ = [
    "INTEREST_CATALOGUE",
    "MIN_INTERESTS",
    "MAX_INTERESTS",
    "FEED_CHANNEL",
    "user_channel",
    "notification_channel",
    "conversation_channel",
]
