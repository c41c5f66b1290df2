"""Data access layer repositories."""

from . import addresses, categories, courses, meetings, ratings, roles, users

__all__ = [
    "addresses",
    "categories",
    "courses",
    "meetings",
    "ratings",
    "roles",
    "users",
]
