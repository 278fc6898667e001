"""Domain services package."""

from .rating_palette import RatingPalette
from .statistics_cleaner import StatisticsCleaner
from .visibility_policy import FieldVisibilityPolicy, RoleConfiguration

__all__ = [
    "RatingPalette",
    "StatisticsCleaner",
    "FieldVisibilityPolicy",
    "RoleConfiguration",
]
