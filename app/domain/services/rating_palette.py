"""Rating to color classification."""

from __future__ import annotations

from typing import Any, Sequence, Tuple


class RatingPalette:
    """Maps a numeric rating onto an ordered color palette.

    ``thresholds`` are ascending ``(limit, color)`` pairs; a rating takes the
    color of the first limit it is strictly below, and ``top_color`` once it
    reaches the last limit. Non-numeric ratings fall into the lowest bucket.
    """

    def __init__(self, thresholds: Sequence[Tuple[float, str]], top_color: str):
        self.thresholds = tuple(sorted(thresholds, key=lambda pair: pair[0]))
        self.top_color = top_color

    def color_for(self, rating: Any) -> str:
        try:
            value = float(rating)
        except (TypeError, ValueError):
            value = float("-inf")
        if value != value:  # NaN
            value = float("-inf")

        for limit, color in self.thresholds:
            if value < limit:
                return color
        return self.top_color


__all__ = ["RatingPalette"]
