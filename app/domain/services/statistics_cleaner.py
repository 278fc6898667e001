"""Normalization of statistics documents read from the index or the store."""

from __future__ import annotations

import json
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from app.domain.exceptions import DataFormatError
from app.domain.fields import project
from app.domain.services.rating_palette import RatingPalette

# Sub-documents that legacy writers stored as JSON strings
ENCODED_STATS_FIELDS = ("maxRating", "DATA_SCIENCE", "DESIGN", "DEVELOP")


def decode_json_field(value: Any, field: str) -> Any:
    """Decode a JSON-string encoded value, passing structured values through."""
    if not isinstance(value, (str, bytes)):
        return value
    try:
        return json.loads(value)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DataFormatError(field, str(exc)) from exc


def coerce_number(value: Any) -> Optional[Union[int, float]]:
    """Numeric value of ``value``, accepting numeric strings; ``None`` otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def decode_max_rating(value: Any, palette: RatingPalette) -> Any:
    """Decode ``maxRating`` and attach ``ratingColor`` when a rating is present."""
    max_rating = decode_json_field(value, "maxRating")
    if isinstance(max_rating, Mapping) and "rating" in max_rating:
        max_rating = dict(max_rating)
        max_rating["ratingColor"] = palette.color_for(max_rating["rating"])
    return max_rating


class StatisticsCleaner:
    """Decodes string-encoded sub-documents and applies field selection."""

    def __init__(self, palette: RatingPalette):
        self.palette = palette

    def clean(self, record: Mapping[str, Any], fields: Optional[Sequence[str]] = None) -> Dict[str, Any]:
        cleaned = dict(record)
        if "maxRating" in cleaned:
            cleaned["maxRating"] = decode_max_rating(cleaned["maxRating"], self.palette)
        for name in ENCODED_STATS_FIELDS[1:]:
            if name in cleaned:
                cleaned[name] = decode_json_field(cleaned[name], name)
        if fields:
            cleaned = project(cleaned, fields)
        return cleaned

    def clean_all(
        self,
        records: Iterable[Mapping[str, Any]],
        fields: Optional[Sequence[str]] = None,
    ) -> List[Dict[str, Any]]:
        return [self.clean(record, fields) for record in records]


__all__ = [
    "ENCODED_STATS_FIELDS",
    "coerce_number",
    "decode_json_field",
    "decode_max_rating",
    "StatisticsCleaner",
]
