"""Adapters for normalizing Pretalx API data.

This package provides helpers for handling Pretalx's multilingual fields,
ID-to-name resolution, datetime parsing, and slot normalization.
"""

from pretalx_client.adapters.normalization import localized, localized_dict, resolve_id, resolve_id_or_localized
from pretalx_client.adapters.schedule import normalize_slot, parse_datetime

__all__ = [
    "localized",
    "localized_dict",
    "normalize_slot",
    "parse_datetime",
    "resolve_id",
    "resolve_id_or_localized",
]
