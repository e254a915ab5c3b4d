"""Helpers that flatten the two ways Pretalx encodes fields.

Text fields arrive either as plain strings or as ``{language: text}`` dicts,
and references arrive as bare integer IDs (current API) or inline objects
(legacy API). Everything downstream works on the flattened values.
"""

from typing import Any


def localized(value: str | dict[str, Any] | None, language: str = "en") -> str:
    """Pick one display string out of a Pretalx multilingual field.

    Plain strings are returned unchanged. For a ``{language: text}`` dict the
    *language* entry wins, then the first text entry; objects that wrap the
    text in a ``name`` key are unwrapped.

    Args:
        value: The raw field value.
        language: Preferred language code.

    Returns:
        The display string, empty when there is none.
    """
    if value is None:
        return ""
    if not isinstance(value, dict):
        return str(value)
    if language in value:
        return str(value[language])
    if "name" in value:
        return localized(value["name"], language)
    return next((text for text in value.values() if isinstance(text, str)), "")


def localized_dict(value: str | dict[str, Any] | None, default_language: str = "en") -> dict[str, str]:
    """Return a multilingual field as a ``{language: text}`` dict.

    Plain strings are keyed under *default_language*; non-string entries
    of a multilingual dict are dropped.

    Args:
        value: A string, a multilingual dict, or ``None``.
        default_language: Language code used for plain strings.

    Returns:
        A dict mapping language codes to text, empty for ``None``.
    """
    if value is None:
        return {}
    if isinstance(value, dict):
        if "name" in value and isinstance(value["name"], (dict, str)):
            return localized_dict(value["name"], default_language)
        return {str(k): v for k, v in value.items() if isinstance(v, str)}
    return {default_language: str(value)}


def resolve_id_or_localized(
    value: int | str | dict[str, Any] | None,
    mapping: dict[int, str] | None = None,
) -> str:
    """Return the display name of a reference that may be a bare ID.

    The current API sends integer IDs for submission types, tracks and rooms;
    *mapping* (as fetched from the matching lookup endpoint) turns them back
    into names. Unmapped IDs are stringified and inline values go through
    :func:`localized`.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return (mapping or {}).get(value, str(value))
    return localized(value)


def resolve_id(value: object, fallback: object = None) -> int | None:
    """Extract an integer ID from a Pretalx foreign-key field.

    Accepts a bare integer, a numeric string, or an inline object with an
    ``id`` key.  When *value* carries no ID, *fallback* (typically a sibling
    ``*_id`` field from the legacy API) is tried instead.

    Args:
        value: The raw field value.
        fallback: A secondary raw value to try when *value* has no ID.

    Returns:
        The integer ID, or ``None`` if neither value carries one.
    """
    for candidate in (value, fallback):
        if isinstance(candidate, dict):
            candidate = candidate.get("id")
        if isinstance(candidate, bool) or candidate is None:
            continue
        if isinstance(candidate, int):
            return candidate
        if isinstance(candidate, str) and candidate.strip().isdigit():
            return int(candidate.strip())
    return None
