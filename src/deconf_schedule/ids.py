"""Stable identifiers for the published schedule.

Every cross-reference inside a :class:`~deconf_schedule.records.ScheduleRecord`
(a session's type, track, slot and themes) is a string ID produced here.
Numeric Pretalx IDs are preferred because they survive title edits upstream;
slugs of free-text labels are the fallback. Two distinct labels that slug
identically will collide, which is accepted rather than guarded against.
"""

from django.utils.text import slugify as _django_slugify

SLOT_ID_SEPARATOR = "__"
UNKNOWN_ID = "unknown"


def slugify(label: str) -> str:
    """Convert a free-text label to a lowercase, punctuation-free slug.

    Args:
        label: The label to slugify, e.g. a room or submission type name.

    Returns:
        A hyphen-separated slug, empty if *label* has no word characters.
    """
    return _django_slugify(label or "")


def external_id(value: object) -> str | None:
    """Return the string form of an external ID, or ``None`` when missing.

    ``0`` is a valid ID; ``None``, booleans and blank strings are not.
    """
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None


def composite_id(*parts: object, separator: str = SLOT_ID_SEPARATOR) -> str:
    """Join the string forms of *parts* into one deterministic ID."""
    return separator.join("" if part is None else str(part) for part in parts)


def session_id(code: str) -> str:
    """Return the schedule ID of the session created from submission *code*.

    Pretalx submission codes are unique per event, so the code is used as is.
    """
    return str(code)
