"""Slot parsing and datetime normalization for Pretalx API data.

Handles the differences between the legacy nested submission slot (a
localized ``room`` object plus a separate ``room_id``) and the current API
shape (an integer ``room`` ID with names resolved through ``/rooms/``).
"""

from datetime import datetime
from typing import Any

from pretalx_client.adapters.normalization import localized_dict, resolve_id


def parse_datetime(value: str) -> datetime | None:
    """Return *value* as a datetime, or ``None`` when it is empty or not ISO 8601."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):  # fmt: skip
        return None


def normalize_slot(
    data: dict[str, Any],
    *,
    rooms: dict[int, str] | None = None,
) -> dict[str, Any]:
    """Flatten a submission's ``slot`` object.

    The room is taken, in order, from an inline room object, from a
    localized room name, or from *rooms* when only an ID was sent.

    Args:
        data: The raw slot.
        rooms: Room names by ID.

    Returns:
        A dict with normalized keys: ``room`` (a ``{language: name}`` dict),
        ``room_id``, ``start``, ``end``, ``start_dt``, ``end_dt``.
    """
    start_str = data.get("start") or ""
    end_str = data.get("end") or ""

    room_raw = data.get("room")
    room_id = resolve_id(data.get("room_id"), room_raw)
    if isinstance(room_raw, dict) and "id" in room_raw:
        room = localized_dict(room_raw.get("name"))
    elif isinstance(room_raw, (str, dict)):
        room = localized_dict(room_raw)
    else:
        room = {}
    if not room and room_id is not None and rooms and room_id in rooms:
        room = {"en": rooms[room_id]}

    return {
        "room": room,
        "room_id": room_id,
        "start": start_str,
        "end": end_str,
        "start_dt": parse_datetime(start_str),
        "end_dt": parse_datetime(end_str),
    }
