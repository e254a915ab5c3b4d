"""Numeric profile: prefer Pretalx's numeric IDs."""

from deconf_schedule.profiles.base import IdentifierProfile


class NumericIdProfile(IdentifierProfile):
    """Use numeric submission type, room and tag IDs as schedule IDs."""

    name = "numeric"
