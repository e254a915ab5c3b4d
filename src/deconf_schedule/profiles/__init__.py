"""Identifier profiles for mapping Pretalx references to schedule IDs."""

from deconf_schedule.profiles.base import IdentifierProfile
from deconf_schedule.profiles.numeric import NumericIdProfile
from deconf_schedule.profiles.resolver import resolve_identifier_profile
from deconf_schedule.profiles.slug import SlugIdProfile

__all__ = [
    "IdentifierProfile",
    "NumericIdProfile",
    "SlugIdProfile",
    "resolve_identifier_profile",
]
