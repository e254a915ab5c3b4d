"""Resolver for selecting the identifier profile a sync run uses."""

from deconf_schedule.profiles.base import IdentifierProfile
from deconf_schedule.profiles.numeric import NumericIdProfile
from deconf_schedule.profiles.slug import SlugIdProfile

_PROFILES: dict[str, type[IdentifierProfile]] = {
    NumericIdProfile.name: NumericIdProfile,
    SlugIdProfile.name: SlugIdProfile,
}


def resolve_identifier_profile(strategy: str) -> IdentifierProfile:
    """Return the profile for *strategy* (``"numeric"`` or ``"slug"``).

    Raises:
        ValueError: If *strategy* names no known profile.
    """
    try:
        return _PROFILES[strategy.casefold()]()
    except KeyError:
        msg = f"Unknown identifier strategy: {strategy!r}"
        raise ValueError(msg) from None
