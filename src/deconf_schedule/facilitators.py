"""Privacy-preserving facilitator set.

The presentation service needs to know whether a signed-in user is a speaker
on a confirmed session without being handed anyone's email address.  Only a
SHA-256 digest of each normalized email is published.
"""

import hashlib
from collections.abc import Iterable

from deconf_schedule.records import Session
from pretalx_client.models import PretalxSpeaker, SubmissionState


def trim_email(email: str) -> str:
    """Normalize an email address before hashing.

    Surrounding whitespace is removed, the address is lowercased and any
    ``+tag`` sub-address is dropped from the local part, so
    ``" Ada+mozfest@Example.org"`` becomes ``"ada@example.org"``.
    """
    local, sep, domain = email.strip().lower().partition("@")
    local = local.split("+", 1)[0]
    return f"{local}{sep}{domain}"


def hash_email(email: str) -> str:
    """Return the hex SHA-256 digest of the trimmed *email*."""
    return hashlib.sha256(trim_email(email).encode("utf-8")).hexdigest()


def collect_facilitators(sessions: Iterable[Session], speakers: Iterable[PretalxSpeaker]) -> list[str]:
    """Return the email hashes of speakers on confirmed sessions.

    Sessions in any state other than ``confirmed`` contribute nothing, and
    speakers without an email are skipped.  The result is a set rendered as
    a sorted list.
    """
    speakers_by_code = {speaker.code: speaker for speaker in speakers}
    hashes: set[str] = set()
    for session in sessions:
        if session.state != SubmissionState.CONFIRMED:
            continue
        for code in session.speakers:
            speaker = speakers_by_code.get(code)
            if speaker is None or not speaker.email.strip():
                continue
            hashes.add(hash_email(speaker.email))
    return sorted(hashes)
