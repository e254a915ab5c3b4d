"""Standalone Python client for the Pretalx REST API."""

from pretalx_client.client import PretalxClient
from pretalx_client.models import (
    PretalxAnswer,
    PretalxResource,
    PretalxSlot,
    PretalxSpeaker,
    PretalxSubmission,
    PretalxTag,
    SubmissionState,
)

__all__ = [
    "PretalxAnswer",
    "PretalxClient",
    "PretalxResource",
    "PretalxSlot",
    "PretalxSpeaker",
    "PretalxSubmission",
    "PretalxTag",
    "SubmissionState",
]
