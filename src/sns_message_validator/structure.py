"""
Structural validation of message envelopes
"""

from typing import List

from .types import (
    ALTERNATE_KEY_CASINGS,
    REQUIRED_KEYS,
    SUBSCRIPTION_CONTROL_KEYS,
    Envelope,
    is_subscription_control,
)


def _has_key(envelope: Envelope, key: str) -> bool:
    if key in envelope:
        return True
    alternate = ALTERNATE_KEY_CASINGS.get(key)
    return alternate is not None and alternate in envelope


def missing_keys(envelope: Envelope) -> List[str]:
    """
    List required keys absent from the envelope.

    Presence is checked, not truthiness; an empty string counts as present.
    Subscription-control types additionally require SubscribeURL and Token.

    Args:
        envelope: Message envelope

    Returns:
        List[str]: Canonical names of missing keys, in declaration order
    """
    required = list(REQUIRED_KEYS)
    if is_subscription_control(envelope.get("Type")):
        required.extend(SUBSCRIPTION_CONTROL_KEYS)

    return [key for key in required if not _has_key(envelope, key)]


def has_required_keys(envelope: Envelope) -> bool:
    """Return True if every required key is present"""
    return not missing_keys(envelope)
