"""
Type definitions and field tables for SNS message validation

The key lists in this module mirror how SNS builds the string it signs, so
their order is significant and must not be sorted.
"""

from enum import Enum
from typing import Dict, Optional, Tuple


Envelope = Dict[str, Optional[str]]


class MessageType(str, Enum):
    """Known values of the ``Type`` field"""
    NOTIFICATION = "Notification"
    SUBSCRIPTION_CONFIRMATION = "SubscriptionConfirmation"
    UNSUBSCRIBE_CONFIRMATION = "UnsubscribeConfirmation"


class SignatureVersion(str, Enum):
    """Supported values of the ``SignatureVersion`` field"""
    V1 = "1"  # RSA with SHA1
    V2 = "2"  # RSA with SHA256


DEFAULT_ENCODING = "utf-8"
DEFAULT_HOST_PATTERN = r"^sns\.[a-zA-Z0-9\-]{3,}\.amazonaws\.com(\.cn)?$"

REQUIRED_KEYS: Tuple[str, ...] = (
    "Message",
    "MessageId",
    "Timestamp",
    "TopicArn",
    "Type",
    "Signature",
    "SigningCertURL",
    "SignatureVersion",
)

SUBSCRIPTION_CONTROL_KEYS: Tuple[str, ...] = ("SubscribeURL", "Token")

SUBSCRIPTION_CONTROL_TYPES: Tuple[str, ...] = (
    MessageType.SUBSCRIPTION_CONFIRMATION.value,
    MessageType.UNSUBSCRIBE_CONFIRMATION.value,
)

SIGNABLE_KEYS_FOR_NOTIFICATION: Tuple[str, ...] = (
    "Message",
    "MessageId",
    "Subject",
    "SubscribeURL",
    "Timestamp",
    "TopicArn",
    "Type",
)

SIGNABLE_KEYS_FOR_SUBSCRIPTION: Tuple[str, ...] = (
    "Message",
    "MessageId",
    "Subject",
    "SubscribeURL",
    "Timestamp",
    "Token",
    "TopicArn",
    "Type",
)

# canonical name -> alternate casing sent by some producers (e.g. Lambda)
ALTERNATE_KEY_CASINGS: Dict[str, str] = {
    "SigningCertURL": "SigningCertUrl",
    "UnsubscribeURL": "UnsubscribeUrl",
}


def is_subscription_control(message_type: Optional[str]) -> bool:
    """Return True for message types that carry SubscribeURL and Token"""
    return message_type in SUBSCRIPTION_CONTROL_TYPES


def lookup_key(envelope: Envelope, key: str) -> Optional[str]:
    """
    Resolve a field by canonical name, falling back to its alternate casing.

    Args:
        envelope: Message envelope
        key: Canonical field name

    Returns:
        The field value, or None when neither spelling is present
    """
    if key in envelope:
        return envelope[key]
    alternate = ALTERNATE_KEY_CASINGS.get(key)
    if alternate is not None:
        return envelope.get(alternate)
    return None
