"""
Shared fixtures for SNS message validator tests

Messages are signed with a throwaway RSA key and self-signed certificate, the
same way SNS signs them, so the tests never touch the network.
"""

import base64
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
from unittest.mock import Mock

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.x509.oid import NameOID

from sns_message_validator import CertificateStore, FetchResponse, MessageValidator

CERT_URL = "https://sns.us-east-1.amazonaws.com/SimpleNotificationService-abc123.pem"

# Producer-side field order, kept separate from the library's own tables
PRODUCER_SIGNED_KEYS = [
    "Message",
    "MessageId",
    "Subject",
    "SubscribeURL",
    "Timestamp",
    "Token",
    "TopicArn",
    "Type",
]


def sign_envelope(envelope: Dict[str, Optional[str]], private_key, version: str = "1",
                  encoding: str = "utf-8") -> Dict[str, Optional[str]]:
    """Sign an envelope in place and return it"""
    lines = []
    for key in PRODUCER_SIGNED_KEYS:
        if key in envelope and envelope[key] is not None:
            lines.append(f"{key}\n{envelope[key]}\n")
    algorithm = hashes.SHA1() if version == "1" else hashes.SHA256()
    signature = private_key.sign("".join(lines).encode(encoding), padding.PKCS1v15(), algorithm)
    envelope["SignatureVersion"] = version
    envelope["Signature"] = base64.b64encode(signature).decode("ascii")
    return envelope


def _self_signed_certificate(private_key, common_name: str) -> str:
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.now(timezone.utc)
    certificate = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(minutes=5))
        .not_valid_after(now + timedelta(days=1))
        .sign(private_key, hashes.SHA256())
    )
    return certificate.public_bytes(serialization.Encoding.PEM).decode("ascii")


@pytest.fixture(scope="session")
def private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def certificate_pem(private_key):
    return _self_signed_certificate(private_key, "sns.amazonaws.com")


@pytest.fixture(scope="session")
def public_key_pem(private_key):
    return private_key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")


@pytest.fixture
def fetcher(certificate_pem):
    """Certificate fetcher that always serves the test certificate"""
    return Mock(return_value=FetchResponse(status_code=200, body=certificate_pem.encode("ascii")))


@pytest.fixture
def store(fetcher):
    return CertificateStore(fetcher)


@pytest.fixture
def validator(store):
    return MessageValidator(certificate_store=store)


@pytest.fixture
def notification():
    return {
        "Type": "Notification",
        "MessageId": "22b80b92-fdea-4c2c-8f9d-bdfb0c7bf324",
        "TopicArn": "arn:aws:sns:us-east-1:123456789012:MyTopic",
        "Subject": "My First Message",
        "Message": "Hello world!",
        "Timestamp": "2012-05-02T00:54:06.655Z",
        "SigningCertURL": CERT_URL,
        "UnsubscribeURL": "https://sns.us-east-1.amazonaws.com/?Action=Unsubscribe",
    }


@pytest.fixture
def subscription_confirmation():
    return {
        "Type": "SubscriptionConfirmation",
        "MessageId": "165545c9-2a5c-472c-8df2-7ff2be2b3b1b",
        "Token": "2336412f37fb687f5d51e6e241d09c805a5a57b30d712f794cc5f6a988666d92768dd60a",
        "TopicArn": "arn:aws:sns:us-west-2:123456789012:MyTopic",
        "Message": "You have chosen to subscribe to the topic.",
        "SubscribeURL": "https://sns.us-west-2.amazonaws.com/?Action=ConfirmSubscription",
        "Timestamp": "2012-04-26T20:45:04.751Z",
        "SigningCertURL": CERT_URL,
    }


@pytest.fixture
def signed_notification(notification, private_key):
    return sign_envelope(notification, private_key)


@pytest.fixture
def signed_subscription_confirmation(subscription_confirmation, private_key):
    return sign_envelope(subscription_confirmation, private_key)
