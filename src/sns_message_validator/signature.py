"""
Signature reconstruction and verification for SNS messages

This module rebuilds the exact string SNS signed for a message and verifies
the RSA signature over it using the public key from the signing certificate.
"""

import base64
import logging
from typing import Sequence, Union

from cryptography import x509
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .exceptions import InvalidSignatureError, UnsupportedSignatureVersionError
from .types import (
    DEFAULT_ENCODING,
    SIGNABLE_KEYS_FOR_NOTIFICATION,
    SIGNABLE_KEYS_FOR_SUBSCRIPTION,
    Envelope,
    SignatureVersion,
    is_subscription_control,
)

logger = logging.getLogger(__name__)

HASH_ALGORITHMS = {
    SignatureVersion.V1.value: hashes.SHA1,
    SignatureVersion.V2.value: hashes.SHA256,
}

INVALID_SIGNATURE_MESSAGE = 'The message signature is invalid.'


def signable_keys(envelope: Envelope) -> Sequence[str]:
    """Return the ordered field list SNS signs for this message type"""
    if is_subscription_control(envelope.get("Type")):
        return SIGNABLE_KEYS_FOR_SUBSCRIPTION
    return SIGNABLE_KEYS_FOR_NOTIFICATION


def build_canonical_string(envelope: Envelope) -> str:
    """
    Build the string SNS signed for an envelope.

    Each signed field present with a non-null value contributes
    "<name>\\n<value>\\n". Absent or null fields are skipped entirely.
    Signed values must be strings, as SNS sends them.

    Args:
        envelope: Normalized message envelope

    Returns:
        str: Canonical string to digest

    Raises:
        TypeError: If a signed value is not a string
    """
    parts = []
    for key in signable_keys(envelope):
        value = envelope.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise TypeError(f"Signed field {key} must be a string, got {type(value).__name__}")
        parts.append(f"{key}\n{value}\n")
    return "".join(parts)


def load_public_key(certificate: Union[str, bytes]) -> rsa.RSAPublicKey:
    """
    Extract the RSA public key from a PEM certificate or PEM public key.

    Raises:
        ValueError: If the PEM cannot be parsed
        TypeError: If the key is not an RSA key
    """
    pem = certificate.encode('ascii') if isinstance(certificate, str) else certificate

    if b"BEGIN CERTIFICATE" in pem:
        public_key = x509.load_pem_x509_certificate(pem).public_key()
    else:
        public_key = serialization.load_pem_public_key(pem)

    if not isinstance(public_key, rsa.RSAPublicKey):
        raise TypeError(f"Expected an RSA public key, got {type(public_key).__name__}")
    return public_key


class SignatureVerifier:
    """
    Verifies SNS message signatures against a signing certificate.
    """

    def __init__(self, encoding: str = DEFAULT_ENCODING):
        """
        Initialize the verifier.

        Args:
            encoding: Encoding the producer used when signing field values
        """
        self.encoding = encoding

    def resolve_hash_algorithm(self, envelope: Envelope) -> hashes.HashAlgorithm:
        """
        Select the digest for the envelope's SignatureVersion.

        Raises:
            UnsupportedSignatureVersionError: For any version other than 1 or 2
        """
        version = envelope.get("SignatureVersion")
        algorithm = HASH_ALGORITHMS.get(version) if isinstance(version, str) else None
        if algorithm is None:
            raise UnsupportedSignatureVersionError(
                f'The signature version {version} is not supported.',
                details={'signature_version': version}
            )
        return algorithm()

    def verify(self, envelope: Envelope, certificate: Union[str, bytes]) -> Envelope:
        """
        Verify the envelope signature.

        Args:
            envelope: Normalized message envelope
            certificate: PEM signing certificate

        Returns:
            Envelope: The envelope, unchanged

        Raises:
            UnsupportedSignatureVersionError: If the version is unsupported
            InvalidSignatureError: On mismatch or any failure while verifying
        """
        algorithm = self.resolve_hash_algorithm(envelope)

        try:
            canonical = build_canonical_string(envelope)
            logger.debug(f"Canonical string length: {len(canonical)}")
            data = canonical.encode(self.encoding)
            signature = base64.b64decode(envelope["Signature"] or "")
            public_key = load_public_key(certificate)
            public_key.verify(signature, data, padding.PKCS1v15(), algorithm)
        except InvalidSignature:
            raise InvalidSignatureError(INVALID_SIGNATURE_MESSAGE) from None
        except Exception as e:
            # Malformed input is reported exactly like a forged signature
            logger.debug(f"Signature verification raised {type(e).__name__}")
            raise InvalidSignatureError(INVALID_SIGNATURE_MESSAGE) from None

        return envelope
