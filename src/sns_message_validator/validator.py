"""
Validation pipeline for inbound SNS HTTP(S) messages

MessageValidator runs normalization, structural checks, certificate domain
checks, certificate retrieval and signature verification in that order, and
stops at the first failure. Every call ends in exactly one outcome: the
normalized envelope, or one SnsValidationError.
"""

import asyncio
import functools
import json
import logging
from typing import Callable, Optional, Union

from .certificates import CertificateStore, RequestsCertificateFetcher
from .config import ValidatorConfig
from .domain import DomainValidator, HostPattern
from .exceptions import (
    InvalidDomainError,
    MalformedMessageError,
    MissingKeysError,
    SnsValidationError,
)
from .normalizer import normalize_envelope
from .signature import SignatureVerifier
from .structure import missing_keys
from .types import Envelope

logger = logging.getLogger(__name__)

RawMessage = Union[str, bytes, Envelope]
ValidationCallback = Callable[[Optional[SnsValidationError], Optional[Envelope]], None]


def parse_message(message: RawMessage) -> Envelope:
    """
    Turn raw input into an envelope.

    Args:
        message: JSON text, JSON bytes or an already-parsed mapping

    Returns:
        Envelope: Parsed envelope (the same object when a dict is given)

    Raises:
        MalformedMessageError: If the text is not a JSON object
    """
    if isinstance(message, dict):
        return message

    if isinstance(message, (str, bytes, bytearray)):
        try:
            parsed = json.loads(message)
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
            raise MalformedMessageError(f"Message could not be parsed: {e}") from e
        if not isinstance(parsed, dict):
            raise MalformedMessageError(
                f"Message could not be parsed: expected a JSON object, got {type(parsed).__name__}"
            )
        return parsed

    raise MalformedMessageError(
        f"Message could not be parsed: unsupported input type {type(message).__name__}"
    )


class MessageValidator:
    """
    Validator for inbound HTTP(S) SNS messages.

    Each validator owns its certificate store unless one is passed in, so
    validators only share cached certificates when wired together explicitly.
    """

    def __init__(
        self,
        host_pattern: Optional[HostPattern] = None,
        encoding: Optional[str] = None,
        certificate_store: Optional[CertificateStore] = None,
        config: Optional[ValidatorConfig] = None,
    ):
        """
        Initialize the validator.

        Args:
            host_pattern: Pattern certificate hosts must fully match
                          (overrides config.host_pattern)
            encoding: Encoding of the signed field values
                      (overrides config.encoding)
            certificate_store: Store to fetch certificates through
            config: Validator configuration
        """
        self.config = config or ValidatorConfig()
        self.encoding = encoding or self.config.encoding
        if host_pattern is None:
            host_pattern = self.config.host_pattern
        self.domain_validator = DomainValidator(host_pattern)
        self.signature_verifier = SignatureVerifier(self.encoding)
        if certificate_store is None:
            certificate_store = CertificateStore(RequestsCertificateFetcher(self.config))
        self.certificate_store = certificate_store

    @property
    def host_pattern(self):
        return self.domain_validator.host_pattern

    def _check(self, message: RawMessage) -> Envelope:
        """Run every stage before the certificate fetch"""
        envelope = normalize_envelope(parse_message(message))

        missing = missing_keys(envelope)
        if missing:
            logger.warning(f"Rejected message missing keys: {', '.join(missing)}")
            raise MissingKeysError('Message missing required keys.', details={'missing_keys': missing})

        if not self.domain_validator.is_valid(envelope):
            logger.warning(f"Rejected certificate URL {envelope.get('SigningCertURL')!r}")
            raise InvalidDomainError('The certificate is located on an invalid domain.')

        # Unsupported versions never reach the network
        self.signature_verifier.resolve_hash_algorithm(envelope)
        return envelope

    def _finish(self, envelope: Envelope, certificate: str) -> Envelope:
        self.signature_verifier.verify(envelope, certificate)
        logger.info(f"Validated {envelope.get('Type')} message {envelope.get('MessageId')}")
        return envelope

    def validate(self, message: RawMessage) -> Envelope:
        """
        Validate a message and return its normalized envelope.

        Args:
            message: JSON text/bytes or an envelope dict (normalized in place)

        Returns:
            Envelope: The validated envelope

        Raises:
            MalformedMessageError: Raw input is not a JSON object
            MissingKeysError: Required keys are absent
            InvalidDomainError: Certificate URL is not trusted
            UnsupportedSignatureVersionError: SignatureVersion is not 1 or 2
            CertificateRetrievalError: Certificate could not be fetched
            InvalidSignatureError: Signature does not verify
        """
        envelope = self._check(message)
        certificate = self.certificate_store.fetch(envelope["SigningCertURL"])
        return self._finish(envelope, certificate)

    def validate_with_callback(self, message: RawMessage, callback: ValidationCallback) -> None:
        """
        Validate a message and report the outcome error-first.

        The callback receives (error, None) on failure or (None, envelope) on
        success, exactly once. Exceptions raised by the callback propagate.
        """
        try:
            envelope = self.validate(message)
        except SnsValidationError as error:
            callback(error, None)
            return
        callback(None, envelope)

    async def validate_async(self, message: RawMessage) -> Envelope:
        """
        Awaitable variant of validate().

        The certificate fetch runs in the loop's default executor; every other
        stage runs inline.
        """
        envelope = self._check(message)
        url = envelope["SigningCertURL"]

        if url in self.certificate_store:
            certificate = self.certificate_store.fetch(url)
        else:
            loop = asyncio.get_running_loop()
            certificate = await loop.run_in_executor(
                None, functools.partial(self.certificate_store.fetch, url)
            )

        return self._finish(envelope, certificate)


def create_validator(config: Optional[ValidatorConfig] = None, **kwargs) -> MessageValidator:
    """
    Create a validator from configuration.

    Args:
        config: Validator configuration (loaded from the environment if omitted)
        **kwargs: Extra MessageValidator arguments

    Returns:
        MessageValidator: Configured validator
    """
    if config is None:
        config = ValidatorConfig.from_env()
    return MessageValidator(config=config, **kwargs)


def validate_message(message: RawMessage, **kwargs) -> Envelope:
    """Validate a single message with a throwaway validator"""
    return MessageValidator(**kwargs).validate(message)
