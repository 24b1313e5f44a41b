"""
SNS Message Validator
Signature validation for inbound Amazon SNS HTTP(S) messages
"""

from .version import __version__
from .types import (
    Envelope,
    MessageType,
    SignatureVersion,
    DEFAULT_ENCODING,
    DEFAULT_HOST_PATTERN,
    REQUIRED_KEYS,
    SUBSCRIPTION_CONTROL_KEYS,
    SUBSCRIPTION_CONTROL_TYPES,
    SIGNABLE_KEYS_FOR_NOTIFICATION,
    SIGNABLE_KEYS_FOR_SUBSCRIPTION,
    ALTERNATE_KEY_CASINGS,
)
from .exceptions import (
    ValidationErrorCodes,
    SnsValidationError,
    MalformedMessageError,
    MissingKeysError,
    InvalidDomainError,
    UnsupportedSignatureVersionError,
    CertificateRetrievalError,
    InvalidSignatureError,
    ConfigurationError,
)
from .config import ValidatorConfig, load_default_config
from .normalizer import normalize_envelope
from .structure import has_required_keys, missing_keys
from .domain import DomainValidator, is_trusted_certificate_url
from .certificates import (
    CertificateStore,
    CertificateFetcher,
    FetchResponse,
    RequestsCertificateFetcher,
)
from .signature import SignatureVerifier, build_canonical_string, signable_keys
from .validator import (
    MessageValidator,
    create_validator,
    parse_message,
    validate_message,
)

__all__ = [
    '__version__',
    # Types
    'Envelope',
    'MessageType',
    'SignatureVersion',
    'DEFAULT_ENCODING',
    'DEFAULT_HOST_PATTERN',
    'REQUIRED_KEYS',
    'SUBSCRIPTION_CONTROL_KEYS',
    'SUBSCRIPTION_CONTROL_TYPES',
    'SIGNABLE_KEYS_FOR_NOTIFICATION',
    'SIGNABLE_KEYS_FOR_SUBSCRIPTION',
    'ALTERNATE_KEY_CASINGS',
    # Exceptions
    'ValidationErrorCodes',
    'SnsValidationError',
    'MalformedMessageError',
    'MissingKeysError',
    'InvalidDomainError',
    'UnsupportedSignatureVersionError',
    'CertificateRetrievalError',
    'InvalidSignatureError',
    'ConfigurationError',
    # Configuration
    'ValidatorConfig',
    'load_default_config',
    # Pipeline stages
    'normalize_envelope',
    'has_required_keys',
    'missing_keys',
    'DomainValidator',
    'is_trusted_certificate_url',
    'CertificateStore',
    'CertificateFetcher',
    'FetchResponse',
    'RequestsCertificateFetcher',
    'SignatureVerifier',
    'build_canonical_string',
    'signable_keys',
    # Orchestrator
    'MessageValidator',
    'create_validator',
    'parse_message',
    'validate_message',
]
