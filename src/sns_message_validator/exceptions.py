"""
Exception classes for the SNS message validator
"""

from typing import Optional, Dict, Any


class ValidationErrorCodes:
    """Standard error codes for message validation"""

    # Input errors
    MALFORMED_MESSAGE = "MALFORMED_MESSAGE"
    MISSING_REQUIRED_KEYS = "MISSING_REQUIRED_KEYS"

    # Certificate errors
    INVALID_CERTIFICATE_DOMAIN = "INVALID_CERTIFICATE_DOMAIN"
    CERTIFICATE_RETRIEVAL_FAILED = "CERTIFICATE_RETRIEVAL_FAILED"

    # Signature errors
    UNSUPPORTED_SIGNATURE_VERSION = "UNSUPPORTED_SIGNATURE_VERSION"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"

    # Configuration errors
    INVALID_CONFIG = "INVALID_CONFIG"


class SnsValidationError(Exception):
    """Base exception for all validator errors"""

    default_code = "UNKNOWN_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message='{self.message}', error_code='{self.error_code}', details={self.details})"


class MalformedMessageError(SnsValidationError):
    """Exception raised when raw input cannot be parsed into an envelope"""
    default_code = ValidationErrorCodes.MALFORMED_MESSAGE


class MissingKeysError(SnsValidationError):
    """Exception raised when required envelope keys are absent"""
    default_code = ValidationErrorCodes.MISSING_REQUIRED_KEYS


class InvalidDomainError(SnsValidationError):
    """Exception raised when the signing certificate URL is not trusted"""
    default_code = ValidationErrorCodes.INVALID_CERTIFICATE_DOMAIN


class UnsupportedSignatureVersionError(SnsValidationError):
    """Exception raised for signature versions this validator cannot check"""
    default_code = ValidationErrorCodes.UNSUPPORTED_SIGNATURE_VERSION


class CertificateRetrievalError(SnsValidationError):
    """Exception raised when the signing certificate cannot be fetched"""

    def __init__(self, message: str, error_code: str = ValidationErrorCodes.CERTIFICATE_RETRIEVAL_FAILED,
                 http_status: int = 0, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
        self.http_status = http_status


class InvalidSignatureError(SnsValidationError):
    """Exception raised when the message signature does not verify"""
    default_code = ValidationErrorCodes.INVALID_SIGNATURE


class ConfigurationError(SnsValidationError):
    """Exception raised for invalid validator configuration"""
    default_code = ValidationErrorCodes.INVALID_CONFIG
