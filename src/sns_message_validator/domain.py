"""
Trusted-domain enforcement for signing certificate URLs

A certificate URL is trusted only when it uses https, names a .pem file and
its host fully matches the configured pattern.
"""

import logging
import re
from typing import Optional, Pattern, Union
from urllib.parse import urlparse

from .exceptions import ConfigurationError
from .types import DEFAULT_HOST_PATTERN, Envelope, lookup_key

logger = logging.getLogger(__name__)

HostPattern = Union[str, Pattern[str]]


def compile_host_pattern(host_pattern: Optional[HostPattern]) -> Pattern[str]:
    """
    Compile a host pattern, using the SNS default when none is given.

    Raises:
        ConfigurationError: If a pattern string is not a valid regular expression
    """
    if host_pattern is None:
        host_pattern = DEFAULT_HOST_PATTERN
    if isinstance(host_pattern, str):
        try:
            return re.compile(host_pattern)
        except re.error as e:
            raise ConfigurationError(f"Invalid host pattern {host_pattern!r}: {e}")
    return host_pattern


def is_trusted_certificate_url(url: object, host_pattern: Optional[HostPattern] = None) -> bool:
    """
    Check that a certificate URL is served over HTTPS from a trusted host.

    The host is lowercased before matching. Only the URL path must end in
    .pem; a query string is ignored.

    Args:
        url: Candidate certificate URL
        host_pattern: Regular expression the host must fully match

    Returns:
        bool: True if the scheme is https, the path ends in .pem and the
              host matches the pattern
    """
    if not isinstance(url, str):
        return False

    pattern = compile_host_pattern(host_pattern)

    try:
        parsed = urlparse(url)
    except ValueError as e:
        logger.debug(f"Could not parse certificate URL {url!r}: {e}")
        return False

    return (
        parsed.scheme == "https"
        and parsed.path[-4:] == ".pem"
        and pattern.fullmatch(parsed.netloc.lower()) is not None
    )


class DomainValidator:
    """
    Validates the SigningCertURL of an envelope against a trust pattern.
    """

    def __init__(self, host_pattern: Optional[HostPattern] = None):
        """
        Initialize the domain validator.

        Args:
            host_pattern: Pattern over certificate hosts; defaults to
                          sns.<region>.amazonaws.com with optional .cn suffix
        """
        self.host_pattern = compile_host_pattern(host_pattern)

    def certificate_url(self, envelope: Envelope) -> Optional[str]:
        """Return the certificate URL, accepting the alternate casing"""
        return lookup_key(envelope, "SigningCertURL")

    def is_valid(self, envelope: Envelope) -> bool:
        return is_trusted_certificate_url(self.certificate_url(envelope), self.host_pattern)
