"""
Signing certificate retrieval and caching

Certificates are memoized by URL for the lifetime of the store. SNS never
changes the content behind a certificate URL, so cached entries are never
refreshed or expired.

Concurrent first fetches of the same URL are not deduplicated: two
validations racing on a new URL may both miss the cache and both hit the
network, and the last response written wins.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

import requests

from .config import ValidatorConfig
from .exceptions import CertificateRetrievalError

logger = logging.getLogger(__name__)

HTTP_OK = 200
CHUNK_SIZE = 8192


@dataclass
class FetchResponse:
    """Result of a certificate GET as seen by the store."""
    status_code: int
    body: Union[bytes, str] = b""

    def text(self, encoding: str = "utf-8") -> str:
        if isinstance(self.body, str):
            return self.body
        return self.body.decode(encoding)


# Given a URL, perform a GET and return the status and full body. Transport
# faults are raised as exceptions.
CertificateFetcher = Callable[[str], FetchResponse]


class RequestsCertificateFetcher:
    """
    Certificate fetcher backed by a requests session.

    Performs a single GET per call; no retry adapter is mounted.
    """

    def __init__(self, config: Optional[ValidatorConfig] = None, session: Optional[requests.Session] = None):
        """
        Initialize the fetcher.

        Args:
            config: Validator configuration supplying timeout and TLS settings
            session: Pre-built session (a new one is created if omitted)
        """
        self.config = config or ValidatorConfig()
        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update({
            'Accept': 'application/x-pem-file, text/plain, */*',
            'User-Agent': self.config.user_agent,
        })
        return session

    def __call__(self, url: str) -> FetchResponse:
        logger.debug(f"Requesting signing certificate from {url}")
        response = self.session.get(
            url,
            timeout=self.config.timeout,
            verify=self.config.verify_ssl,
            stream=True,
        )
        try:
            if response.status_code != HTTP_OK:
                return FetchResponse(status_code=response.status_code)
            chunks = [chunk for chunk in response.iter_content(chunk_size=CHUNK_SIZE) if chunk]
            return FetchResponse(status_code=response.status_code, body=b"".join(chunks))
        finally:
            response.close()

    def close(self) -> None:
        self.session.close()


class CertificateStore:
    """
    In-memory store of PEM certificates keyed by URL.

    Each MessageValidator owns one unless a store is passed in explicitly,
    which is how several validators can share a cache.
    """

    def __init__(self, fetcher: Optional[CertificateFetcher] = None, encoding: str = "utf-8"):
        """
        Initialize the certificate store.

        Args:
            fetcher: Callable performing the HTTPS GET (defaults to requests)
            encoding: Text encoding used to decode certificate bodies
        """
        self.fetcher = fetcher if fetcher is not None else RequestsCertificateFetcher()
        self.encoding = encoding
        self._cache: Dict[str, str] = {}

    def fetch(self, url: str) -> str:
        """
        Return the PEM certificate at url, fetching it on first use.

        Args:
            url: Trusted certificate URL

        Returns:
            str: PEM certificate text

        Raises:
            CertificateRetrievalError: On a non-200 response or transport fault
        """
        cached = self._cache.get(url)
        if cached is not None:
            logger.debug(f"Certificate cache hit: {url}")
            return cached

        logger.info(f"Fetching signing certificate: {url}")
        try:
            response = self.fetcher(url)
        except (requests.exceptions.RequestException, OSError) as e:
            logger.warning(f"Certificate request to {url} failed: {e}")
            raise CertificateRetrievalError(
                'Certificate could not be retrieved',
                details={'url': url, 'reason': str(e)}
            ) from e

        if response.status_code != HTTP_OK:
            logger.warning(f"Certificate request to {url} returned HTTP {response.status_code}")
            raise CertificateRetrievalError(
                'Certificate could not be retrieved',
                http_status=response.status_code,
                details={'url': url, 'status_code': response.status_code}
            )

        try:
            certificate = response.text(self.encoding)
        except UnicodeDecodeError as e:
            raise CertificateRetrievalError(
                'Certificate could not be retrieved',
                details={'url': url, 'reason': str(e)}
            ) from e

        self._cache[url] = certificate
        return certificate

    def add(self, url: str, certificate: str) -> None:
        """Seed the cache with a known certificate"""
        self._cache[url] = certificate

    def urls(self) -> List[str]:
        return list(self._cache)

    def clear(self) -> None:
        """Drop every cached certificate"""
        self._cache.clear()

    def __contains__(self, url: object) -> bool:
        return url in self._cache

    def __len__(self) -> int:
        return len(self._cache)
