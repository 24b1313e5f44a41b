"""
Unit tests for certificate retrieval and caching
"""

from unittest.mock import Mock

import pytest
import requests

from sns_message_validator import (
    CertificateRetrievalError,
    CertificateStore,
    FetchResponse,
    RequestsCertificateFetcher,
    ValidatorConfig,
    ValidationErrorCodes,
)

URL = "https://sns.us-east-1.amazonaws.com/cert.pem"


class TestFetchResponse:
    """Test fetch response decoding"""

    def test_bytes_body(self):
        assert FetchResponse(200, b"-----BEGIN").text() == "-----BEGIN"

    def test_text_body(self):
        assert FetchResponse(200, "-----BEGIN").text() == "-----BEGIN"


class TestCertificateStore:
    """Test certificate store behaviour"""

    def test_fetch_caches_successful_response(self):
        fetcher = Mock(return_value=FetchResponse(200, b"PEM DATA"))
        store = CertificateStore(fetcher)

        assert store.fetch(URL) == "PEM DATA"
        assert store.fetch(URL) == "PEM DATA"

        fetcher.assert_called_once_with(URL)
        assert URL in store
        assert len(store) == 1

    def test_non_ok_status_is_not_cached(self):
        fetcher = Mock(return_value=FetchResponse(404, b"Not Found"))
        store = CertificateStore(fetcher)

        with pytest.raises(CertificateRetrievalError) as exc_info:
            store.fetch(URL)

        assert exc_info.value.message == 'Certificate could not be retrieved'
        assert exc_info.value.http_status == 404
        assert exc_info.value.error_code == ValidationErrorCodes.CERTIFICATE_RETRIEVAL_FAILED
        assert URL not in store

    def test_redirect_status_is_a_failure(self):
        store = CertificateStore(Mock(return_value=FetchResponse(301)))

        with pytest.raises(CertificateRetrievalError):
            store.fetch(URL)

    def test_failure_is_retried_on_next_call(self):
        fetcher = Mock(side_effect=[FetchResponse(500), FetchResponse(200, b"PEM")])
        store = CertificateStore(fetcher)

        with pytest.raises(CertificateRetrievalError):
            store.fetch(URL)
        assert store.fetch(URL) == "PEM"
        assert fetcher.call_count == 2

    @pytest.mark.parametrize("error", [
        requests.exceptions.ConnectionError("connection refused"),
        requests.exceptions.SSLError("bad handshake"),
        requests.exceptions.Timeout("timed out"),
        OSError("name resolution failed"),
    ])
    def test_transport_errors_are_terminal(self, error):
        fetcher = Mock(side_effect=error)
        store = CertificateStore(fetcher)

        with pytest.raises(CertificateRetrievalError) as exc_info:
            store.fetch(URL)

        assert exc_info.value.__cause__ is error
        fetcher.assert_called_once_with(URL)
        assert len(store) == 0

    def test_undecodable_body(self):
        store = CertificateStore(Mock(return_value=FetchResponse(200, b"\xff\xfe\xfa")))

        with pytest.raises(CertificateRetrievalError):
            store.fetch(URL)
        assert URL not in store

    def test_add_and_clear(self):
        fetcher = Mock()
        store = CertificateStore(fetcher)

        store.add(URL, "SEEDED")
        assert store.fetch(URL) == "SEEDED"
        assert store.urls() == [URL]
        fetcher.assert_not_called()

        store.clear()
        assert len(store) == 0

    def test_stores_are_independent(self):
        first = CertificateStore(Mock(return_value=FetchResponse(200, b"A")))
        second = CertificateStore(Mock(return_value=FetchResponse(200, b"B")))

        assert first.fetch(URL) == "A"
        assert second.fetch(URL) == "B"


class TestRequestsCertificateFetcher:
    """Test the requests-backed fetcher"""

    @pytest.fixture
    def session(self):
        return Mock(spec=requests.Session)

    def _response(self, status_code, chunks=()):
        response = Mock()
        response.status_code = status_code
        response.iter_content.return_value = iter(chunks)
        return response

    def test_joins_streamed_chunks(self, session):
        response = self._response(200, [b"-----BEGIN ", b"", b"CERTIFICATE-----"])
        session.get.return_value = response
        fetcher = RequestsCertificateFetcher(ValidatorConfig(timeout=5.0), session=session)

        result = fetcher(URL)

        assert result.status_code == 200
        assert result.body == b"-----BEGIN CERTIFICATE-----"
        session.get.assert_called_once_with(URL, timeout=5.0, verify=True, stream=True)
        response.close.assert_called_once()

    def test_non_ok_status_skips_body(self, session):
        response = self._response(403, [b"denied"])
        session.get.return_value = response
        fetcher = RequestsCertificateFetcher(session=session)

        result = fetcher(URL)

        assert result.status_code == 403
        assert result.body == b""
        response.iter_content.assert_not_called()
        response.close.assert_called_once()

    def test_transport_error_propagates(self, session):
        session.get.side_effect = requests.exceptions.ConnectionError("refused")
        fetcher = RequestsCertificateFetcher(session=session)

        with pytest.raises(requests.exceptions.ConnectionError):
            fetcher(URL)

    def test_default_session_headers(self):
        fetcher = RequestsCertificateFetcher(ValidatorConfig(user_agent="test-agent/1.0"))
        try:
            assert fetcher.session.headers['User-Agent'] == "test-agent/1.0"
        finally:
            fetcher.close()

    def test_store_with_requests_fetcher(self, session):
        session.get.return_value = self._response(200, [b"PEM"])
        store = CertificateStore(RequestsCertificateFetcher(session=session))

        assert store.fetch(URL) == "PEM"
        assert store.fetch(URL) == "PEM"
        session.get.assert_called_once()
