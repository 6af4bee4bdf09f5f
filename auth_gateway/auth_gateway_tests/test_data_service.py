import json
import logging

import httpx
import pytest

from auth_gateway.auth_gateway.auth_service.data_service import ADMIN_SECRET_HEADER, DataServiceClient
from auth_gateway.auth_gateway.auth_service.exceptions import TransportError

from .fakes import ADMIN_SECRET, DATA_SERVICE_URL


def make_client(handler, **kwargs):
    return DataServiceClient(DATA_SERVICE_URL, ADMIN_SECRET, transport=httpx.MockTransport(handler), **kwargs)


def test_execute_posts_query_and_variables():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, content=b'{"data": {"users": []}}')

    client = make_client(handler)
    raw = client.execute("query Q($email: String!) { users { id } }", {"email": "a@x.com"})

    assert raw == b'{"data": {"users": []}}'
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == DATA_SERVICE_URL
    assert request.headers[ADMIN_SECRET_HEADER] == ADMIN_SECRET
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {
        "query": "query Q($email: String!) { users { id } }",
        "variables": {"email": "a@x.com"},
    }


def test_execute_returns_body_of_error_responses_unparsed():
    client = make_client(lambda request: httpx.Response(400, content=b'{"errors": [{"message": "bad"}]}'))
    assert client.execute("query { users { id } }", {}) == b'{"errors": [{"message": "bad"}]}'


@pytest.mark.parametrize("exc_cls", [httpx.ConnectError, httpx.ReadTimeout, httpx.ConnectTimeout])
def test_network_failures_raise_transport_error(exc_cls):
    def handler(request):
        raise exc_cls("boom", request=request)

    client = make_client(handler)
    with pytest.raises(TransportError):
        client.execute("query { users { id } }", {})


def test_timeout_is_bounded():
    client = DataServiceClient(DATA_SERVICE_URL, ADMIN_SECRET, timeout=2.5)
    try:
        assert client._client.timeout == httpx.Timeout(2.5)
    finally:
        client.close()


def test_disabling_tls_verification_is_logged(caplog):
    with caplog.at_level(logging.WARNING):
        client = DataServiceClient(DATA_SERVICE_URL, ADMIN_SECRET, verify_tls=False)
    client.close()
    assert "TLS certificate verification is DISABLED" in caplog.text


def test_tls_verification_enabled_by_default(caplog):
    with caplog.at_level(logging.WARNING):
        client = DataServiceClient(DATA_SERVICE_URL, ADMIN_SECRET)
    client.close()
    assert "TLS certificate verification is DISABLED" not in caplog.text
