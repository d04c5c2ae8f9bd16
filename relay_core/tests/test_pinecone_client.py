import logging

import pytest

from relay_core.domain.exceptions import ApiError, ResponseParseError
from relay_core.domain.models import VectorQueryParams
from relay_core.providers.pinecone_client import VectorQueryClient


class SettingsStub:
    pinecone_project_id = "2c91f9c"
    http_timeout = None


PARAMS = VectorQueryParams(index="docs", environment="us-east1-gcp", api_key="pc-test-key-123")


class Resp:
    def __init__(self, status_code=200, body="", reason_phrase="OK"):
        self.status_code = status_code
        self.text = body
        self.reason_phrase = reason_phrase


def install_client(monkeypatch, resp):
    captured = {}

    class Client:
        def __init__(self, *a, **kw):
            pass

        def __enter__(self):
            return self

        def __exit__(self, *a):
            return False

        def post(self, url, json=None, headers=None, **_):
            captured["url"] = url
            captured["payload"] = json
            captured["headers"] = headers
            return resp

    monkeypatch.setattr("httpx.Client", Client)
    return captured


def test_query_request_shape(monkeypatch):
    captured = install_client(monkeypatch, Resp(body='{"matches": []}'))

    VectorQueryClient(SettingsStub()).query(PARAMS, "query")

    assert captured["url"] == "https://docs-2c91f9c.svc.us-east1-gcp.pinecone.io/query"
    assert captured["payload"] == {
        "includeValues": True,
        "includeMetadata": "false",
        "namespace": "pdf-test",
        "topK": 5,
    }
    assert captured["headers"] == {
        "accept": "application/json",
        "content-type": "application/json",
        "Api-Key": "pc-test-key-123",
    }


def test_query_returns_parsed_json(monkeypatch):
    body = '{"matches": [{"id": "a", "score": 0.91, "values": [0.1, 0.2]}], "namespace": "pdf-test"}'
    install_client(monkeypatch, Resp(body=body))

    result = VectorQueryClient(SettingsStub()).query(PARAMS, "query")

    assert result == {"matches": [{"id": "a", "score": 0.91, "values": [0.1, 0.2]}], "namespace": "pdf-test"}


def test_query_empty_body(monkeypatch):
    install_client(monkeypatch, Resp(body=""))

    with pytest.raises(ResponseParseError) as exc:
        VectorQueryClient(SettingsStub()).query(PARAMS, "query")
    assert "response is empty" in str(exc.value)


def test_query_non_json_body(monkeypatch):
    install_client(monkeypatch, Resp(body="not json"))

    with pytest.raises(ResponseParseError) as exc:
        VectorQueryClient(SettingsStub()).query(PARAMS, "query")
    assert "not json" in str(exc.value)
    assert "response is empty" not in str(exc.value)


def test_query_error_status(monkeypatch):
    install_client(monkeypatch, Resp(status_code=404, body="", reason_phrase="Not Found"))

    with pytest.raises(ApiError) as exc:
        VectorQueryClient(SettingsStub()).query(PARAMS, "query")
    assert exc.value.message == "Pinecone API returned an error: Not Found"
    assert exc.value.http_status == 404


def test_query_error_status_with_body(monkeypatch):
    install_client(monkeypatch, Resp(status_code=401, body='{"message": "invalid api key"}'))

    with pytest.raises(ApiError) as exc:
        VectorQueryClient(SettingsStub()).query(PARAMS, "query")
    assert "invalid api key" in exc.value.message


def test_custom_project_id():
    class Other(SettingsStub):
        pinecone_project_id = "abc1234"

    url = VectorQueryClient(Other()).build_url(PARAMS, "describe_index_stats")
    assert url == "https://docs-abc1234.svc.us-east1-gcp.pinecone.io/describe_index_stats"


def test_query_logs_response_without_body(monkeypatch, caplog):
    caplog.set_level(logging.INFO, logger="relay_core")
    install_client(monkeypatch, Resp(body='{"matches": [{"id": "secret-doc"}]}'))

    VectorQueryClient(SettingsStub()).query(PARAMS, "query")

    records = [r for r in caplog.records if r.getMessage() == "pinecone.response"]
    assert len(records) == 1
    assert records[0].levelno == logging.INFO
    assert records[0].extra == {"status": 200, "chars": 35}
    assert "secret-doc" not in str(records[0].extra)
