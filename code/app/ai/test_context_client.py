import pytest
import requests

from app.ai import context_client


class FakeResponse:
    def __init__(self, status_code: int):
        self.status_code = status_code


def test_base_url_strips_completion_paths(monkeypatch):
    monkeypatch.setattr(context_client, "CONTEXT_BASE_URL", "https://example.test/v1/chat/completions?x=1")
    assert context_client._base_url() == "https://example.test/v1"


def test_key_detection(monkeypatch):
    monkeypatch.setattr(context_client, "CONTEXT_API_KEY", "  ")
    assert context_client.is_api_key_configured() is False
    monkeypatch.setattr(context_client, "CONTEXT_API_KEY", "secret")
    assert context_client.is_api_key_configured() is True


def test_query_without_key_raises(monkeypatch):
    monkeypatch.setattr(context_client, "CONTEXT_API_KEY", None)
    with pytest.raises(RuntimeError, match="GEMINI_API_KEY"):
        context_client.query_context_model("hello")


def test_extract_text_variants():
    assert context_client.extract_text({"choices": [{"message": {"content": " hi "}}]}) == "hi"
    assert context_client.extract_text({"choices": [{"message": {"content": ""}}]}) == ""
    assert context_client.extract_text({"choices": [{"text": "legacy"}]}) == "legacy"
    assert context_client.extract_text({}) == ""


def test_service_online_on_client_error_status(monkeypatch):
    monkeypatch.setattr(context_client.requests, "get", lambda url, timeout, headers: FakeResponse(401))
    assert context_client.check_context_service_online() is True


def test_service_offline_on_connection_error(monkeypatch):
    def refuse(url, timeout, headers):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(context_client.requests, "get", refuse)
    assert context_client.check_context_service_online(timeout=0.1) is False


def test_service_offline_on_server_error(monkeypatch):
    monkeypatch.setattr(context_client.requests, "get", lambda url, timeout, headers: FakeResponse(503))
    assert context_client.check_context_service_online() is False
