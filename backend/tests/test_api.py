"""
Integration tests for the HTTP surface.
Runs the FastAPI app against an in-memory store and a mocked upstream provider.
"""

import pytest
from fastapi.testclient import TestClient

from gosh_mind.config import Settings
from gosh_mind.core.chat_relay import ChatRelay
from gosh_mind.core.errors import UpstreamError, UpstreamTimeoutError
from gosh_mind.llm.base import LLMResponse
from gosh_mind.main import create_app


@pytest.fixture
def config():
    return Settings(log_file_enabled=False, log_console_enabled=False)


@pytest.fixture
def client(relay, config):
    return TestClient(create_app(chat_relay=relay, config=config))


class TestChatEndpoint:

    def test_send_message(self, client):
        response = client.post("/api/chat", json={"message": "Hello", "sessionId": "s1"})
        assert response.status_code == 200
        assert response.json() == {"response": "Hi there", "sessionId": "s1"}

    def test_conversation_after_exchange(self, client):
        client.post("/api/chat", json={"message": "Hello", "sessionId": "s1"})

        response = client.get("/api/conversation/s1")
        assert response.status_code == 200
        messages = response.json()["messages"]
        assert [(m["role"], m["content"]) for m in messages] == [
            ("user", "Hello"),
            ("assistant", "Hi there"),
        ]
        assert all("timestamp" in m for m in messages)

    def test_two_exchanges(self, client):
        client.post("/api/chat", json={"message": "Hello", "sessionId": "s1"})
        client.post("/api/chat", json={"message": "Again", "sessionId": "s1"})

        messages = client.get("/api/conversation/s1").json()["messages"]
        assert [m["role"] for m in messages] == ["user", "assistant", "user", "assistant"]

    def test_unknown_conversation_is_empty(self, client):
        response = client.get("/api/conversation/never-seen")
        assert response.status_code == 200
        assert response.json() == {"messages": []}

    def test_empty_message_is_400(self, client, provider):
        response = client.post("/api/chat", json={"message": "", "sessionId": "s1"})
        assert response.status_code == 400
        data = response.json()
        assert data["message"] == "Invalid request data"
        assert data["errors"][0]["loc"] == ["body", "message"]
        provider.generate_reply.assert_not_called()

    def test_message_too_long_is_400(self, client, provider):
        response = client.post("/api/chat", json={"message": "x" * 2001, "sessionId": "s1"})
        assert response.status_code == 400
        assert response.json()["errors"][0]["type"] == "string_too_long"
        provider.generate_reply.assert_not_called()

    def test_max_message_length_from_settings(self):
        config = Settings(
            max_message_length=5, log_file_enabled=False, log_console_enabled=False
        )
        client = TestClient(create_app(config=config))

        response = client.post("/api/chat", json={"message": "toolong", "sessionId": "s1"})
        assert response.status_code == 400
        assert response.json()["errors"][0]["loc"] == ["message"]
        assert client.get("/api/conversation/s1").json() == {"messages": []}

    def test_missing_session_id_is_400(self, client):
        response = client.post("/api/chat", json={"message": "Hello"})
        assert response.status_code == 400
        locs = [err["loc"] for err in response.json()["errors"]]
        assert ["body", "sessionId"] in locs

    def test_malformed_body_is_400(self, client):
        response = client.post(
            "/api/chat",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400

    def test_upstream_error_is_opaque_500(self, client, provider):
        provider.generate_reply.side_effect = UpstreamError("invalid api key", status_code=401)

        response = client.post("/api/chat", json={"message": "Hello", "sessionId": "s1"})
        assert response.status_code == 500
        assert response.json() == {"message": "Failed to process chat request"}
        assert "invalid api key" not in response.text

    def test_upstream_timeout_is_500(self, client, provider):
        provider.generate_reply.side_effect = UpstreamTimeoutError("run still queued")

        response = client.post("/api/chat", json={"message": "Hello", "sessionId": "s1"})
        assert response.status_code == 500

    def test_empty_reply_is_500_and_not_persisted(self, client, provider):
        provider.generate_reply.return_value = LLMResponse(content="", model="test")

        response = client.post("/api/chat", json={"message": "Hello", "sessionId": "s1"})
        assert response.status_code == 500
        assert client.get("/api/conversation/s1").json() == {"messages": []}

    def test_unconfigured_upstream_is_500(self, store, config):
        client = TestClient(create_app(chat_relay=ChatRelay(store, None), config=config))

        response = client.post("/api/chat", json={"message": "Hello", "sessionId": "s1"})
        assert response.status_code == 500
        assert response.json()["message"] == "Failed to process chat request"

    def test_unexpected_error_is_500(self, relay, provider, config):
        provider.generate_reply.side_effect = RuntimeError("bug")
        client = TestClient(
            create_app(chat_relay=relay, config=config), raise_server_exceptions=False
        )

        response = client.post("/api/chat", json={"message": "Hello", "sessionId": "s1"})
        assert response.status_code == 500


class TestAppEndpoints:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["app"] == "GOSH-MIND"
        assert data["status"] == "running"

    def test_health_check(self, client):
        client.post("/api/chat", json={"message": "Hello", "sessionId": "s1"})

        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["upstream_configured"] is True
        assert data["sessions"] == 1

    def test_static_bundle_served(self, relay, tmp_path):
        (tmp_path / "index.html").write_text("<html>GOSH-MIND client</html>")
        config = Settings(
            static_dir=str(tmp_path), log_file_enabled=False, log_console_enabled=False
        )
        client = TestClient(create_app(chat_relay=relay, config=config))

        response = client.get("/")
        assert response.status_code == 200
        assert "GOSH-MIND client" in response.text

        # API routes still take precedence over the mount
        response = client.post("/api/chat", json={"message": "Hello", "sessionId": "s1"})
        assert response.status_code == 200
