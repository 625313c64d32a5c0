"""Unit tests for the language-model API client."""

from unittest.mock import Mock, patch

import pytest
import requests

from event_tracker.config.models import LLMConfig
from event_tracker.llm import (
    AnthropicClient,
    LLMError,
    LLMHTTPError,
    LLMResponseError,
    LLMTimeoutError,
    build_client,
)
from event_tracker.llm.client import WEB_SEARCH_TOOL


@pytest.fixture
def config():
    return LLMConfig(request_timeout=30)


@pytest.fixture
def client(config):
    client = AnthropicClient("sk-test", config)
    yield client
    client.close()


def make_response(status_code=200, body=None, json_error=False):
    """Create a mock requests response."""
    response = Mock()
    response.status_code = status_code
    if json_error:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = body
    return response


class TestClientSetup:
    """Tests for client construction."""

    def test_headers(self, client, config):
        headers = client._session.headers

        assert headers["x-api-key"] == "sk-test"
        assert headers["anthropic-version"] == config.api_version
        assert headers["Content-Type"] == "application/json"

    @pytest.mark.parametrize("api_key", ["", "   "])
    def test_empty_key_rejected(self, config, api_key):
        with pytest.raises(LLMError):
            AnthropicClient(api_key, config)

    def test_build_client_handles_none(self, config):
        with pytest.raises(LLMError):
            build_client(None, config)


class TestSearch:
    """Tests for web-search calls."""

    def test_text_blocks_joined_with_newline(self, client):
        """Test tool-use blocks are ignored and text blocks joined."""
        body = {
            "content": [
                {"type": "text", "text": "First event"},
                {"type": "server_tool_use", "name": "web_search"},
                {"type": "web_search_tool_result", "content": []},
                {"type": "text", "text": "Second event"},
            ]
        }
        with patch.object(client._session, "post", return_value=make_response(body=body)):
            text = client.search("AI meetup", "system", "user")

        assert text == "First event\nSecond event"

    def test_payload_includes_web_search_tool(self, client, config):
        with patch.object(
            client._session, "post", return_value=make_response(body={"content": []})
        ) as mock_post:
            client.search("AI meetup", "sys prompt", "user prompt")

        args, kwargs = mock_post.call_args
        assert args[0] == config.api_url
        assert kwargs["timeout"] == 30
        payload = kwargs["json"]
        assert payload["model"] == config.model
        assert payload["max_tokens"] == config.search_max_tokens
        assert payload["system"] == "sys prompt"
        assert payload["tools"] == [WEB_SEARCH_TOOL]
        assert payload["messages"] == [{"role": "user", "content": "user prompt"}]

    @pytest.mark.parametrize("body", [{}, {"content": None}, {"content": "text"}, [], None])
    def test_missing_content_yields_empty_text(self, client, body):
        with patch.object(client._session, "post", return_value=make_response(body=body)):
            assert client.search("q", "s", "u") == ""

    def test_http_error_carries_status(self, client):
        with patch.object(client._session, "post", return_value=make_response(status_code=529)):
            with pytest.raises(LLMHTTPError) as exc_info:
                client.search("q", "s", "u")

        assert exc_info.value.status_code == 529

    def test_timeout(self, client):
        with patch.object(client._session, "post", side_effect=requests.exceptions.Timeout()):
            with pytest.raises(LLMTimeoutError):
                client.search("q", "s", "u")

    def test_connection_error_has_zero_status(self, client):
        error = requests.exceptions.ConnectionError("connection refused")
        with patch.object(client._session, "post", side_effect=error):
            with pytest.raises(LLMHTTPError) as exc_info:
                client.search("q", "s", "u")

        assert exc_info.value.status_code == 0

    def test_non_json_body(self, client):
        with patch.object(client._session, "post", return_value=make_response(json_error=True)):
            with pytest.raises(LLMResponseError):
                client.search("q", "s", "u")


class TestExtract:
    """Tests for the structuring call."""

    def test_text_blocks_concatenated(self, client):
        body = {"content": [{"type": "text", "text": '[{"name": '}, {"type": "text", "text": '"X"}]'}]}
        with patch.object(client._session, "post", return_value=make_response(body=body)):
            assert client.extract("s", "u") == '[{"name": "X"}]'

    def test_payload_has_no_tools(self, client, config):
        with patch.object(
            client._session, "post", return_value=make_response(body={"content": []})
        ) as mock_post:
            client.extract("s", "u")

        payload = mock_post.call_args.kwargs["json"]
        assert "tools" not in payload
        assert payload["max_tokens"] == config.extract_max_tokens

    def test_server_error(self, client):
        with patch.object(client._session, "post", return_value=make_response(status_code=500)):
            with pytest.raises(LLMHTTPError, match="HTTP 500"):
                client.extract("s", "u")
