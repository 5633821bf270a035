"""Tests for the Dyte integration client."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import httpx
from pydantic import SecretStr
import pytest

from liveclass.integrations.dyte_client import (
    DyteClient,
    DyteError,
    FakeDyteClient,
    build_dyte_client,
)


def _mock_http(mock_client_cls, *, status_code=200, json_body=None, json_error=None, text=""):
    mock_response = MagicMock()
    mock_response.status_code = status_code
    if json_error is not None:
        mock_response.json.side_effect = json_error
    else:
        mock_response.json.return_value = json_body
    mock_response.text = text
    mock_client = MagicMock()
    mock_client.__enter__ = MagicMock(return_value=mock_client)
    mock_client.__exit__ = MagicMock(return_value=False)
    mock_client.request.return_value = mock_response
    mock_client_cls.return_value = mock_client
    return mock_client


def _make_client(**overrides):
    defaults = {"org_id": "org_123", "api_key": "key_abc"}
    defaults.update(overrides)
    return DyteClient(**defaults)


class TestCreateMeeting:
    @patch("liveclass.integrations.dyte_client.httpx.Client")
    def test_sends_title_and_record_on_start(self, mock_client_cls):
        mock_client = _mock_http(
            mock_client_cls, json_body={"success": True, "data": {"id": "mtg_1", "title": "Physics"}}
        )

        result = _make_client().create_meeting(title="Physics")

        call_args = mock_client.request.call_args
        assert call_args[0][0] == "POST"
        assert call_args[0][1] == "https://api.dyte.io/v2/meetings"
        assert call_args[1]["json"] == {"title": "Physics", "record_on_start": True}
        assert call_args[1]["auth"] == ("org_123", "key_abc")
        assert result["id"] == "mtg_1"

    @patch("liveclass.integrations.dyte_client.httpx.Client")
    def test_secret_str_api_key_is_unwrapped(self, mock_client_cls):
        mock_client = _mock_http(mock_client_cls, json_body={"data": {"id": "mtg_1"}})

        _make_client(api_key=SecretStr("hidden")).create_meeting(title="x")

        assert mock_client.request.call_args[1]["auth"] == ("org_123", "hidden")

    @patch("liveclass.integrations.dyte_client.httpx.Client")
    def test_timeout_is_passed_to_httpx(self, mock_client_cls):
        _mock_http(mock_client_cls, json_body={"data": {"id": "mtg_1"}})

        _make_client(timeout=3.5).create_meeting(title="x")

        assert mock_client_cls.call_args[1]["timeout"] == 3.5


class TestAddParticipant:
    @patch("liveclass.integrations.dyte_client.httpx.Client")
    def test_posts_participant_and_returns_token(self, mock_client_cls):
        mock_client = _mock_http(
            mock_client_cls, json_body={"data": {"id": "p_1", "token": "tok_abc"}}
        )

        result = _make_client(base_url="https://dyte.test/v2/").add_participant(
            meeting_id="mtg_1",
            name="Ada Lovelace",
            preset_name="group_call_host",
            client_specific_id="user_1",
        )

        call_args = mock_client.request.call_args
        assert call_args[0][1] == "https://dyte.test/v2/meetings/mtg_1/participants"
        assert call_args[1]["json"] == {
            "name": "Ada Lovelace",
            "preset_name": "group_call_host",
            "client_specific_id": "user_1",
        }
        assert result["token"] == "tok_abc"


class TestListSessions:
    @patch("liveclass.integrations.dyte_client.httpx.Client")
    def test_queries_by_meeting_id(self, mock_client_cls):
        mock_client = _mock_http(
            mock_client_cls, json_body={"data": [{"id": "s_1", "status": "ENDED"}]}
        )

        sessions = _make_client().list_sessions("mtg_1")

        call_args = mock_client.request.call_args
        assert call_args[0][0] == "GET"
        assert call_args[0][1] == "https://api.dyte.io/v2/sessions"
        assert call_args[1]["params"] == {"meeting_id": "mtg_1"}
        assert sessions == [{"id": "s_1", "status": "ENDED"}]

    @patch("liveclass.integrations.dyte_client.httpx.Client")
    def test_accepts_nested_sessions_key(self, mock_client_cls):
        _mock_http(mock_client_cls, json_body={"data": {"sessions": [{"id": "s_2"}]}})

        assert _make_client().list_sessions("mtg_1") == [{"id": "s_2"}]

    @patch("liveclass.integrations.dyte_client.httpx.Client")
    def test_null_data_is_empty_list(self, mock_client_cls):
        _mock_http(mock_client_cls, json_body={"data": None})

        assert _make_client().list_sessions("mtg_1") == []

    @patch("liveclass.integrations.dyte_client.httpx.Client")
    def test_non_list_data_raises(self, mock_client_cls):
        _mock_http(mock_client_cls, json_body={"data": "maintenance"})

        with pytest.raises(DyteError) as exc_info:
            _make_client().list_sessions("mtg_1")

        assert exc_info.value.status_code is None
        assert exc_info.value.details == {"meeting_id": "mtg_1", "type": "str"}


class TestErrors:
    @patch("liveclass.integrations.dyte_client.httpx.Client")
    def test_4xx_with_error_object(self, mock_client_cls):
        _mock_http(
            mock_client_cls,
            status_code=401,
            json_body={"success": False, "error": {"code": 401, "message": "Unauthorized"}},
            text="Unauthorized",
        )

        with pytest.raises(DyteError) as exc_info:
            _make_client().create_meeting(title="x")

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Unauthorized"
        assert exc_info.value.details == {"code": 401, "message": "Unauthorized"}

    @patch("liveclass.integrations.dyte_client.httpx.Client")
    def test_5xx_without_json(self, mock_client_cls):
        _mock_http(
            mock_client_cls,
            status_code=502,
            json_error=ValueError("no json"),
            text="Bad Gateway",
        )

        with pytest.raises(DyteError) as exc_info:
            _make_client().list_sessions("mtg_1")

        assert exc_info.value.status_code == 502
        assert "Bad Gateway" in exc_info.value.message

    @patch("liveclass.integrations.dyte_client.httpx.Client")
    def test_transport_error_is_wrapped(self, mock_client_cls):
        mock_client = _mock_http(mock_client_cls, json_body={})
        mock_client.request.side_effect = httpx.ConnectTimeout("timed out")

        with pytest.raises(DyteError) as exc_info:
            _make_client().create_meeting(title="x")

        assert exc_info.value.status_code is None
        assert "unreachable" in exc_info.value.message

    @patch("liveclass.integrations.dyte_client.httpx.Client")
    def test_missing_data_envelope(self, mock_client_cls):
        _mock_http(mock_client_cls, json_body={"success": True})

        with pytest.raises(DyteError, match="missing 'data'"):
            _make_client().create_meeting(title="x")


class TestBuildDyteClient:
    def test_builds_from_settings_like_object(self):
        config = MagicMock()
        config.dyte_org_id = " org_9 "
        config.dyte_api_key = SecretStr("secret")
        config.dyte_api_base_url = "https://dyte.test/v2"
        config.dyte_timeout_seconds = 4.0

        client = build_dyte_client(config)

        assert isinstance(client, DyteClient)
        assert client._org_id == "org_9"
        assert client._api_key == "secret"
        assert client._timeout == 4.0


class TestFakeDyteClient:
    def test_records_calls_and_issues_deterministic_tokens(self):
        fake = FakeDyteClient()
        meeting = fake.create_meeting(title="Physics", record_on_start=True)
        participant = fake.add_participant(
            meeting_id=meeting["id"],
            name="Ada",
            preset_name="group_call_participant",
            client_specific_id="u1",
        )

        assert meeting["id"].startswith("fake_meeting_")
        assert participant["token"] == f"fake_auth_token_{meeting['id']}_u1"
        assert [call["method"] for call in fake._calls] == ["create_meeting", "add_participant"]

    def test_injected_error_is_raised(self):
        fake = FakeDyteClient()
        fake.set_error("create_meeting", DyteError("boom", status_code=500))

        with pytest.raises(DyteError):
            fake.create_meeting(title="x")

        fake.clear_errors()
        assert fake.create_meeting(title="x")["id"]

    def test_list_sessions_returns_seeded_sessions(self):
        fake = FakeDyteClient()
        fake.sessions["mtg_1"] = [{"id": "s_1"}]

        assert fake.list_sessions("mtg_1") == [{"id": "s_1"}]
        assert fake.list_sessions("other") == []
