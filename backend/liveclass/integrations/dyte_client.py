"""Dyte Video Platform Integration Client.

Handles meeting creation, participant (auth token) issuance and session
history listing against the Dyte v2 REST API. Requests authenticate with
HTTP Basic using the organization id and API key.
"""

from __future__ import annotations

import logging
from typing import Any, cast
import uuid

import httpx
from pydantic import SecretStr

logger = logging.getLogger(__name__)


class DyteError(RuntimeError):
    """Raised when the Dyte API responds with an error or is unreachable."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        *,
        details: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


class DyteClient:
    """HTTP client for the Dyte REST API."""

    def __init__(
        self,
        *,
        org_id: str,
        api_key: str | SecretStr,
        base_url: str = "https://api.dyte.io/v2",
        timeout: float = 10.0,
    ) -> None:
        self._org_id = org_id
        self._api_key = api_key.get_secret_value() if isinstance(api_key, SecretStr) else api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    def _request(
        self,
        method: str,
        path: str,
        *,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make an authenticated request and return the unwrapped ``data`` payload."""
        url = f"{self._base_url}/{path.lstrip('/')}"
        headers = {"Content-Type": "application/json"}

        try:
            with httpx.Client(timeout=self._timeout) as client:
                response = client.request(
                    method,
                    url,
                    headers=headers,
                    json=json_body,
                    params=params,
                    auth=(self._org_id, self._api_key),
                )
        except httpx.TransportError as exc:
            logger.error("Dyte API unreachable for %s %s: %s", method, path, exc)
            raise DyteError(message=f"Dyte API unreachable: {exc}", status_code=None) from exc

        if response.status_code >= 400:
            error_body: dict[str, Any] = {}
            try:
                parsed_body = response.json()
                if isinstance(parsed_body, dict):
                    error_body = parsed_body
                else:
                    error_body = {"raw": response.text[:500]}
            except ValueError:
                error_body = {"raw": response.text[:500]}

            error_field = error_body.get("error")
            if isinstance(error_field, dict):
                message = error_field.get("message") or response.text
                details = error_field
            else:
                message = error_body.get("message") or error_field or response.text
                details = error_body.get("details")

            logger.error(
                "Dyte API error %s for %s %s: %s",
                response.status_code,
                method,
                path,
                response.text[:500],
            )
            raise DyteError(message=str(message), status_code=response.status_code, details=details)

        try:
            body = response.json()
        except ValueError as exc:
            raise DyteError(
                message="Dyte API returned a non-JSON response",
                status_code=response.status_code,
            ) from exc
        if not isinstance(body, dict) or "data" not in body:
            raise DyteError(
                message="Dyte API response is missing 'data'",
                status_code=response.status_code,
            )
        return body["data"]

    # ── High-level API methods ──────────────────────────────────────────

    def create_meeting(self, *, title: str, record_on_start: bool = True) -> dict[str, Any]:
        """Create a meeting; recording starts automatically when the session opens."""
        data = self._request(
            "POST",
            "meetings",
            json_body={"title": title, "record_on_start": record_on_start},
        )
        return cast(dict[str, Any], data)

    def add_participant(
        self,
        *,
        meeting_id: str,
        name: str,
        preset_name: str,
        client_specific_id: str,
    ) -> dict[str, Any]:
        """Add a participant to a meeting. The response carries the SDK ``token``."""
        data = self._request(
            "POST",
            f"meetings/{meeting_id}/participants",
            json_body={
                "name": name,
                "preset_name": preset_name,
                "client_specific_id": client_specific_id,
            },
        )
        return cast(dict[str, Any], data)

    def list_sessions(self, meeting_id: str) -> list[dict[str, Any]]:
        """List historical sessions for a meeting.

        Only the first page is read; Dyte returns the most recent sessions first.
        """
        data = self._request("GET", "sessions", params={"meeting_id": meeting_id})
        if isinstance(data, dict):
            # Some API versions nest the list under "sessions"
            data = data.get("sessions", [])
        if data is None:
            return []
        if not isinstance(data, list):
            logger.error(
                "Unexpected Dyte sessions payload for meeting %s: %s",
                meeting_id,
                type(data).__name__,
            )
            raise DyteError(
                message="Unexpected sessions payload from Dyte",
                status_code=None,
                details={"meeting_id": meeting_id, "type": type(data).__name__},
            )
        return cast(list[dict[str, Any]], data)


class FakeDyteClient:
    """In-memory stub for testing/non-production environments."""

    def __init__(self, **kwargs: Any) -> None:
        self._calls: list[dict[str, Any]] = []
        self._errors: dict[str, DyteError] = {}
        self.sessions: dict[str, list[dict[str, Any]]] = {}

    def set_error(self, method: str, error: DyteError) -> None:
        """Inject a method-specific error for deterministic failure testing."""
        self._errors[method] = error

    def clear_errors(self) -> None:
        """Reset all injected fake-client errors."""
        self._errors.clear()

    def calls_for(self, method: str) -> list[dict[str, Any]]:
        return [call for call in self._calls if call["method"] == method]

    def _raise_if_injected(self, method: str) -> None:
        error = self._errors.get(method)
        if error is not None:
            raise error

    def create_meeting(self, *, title: str, **kwargs: Any) -> dict[str, Any]:
        self._calls.append({"method": "create_meeting", "title": title, **kwargs})
        self._raise_if_injected("create_meeting")
        return {
            "id": f"fake_meeting_{uuid.uuid4().hex[:12]}",
            "title": title,
            "record_on_start": kwargs.get("record_on_start", True),
            "status": "ACTIVE",
        }

    def add_participant(
        self,
        *,
        meeting_id: str,
        name: str,
        preset_name: str,
        client_specific_id: str,
    ) -> dict[str, Any]:
        self._calls.append(
            {
                "method": "add_participant",
                "meeting_id": meeting_id,
                "name": name,
                "preset_name": preset_name,
                "client_specific_id": client_specific_id,
            }
        )
        self._raise_if_injected("add_participant")
        return {
            "id": f"fake_participant_{uuid.uuid4().hex[:12]}",
            "token": f"fake_auth_token_{meeting_id}_{client_specific_id}",
            "preset_name": preset_name,
        }

    def list_sessions(self, meeting_id: str) -> list[dict[str, Any]]:
        self._calls.append({"method": "list_sessions", "meeting_id": meeting_id})
        self._raise_if_injected("list_sessions")
        return list(self.sessions.get(meeting_id, []))


def build_dyte_client(config: Any) -> DyteClient:
    """Construct a DyteClient from application settings."""
    return DyteClient(
        org_id=(config.dyte_org_id or "").strip(),
        api_key=config.dyte_api_key,
        base_url=config.dyte_api_base_url,
        timeout=config.dyte_timeout_seconds,
    )
