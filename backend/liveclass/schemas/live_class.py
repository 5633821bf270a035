"""Live class admission schemas.

Request/response models for the start and join endpoints.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from ._strict_base import StrictModel, StrictRequestModel


class LiveClassRequest(StrictRequestModel):
    """Body of POST /api/v1/live-classes/start and /join."""

    # Optional here so a missing id surfaces as the service's 400, not a 422
    batch_id: Optional[str] = Field(default=None, max_length=64, examples=["01HF4G12ABCDEF3456789XYZAB"])


class LiveClassAdmissionResponse(StrictModel):
    """Credentials for the frontend meeting SDK."""

    success: bool = True
    meeting_id: str
    auth_token: str
    role: str
