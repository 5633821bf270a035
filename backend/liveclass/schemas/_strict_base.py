"""Base models shared by the live class API schemas."""

from pydantic import BaseModel, ConfigDict


class StrictModel(BaseModel):
    """Response base: unknown fields are a programming error, not client input."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class StrictRequestModel(StrictModel):
    """Request base: rejects unexpected fields and trims identifiers."""

    # A whitespace-only batch id reaches the service as empty
    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
    )
