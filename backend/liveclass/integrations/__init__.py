"""External service integrations for the live class gateway."""

from .dyte_client import DyteClient, DyteError, FakeDyteClient, build_dyte_client

__all__ = ["DyteClient", "DyteError", "FakeDyteClient", "build_dyte_client"]
