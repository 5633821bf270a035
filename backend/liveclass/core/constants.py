"""Application-wide constants for the live class gateway."""

from __future__ import annotations

API_TITLE = "Live Class Gateway API"
API_DESCRIPTION = "Admission, meeting lifecycle and session reconciliation for live batches"
API_VERSION = "1.0.0"

# Platform tag stamped next to a batch's remote meeting reference
DEFAULT_MEETING_PLATFORM = "Dyte"

# Students may enter this many minutes before the nominal class start
EARLY_ADMISSION_MINUTES = 15

# Remote session statuses
PROVIDER_SESSION_ENDED = "ENDED"

# Metadata stamped on sessions materialized by the reconciliation sweep
SYNCED_TOPIC_SUFFIX = " (Synced)"
SYNCED_AGENDA = "Class Session"

# Display name used when a caller's profile cannot be resolved
FALLBACK_DISPLAY_NAME = "User"

# Query limits
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Day of week mapping (index matches date.weekday())
DAYS_OF_WEEK = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
