"""Helpers shared by the inventory entities."""

import uuid
from datetime import UTC, datetime


def utcnow() -> datetime:
    """Timezone-aware current time."""
    return datetime.now(UTC)


def new_id() -> str:
    return str(uuid.uuid4())
