"""
Identifier and timestamp helpers for stored documents.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone


def new_id(prefix: str) -> str:
    """Return a collision-resistant document id such as ``ration-3f9a1c0b2d4e``."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def utc_timestamp() -> str:
    """Current UTC time as an ISO date-time string."""
    return datetime.now(timezone.utc).isoformat()
