"""Identifiers for stored records."""

from __future__ import annotations

import uuid

CHUNK_PREFIX = "chk"
INTERACTION_PREFIX = "int"
EMAIL_AUDIT_PREFIX = "mail"


def new_id(prefix: str) -> str:
    """``<prefix>_<uuid4 hex>``, e.g. ``int_9f1c...``."""
    return f"{prefix}_{uuid.uuid4().hex}"
