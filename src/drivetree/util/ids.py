from __future__ import annotations

import uuid


def new_uuid() -> str:
    """Generate a UUID4 string."""
    return str(uuid.uuid4())


def new_request_id() -> str:
    """Generate a new OutstandingRequest ID."""
    return new_uuid()


def new_boundary() -> str:
    """Generate a multipart boundary string."""
    return f"drivetree-{uuid.uuid4().hex}"
