"""Identifier generation."""

import uuid


def new_id() -> str:
    """Return a new opaque identifier."""
    return str(uuid.uuid4())


__all__ = ["new_id"]
