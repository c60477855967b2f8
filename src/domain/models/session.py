"""Signed-in user context."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserSession:
    """Identity of the signed-in user, passed explicitly to use cases.

    Established at sign-in and discarded at sign-out.
    """

    user_id: str
    email: str


__all__ = ["UserSession"]
