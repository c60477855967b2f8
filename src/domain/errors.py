"""Domain error taxonomy.

Error Hierarchy:
    DomainError
    ├── ValidationError (malformed input, rejected before any write)
    ├── NotFoundError (id absent or outside the caller's scope)
    ├── ConflictError (duplicate invitation, already a member, stale state)
    ├── AuthorizationError (role insufficient for the action)
    └── GatewayError (storage or network failure, opaque cause)
"""


class DomainError(Exception):
    """Base class for errors surfaced to callers of the use cases."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Input failed validation.

    Attributes:
        field: Name of the offending field, when known.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(DomainError):
    """Referenced resource does not exist for the caller.

    Attributes:
        resource_type: Kind of resource (account, family, invitation...).
        resource_id: Identifier that could not be resolved.
    """

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(f"{resource_type} not found: {resource_id}")
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(DomainError):
    """Action conflicts with existing state."""


class AuthorizationError(DomainError):
    """Caller's role does not permit the action."""


class GatewayError(DomainError):
    """Persistence gateway failed; the underlying exception is chained."""


__all__ = [
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "AuthorizationError",
    "GatewayError",
]
