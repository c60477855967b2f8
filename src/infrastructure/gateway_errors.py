"""Translation of driver failures into gateway errors."""

from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from src.domain.errors import GatewayError


@contextmanager
def gateway_errors(action: str):
    """Re-raise SQLAlchemy failures inside the block as ``GatewayError``.

    Args:
        action: Short description used in the error message.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        raise GatewayError(f"Failed to {action}: {exc}") from exc


__all__ = ["gateway_errors"]
