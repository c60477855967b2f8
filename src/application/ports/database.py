"""Database ports for the net worth dashboard.

This module defines the application-layer protocol for accessing the
database engine. Infrastructure implementations are expected to provide
concrete adapters that satisfy this port.
"""

from typing import Protocol

from sqlalchemy.engine import Engine


class DatabaseEnginePort(Protocol):
    """Port exposing the database engine backing the persistence gateway.

    Repositories depend on this protocol instead of concrete drivers or
    configuration details.
    """

    def get_engine(self) -> Engine:
        """Get the engine for the application database.

        Returns:
            Engine: SQLAlchemy engine connected to the backend.
        """


__all__ = ["DatabaseEnginePort"]
