"""SQLAlchemy-backed repository for net worth snapshots."""

from sqlalchemy import text

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.snapshots_repository import SnapshotsRepositoryPort
from src.domain.models import Snapshot
from src.infrastructure.gateway_errors import gateway_errors
from src.infrastructure.mappers import row_to_snapshot, snapshot_to_row


SELECT_SNAPSHOTS_SQL = text(
    """
    SELECT id, date, total_assets, total_liabilities, net_worth, breakdown
    FROM snapshots
    WHERE user_id = :user_id
    ORDER BY date, id
    """
)

INSERT_SNAPSHOT_SQL = text(
    """
    INSERT INTO snapshots (
        id, user_id, date, total_assets, total_liabilities, net_worth,
        breakdown
    )
    VALUES (
        :id, :user_id, :date, :total_assets, :total_liabilities, :net_worth,
        :breakdown
    )
    """
)

DELETE_SNAPSHOTS_SQL = text("DELETE FROM snapshots WHERE user_id = :user_id")


class SqlAlchemySnapshotsRepository(SnapshotsRepositoryPort):
    """Repository backed by SQLAlchemy for snapshots."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the application engine.
        """
        self._db_port = db_port

    def fetch_snapshots(self, user_id: str) -> list[Snapshot]:
        """Return the user's snapshots ordered by date."""
        engine = self._db_port.get_engine()
        with gateway_errors("load snapshots"):
            with engine.connect() as conn:
                rows = conn.execute(
                    SELECT_SNAPSHOTS_SQL,
                    {"user_id": user_id},
                ).all()
        return [row_to_snapshot(row) for row in rows]

    def insert_snapshot(self, user_id: str, snapshot: Snapshot) -> None:
        engine = self._db_port.get_engine()
        with gateway_errors("store snapshot"):
            with engine.begin() as conn:
                conn.execute(
                    INSERT_SNAPSHOT_SQL,
                    snapshot_to_row(user_id, snapshot),
                )

    def delete_all(self, user_id: str) -> None:
        engine = self._db_port.get_engine()
        with gateway_errors("clear snapshots"):
            with engine.begin() as conn:
                conn.execute(DELETE_SNAPSHOTS_SQL, {"user_id": user_id})


__all__ = ["SqlAlchemySnapshotsRepository"]
