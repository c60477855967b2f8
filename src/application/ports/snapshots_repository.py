"""Port for net worth snapshots."""

from typing import Protocol

from src.domain.models import Snapshot


class SnapshotsRepositoryPort(Protocol):
    """Port exposing create-only access to a user's snapshots."""

    def fetch_snapshots(self, user_id: str) -> list[Snapshot]:
        """Return the user's snapshots ordered by date ascending."""

    def insert_snapshot(self, user_id: str, snapshot: Snapshot) -> None:
        """Persist a new snapshot."""

    def delete_all(self, user_id: str) -> None:
        """Delete every snapshot owned by the user."""


__all__ = ["SnapshotsRepositoryPort"]
