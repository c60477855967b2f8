"""Use case capturing dated net worth snapshots from the ledger."""

from collections.abc import Callable
from datetime import datetime

from src.application.ports.snapshots_repository import SnapshotsRepositoryPort
from src.application.use_cases.account_ledger import AccountLedger
from src.domain.errors import GatewayError
from src.domain.models import Snapshot, UserSession
from src.domain.services import compute_snapshot_breakdown
from src.infrastructure.logging.logger import get_app_logger
from src.utils.datetime_utils import utc_now
from src.utils.ids import new_id


class SnapshotRecorder:
    """Record and expose the snapshot history of a user.

    Several snapshots on the same day are kept as distinct records. The
    history keeps insertion order; chart consumers sort it by date.
    """

    def __init__(
        self,
        session: UserSession,
        ledger: AccountLedger,
        snapshots_repository: SnapshotsRepositoryPort,
        logger=None,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        """Initialize the recorder.

        Args:
            session: Signed-in user owning the snapshots.
            ledger: Ledger whose current state is captured.
            snapshots_repository: Port persisting the snapshots.
            logger: Optional logger compatible with logging.Logger-like API.
            clock: Optional callable returning the current aware datetime.
            id_factory: Optional callable generating snapshot identifiers.
        """
        self._session = session
        self._ledger = ledger
        self._repository = snapshots_repository
        self._logger = logger or get_app_logger()
        self._clock = clock or utc_now
        self._id_factory = id_factory or new_id
        self._history: list[Snapshot] = []

    @property
    def history(self) -> tuple[Snapshot, ...]:
        return tuple(self._history)

    def load(self) -> None:
        """Replace the in-memory history with the stored snapshots."""
        try:
            snapshots = self._repository.fetch_snapshots(self._session.user_id)
        except GatewayError as exc:
            self._logger.error(f"Failed to load snapshots: {exc}")
            raise
        self._history = list(snapshots)

    def take_snapshot(self) -> Snapshot:
        """Capture today's totals and per-account breakdown.

        Returns:
            Snapshot: The persisted snapshot.
        """
        totals = self._ledger.totals()
        snapshot = Snapshot(
            id=self._id_factory(),
            date=self._clock().date(),
            total_assets=totals.total_assets,
            total_liabilities=totals.total_liabilities,
            net_worth=totals.net_worth,
            breakdown=compute_snapshot_breakdown(
                self._ledger.assets,
                self._ledger.liabilities,
            ),
        )
        try:
            self._repository.insert_snapshot(self._session.user_id, snapshot)
        except GatewayError as exc:
            self._logger.error(f"Failed to record snapshot: {exc}")
            raise
        self._history.append(snapshot)
        self._logger.info(
            f"Snapshot {snapshot.id} on {snapshot.date}: "
            f"net_worth={snapshot.net_worth}"
        )
        return snapshot

    def clear(self) -> None:
        """Delete every snapshot of the user."""
        try:
            self._repository.delete_all(self._session.user_id)
        except GatewayError as exc:
            self._logger.error(f"Failed to clear snapshots: {exc}")
            raise
        self._history = []


__all__ = ["SnapshotRecorder"]
