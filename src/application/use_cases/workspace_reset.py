"""Use case wiping a user's workspace or seeding it with demo data."""

from decimal import Decimal

from src.application.use_cases.account_ledger import AccountLedger
from src.application.use_cases.snapshot_recorder import SnapshotRecorder
from src.domain.constants import AccountKind
from src.domain.models import Account
from src.infrastructure.logging.logger import get_app_logger


DEMO_ASSETS = (
    {
        "name": "Savings account",
        "category": "deposit",
        "amount": Decimal("150000"),
        "platform": "Merchant Bank",
    },
    {
        "name": "Wallet balance",
        "category": "cash",
        "amount": Decimal("8500"),
        "platform": "Mobile wallet",
    },
    {
        "name": "Index fund",
        "category": "fund",
        "amount": Decimal("85000"),
        "platform": "Fund broker",
    },
    {
        "name": "Tech shares",
        "category": "stock",
        "amount": Decimal("45000"),
        "platform": "Online broker",
    },
    {
        "name": "Family home",
        "category": "realestate",
        "amount": Decimal("3500000"),
        "note": "Primary residence",
    },
    {
        "name": "Electric car",
        "category": "vehicle",
        "amount": Decimal("180000"),
    },
    {
        "name": "Life insurance cash value",
        "category": "insurance",
        "amount": Decimal("25000"),
        "platform": "Insurer",
    },
)

DEMO_LIABILITIES = (
    {
        "name": "Mortgage",
        "category": "mortgage",
        "amount": Decimal("2200000"),
        "interest_rate": Decimal("4.2"),
    },
    {
        "name": "Credit card",
        "category": "credit_card",
        "amount": Decimal("15000"),
    },
    {
        "name": "Car loan",
        "category": "car_loan",
        "amount": Decimal("80000"),
        "interest_rate": Decimal("5.5"),
    },
)


class WorkspaceResetUseCase:
    """Clear all personal data or replace it with a demo portfolio."""

    def __init__(
        self,
        ledger: AccountLedger,
        recorder: SnapshotRecorder,
        logger=None,
    ) -> None:
        self._ledger = ledger
        self._recorder = recorder
        self._logger = logger or get_app_logger()

    def clear_all_data(self) -> None:
        """Delete every account and snapshot of the user."""
        self._ledger.clear()
        self._recorder.clear()
        self._logger.info("Cleared accounts and snapshots")

    def load_demo_data(self) -> list[Account]:
        """Clear the workspace, then store the demo accounts.

        Returns:
            list[Account]: Stored demo accounts, assets first.
        """
        self.clear_all_data()
        drafts = [(AccountKind.ASSET, dict(item)) for item in DEMO_ASSETS]
        drafts.extend(
            (AccountKind.LIABILITY, dict(item)) for item in DEMO_LIABILITIES
        )
        accounts = self._ledger.import_accounts(drafts)
        self._logger.info(f"Loaded {len(accounts)} demo accounts")
        return accounts


__all__ = ["WorkspaceResetUseCase", "DEMO_ASSETS", "DEMO_LIABILITIES"]
