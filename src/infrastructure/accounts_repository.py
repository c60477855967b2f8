"""SQLAlchemy-backed repository for asset and liability accounts."""

from sqlalchemy import text

from src.application.ports.accounts_repository import AccountsRepositoryPort
from src.application.ports.database import DatabaseEnginePort
from src.domain.constants import AccountKind
from src.domain.models import (
    MUTABLE_FIELDS,
    Account,
    AssetAccount,
    LiabilityAccount,
)
from src.infrastructure.gateway_errors import gateway_errors
from src.infrastructure.mappers import (
    account_changes_to_row,
    account_to_row,
    row_to_asset,
    row_to_liability,
)


TABLES = {
    AccountKind.ASSET: "assets",
    AccountKind.LIABILITY: "liabilities",
}

SELECT_ASSETS_SQL = text(
    """
    SELECT id, name, amount, category, platform, note, icon,
           created_at, updated_at
    FROM assets
    WHERE user_id = :user_id
    ORDER BY created_at, id
    """
)

SELECT_LIABILITIES_SQL = text(
    """
    SELECT id, name, amount, category, interest_rate, due_date, note, icon,
           created_at, updated_at
    FROM liabilities
    WHERE user_id = :user_id
    ORDER BY created_at, id
    """
)

INSERT_ASSET_SQL = text(
    """
    INSERT INTO assets (
        id, user_id, name, amount, category, platform, note, icon,
        created_at, updated_at
    )
    VALUES (
        :id, :user_id, :name, :amount, :category, :platform, :note, :icon,
        :created_at, :updated_at
    )
    """
)

INSERT_LIABILITY_SQL = text(
    """
    INSERT INTO liabilities (
        id, user_id, name, amount, category, interest_rate, due_date, note,
        icon, created_at, updated_at
    )
    VALUES (
        :id, :user_id, :name, :amount, :category, :interest_rate, :due_date,
        :note, :icon, :created_at, :updated_at
    )
    """
)

INSERT_SQL = {
    AccountKind.ASSET: INSERT_ASSET_SQL,
    AccountKind.LIABILITY: INSERT_LIABILITY_SQL,
}


class SqlAlchemyAccountsRepository(AccountsRepositoryPort):
    """Repository backed by SQLAlchemy for a user's accounts."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the application engine.
        """
        self._db_port = db_port

    def fetch_assets(self, user_id: str) -> list[AssetAccount]:
        """Return the user's asset accounts, oldest first."""
        engine = self._db_port.get_engine()
        with gateway_errors("load assets"):
            with engine.connect() as conn:
                rows = conn.execute(
                    SELECT_ASSETS_SQL,
                    {"user_id": user_id},
                ).all()
        return [row_to_asset(row) for row in rows]

    def fetch_liabilities(self, user_id: str) -> list[LiabilityAccount]:
        """Return the user's liability accounts, oldest first."""
        engine = self._db_port.get_engine()
        with gateway_errors("load liabilities"):
            with engine.connect() as conn:
                rows = conn.execute(
                    SELECT_LIABILITIES_SQL,
                    {"user_id": user_id},
                ).all()
        return [row_to_liability(row) for row in rows]

    def insert_account(self, user_id: str, account: Account) -> None:
        self.insert_accounts(user_id, [account])

    def insert_accounts(self, user_id: str, accounts: list[Account]) -> None:
        """Insert accounts of either kind in one transaction."""
        payloads = {kind: [] for kind in AccountKind}
        for account in accounts:
            payloads[account.kind].append(account_to_row(user_id, account))
        engine = self._db_port.get_engine()
        with gateway_errors("store accounts"):
            with engine.begin() as conn:
                for kind, payload in payloads.items():
                    if payload:
                        conn.execute(INSERT_SQL[kind], payload)

    def update_account(
        self,
        user_id: str,
        kind: AccountKind,
        account_id: str,
        fields: dict,
    ) -> int:
        """Apply column changes to one account of the user.

        Returns:
            int: Number of rows changed.
        """
        allowed = MUTABLE_FIELDS[kind] | {"updated_at"}
        unknown = set(fields) - allowed
        if unknown:
            raise ValueError(f"Unsupported columns: {sorted(unknown)}")
        if not fields:
            return 0
        params = account_changes_to_row(fields)
        assignments = ", ".join(f"{name} = :{name}" for name in sorted(params))
        query = text(
            f"UPDATE {TABLES[kind]} SET {assignments} "
            "WHERE id = :account_id AND user_id = :user_id"
        )
        engine = self._db_port.get_engine()
        with gateway_errors("update account"):
            with engine.begin() as conn:
                result = conn.execute(
                    query,
                    {**params, "account_id": account_id, "user_id": user_id},
                )
                changed = result.rowcount
        return changed

    def delete_account(
        self,
        user_id: str,
        kind: AccountKind,
        account_id: str,
    ) -> None:
        query = text(
            f"DELETE FROM {TABLES[kind]} "
            "WHERE id = :account_id AND user_id = :user_id"
        )
        engine = self._db_port.get_engine()
        with gateway_errors("delete account"):
            with engine.begin() as conn:
                conn.execute(
                    query,
                    {"account_id": account_id, "user_id": user_id},
                )

    def delete_all(self, user_id: str) -> None:
        """Delete every asset and liability of the user."""
        engine = self._db_port.get_engine()
        with gateway_errors("clear accounts"):
            with engine.begin() as conn:
                for table in TABLES.values():
                    conn.execute(
                        text(f"DELETE FROM {table} WHERE user_id = :user_id"),
                        {"user_id": user_id},
                    )


__all__ = ["SqlAlchemyAccountsRepository"]
