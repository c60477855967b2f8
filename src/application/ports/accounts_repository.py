"""Port for reading and writing a user's asset and liability accounts."""

from collections.abc import Mapping
from typing import Any, Protocol

from src.domain.constants import AccountKind
from src.domain.models import Account, AssetAccount, LiabilityAccount


class AccountsRepositoryPort(Protocol):
    """Port exposing owner-scoped access to asset and liability rows."""

    def fetch_assets(self, user_id: str) -> list[AssetAccount]:
        """Return every asset account owned by the user."""

    def fetch_liabilities(self, user_id: str) -> list[LiabilityAccount]:
        """Return every liability account owned by the user."""

    def insert_account(self, user_id: str, account: Account) -> None:
        """Persist a new account owned by the user."""

    def insert_accounts(self, user_id: str, accounts: list[Account]) -> None:
        """Persist several new accounts owned by the user."""

    def update_account(
        self,
        user_id: str,
        kind: AccountKind,
        account_id: str,
        fields: Mapping[str, Any],
    ) -> int:
        """Update an owned account and return the number of rows changed."""

    def delete_account(
        self,
        user_id: str,
        kind: AccountKind,
        account_id: str,
    ) -> None:
        """Delete an owned account; absent rows are ignored."""

    def delete_all(self, user_id: str) -> None:
        """Delete every asset and liability owned by the user."""


__all__ = ["AccountsRepositoryPort"]
