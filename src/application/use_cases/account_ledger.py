"""Use case holding a user's accounts and their derived totals.

The ledger keeps the in-memory collections of asset and liability accounts
for the signed-in user. Every mutation is written through the accounts
repository first; the in-memory collections only change once the write
returned, so a failed write leaves the ledger at its last known state.
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Any

from src.application.ports.accounts_repository import AccountsRepositoryPort
from src.domain.constants import DEFAULT_ICONS, AccountKind
from src.domain.errors import GatewayError, NotFoundError, ValidationError
from src.domain.models import (
    ACCOUNT_TYPES,
    Account,
    AllocationBreakdown,
    AssetAccount,
    LedgerTotals,
    LiabilityAccount,
    UserSession,
)
from src.domain.services import (
    compute_allocation,
    compute_asset_ratio,
    compute_totals,
    filter_by_category,
    validate_account_fields,
)
from src.infrastructure.logging.logger import get_app_logger
from src.utils.datetime_utils import utc_now
from src.utils.ids import new_id


class AccountLedger:
    """Create, update and delete accounts and compute totals."""

    def __init__(
        self,
        session: UserSession,
        accounts_repository: AccountsRepositoryPort,
        logger=None,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        """Initialize the ledger.

        Args:
            session: Signed-in user owning the accounts.
            accounts_repository: Port persisting the accounts.
            logger: Optional logger compatible with logging.Logger-like API.
            clock: Optional callable returning the current aware datetime.
            id_factory: Optional callable generating account identifiers.
        """
        self._session = session
        self._repository = accounts_repository
        self._logger = logger or get_app_logger()
        self._clock = clock or utc_now
        self._id_factory = id_factory or new_id
        self._assets: list[AssetAccount] = []
        self._liabilities: list[LiabilityAccount] = []

    @property
    def assets(self) -> tuple[AssetAccount, ...]:
        return tuple(self._assets)

    @property
    def liabilities(self) -> tuple[LiabilityAccount, ...]:
        return tuple(self._liabilities)

    def load(self) -> None:
        """Replace the in-memory collections with the stored accounts."""
        user_id = self._session.user_id
        try:
            assets = self._repository.fetch_assets(user_id)
            liabilities = self._repository.fetch_liabilities(user_id)
        except GatewayError as exc:
            self._logger.error(f"Failed to load accounts for {user_id}: {exc}")
            raise
        self._assets = list(assets)
        self._liabilities = list(liabilities)
        self._logger.info(
            f"Loaded {len(self._assets)} assets and "
            f"{len(self._liabilities)} liabilities for {user_id}"
        )

    def add_account(
        self,
        kind: AccountKind | str,
        fields: Mapping[str, Any],
    ) -> Account:
        """Validate, persist and append a new account.

        Args:
            kind: Asset or liability.
            fields: Field values; name, amount and category are required.

        Returns:
            Account: The stored account with identifier and timestamps.

        Raises:
            ValidationError: When the fields are invalid (nothing is written).
            GatewayError: When the write fails (memory is unchanged).
        """
        account = self._build_account(_coerce_kind(kind), fields)
        try:
            self._repository.insert_account(self._session.user_id, account)
        except GatewayError as exc:
            self._logger.error(
                f"Failed to add {account.kind.value} '{account.name}': {exc}"
            )
            raise
        self._collection(account.kind).append(account)
        self._logger.info(
            f"Added {account.kind.value} {account.id} ({account.category})"
        )
        return account

    def import_accounts(
        self,
        drafts: Iterable[tuple[AccountKind | str, Mapping[str, Any]]],
    ) -> list[Account]:
        """Validate every draft, then persist them in one call.

        Args:
            drafts: Pairs of account kind and field values.

        Returns:
            list[Account]: The stored accounts, in draft order.
        """
        accounts = [
            self._build_account(_coerce_kind(kind), fields)
            for kind, fields in drafts
        ]
        if not accounts:
            return []
        try:
            self._repository.insert_accounts(self._session.user_id, accounts)
        except GatewayError as exc:
            self._logger.error(
                f"Failed to import {len(accounts)} accounts: {exc}"
            )
            raise
        for account in accounts:
            self._collection(account.kind).append(account)
        self._logger.info(f"Imported {len(accounts)} accounts")
        return accounts

    def update_account(
        self,
        account_id: str,
        fields: Mapping[str, Any],
    ) -> Account:
        """Merge the provided fields into an existing account.

        Args:
            account_id: Identifier of an account owned by the user.
            fields: Subset of mutable fields to change.

        Returns:
            Account: The updated account.

        Raises:
            NotFoundError: When the account is not in the user's scope.
            ValidationError: When a provided field is invalid.
            GatewayError: When the write fails (memory is unchanged).
        """
        account = self.get_account(account_id)
        cleaned = validate_account_fields(account.kind, fields, partial=True)
        if not cleaned:
            return account
        now = self._clock()
        try:
            changed = self._repository.update_account(
                self._session.user_id,
                account.kind,
                account_id,
                {**cleaned, "updated_at": now},
            )
        except GatewayError as exc:
            self._logger.error(f"Failed to update account {account_id}: {exc}")
            raise
        if not changed:
            raise NotFoundError("account", account_id)

        updated = replace(account, **cleaned, updated_at=now)
        collection = self._collection(account.kind)
        collection[collection.index(account)] = updated
        self._logger.info(
            f"Updated {account.kind.value} {account_id}: {sorted(cleaned)}"
        )
        return updated

    def delete_account(self, account_id: str) -> None:
        """Delete an account; unknown identifiers are ignored."""
        account = self._find(account_id)
        if account is None:
            self._logger.debug(f"Account {account_id} already absent")
            return
        try:
            self._repository.delete_account(
                self._session.user_id,
                account.kind,
                account_id,
            )
        except GatewayError as exc:
            self._logger.error(f"Failed to delete account {account_id}: {exc}")
            raise
        self._collection(account.kind).remove(account)
        self._logger.info(f"Deleted {account.kind.value} {account_id}")

    def clear(self) -> None:
        """Delete every account owned by the user."""
        try:
            self._repository.delete_all(self._session.user_id)
        except GatewayError as exc:
            self._logger.error(f"Failed to clear accounts: {exc}")
            raise
        self._assets = []
        self._liabilities = []
        self._logger.info(f"Cleared accounts for {self._session.user_id}")

    def get_account(self, account_id: str) -> Account:
        """Return an account by identifier or raise NotFoundError."""
        account = self._find(account_id)
        if account is None:
            raise NotFoundError("account", account_id)
        return account

    def totals(self) -> LedgerTotals:
        return compute_totals(self._assets, self._liabilities)

    def filter_by_category(self, category: str) -> list[Account]:
        """Return the accounts of a category, or all of them for ``"all"``."""
        return filter_by_category(self._assets, self._liabilities, category)

    def allocation(self, kind: AccountKind | str) -> AllocationBreakdown:
        """Return the per-category rollup of one account kind."""
        resolved = _coerce_kind(kind)
        return compute_allocation(self._collection(resolved), resolved)

    def asset_ratio(self) -> Decimal:
        """Return assets as a percentage of assets plus liabilities."""
        return compute_asset_ratio(self.totals())

    def _build_account(
        self,
        kind: AccountKind,
        fields: Mapping[str, Any],
    ) -> Account:
        cleaned = validate_account_fields(kind, fields)
        if not cleaned.get("icon"):
            cleaned["icon"] = DEFAULT_ICONS[kind]
        now = self._clock()
        return ACCOUNT_TYPES[kind](
            id=self._id_factory(),
            created_at=now,
            updated_at=now,
            **cleaned,
        )

    def _find(self, account_id: str) -> Account | None:
        for account in (*self._assets, *self._liabilities):
            if account.id == account_id:
                return account
        return None

    def _collection(self, kind: AccountKind) -> list:
        if kind is AccountKind.ASSET:
            return self._assets
        return self._liabilities


def _coerce_kind(kind: AccountKind | str) -> AccountKind:
    try:
        return AccountKind(kind)
    except ValueError as exc:
        raise ValidationError(
            f"Unknown account kind: {kind}",
            field="kind",
        ) from exc


__all__ = ["AccountLedger"]
