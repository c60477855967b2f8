"""CLI adapter recording a net worth snapshot for one user.

Intended for scheduled jobs: the user is taken from ``--email`` or the
``SNAPSHOT_USER_EMAIL`` setting, the ledger is loaded and one snapshot
is appended to the history.
"""

import argparse
import sys

from src.domain.errors import DomainError
from src.infrastructure.container import (
    build_database_adapter,
    build_sign_in_use_case,
    build_workspace,
)
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.settings import AppSettings


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Record a net worth snapshot for a user.",
    )
    parser.add_argument(
        "--email",
        help="Email of the user (defaults to SNAPSHOT_USER_EMAIL).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Record one snapshot and print its totals.

    Returns:
        int: Process exit code.
    """
    args = _parse_args(argv)
    logger = get_app_logger()
    settings = AppSettings.from_env()
    email = args.email or settings.snapshot_user_email
    if not email:
        logger.warning(
            "No user given: pass --email or set SNAPSHOT_USER_EMAIL."
        )
        return 2

    db_adapter = build_database_adapter()
    try:
        session = build_sign_in_use_case(db_adapter).execute(email)
        workspace = build_workspace(
            session,
            db_port=db_adapter,
            settings=settings,
        )
        workspace.ledger.load()
        snapshot = workspace.recorder.take_snapshot()
    except DomainError as exc:
        logger.error(f"Snapshot failed for {email}: {exc.message}")
        return 1

    symbol = settings.currency_symbol
    print(
        f"Snapshot {snapshot.date}: assets {symbol}{snapshot.total_assets}, "
        f"liabilities {symbol}{snapshot.total_liabilities}, "
        f"net worth {symbol}{snapshot.net_worth}"
    )
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
