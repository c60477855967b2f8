"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os
from typing import Optional

import dotenv

from src.domain.constants import DEFAULT_INVITATION_TTL_DAYS
from src.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class AppSettings:
    """Runtime settings of the dashboard.

    Attributes:
        db_url: Database URL, when configured.
        invitation_ttl_days: Days before a pending invitation goes inactive.
        currency_symbol: Symbol shown in front of amounts.
        snapshot_user_email: Account used by the snapshot CLI.
    """

    db_url: Optional[str] = None
    invitation_ttl_days: int = DEFAULT_INVITATION_TTL_DAYS
    currency_symbol: str = "$"
    snapshot_user_email: Optional[str] = None

    @classmethod
    def from_env(cls) -> "AppSettings":
        """Build settings from environment variables.

        Returns:
            AppSettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        ttl_days = cls._parse_ttl(
            os.getenv("INVITATION_TTL_DAYS"),
            logger=logger,
        )
        currency = os.getenv("NETWORTH_CURRENCY", "").strip() or "$"
        snapshot_email = os.getenv("SNAPSHOT_USER_EMAIL", "").strip() or None
        return cls(
            db_url=os.getenv("NETWORTH_DB_URL") or None,
            invitation_ttl_days=ttl_days,
            currency_symbol=currency,
            snapshot_user_email=snapshot_email,
        )

    @staticmethod
    def _parse_ttl(raw_value: Optional[str], logger) -> int:
        """Parse the invitation lifetime, falling back to the default.

        Args:
            raw_value: Raw environment value.
            logger: Logger used for warnings.

        Returns:
            int: Positive number of days.
        """
        if raw_value is None or not raw_value.strip():
            return DEFAULT_INVITATION_TTL_DAYS
        try:
            days = int(raw_value.strip())
        except ValueError:
            logger.warning(
                f"Invalid INVITATION_TTL_DAYS={raw_value!r}, "
                f"using {DEFAULT_INVITATION_TTL_DAYS}"
            )
            return DEFAULT_INVITATION_TTL_DAYS
        if days <= 0:
            logger.warning(
                f"INVITATION_TTL_DAYS must be positive, "
                f"using {DEFAULT_INVITATION_TTL_DAYS}"
            )
            return DEFAULT_INVITATION_TTL_DAYS
        return days


__all__ = ["AppSettings"]
