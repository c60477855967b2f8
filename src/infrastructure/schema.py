"""DDL for the persistence gateway tables.

Amounts are stored as text so that Decimal values survive every backend
unchanged; timestamps are ISO-8601 text in UTC.
"""

from sqlalchemy.engine import Engine

from src.infrastructure.logging.logger import get_app_logger


CREATE_PROFILES_SQL = """
CREATE TABLE IF NOT EXISTS profiles (
    id TEXT PRIMARY KEY,
    email TEXT NOT NULL UNIQUE,
    created_at TEXT NOT NULL
)
"""

CREATE_ASSETS_SQL = """
CREATE TABLE IF NOT EXISTS assets (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    name TEXT NOT NULL,
    amount TEXT NOT NULL,
    category TEXT NOT NULL,
    platform TEXT,
    note TEXT,
    icon TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""

CREATE_LIABILITIES_SQL = """
CREATE TABLE IF NOT EXISTS liabilities (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    name TEXT NOT NULL,
    amount TEXT NOT NULL,
    category TEXT NOT NULL,
    interest_rate TEXT,
    due_date TEXT,
    note TEXT,
    icon TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""

CREATE_SNAPSHOTS_SQL = """
CREATE TABLE IF NOT EXISTS snapshots (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    date TEXT NOT NULL,
    total_assets TEXT NOT NULL,
    total_liabilities TEXT NOT NULL,
    net_worth TEXT NOT NULL,
    breakdown TEXT NOT NULL
)
"""

CREATE_FAMILIES_SQL = """
CREATE TABLE IF NOT EXISTS families (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    created_by TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""

CREATE_FAMILY_MEMBERS_SQL = """
CREATE TABLE IF NOT EXISTS family_members (
    id TEXT PRIMARY KEY,
    family_id TEXT NOT NULL REFERENCES families(id) ON DELETE CASCADE,
    user_id TEXT NOT NULL,
    role TEXT NOT NULL,
    joined_at TEXT NOT NULL,
    UNIQUE (family_id, user_id)
)
"""

CREATE_FAMILY_INVITATIONS_SQL = """
CREATE TABLE IF NOT EXISTS family_invitations (
    id TEXT PRIMARY KEY,
    family_id TEXT NOT NULL REFERENCES families(id) ON DELETE CASCADE,
    inviter_id TEXT NOT NULL,
    invitee_email TEXT NOT NULL,
    invitee_id TEXT,
    status TEXT NOT NULL,
    role TEXT NOT NULL,
    created_at TEXT NOT NULL,
    expires_at TEXT NOT NULL,
    responded_at TEXT
)
"""

SCHEMA_STATEMENTS = (
    CREATE_PROFILES_SQL,
    CREATE_ASSETS_SQL,
    CREATE_LIABILITIES_SQL,
    CREATE_SNAPSHOTS_SQL,
    CREATE_FAMILIES_SQL,
    CREATE_FAMILY_MEMBERS_SQL,
    CREATE_FAMILY_INVITATIONS_SQL,
)

TABLE_NAMES = (
    "profiles",
    "assets",
    "liabilities",
    "snapshots",
    "families",
    "family_members",
    "family_invitations",
)


def ensure_schema(engine: Engine, logger=None) -> None:
    """Create every gateway table that does not exist yet.

    Args:
        engine: Engine connected to the application database.
        logger: Optional logger compatible with logging.Logger-like API.
    """
    logger = logger or get_app_logger()
    with engine.begin() as conn:
        for statement in SCHEMA_STATEMENTS:
            conn.exec_driver_sql(statement)
    logger.info(f"Schema ready on {engine.url}")


__all__ = ["SCHEMA_STATEMENTS", "TABLE_NAMES", "ensure_schema"]
