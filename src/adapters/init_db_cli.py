"""CLI adapter creating the gateway tables in the configured database."""

from src.infrastructure.container import build_database_adapter
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.schema import TABLE_NAMES, ensure_schema


def main() -> None:
    """Create any missing table of the persistence gateway."""
    logger = get_app_logger()
    db_adapter = build_database_adapter()

    ensure_schema(db_adapter.get_engine(), logger=logger)

    print(f"Schema ready: {', '.join(TABLE_NAMES)}.")


if __name__ == "__main__":  # pragma: no cover
    main()
