#!/usr/bin/env python3
"""Initialize ledger tables and program settings."""

import argparse
import asyncio
import sys

from loguru import logger

from incentives.config.settings import settings
from incentives.database import create_engine, create_session_maker, init_models
from incentives.ledger import IncentiveLedger
from incentives.logging_config import setup_logging
from incentives.utils.exceptions import LedgerError


async def init_database(
    database_url: str | None, owner: str | None, backend: str | None
) -> None:
    """Create all tables and bootstrap program settings."""
    database_url = database_url or settings.database_url

    logger.info("Connecting to database...")
    engine = create_engine(database_url, echo=False)

    logger.info("Creating tables (checkfirst=True)...")
    await init_models(engine)

    owner = owner or settings.owner_address
    if owner:
        ledger = IncentiveLedger(create_session_maker(engine))
        try:
            program = await ledger.bootstrap(owner=owner, authorized_backend=backend)
        except LedgerError as exc:
            logger.error(f"Bootstrap failed: {exc.message}")
            await engine.dispose()
            sys.exit(1)
        logger.info(
            f"Program owner {program.owner}, backend {program.authorized_backend}"
        )
    else:
        logger.warning("OWNER_ADDRESS not set, skipping program bootstrap")

    await engine.dispose()
    logger.success("Database initialized successfully!")


def main():
    parser = argparse.ArgumentParser(
        description="Create ledger tables and bootstrap program settings"
    )
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    parser.add_argument("--owner", help="Administrative owner address")
    parser.add_argument("--backend", help="Authorized backend address")

    args = parser.parse_args()

    setup_logging()
    asyncio.run(init_database(args.database_url, args.owner, args.backend))


if __name__ == "__main__":
    main()
