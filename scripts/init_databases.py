#!/usr/bin/env python3
"""
Database Initialization Script
==============================

Create the VendorShield tables and, optionally, a demo vendor.

Usage:
    python scripts/init_databases.py
    python scripts/init_databases.py --seed-demo

Version: 0.1.0
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from shared.logging import get_logger, setup_logging

setup_logging(log_level="INFO", json_logs=False, service_name="init-db")
logger = get_logger(__name__)


async def init_postgres() -> bool:
    """Create every table of the vendor assessment service."""
    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError

    # Registers the ORM models on Base.metadata
    import services.vendor_assessment.models  # noqa: F401
    from shared.database.postgres import PostgresClient

    logger.info("postgres_init_starting")

    try:
        await PostgresClient.create_all()

        async with PostgresClient.get_engine().connect() as conn:
            result = await conn.execute(text("SELECT version()"))
            version = result.scalar() or ""
            logger.info("postgres_version", version=version[:50])

    except (SQLAlchemyError, OSError) as e:
        logger.error("postgres_init_failed", error=str(e))
        return False

    logger.info("postgres_initialized")
    return True


async def seed_demo_vendor() -> bool:
    """Create a demo vendor and print its invitation token."""
    from services.vendor_assessment.errors import VendorAssessmentError
    from services.vendor_assessment.repository import PostgresAssessmentRepository
    from services.vendor_assessment.services import SubmissionService
    from shared.database.postgres import postgres_session
    from shared.models.vendor import VendorCreate

    try:
        async with postgres_session() as session:
            service = SubmissionService(PostgresAssessmentRepository(session))
            vendor = await service.create_vendor(
                VendorCreate(name="Demo Vendor", contact_email="security@demo-vendor.example")
            )
    except VendorAssessmentError as e:
        logger.error("demo_vendor_failed", error=str(e))
        return False

    logger.info("demo_vendor_created", vendor_id=vendor.id, invite_token=vendor.invite_token)
    print(f"Portal token: {vendor.invite_token}")
    return True


async def main(args: argparse.Namespace) -> int:
    from shared.database.postgres import PostgresClient

    try:
        ok = await init_postgres()
        if ok and args.seed_demo:
            ok = await seed_demo_vendor()
    finally:
        await PostgresClient.close()

    return 0 if ok else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Initialize VendorShield databases")
    parser.add_argument("--seed-demo", action="store_true", help="Create a demo vendor")
    sys.exit(asyncio.run(main(parser.parse_args())))
