"""
Create the storefront tables (and seed the default WhatsApp settings)

Usage:
    python3 scripts/init_db.py [--seed] [--admin-password PASSWORD]

Options:
    --seed             : Insert default WhatsApp and store settings when missing
    --admin-password   : Print the ADMIN_PASSWORD_HASH value for a password

Author: TM3
Date: 2025-10-17
"""
import argparse
import logging
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from dotenv import load_dotenv
load_dotenv()

from app.core.auth import hash_password
from app.core.config import settings
from app.core.database import Base, get_engine, get_db_connection_dict
from app.domain.settings import WhatsAppSettings
import app.models  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)


def create_tables() -> None:
    engine = get_engine()
    with engine.begin() as conn:
        conn.exec_driver_sql('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')
    Base.metadata.create_all(engine)
    logger.info(f"Tables ready: {', '.join(sorted(Base.metadata.tables))}")


def seed_defaults() -> None:
    defaults = WhatsAppSettings()
    conn = get_db_connection_dict()
    cursor = conn.cursor()

    try:
        cursor.execute("SELECT COUNT(*) AS total FROM whatsapp_settings")
        if cursor.fetchone()['total'] == 0:
            cursor.execute("""
                INSERT INTO whatsapp_settings (phone_number, default_message, product_message)
                VALUES (%s, %s, %s)
            """, (defaults.phone_number, defaults.default_message, defaults.product_message))
            logger.info("Seeded default WhatsApp settings")

        cursor.execute("SELECT COUNT(*) AS total FROM store_settings")
        if cursor.fetchone()['total'] == 0:
            cursor.execute("INSERT INTO store_settings (store_name) VALUES (%s)", (settings.STORE_NAME,))
            logger.info(f"Seeded store settings for {settings.STORE_NAME}")

        conn.commit()

    except Exception:
        conn.rollback()
        raise
    finally:
        cursor.close()
        conn.close()


def main():
    parser = argparse.ArgumentParser(description="Initialize the storefront database")
    parser.add_argument("--seed", action="store_true", help="Insert default settings rows")
    parser.add_argument("--admin-password", help="Print a password hash for ADMIN_PASSWORD_HASH and exit")
    args = parser.parse_args()

    logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s %(message)s")

    if args.admin_password:
        print(f"ADMIN_PASSWORD_HASH={hash_password(args.admin_password)}")
        return

    create_tables()
    if args.seed:
        seed_defaults()


if __name__ == "__main__":
    main()
