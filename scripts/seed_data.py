# scripts/seed_data.py
import sys
import requests
import argparse
from pathlib import Path

# Add parent directory to path so we can import app modules
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.db.init_db import ensure_admin, seed_sample_data
from app.core.logging import logger, setup_logging


def seed_database(with_samples: bool = True):
    """Create tables, the bootstrap admin and optionally the sample catalog"""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        ensure_admin(db)
        if with_samples:
            seed_sample_data(db)
    finally:
        db.close()


def check_service(base_url: str) -> bool:
    """Probe a running deployment: liveness, database health and the public catalog"""
    ok = True
    for path in ("/health", "/api/health", "/api/categories"):
        try:
            response = requests.get(f"{base_url}{path}", timeout=10)
        except requests.RequestException as e:
            logger.error(f"Error accessing {path}: {e}")
            ok = False
            continue

        if response.status_code == 200 and response.json().get("success"):
            logger.info(f"{path} OK")
        else:
            logger.error(f"{path} failed: {response.status_code}, {response.text[:200]}")
            ok = False
    return ok


def main():
    """Main entry point for the script"""
    parser = argparse.ArgumentParser(description='Seed database for Art Gallery API')
    parser.add_argument('--service-url', type=str, help='URL of a running API service to check')
    parser.add_argument('--admin-only', action='store_true', help='Only create the bootstrap admin')

    args = parser.parse_args()
    setup_logging()

    logger.info("Seeding database...")
    seed_database(with_samples=not args.admin_only)
    logger.info("Database seeded successfully.")

    if args.service_url:
        if not check_service(args.service_url.rstrip('/')):
            sys.exit(1)


if __name__ == "__main__":
    main()
