#!/usr/bin/env python3
"""Backfill museums.region_id from address strings"""

import json
import logging
import sys
from pathlib import Path

# Add project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.exc import SQLAlchemyError

from museum_api.database import SessionLocal, init_db
from museum_api.services.region_backfill import backfill_regions

UNMATCHED_PATH = Path(__file__).parent / "region-unmatched.json"

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("seed_regions")


def write_unmatched(unmatched):
    if not unmatched:
        return
    UNMATCHED_PATH.write_text(
        json.dumps({"unmatched": unmatched}, ensure_ascii=False, indent=2), encoding="utf-8"
    )
    logger.info(f"Logged {len(unmatched):,} unmatched museums to {UNMATCHED_PATH}")


def main():
    init_db()
    session = SessionLocal()
    try:
        processed, unmatched = backfill_regions(session)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Region backfill failed: {e}")
        sys.exit(1)
    finally:
        session.close()

    write_unmatched(unmatched)
    logger.info(f"Processed {processed:,} museums. Region backfill completed.")


if __name__ == "__main__":
    main()
