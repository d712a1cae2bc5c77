#!/usr/bin/env python3
"""
Report blobs without a photo record and photo records without a blob.
Nothing is deleted; use the output for manual cleanup.

Usage:
    python -m scripts.find_orphans [--prefix PREFIX]
"""
import argparse

from app.config import settings
from app.database import SessionLocal
from app.services.storage_service import build_object_store
from app.services.reconciliation_service import find_orphans


def main():
    parser = argparse.ArgumentParser(description="Find storage/metadata inconsistencies")
    parser.add_argument("--prefix", default="", help="Only check keys with this prefix")
    args = parser.parse_args()

    storage = build_object_store(settings)
    db = SessionLocal()
    try:
        report = find_orphans(db, storage, prefix=args.prefix)
    finally:
        db.close()

    print(f"Orphan blobs ({len(report.orphan_blobs)}):")
    for name in report.orphan_blobs:
        print(f"  {name}")
    print(f"Orphan records ({len(report.orphan_records)}):")
    for photo_id in report.orphan_records:
        print(f"  {photo_id}")


if __name__ == "__main__":
    main()
