#!/usr/bin/env python3
"""Import the public museum/gallery CSV into the DB"""

import csv
import sys
from pathlib import Path

# Add project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from museum_api.database import SessionLocal, init_db
from museum_api.models import Museum

RAW_DIR = Path(__file__).parent.parent / "data" / "raw"
DEFAULT_FILE = RAW_DIR / "museums.csv"

# Standard-data headers -> museums columns (column names are accepted as-is too)
HEADER_MAP = {
    "시설명": "facil_name",
    "박물관미술관구분": "type",
    "소재지도로명주소": "address_road",
    "소재지지번주소": "address_jb",
    "위도": "latitude",
    "경도": "longitude",
    "운영기관전화번호": "phone",
    "운영기관명": "org_name",
    "운영홈페이지": "org_site",
    "교통안내정보": "transportation",
    "박물관미술관소개": "facil_intro",
    "관리기관전화번호": "admin_org_phone",
    "관리기관명": "admin_org",
    "데이터기준일자": "data_update_date",
    "제공기관코드": "provider_code",
}
COLUMNS = {c.name for c in Museum.__table__.columns} - {"id", "region_id"}
BATCH_SIZE = 2000


def safe_float(v):
    if not v or v.strip() == "":
        return None
    try:
        f = float(v)
        return f if f != 0.0 else None  # 0.0 means "not registered"
    except ValueError:
        return None


def to_record(row):
    """CSV row (dict) -> museums column dict; None if it has no name"""
    record = {}
    for header, value in row.items():
        column = HEADER_MAP.get((header or "").strip(), (header or "").strip())
        if column in COLUMNS:
            record[column] = (value or "").strip() or None
    if not record.get("facil_name"):
        return None
    record["latitude"] = safe_float(record.get("latitude"))
    record["longitude"] = safe_float(record.get("longitude"))
    return record


def import_file(session, filepath):
    count = 0
    with open(filepath, encoding="utf-8-sig") as f:
        for row in csv.DictReader(f):
            record = to_record(row)
            if record is None:
                continue
            session.add(Museum(**record))
            count += 1
            if count % BATCH_SIZE == 0:
                session.commit()
                print(f"   {count:,}...")
    session.commit()
    return count


def main():
    filepath = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_FILE
    if not filepath.exists():
        print(f"⚠️ {filepath} not found")
        sys.exit(1)

    print("🗄️  Creating tables...")
    init_db()

    session = SessionLocal()
    try:
        print(f"🏛️  Museums from {filepath.name}...")
        n = import_file(session, filepath)
        print(f"   ✅ {n:,} rows")
        print("\n🎉 Import complete!")
    finally:
        session.close()


if __name__ == "__main__":
    main()
