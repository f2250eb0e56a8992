"""Application settings"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).parent.parent

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"sqlite:///{BASE_DIR / 'data' / 'museums.db'}"
)

API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Nearby search
NEARBY_DEFAULT_RADIUS_KM = float(os.getenv("NEARBY_DEFAULT_RADIUS_KM", "25"))
NEARBY_MAX_RADIUS_KM = float(os.getenv("NEARBY_MAX_RADIUS_KM", "100"))
NEARBY_DEFAULT_LIMIT = int(os.getenv("NEARBY_DEFAULT_LIMIT", "25"))
NEARBY_MAX_LIMIT = int(os.getenv("NEARBY_MAX_LIMIT", "100"))
NEARBY_FALLBACK_LIMIT = int(os.getenv("NEARBY_FALLBACK_LIMIT", "500"))

LIST_DEFAULT_PAGE_SIZE = int(os.getenv("LIST_DEFAULT_PAGE_SIZE", "50"))
LIST_MAX_PAGE_SIZE = int(os.getenv("LIST_MAX_PAGE_SIZE", "100"))
LIST_MAX_PAGE = int(os.getenv("LIST_MAX_PAGE", "100000"))
REGIONS_CACHE_TTL = int(os.getenv("REGIONS_CACHE_TTL", "300"))
