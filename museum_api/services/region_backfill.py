"""Region backfill: assign region ids to museums by parsing their addresses.

The first address token is taken as the province (parent region) and the
first two tokens as the city/district (child region), e.g.
"서울특별시 종로구 ..." -> parent "서울특별시", child "서울특별시 종로구".
"""
import logging
import re
from typing import Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Museum, Region

logger = logging.getLogger(__name__)

PAGE_SIZE = 500


def slugify(value: str) -> str:
    value = re.sub(r"\s+", "-", value.strip().lower())
    value = re.sub(r"[^\w-]|_", "", value)
    value = re.sub(r"-+", "-", value)
    return value.strip("-")


def tokenize(address: Optional[str]) -> List[str]:
    if not address:
        return []
    return address.split()


def extract_region_details(
    address_road: Optional[str], address_jb: Optional[str]
) -> Optional[Dict[str, Optional[Dict[str, str]]]]:
    """Return {"parent": {name, slug}, "child": {name, slug} | None}, or None"""
    raw = (address_road or address_jb or "").strip()
    tokens = tokenize(raw)
    if not tokens:
        return None

    parent_name = tokens[0]
    parent = {"name": parent_name, "slug": slugify(parent_name)}
    if len(tokens) < 2:
        return {"parent": parent, "child": None}

    child_name = f"{parent_name} {tokens[1]}"
    return {"parent": parent, "child": {"name": child_name, "slug": slugify(child_name)}}


class RegionBackfill:
    """Creates missing regions on demand (cached by slug) and links museums to them"""

    def __init__(self, session: Session):
        self.session = session
        self.slug_cache: Dict[str, Region] = {}
        self.unmatched: List[Dict[str, Optional[str]]] = []
        self.processed = 0

    def ensure_region(self, name: str, slug: str, parent_id: Optional[str] = None) -> Optional[Region]:
        if not name or not slug:
            return None

        region = self.slug_cache.get(slug)
        if region is None:
            region = self.session.query(Region).filter(Region.slug == slug).first()
        if region is None:
            region = Region(name=name, slug=slug, parent_region_id=parent_id)
            self.session.add(region)
            self.session.flush()
        elif parent_id and parent_id != region.id and region.parent_region_id != parent_id:
            region.parent_region_id = parent_id

        self.slug_cache[slug] = region
        return region

    def _mark_unmatched(self, museum: Museum):
        self.unmatched.append({
            "museum": museum.facil_name,
            "address": museum.address_road or museum.address_jb,
        })

    def assign(self, museum: Museum):
        details = extract_region_details(museum.address_road, museum.address_jb)
        if not details:
            self._mark_unmatched(museum)
            return

        parent = self.ensure_region(**details["parent"])
        if parent is None:
            self._mark_unmatched(museum)
            return

        target = parent
        if details["child"]:
            child = self.ensure_region(parent_id=parent.id, **details["child"])
            if child is None:
                self._mark_unmatched(museum)
                return
            target = child

        museum.region_id = target.id

    def _assign_or_skip(self, museum: Museum):
        """Assign inside a savepoint; a failing row is logged and left unmatched"""
        try:
            with self.session.begin_nested():
                self.assign(museum)
        except SQLAlchemyError as e:
            logger.warning(f"Failed to assign region to {museum.facil_name}: {e}")
            # regions created in the rolled-back savepoint are gone
            self.slug_cache.clear()
            self._mark_unmatched(museum)

    def run(self, page_size: int = PAGE_SIZE) -> Tuple[int, List[Dict[str, Optional[str]]]]:
        """Process every museum; returns (processed_count, unmatched)"""
        last_id = 0
        while True:
            batch = (
                self.session.query(Museum)
                .filter(Museum.id > last_id)
                .order_by(Museum.id)
                .limit(page_size)
                .all()
            )
            if not batch:
                break

            for museum in batch:
                if not museum.region_id:
                    self._assign_or_skip(museum)
                self.processed += 1
            self.session.commit()
            logger.info(f"Backfill: processed {self.processed:,} museums")

            last_id = batch[-1].id
            if len(batch) < page_size:
                break

        return self.processed, self.unmatched


def backfill_regions(session: Session, page_size: int = PAGE_SIZE) -> Tuple[int, List[Dict[str, Optional[str]]]]:
    return RegionBackfill(session).run(page_size)
