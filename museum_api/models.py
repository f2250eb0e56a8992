"""SQLAlchemy models"""
import uuid
from sqlalchemy import Column, String, Text, Integer, Float, ForeignKey, Index
from sqlalchemy.orm import relationship
from .database import Base


def _new_uuid() -> str:
    return str(uuid.uuid4())


class Region(Base):
    """Region (province -> city/district)"""
    __tablename__ = "regions"

    id = Column(String(36), primary_key=True, default=_new_uuid)
    name = Column(Text, nullable=False)
    slug = Column(String(200), nullable=False, unique=True, index=True)
    parent_region_id = Column(String(36), ForeignKey("regions.id"), index=True)

    parent = relationship("Region", remote_side=[id], back_populates="children")
    children = relationship("Region", back_populates="parent")
    museums = relationship("Museum", back_populates="region")


class Museum(Base):
    """Museum / gallery record, columns follow the public dataset"""
    __tablename__ = "museums"

    id = Column(Integer, primary_key=True, autoincrement=True)
    facil_name = Column(Text, nullable=False, index=True)
    address_road = Column(Text)   # road-name address
    address_jb = Column(Text)     # lot-number address
    latitude = Column(Float)
    longitude = Column(Float)
    type = Column(String(20))     # museum / gallery
    provider_code = Column(String(20))
    phone = Column(String(50))
    org_name = Column(Text)
    org_site = Column(Text)
    transportation = Column(Text)
    facil_intro = Column(Text)
    admin_org_phone = Column(String(50))
    admin_org = Column(Text)
    data_update_date = Column(String(10))
    region_id = Column(String(36), ForeignKey("regions.id"), index=True)

    region = relationship("Region", back_populates="museums")

    __table_args__ = (
        Index("idx_museums_latlng", "latitude", "longitude"),
    )
