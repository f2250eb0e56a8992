"""Shared fixtures: in-memory SQLite DB with a small museum/region dataset"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from museum_api.database import Base, get_db
from museum_api.main import app
from museum_api.models import Museum, Region
from museum_api.routes import museums as museums_routes

SEOUL_ID = "11111111-1111-4111-8111-111111111111"
JONGNO_ID = "22222222-2222-4222-8222-222222222222"
YONGSAN_ID = "33333333-3333-4333-8333-333333333333"
BUSAN_ID = "44444444-4444-4444-8444-444444444444"
HAEUNDAE_ID = "55555555-5555-4555-8555-555555555555"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded(db_session):
    db_session.add_all([
        Region(id=SEOUL_ID, name="서울특별시", slug="seoul"),
        Region(id=BUSAN_ID, name="부산광역시", slug="busan"),
    ])
    db_session.flush()
    db_session.add_all([
        Region(id=JONGNO_ID, name="서울특별시 종로구", slug="seoul-jongno", parent_region_id=SEOUL_ID),
        Region(id=YONGSAN_ID, name="서울특별시 용산구", slug="seoul-yongsan", parent_region_id=SEOUL_ID),
        Region(id=HAEUNDAE_ID, name="부산광역시 해운대구", slug="busan-haeundae", parent_region_id=BUSAN_ID),
    ])
    db_session.flush()
    db_session.add_all([
        Museum(
            id=1, facil_name="국립중앙박물관", type="박물관", provider_code="B551",
            address_road="서울특별시 용산구 서빙고로 137", latitude=37.5239, longitude=126.9803,
            phone="02-2077-9000", org_site="https://www.museum.go.kr", region_id=YONGSAN_ID,
            data_update_date="2024-06-30",
        ),
        Museum(
            id=2, facil_name="국립민속박물관", type="박물관",
            address_road="서울특별시 종로구 삼청로 37", latitude=37.5815, longitude=126.9790,
            region_id=JONGNO_ID,
        ),
        Museum(
            id=3, facil_name="서울역사박물관", type="박물관",
            address_road="서울특별시 종로구 새문안로 55", latitude=37.5703, longitude=126.9703,
            region_id=JONGNO_ID,
        ),
        Museum(
            id=4, facil_name="부산시립미술관", type="미술관",
            address_road="부산광역시 해운대구 APEC로 58", latitude=35.1664, longitude=129.1371,
            region_id=HAEUNDAE_ID,
        ),
        Museum(
            id=5, facil_name="수원화성박물관", type="박물관",
            address_road="경기도 수원시 팔달구 창룡대로 21",
        ),
    ])
    db_session.commit()
    return db_session


@pytest.fixture
def client(seeded):
    def override_get_db():
        yield seeded

    museums_routes._cache.clear()
    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        museums_routes._cache.clear()
