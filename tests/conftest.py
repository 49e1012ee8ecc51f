"""
Fixtures compartidos. La base apunta a SQLite en memoria antes de importar
cualquier módulo que lea settings.
"""
import os

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENV", "test")

from app.db.session import Base, SessionLocal, engine  # noqa: E402
from app.db.schemas.building import BuildingEntity, LeaseDetails  # noqa: E402
from app.db.schemas.campus import CampusEntity  # noqa: E402
from app.db.schemas.floor import FloorEntity, SeatCounts  # noqa: E402
from app.db.schemas.organization import OrganizationEntity  # noqa: E402
from app.db.schemas.portfolio import PortfolioEntity  # noqa: E402
from app.db.schemas.seat_zone import SeatZoneEntity  # noqa: E402
from app.services.events import EventHub  # noqa: E402
from app.services.store import EntityStore  # noqa: E402
from app.services.tree import build_tree  # noqa: E402


@pytest.fixture()
def db_tables():
    """Tablas limpias para cada test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def events():
    return EventHub()


@pytest.fixture()
def store(db_tables, events):
    return EntityStore(SessionLocal, events=events)


def make_collections():
    org = OrganizationEntity(id="org1", readable_id="ACME", name="Acme", country_code="IN")
    portfolio = PortfolioEntity(id="portfolio1", readable_id="APAC", organization_id="org1", name="APAC", country_code="IN")
    campus = CampusEntity(id="campus1", readable_id="IN-HQ-CAMPUS", portfolio_id="portfolio1", name="HQ Campus")
    building = BuildingEntity(
        id="building1",
        readable_id="IN-HQ-CAMPUS-SB",
        campus_id="campus1",
        name="Tower A",
        code="SB",
        total_area_carpet=1000.0,
        ownership_type="leased",
        lease_details=LeaseDetails(start_date="2023-01-01", end_date="2028-12-31", monthly_rent=100.0),
    )
    floor = FloorEntity(
        id="floor1",
        readable_id="IN-HQ-CAMPUS-SB-F2",
        building_id="building1",
        floor_number="2",
        seat_counts=SeatCounts(fixed_desk=10, hot_desk=5, cafe_seat=3, meeting_room_seat=2),
    )
    zone = SeatZoneEntity(id="zone1", readable_id="IN-HQ-CAMPUS-SB-F2-ZONE-A", floor_id="floor1", name="Zone A")
    return {
        "organizations": [org],
        "portfolios": [portfolio],
        "campuses": [campus],
        "buildings": [building],
        "floors": [floor],
        "seat_zones": [zone],
    }


@pytest.fixture()
def collections():
    return make_collections()


@pytest.fixture()
def tree(collections):
    return build_tree(**collections)


@pytest.fixture()
def seeded_store(store, collections):
    """Store con una rama completa org -> zona."""
    store.insert_batch("organization", collections["organizations"])
    store.insert_batch("portfolio", collections["portfolios"])
    store.insert_batch("campus", collections["campuses"])
    store.insert_batch("building", collections["buildings"])
    store.insert_batch("floor", collections["floors"])
    store.insert_batch("seat_zone", collections["seat_zones"])
    return store
