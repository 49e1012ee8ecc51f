from enum import Enum
from typing import Dict, NamedTuple, Optional, Type

from app.db.models.enums import (
    CampusType,
    EntityLevel,
    LifecycleStatus,
    OccupancyStatus,
    OwnershipType,
    Region,
)
from app.db.models.organization import Organization
from app.db.models.portfolio import Portfolio
from app.db.models.campus import Campus
from app.db.models.building import Building
from app.db.models.floor import Floor
from app.db.models.seat_zone import SeatZone
from app.db.schemas.common import EntityBase
from app.db.schemas.organization import OrganizationEntity
from app.db.schemas.portfolio import PortfolioEntity
from app.db.schemas.campus import CampusEntity
from app.db.schemas.building import BuildingEntity
from app.db.schemas.floor import FloorEntity
from app.db.schemas.seat_zone import SeatZoneEntity


class LevelSpec(NamedTuple):
    level: EntityLevel
    schema: Type[EntityBase]
    table: type
    parent: Optional[EntityLevel]
    parent_key: Optional[str]
    # campo usado como etiqueta y para búsquedas
    label_field: str
    enum_fields: Dict[str, Type[Enum]]


# Orden de arriba hacia abajo en la jerarquía
LEVEL_ORDER = (
    EntityLevel.organization,
    EntityLevel.portfolio,
    EntityLevel.campus,
    EntityLevel.building,
    EntityLevel.floor,
    EntityLevel.seat_zone,
)

LEVELS: Dict[EntityLevel, LevelSpec] = {
    EntityLevel.organization: LevelSpec(
        EntityLevel.organization, OrganizationEntity, Organization,
        None, None, "name", {},
    ),
    EntityLevel.portfolio: LevelSpec(
        EntityLevel.portfolio, PortfolioEntity, Portfolio,
        EntityLevel.organization, "organization_id", "name",
        {"region": Region},
    ),
    EntityLevel.campus: LevelSpec(
        EntityLevel.campus, CampusEntity, Campus,
        EntityLevel.portfolio, "portfolio_id", "name",
        {"type": CampusType, "status": LifecycleStatus},
    ),
    EntityLevel.building: LevelSpec(
        EntityLevel.building, BuildingEntity, Building,
        EntityLevel.campus, "campus_id", "name",
        {"status": LifecycleStatus, "ownership_type": OwnershipType},
    ),
    EntityLevel.floor: LevelSpec(
        EntityLevel.floor, FloorEntity, Floor,
        EntityLevel.building, "building_id", "floor_number", {},
    ),
    EntityLevel.seat_zone: LevelSpec(
        EntityLevel.seat_zone, SeatZoneEntity, SeatZone,
        EntityLevel.floor, "floor_id", "name",
        {"occupancy_status": OccupancyStatus},
    ),
}


def spec_for(level: EntityLevel) -> LevelSpec:
    return LEVELS[EntityLevel(level)]


def child_level(level: EntityLevel) -> Optional[EntityLevel]:
    idx = LEVEL_ORDER.index(level)
    return LEVEL_ORDER[idx + 1] if idx + 1 < len(LEVEL_ORDER) else None


def parent_id_of(level: EntityLevel, entity: EntityBase) -> Optional[str]:
    key = spec_for(level).parent_key
    return getattr(entity, key) if key else None


def label_of(level: EntityLevel, entity: EntityBase) -> str:
    return getattr(entity, spec_for(level).label_field) or ""
