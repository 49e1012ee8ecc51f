from app.db.models.enums import OccupancyStatus
from app.db.schemas.common import EntityBase


class SeatZoneEntity(EntityBase):
    floor_id: str = ""
    name: str = ""
    occupancy_status: str = OccupancyStatus.free.value
