from typing import List
from pydantic import Field, computed_field
from app.db.schemas.common import CamelModel, EntityBase


class SeatCounts(CamelModel):
    fixed_desk: int = 0
    hot_desk: int = 0
    cafe_seat: int = 0
    meeting_room_seat: int = 0


class FloorEntity(EntityBase):
    building_id: str = ""
    # token libre: "G", "B1", "2", ...
    floor_number: str = ""
    floor_area: float = 0.0
    seat_counts: SeatCounts = Field(default_factory=SeatCounts)
    parking_allocation_2w: int = Field(0, alias="parkingAllocation2W")
    parking_allocation_4w: int = Field(0, alias="parkingAllocation4W")
    parking_allocation_ev: int = Field(0, alias="parkingAllocationEV")
    amenities: List[str] = Field(default_factory=list)

    @computed_field
    @property
    def total_seats(self) -> int:
        c = self.seat_counts
        return c.fixed_desk + c.hot_desk + c.cafe_seat + c.meeting_room_seat
