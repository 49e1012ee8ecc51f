from typing import List, Optional
from pydantic import Field
from app.db.models.enums import CampusType, LifecycleStatus
from app.db.schemas.common import CamelModel, EntityBase


class GreenInfrastructure(CamelModel):
    has_solar: bool = False
    has_rainwater_harvesting: bool = False
    has_stp: bool = Field(False, alias="hasSTP")
    green_area_percentage: float = 0.0


class CampusEntity(EntityBase):
    portfolio_id: str = ""
    name: str = ""
    city: Optional[str] = None
    address: Optional[str] = None
    gps_coordinates: Optional[str] = None
    # se guardan como texto; el validador revisa la enumeración
    type: str = CampusType.traditional_office.value
    status: str = LifecycleStatus.active.value
    total_parking_slots_2w: int = Field(0, alias="totalParkingSlots2W")
    total_parking_slots_4w: int = Field(0, alias="totalParkingSlots4W")
    total_parking_ev_slots: int = Field(0, alias="totalParkingEVSlots")
    amenities: List[str] = Field(default_factory=list)
    green_infrastructure: GreenInfrastructure = Field(default_factory=GreenInfrastructure)
    bcp_dr_available: bool = False
