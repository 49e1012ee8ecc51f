from typing import Optional
from pydantic import Field
from app.db.models.enums import LifecycleStatus, OwnershipType
from app.db.schemas.common import CamelModel, EntityBase


class LeaseDetails(CamelModel):
    start_date: str = ""
    end_date: str = ""
    monthly_rent: float = 0.0
    cam_charges: float = 0.0
    security_deposit: float = 0.0
    currency: str = "USD"


class BuildingEntity(EntityBase):
    campus_id: str = ""
    name: str = ""
    code: Optional[str] = None
    alias_name: Optional[str] = None
    total_area_bua: float = Field(0.0, alias="totalAreaBUA")
    total_area_ra: float = Field(0.0, alias="totalAreaRA")
    total_area_carpet: float = 0.0
    number_of_floors: int = 0
    ownership_type: str = OwnershipType.owned.value
    # presente si y solo si ownership_type == leased
    lease_details: Optional[LeaseDetails] = None
    status: str = LifecycleStatus.active.value
    parking_allocation_2w: int = Field(0, alias="parkingAllocation2W")
    parking_allocation_4w: int = Field(0, alias="parkingAllocation4W")
    parking_allocation_ev: int = Field(0, alias="parkingAllocationEV")
