from typing import Optional
from pydantic import BaseModel, SerializeAsAny
from app.core.errors import ErrorKind
from app.db.schemas.common import CamelModel, EntityBase


class OfficeSelection(CamelModel):
    organization_id: Optional[str] = None
    portfolio_id: Optional[str] = None
    campus_id: Optional[str] = None
    building_id: Optional[str] = None
    floor_id: Optional[str] = None
    display_name: Optional[str] = None


class OfficeResolution(BaseModel):
    valid: bool
    organization: Optional[SerializeAsAny[EntityBase]] = None
    portfolio: Optional[SerializeAsAny[EntityBase]] = None
    campus: Optional[SerializeAsAny[EntityBase]] = None
    building: Optional[SerializeAsAny[EntityBase]] = None
    floor: Optional[SerializeAsAny[EntityBase]] = None
    kind: Optional[ErrorKind] = None
    message: Optional[str] = None
