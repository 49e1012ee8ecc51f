from typing import Optional
from app.db.schemas.common import EntityBase


class OrganizationEntity(EntityBase):
    name: str = ""
    description: Optional[str] = None
    headquarters: Optional[str] = None
    website: Optional[str] = None
    country_code: Optional[str] = None
