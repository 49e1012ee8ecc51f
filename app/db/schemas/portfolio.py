from typing import Optional
from app.db.schemas.common import EntityBase


class PortfolioEntity(EntityBase):
    organization_id: str = ""
    name: str = ""
    description: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = None
