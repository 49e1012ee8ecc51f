from typing import Dict, Optional, Tuple
from pydantic import BaseModel, ConfigDict
from app.core.errors import ErrorKind
from app.db.models.enums import EntityLevel
from app.db.schemas.common import EntityBase


class HierarchyNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: EntityLevel
    entity: EntityBase
    children: Tuple["HierarchyNode", ...] = ()


class OrphanWarning(BaseModel):
    kind: ErrorKind = ErrorKind.orphaned_child
    level: EntityLevel
    id: Optional[str] = None
    parent_id: Optional[str] = None
    message: str


class TreeStats(BaseModel):
    counts: Dict[EntityLevel, int]
    total_seats: int
    total_carpet_area: float
    orphans: int
