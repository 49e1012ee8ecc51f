from typing import List, Optional
from pydantic import BaseModel, SerializeAsAny
from app.core.errors import ErrorKind
from app.db.models.enums import EntityLevel
from app.db.schemas.common import EntityBase


class ImportFailure(BaseModel):
    # índice 1-based de la fila de datos (sin contar el encabezado)
    row: int
    kind: ErrorKind
    field: Optional[str] = None
    message: str


class ImportReport(BaseModel):
    level: EntityLevel
    total: int
    succeeded: List[SerializeAsAny[EntityBase]] = []
    failed: List[ImportFailure] = []
