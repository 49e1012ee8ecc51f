from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional


class CamelModel(BaseModel):
    """Modelo base: campos snake_case en Python, columnas/JSON en camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class EntityBase(CamelModel):
    # clave opaca del store (uuid) y el identificador legible generado
    id: Optional[str] = None
    readable_id: Optional[str] = None
