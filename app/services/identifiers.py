import re
from typing import Optional

from app.db.models.enums import EntityLevel
from app.db.schemas.common import EntityBase

FALLBACK_PREFIX = "XX"

_NON_ALNUM = re.compile(r"[^A-Z0-9]+")


def token(text: Optional[str]) -> str:
    """'HQ Campus' -> 'HQ-CAMPUS'"""
    cleaned = _NON_ALNUM.sub("-", (text or "").upper()).strip("-")
    return cleaned or "X"


def _parent_prefix(parent: Optional[EntityBase]) -> str:
    if parent is not None and parent.readable_id:
        return parent.readable_id
    return FALLBACK_PREFIX


def generate_readable_id(level: EntityLevel, entity: EntityBase, parent: Optional[EntityBase] = None) -> str:
    """
    Genera el ID legible de una entidad. Si la fila ya declara uno, se respeta.

    - organización / portafolio: nombre normalizado
    - campus: código de país del portafolio + nombre (IN-HQ-CAMPUS)
    - edificio: ID del campus + código del edificio (IN-HQ-CAMPUS-SB)
    - piso: ID del edificio + F + número de piso (IN-HQ-CAMPUS-SB-F2)
    - zona: ID del piso + nombre
    """
    if entity.readable_id:
        return entity.readable_id

    level = EntityLevel(level)
    if level in (EntityLevel.organization, EntityLevel.portfolio):
        return token(entity.name)
    if level == EntityLevel.campus:
        country = getattr(parent, "country_code", None) or FALLBACK_PREFIX
        return f"{token(country)}-{token(entity.name)}"
    if level == EntityLevel.building:
        return f"{_parent_prefix(parent)}-{token(entity.code or entity.name)}"
    if level == EntityLevel.floor:
        return f"{_parent_prefix(parent)}-F{token(entity.floor_number)}"
    return f"{_parent_prefix(parent)}-{token(entity.name)}"
