"""
Contexto de "oficina actual": la ruta org/portafolio/campus/edificio/piso
elegida por el usuario. Se guarda del lado del cliente y se vuelve a
validar contra el árbol vivo en cada carga, porque los padres pueden
haberse borrado desde que se eligió.
"""
import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from app.core.errors import ErrorKind
from app.db.models.enums import EntityLevel
from app.db.schemas.office import OfficeResolution, OfficeSelection
from app.services.tree import HierarchyTree

logger = logging.getLogger(__name__)

STORAGE_KEY = "selectedOffice"
STALE_MESSAGE = "please re-select your office"

# (nivel, campo de la selección, campo del resultado)
_PATH = (
    (EntityLevel.organization, "organization_id", "organization"),
    (EntityLevel.portfolio, "portfolio_id", "portfolio"),
    (EntityLevel.campus, "campus_id", "campus"),
    (EntityLevel.building, "building_id", "building"),
    (EntityLevel.floor, "floor_id", "floor"),
)


class ContextState(str, Enum):
    unset = "Unset"
    set = "Set"


class OfficeContextStore:
    """Almacenamiento local (archivo JSON con una sola clave) de la selección."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning(f"⚠️ No se pudo leer la selección de oficina guardada: {e}")
            return {}
        return raw if isinstance(raw, dict) else {}

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def load(self) -> Optional[OfficeSelection]:
        """None si no hay selección o si lo guardado está corrupto."""
        value = self._read().get(STORAGE_KEY)
        if value is None:
            return None
        try:
            return OfficeSelection.model_validate(value)
        except ValidationError as e:
            logger.warning(f"⚠️ Selección de oficina inválida, se ignora: {e.error_count()} errores")
            return None

    def persist(self, selection: OfficeSelection) -> None:
        data = self._read()
        data[STORAGE_KEY] = selection.model_dump(mode="json", by_alias=True)
        self._write(data)
        logger.info(f"Oficina seleccionada: {selection.display_name or selection.building_id}")

    def clear(self) -> None:
        data = self._read()
        if data.pop(STORAGE_KEY, None) is not None:
            self._write(data)
            logger.info("🧹 Selección de oficina eliminada")

    @property
    def state(self) -> ContextState:
        return ContextState.set if self.load() is not None else ContextState.unset


def resolve(selection: Optional[OfficeSelection], tree: HierarchyTree) -> OfficeResolution:
    """
    Recorre la ruta de arriba hacia abajo. Se detiene en el primer id que no
    aparece entre los hijos del nodo actual y devuelve valid=False con el
    prefijo que sí resolvió. No lanza excepciones ni toca lo persistido.
    """
    if selection is None:
        return OfficeResolution(valid=False, kind=ErrorKind.stale_path, message=STALE_MESSAGE)

    resolved: Dict[str, Any] = {}
    children = tree.roots
    for level, selection_field, result_field in _PATH:
        wanted = getattr(selection, selection_field)
        if level == EntityLevel.floor and not wanted:
            break  # el piso es opcional
        node = next((n for n in children if n.entity.id == wanted), None) if wanted else None
        if node is None:
            logger.info(f"Ruta de oficina desactualizada en {level.value} ({wanted})")
            return OfficeResolution(valid=False, kind=ErrorKind.stale_path, message=STALE_MESSAGE, **resolved)
        resolved[result_field] = node.entity
        children = node.children
    return OfficeResolution(valid=True, **resolved)


def display_label(resolution: OfficeResolution) -> str:
    """'Org > Campus > Edificio' como en el selector de oficinas."""
    parts = [e.name for e in (resolution.organization, resolution.campus, resolution.building) if e is not None]
    if resolution.floor is not None:
        parts.append(f"Floor {resolution.floor.floor_number}")
    return " > ".join(parts)
