import logging
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.core.errors import EntityNotFound, HasChildren, ReparentNotSupported, StoreUnavailable
from app.db.models.enums import EntityLevel
from app.db.schemas.common import EntityBase
from app.db.session import SessionLocal
from app.services.events import EntitiesChanged, EventHub, event_hub
from app.services.levels import LEVEL_ORDER, child_level, spec_for

logger = logging.getLogger(__name__)


class EntityStore:
    """
    Fachada CRUD sobre la base relacional para los seis niveles.
    Cada llamada abre y cierra su propia sesión.
    """

    def __init__(self, session_factory: sessionmaker = SessionLocal, events: Optional[EventHub] = None):
        self._session_factory = session_factory
        self._events = events if events is not None else event_hub

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"❌ Error de SQLAlchemy en {action}: {e}")
            raise StoreUnavailable(f"El store no está disponible ({action})") from e
        finally:
            db.close()

    # ------------------------------------------------------------
    # Conversión fila <-> entidad
    # ------------------------------------------------------------

    @staticmethod
    def _to_entity(level: EntityLevel, row) -> EntityBase:
        return spec_for(level).schema.model_validate(row)

    @staticmethod
    def _row_data(level: EntityLevel, entity: EntityBase) -> Dict[str, Any]:
        fields = set(spec_for(level).schema.model_fields)
        return entity.model_dump(include=fields)

    def _publish(self, level: EntityLevel, action: str, ids: Sequence[str]) -> None:
        if ids:
            self._events.publish(EntitiesChanged(level=level, action=action, ids=list(ids)))

    # ------------------------------------------------------------
    # Lectura
    # ------------------------------------------------------------

    def select(self, level: EntityLevel) -> List[EntityBase]:
        level = EntityLevel(level)
        table = spec_for(level).table
        with self._session(f"select {level.value}") as db:
            rows = db.query(table).order_by(table.seq).all()
            return [self._to_entity(level, r) for r in rows]

    def select_all(self) -> Dict[EntityLevel, List[EntityBase]]:
        out: Dict[EntityLevel, List[EntityBase]] = {}
        with self._session("select all") as db:
            for level in LEVEL_ORDER:
                table = spec_for(level).table
                rows = db.query(table).order_by(table.seq).all()
                out[level] = [self._to_entity(level, r) for r in rows]
        return out

    def get(self, level: EntityLevel, entity_id: str) -> Optional[EntityBase]:
        level = EntityLevel(level)
        table = spec_for(level).table
        with self._session(f"get {level.value}") as db:
            row = db.query(table).filter(table.id == entity_id).first()
            return self._to_entity(level, row) if row else None

    @staticmethod
    def _child_count(db: Session, level: EntityLevel, entity_id: str) -> int:
        child = child_level(level)
        if child is None:
            return 0
        child_spec = spec_for(child)
        return (
            db.query(child_spec.table)
            .filter(getattr(child_spec.table, child_spec.parent_key) == entity_id)
            .count()
        )

    def count_children(self, level: EntityLevel, entity_id: str) -> int:
        level = EntityLevel(level)
        with self._session(f"count children {level.value}") as db:
            return self._child_count(db, level, entity_id)

    # ------------------------------------------------------------
    # Escritura
    # ------------------------------------------------------------

    def insert_batch(self, level: EntityLevel, entities: Sequence[EntityBase]) -> List[EntityBase]:
        """Inserta el lote en una sola transacción; si falla, no se guarda nada."""
        level = EntityLevel(level)
        table = spec_for(level).table
        rows = []
        for entity in entities:
            data = self._row_data(level, entity)
            data["id"] = data.get("id") or str(uuid.uuid4())
            rows.append(table(**data))

        with self._session(f"insert {level.value}") as db:
            db.add_all(rows)
            db.commit()
            inserted = [self._to_entity(level, r) for r in rows]

        logger.info(f"✅ {len(inserted)} registros insertados en {level.value}")
        self._publish(level, "created", [e.id for e in inserted])
        return inserted

    def update(self, level: EntityLevel, entity_id: str, patch: Mapping[str, Any]) -> EntityBase:
        """Aplica un patch (nombres de campo Python). No se permite mover la entidad de padre."""
        level = EntityLevel(level)
        spec = spec_for(level)
        if "id" in patch and patch["id"] != entity_id:
            raise ReparentNotSupported("El id de una entidad no se puede cambiar")

        with self._session(f"update {level.value}") as db:
            row = db.query(spec.table).filter(spec.table.id == entity_id).first()
            if row is None:
                raise EntityNotFound(f"No existe {level.value} con id '{entity_id}'")
            current = self._to_entity(level, row)
            if spec.parent_key and spec.parent_key in patch and patch[spec.parent_key] != getattr(current, spec.parent_key):
                raise ReparentNotSupported(f"Mover un {level.value} a otro padre no está soportado")

            merged = spec.schema.model_validate({**current.model_dump(), **patch, "id": entity_id})
            for key, value in self._row_data(level, merged).items():
                setattr(row, key, value)
            db.commit()
            updated = self._to_entity(level, row)

        self._publish(level, "updated", [entity_id])
        return updated

    def delete(self, level: EntityLevel, entity_id: str) -> None:
        """Rechaza el borrado si la entidad todavía tiene hijos (no hay cascada)."""
        level = EntityLevel(level)
        spec = spec_for(level)

        with self._session(f"delete {level.value}") as db:
            row = db.query(spec.table).filter(spec.table.id == entity_id).first()
            if row is None:
                raise EntityNotFound(f"No existe {level.value} con id '{entity_id}'")
            children = self._child_count(db, level, entity_id)
            if children:
                raise HasChildren(
                    f"{level.value} '{entity_id}' tiene {children} {child_level(level).value} asociados"
                )
            db.delete(row)
            db.commit()

        logger.info(f"🧹 {level.value} {entity_id} eliminado")
        self._publish(level, "deleted", [entity_id])
