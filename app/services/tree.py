import asyncio
import logging
from collections import defaultdict
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from app.core.errors import ErrorKind
from app.db.models.enums import EntityLevel
from app.db.schemas.common import EntityBase
from app.db.schemas.hierarchy import HierarchyNode, OrphanWarning, TreeStats
from app.services.levels import LEVEL_ORDER, child_level, label_of, parent_id_of, spec_for

logger = logging.getLogger(__name__)


class HierarchyTree:
    """
    Snapshot inmutable de la jerarquía completa.
    Para refrescarlo se vuelve a leer el store y se reconstruye.
    """

    def __init__(self, roots: Tuple[HierarchyNode, ...], warnings: Tuple[OrphanWarning, ...] = ()):
        self._roots = tuple(roots)
        self._warnings = tuple(warnings)
        self._index: Dict[Tuple[EntityLevel, str], HierarchyNode] = {}
        for node in self.iter_nodes():
            self._index.setdefault((node.level, node.entity.id), node)

    @property
    def roots(self) -> Tuple[HierarchyNode, ...]:
        return self._roots

    @property
    def warnings(self) -> Tuple[OrphanWarning, ...]:
        return self._warnings

    def iter_nodes(self) -> Iterator[HierarchyNode]:
        stack = list(reversed(self._roots))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find(self, level: EntityLevel, entity_id: Optional[str]) -> Optional[HierarchyNode]:
        if not entity_id:
            return None
        return self._index.get((EntityLevel(level), entity_id))

    def children_of(self, level: EntityLevel, parent_id: Optional[str]) -> Tuple[HierarchyNode, ...]:
        """Hijos directos, del nivel `level`, del padre `parent_id`."""
        spec = spec_for(level)
        if spec.parent is None:
            return self._roots
        parent = self.find(spec.parent, parent_id)
        return parent.children if parent else ()

    def to_payload(self) -> Dict[str, Any]:
        return {
            "organizations": [_node_payload(n) for n in self._roots],
            "warnings": [w.model_dump(mode="json") for w in self._warnings],
        }


def _node_payload(node: HierarchyNode) -> Dict[str, Any]:
    data = node.entity.model_dump(mode="json", by_alias=True)
    data["level"] = node.level.value
    data["children"] = [_node_payload(c) for c in node.children]
    return data


# ============================================================
# Construcción del árbol
# ============================================================

def build_tree(
    organizations: Sequence[EntityBase],
    portfolios: Sequence[EntityBase],
    campuses: Sequence[EntityBase],
    buildings: Sequence[EntityBase],
    floors: Sequence[EntityBase],
    seat_zones: Sequence[EntityBase],
) -> HierarchyTree:
    """
    Une las seis colecciones planas en un bosque de organizaciones.

    Los hijos se agrupan por id del padre (orden de entrada preservado).
    Los huérfanos y los ids repetidos dentro de un nivel quedan fuera del
    árbol y se reportan como advertencias.
    """
    warnings: List[OrphanWarning] = []
    collections: Dict[EntityLevel, List[EntityBase]] = {}
    raw = (organizations, portfolios, campuses, buildings, floors, seat_zones)
    for level, entities in zip(LEVEL_ORDER, raw):
        seen = set()
        kept: List[EntityBase] = []
        for entity in entities:
            if entity.id and entity.id in seen:
                warnings.append(OrphanWarning(
                    kind=ErrorKind.duplicate_identifier,
                    level=level,
                    id=entity.id,
                    parent_id=parent_id_of(level, entity),
                    message=f"{level.value} {entity.id}: id repetido, se conserva el primero",
                ))
                continue
            seen.add(entity.id)
            kept.append(entity)
        collections[level] = kept

    grouped: Dict[EntityLevel, Dict[str, List[EntityBase]]] = {}
    for level in LEVEL_ORDER[1:]:
        groups: Dict[str, List[EntityBase]] = defaultdict(list)
        for entity in collections[level]:
            groups[parent_id_of(level, entity)].append(entity)
        grouped[level] = groups

    def make(level: EntityLevel, entity: EntityBase) -> HierarchyNode:
        child = child_level(level)
        children: Tuple[HierarchyNode, ...] = ()
        if child is not None:
            children = tuple(make(child, e) for e in grouped[child].get(entity.id, ()))
        return HierarchyNode(level=level, entity=entity, children=children)

    roots = tuple(make(EntityLevel.organization, o) for o in collections[EntityLevel.organization])
    tree = HierarchyTree(roots)

    for level in LEVEL_ORDER[1:]:
        parent_level = spec_for(level).parent
        parent_ids = {p.id for p in collections[parent_level]}
        for entity in collections[level]:
            if tree.find(level, entity.id) is not None:
                continue
            parent_id = parent_id_of(level, entity)
            if parent_id in parent_ids:
                message = f"{level.value} {entity.id}: su {parent_level.value} {parent_id} está fuera del árbol"
            else:
                message = f"{level.value} {entity.id}: {parent_level.value} {parent_id} no existe"
            warnings.append(OrphanWarning(level=level, id=entity.id, parent_id=parent_id, message=message))

    if warnings:
        logger.warning(f"⚠️ {len(warnings)} entidades excluidas del árbol (huérfanas o repetidas)")
    return HierarchyTree(roots, tuple(warnings))


async def fetch_tree(store) -> HierarchyTree:
    """Lee los seis niveles del store (única llamada que sale del proceso) y arma el árbol."""
    collections = await asyncio.to_thread(store.select_all)
    return build_tree(*(collections[level] for level in LEVEL_ORDER))


# ============================================================
# Búsqueda y estadísticas
# ============================================================

def search(tree: HierarchyTree, query: str, level: Optional[EntityLevel] = None) -> List[HierarchyNode]:
    q = query.strip().lower()
    levels = [EntityLevel(level)] if level else list(LEVEL_ORDER)
    nodes = list(tree.iter_nodes())
    return [
        node
        for lvl in levels
        for node in nodes
        if node.level == lvl and q in label_of(lvl, node.entity).lower()
    ]


def summarize(tree: HierarchyTree) -> TreeStats:
    counts = {level: 0 for level in LEVEL_ORDER}
    total_seats = 0
    carpet = 0.0
    for node in tree.iter_nodes():
        counts[node.level] += 1
        if node.level == EntityLevel.floor:
            total_seats += node.entity.total_seats
        elif node.level == EntityLevel.building:
            carpet += node.entity.total_area_carpet
    return TreeStats(counts=counts, total_seats=total_seats, total_carpet_area=carpet, orphans=len(tree.warnings))
