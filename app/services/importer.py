import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from app.core.config import settings
from app.core.errors import DecodeError, ErrorKind, ImportTooLarge, StoreUnavailable
from app.db.models.enums import EntityLevel
from app.db.schemas.building import BuildingEntity, LeaseDetails
from app.db.schemas.campus import CampusEntity, GreenInfrastructure
from app.db.schemas.common import EntityBase
from app.db.schemas.floor import FloorEntity, SeatCounts
from app.db.schemas.import_report import ImportFailure, ImportReport
from app.db.schemas.organization import OrganizationEntity
from app.db.schemas.portfolio import PortfolioEntity
from app.db.schemas.seat_zone import SeatZoneEntity
from app.services.codec import decode, encode, read_csv, write_csv
from app.services.identifiers import generate_readable_id
from app.services.levels import parent_id_of, spec_for
from app.services.store import EntityStore
from app.services.tree import HierarchyTree, fetch_tree
from app.services.validator import validate_create

logger = logging.getLogger(__name__)


class BulkImporter:
    """
    Importa muchas filas de un mismo nivel.

    Cada fila se decodifica y valida contra el snapshot tomado al inicio
    del lote; las válidas se escriben juntas en un único insert. Una fila
    inválida nunca aborta el lote.
    """

    def __init__(self, store: EntityStore, max_rows: Optional[int] = None):
        self._store = store
        self.max_rows = max_rows if max_rows is not None else settings.IMPORT_MAX_ROWS

    async def run(
        self,
        level: EntityLevel,
        rows: Sequence[Mapping[Any, Any]],
        tree: Optional[HierarchyTree] = None,
    ) -> ImportReport:
        level = EntityLevel(level)
        spec = spec_for(level)
        if len(rows) > self.max_rows:
            raise ImportTooLarge(f"El lote tiene {len(rows)} filas; máximo {self.max_rows}")
        logger.info(f"Importando {len(rows)} filas de {level.value}...")

        try:
            snapshot = tree if tree is not None else await fetch_tree(self._store)

            staged: List[EntityBase] = []
            staged_rows: List[int] = []
            failures: List[ImportFailure] = []

            for index, row in enumerate(rows, start=1):
                try:
                    candidate = decode(row, level)
                except DecodeError as e:
                    failures.append(ImportFailure(row=index, kind=e.kind, field=e.field, message=e.message))
                    logger.warning(f"⚠️ Fila {index} de {level.value} rechazada: {e.message}")
                    continue

                parent = None
                if spec.parent is not None:
                    parent_node = snapshot.find(spec.parent, parent_id_of(level, candidate))
                    parent = parent_node.entity if parent_node else None
                candidate = candidate.model_copy(
                    update={"readable_id": generate_readable_id(level, candidate, parent)}
                )

                failure = validate_create(level, candidate, snapshot, staged)
                if failure is not None:
                    failures.append(ImportFailure(row=index, **failure.model_dump()))
                    logger.warning(f"⚠️ Fila {index} de {level.value} rechazada: {failure.kind.value} ({failure.message})")
                    continue

                staged.append(candidate)
                staged_rows.append(index)

            if not staged:
                return ImportReport(level=level, total=len(rows), failed=failures)

            try:
                inserted = await asyncio.to_thread(self._store.insert_batch, level, staged)
            except StoreUnavailable as e:
                failures.extend(
                    ImportFailure(row=i, kind=ErrorKind.store_unavailable, message=e.message)
                    for i in staged_rows
                )
                failures.sort(key=lambda f: f.row)
                logger.error(f"❌ Lote de {level.value} rechazado por el store: {e.message}")
                return ImportReport(level=level, total=len(rows), failed=failures)

        except asyncio.CancelledError:
            logger.warning(f"⚠️ Importación de {level.value} cancelada; filas preparadas descartadas")
            raise

        logger.info(f"✅ Importación de {level.value}: {len(inserted)} ok, {len(failures)} con error")
        return ImportReport(level=level, total=len(rows), succeeded=inserted, failed=failures)

    async def import_csv(self, level: EntityLevel, text: str, tree: Optional[HierarchyTree] = None) -> ImportReport:
        return await self.run(level, read_csv(text), tree)


# ============================================================
# Plantillas de importación
# ============================================================

_TEMPLATE_SAMPLES: Dict[EntityLevel, EntityBase] = {
    EntityLevel.organization: OrganizationEntity(
        name="Sample Organization",
        description="Sample description",
        headquarters="Bangalore",
        website="https://example.com",
        country_code="IN",
    ),
    EntityLevel.portfolio: PortfolioEntity(
        organization_id="1",
        name="Sample Portfolio",
        region="APAC",
        country="India",
        country_code="IN",
    ),
    EntityLevel.campus: CampusEntity(
        portfolio_id="1",
        name="Sample Campus",
        city="Bangalore",
        address="Sample Address",
        gps_coordinates="12.8456, 77.6632",
        type="traditional_office",
        status="active",
        total_parking_slots_2w=100,
        total_parking_slots_4w=50,
        total_parking_ev_slots=10,
        amenities=["cafeteria", "gym", "medical_room"],
        green_infrastructure=GreenInfrastructure(
            has_solar=True,
            has_rainwater_harvesting=True,
            has_stp=False,
            green_area_percentage=25.0,
        ),
        bcp_dr_available=True,
    ),
    EntityLevel.building: BuildingEntity(
        campus_id="1",
        name="Sample Building",
        code="SB",
        alias_name="Main Building",
        total_area_bua=100000.0,
        total_area_ra=90000.0,
        total_area_carpet=80000.0,
        number_of_floors=10,
        ownership_type="leased",
        lease_details=LeaseDetails(
            start_date="2023-01-01",
            end_date="2028-12-31",
            monthly_rent=100000.0,
            cam_charges=10000.0,
            security_deposit=500000.0,
            currency="USD",
        ),
        status="active",
        parking_allocation_2w=50,
        parking_allocation_4w=30,
        parking_allocation_ev=5,
    ),
    EntityLevel.floor: FloorEntity(
        building_id="1",
        floor_number="1",
        floor_area=10000.0,
        seat_counts=SeatCounts(fixed_desk=80, hot_desk=20, cafe_seat=15, meeting_room_seat=24),
        parking_allocation_2w=5,
        parking_allocation_4w=3,
        parking_allocation_ev=1,
        amenities=["meeting_rooms", "break_area", "printer_station"],
    ),
    EntityLevel.seat_zone: SeatZoneEntity(
        floor_id="1",
        name="Zone A",
        occupancy_status="free",
    ),
}


def template(level: EntityLevel) -> Dict[str, str]:
    """Fila de ejemplo con todas las columnas canónicas del nivel."""
    return encode(_TEMPLATE_SAMPLES[EntityLevel(level)])


def template_csv(level: EntityLevel) -> str:
    return write_csv(level, [_TEMPLATE_SAMPLES[EntityLevel(level)]])
