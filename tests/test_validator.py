from app.core.errors import ErrorKind
from app.db.models.enums import EntityLevel
from app.db.schemas.building import BuildingEntity, LeaseDetails
from app.db.schemas.campus import CampusEntity
from app.db.schemas.floor import FloorEntity
from app.db.schemas.organization import OrganizationEntity
from app.db.schemas.portfolio import PortfolioEntity
from app.services.tree import build_tree
from app.services.validator import validate_create, validate_update


def test_valid_campus_passes(tree):
    campus = CampusEntity(portfolio_id="portfolio1", name="North Campus", readable_id="IN-NORTH-CAMPUS")
    assert validate_create(EntityLevel.campus, campus, tree) is None


def test_missing_name(tree):
    failure = validate_create(EntityLevel.organization, OrganizationEntity(name="  "), tree)
    assert failure.kind == ErrorKind.missing_field
    assert failure.field == "name"


def test_missing_parent_reference(tree):
    failure = validate_create(EntityLevel.campus, CampusEntity(name="C"), tree)
    assert failure.kind == ErrorKind.missing_field
    assert failure.field == "portfolioId"


def test_unknown_parent(tree):
    building = BuildingEntity(campus_id="does-not-exist", name="B")
    failure = validate_create(EntityLevel.building, building, tree)
    assert failure.kind == ErrorKind.missing_parent
    assert failure.field == "campusId"


def test_parent_is_looked_up_at_the_right_level(tree):
    # floor1 existe, pero como piso, no como edificio
    failure = validate_create(EntityLevel.floor, FloorEntity(building_id="floor1", floor_number="3"), tree)
    assert failure.kind == ErrorKind.missing_parent


def test_invalid_enum(tree):
    portfolio = PortfolioEntity(organization_id="org1", name="LATAM", region="LATAM")
    failure = validate_create(EntityLevel.portfolio, portfolio, tree)
    assert failure.kind == ErrorKind.invalid_enum
    assert failure.field == "region"
    assert "APAC" in failure.message


def test_optional_enum_may_be_empty(tree):
    portfolio = PortfolioEntity(organization_id="org1", name="Other", readable_id="OTHER")
    assert validate_create(EntityLevel.portfolio, portfolio, tree) is None


def test_campus_type_enum(tree):
    campus = CampusEntity(portfolio_id="portfolio1", name="C", type="castle")
    assert validate_create(EntityLevel.campus, campus, tree).kind == ErrorKind.invalid_enum


class TestLeaseDetails:
    def test_leased_without_details(self, tree):
        building = BuildingEntity(campus_id="campus1", name="B2", ownership_type="leased")
        failure = validate_create(EntityLevel.building, building, tree)
        assert failure.kind == ErrorKind.conditional_field_mismatch
        assert failure.field == "leaseDetails"

    def test_owned_with_details(self, tree):
        building = BuildingEntity(campus_id="campus1", name="B2", ownership_type="owned", lease_details=LeaseDetails())
        failure = validate_create(EntityLevel.building, building, tree)
        assert failure.kind == ErrorKind.conditional_field_mismatch

    def test_owned_without_details(self, tree):
        building = BuildingEntity(campus_id="campus1", name="B2", readable_id="IN-HQ-CAMPUS-B2")
        assert validate_create(EntityLevel.building, building, tree) is None


class TestDuplicates:
    def test_sibling_in_tree(self, tree):
        building = BuildingEntity(campus_id="campus1", name="Other", readable_id="IN-HQ-CAMPUS-SB")
        failure = validate_create(EntityLevel.building, building, tree)
        assert failure.kind == ErrorKind.duplicate_identifier
        assert failure.field == "readableId"

    def test_same_readable_id_under_another_parent(self, tree):
        elsewhere = CampusEntity(portfolio_id="portfolio2", name="HQ Campus", readable_id="IN-TWIN")
        campus = CampusEntity(portfolio_id="portfolio1", name="HQ Campus", readable_id="IN-TWIN")
        assert validate_create(EntityLevel.campus, campus, tree, [elsewhere]) is None

    def test_staged_rows_of_the_same_batch(self, tree):
        first = CampusEntity(portfolio_id="portfolio1", name="Twin", readable_id="IN-TWIN")
        second = CampusEntity(portfolio_id="portfolio1", name="Twin", readable_id="IN-TWIN")
        assert validate_create(EntityLevel.campus, first, tree) is None
        failure = validate_create(EntityLevel.campus, second, tree, [first])
        assert failure.kind == ErrorKind.duplicate_identifier

    def test_update_does_not_collide_with_itself(self, tree, collections):
        building = collections["buildings"][0].model_copy(update={"name": "Tower A (renamed)"})
        assert validate_update(EntityLevel.building, building, tree) is None

    def test_update_collides_with_sibling(self, collections):
        other = BuildingEntity(id="building2", readable_id="IN-HQ-CAMPUS-B2", campus_id="campus1", name="B2")
        collections["buildings"].append(other)
        tree = build_tree(**collections)
        renamed = other.model_copy(update={"readable_id": "IN-HQ-CAMPUS-SB"})
        failure = validate_update(EntityLevel.building, renamed, tree)
        assert failure.kind == ErrorKind.duplicate_identifier


def test_first_failing_check_wins(tree):
    # padre inexistente y enum inválido: se reporta el padre
    campus = CampusEntity(portfolio_id="nope", name="C", status="closed")
    assert validate_create(EntityLevel.campus, campus, tree).kind == ErrorKind.missing_parent


class TestDeclaredIds:
    def test_id_taken_at_the_same_level_elsewhere(self, collections):
        collections["campuses"].append(CampusEntity(id="campus2", readable_id="IN-NORTH", portfolio_id="portfolio1", name="North"))
        tree = build_tree(**collections)
        building = BuildingEntity(id="building1", campus_id="campus2", name="Clash", readable_id="IN-NORTH-CL")
        failure = validate_create(EntityLevel.building, building, tree)
        assert failure.kind == ErrorKind.duplicate_identifier
        assert failure.field == "id"

    def test_id_staged_under_another_parent(self, tree):
        staged = [BuildingEntity(id="b-new", campus_id="campus-other", name="Other", readable_id="X-OTHER")]
        building = BuildingEntity(id="b-new", campus_id="campus1", name="New", readable_id="IN-HQ-CAMPUS-NEW")
        failure = validate_create(EntityLevel.building, building, tree, staged)
        assert failure.kind == ErrorKind.duplicate_identifier
        assert failure.field == "id"

    def test_same_id_at_another_level_is_fine(self, tree):
        floor = FloorEntity(id="building1", building_id="building1", floor_number="9", readable_id="IN-HQ-CAMPUS-SB-F9")
        assert validate_create(EntityLevel.floor, floor, tree) is None

    def test_staged_rows_can_be_a_generator(self, tree):
        staged = (b for b in [BuildingEntity(id="b-new", campus_id="campus1", name="Twin", readable_id="IN-TWIN")])
        building = BuildingEntity(id="b-new", campus_id="campus1", name="Twin 2", readable_id="IN-TWIN-2")
        assert validate_create(EntityLevel.building, building, tree, staged).field == "id"
