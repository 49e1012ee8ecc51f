from enum import Enum


class EntityLevel(str, Enum):
    organization = "organization"
    portfolio = "portfolio"
    campus = "campus"
    building = "building"
    floor = "floor"
    seat_zone = "seat_zone"


class Region(str, Enum):
    apac = "APAC"
    emea = "EMEA"
    americas = "AMERICAS"
    global_ = "GLOBAL"


class CampusType(str, Enum):
    traditional_office = "traditional_office"
    sales_office = "sales_office"
    warehouse = "warehouse"
    data_center = "data_center"
    rd_lab = "rd_lab"
    manufacturing = "manufacturing"
    retail = "retail"
    coworking = "coworking"
    training_center = "training_center"


class LifecycleStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    retired = "retired"


class OwnershipType(str, Enum):
    leased = "leased"
    owned = "owned"


class OccupancyStatus(str, Enum):
    free = "free"
    assigned = "assigned"
    reserved = "reserved"
