from enum import Enum


class OrganizationStatus(str, Enum):
    active = "active"
    inactive = "inactive"


class BuildingType(str, Enum):
    residential = "residential"
    commercial = "commercial"
    mixed = "mixed"


class BuildingStatus(str, Enum):
    active = "active"
    under_construction = "under-construction"
    inactive = "inactive"


class UnitType(str, Enum):
    apartment = "apartment"
    office = "office"
    shop = "shop"
    warehouse = "warehouse"
    parking = "parking"


class UnitStatus(str, Enum):
    available = "available"
    occupied = "occupied"
    maintenance = "maintenance"
    reserved = "reserved"
