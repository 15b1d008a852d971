from enum import Enum


class UserRole(str, Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    ORG_ADMIN = "ORG_ADMIN"
    BUILDING_MANAGER = "BUILDING_MANAGER"
    FACILITY_MANAGER = "FACILITY_MANAGER"
    ACCOUNTANT = "ACCOUNTANT"
    SECURITY = "SECURITY"
    TECHNICIAN = "TECHNICIAN"
    TENANT = "TENANT"
    AUDITOR = "AUDITOR"


class UserStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    suspended = "suspended"


class ExportFormat(str, Enum):
    csv = "csv"
    pdf = "pdf"
