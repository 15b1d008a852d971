from enum import Enum


class TenantStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    suspended = "suspended"


class TenantLanguage(str, Enum):
    am = "am"
    en = "en"
    om = "om"
    ti = "ti"


class LeaseStatus(str, Enum):
    active = "active"
    expired = "expired"
    terminated = "terminated"
    pending = "pending"


class BillingCycle(str, Enum):
    monthly = "monthly"
    quarterly = "quarterly"
    annually = "annually"


class RateSource(str, Enum):
    flat_override = "flat_override"
    unit_override = "unit_override"
    floor_override = "floor_override"
    policy = "policy"
