from enum import Enum


class AccessEntityType(str, Enum):
    tenant = "tenant"
    visitor = "visitor"
    staff = "staff"


class AccessLevel(str, Enum):
    full = "full"
    restricted = "restricted"
    denied = "denied"


class IncidentType(str, Enum):
    theft = "theft"
    vandalism = "vandalism"
    trespassing = "trespassing"
    violence = "violence"
    suspicious_activity = "suspicious_activity"
    fire = "fire"
    medical = "medical"
    other = "other"


class IncidentSeverity(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


class IncidentStatus(str, Enum):
    reported = "reported"
    under_investigation = "under_investigation"
    resolved = "resolved"
    closed = "closed"
