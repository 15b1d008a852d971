from enum import Enum


class AssetStatus(str, Enum):
    active = "active"
    maintenance = "maintenance"
    retired = "retired"
    disposed = "disposed"


class DepreciationMethod(str, Enum):
    straight_line = "straight-line"
    declining_balance = "declining-balance"


class MaintenanceType(str, Enum):
    preventive = "preventive"
    corrective = "corrective"
    emergency = "emergency"


class ScheduleType(str, Enum):
    time_based = "time-based"
    usage_based = "usage-based"


class FrequencyUnit(str, Enum):
    days = "days"
    weeks = "weeks"
    months = "months"
    hours = "hours"
    usage_cycles = "usage_cycles"


class MaintenanceTaskStatus(str, Enum):
    pending = "pending"
    due = "due"
    overdue = "overdue"
    completed = "completed"
    cancelled = "cancelled"


class WorkOrderCategory(str, Enum):
    plumbing = "plumbing"
    electrical = "electrical"
    hvac = "hvac"
    cleaning = "cleaning"
    security = "security"
    other = "other"


class WorkOrderPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"


class WorkOrderStatus(str, Enum):
    open = "open"
    assigned = "assigned"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class ComplaintCategory(str, Enum):
    maintenance = "maintenance"
    noise = "noise"
    security = "security"
    cleanliness = "cleanliness"
    other = "other"


class ComplaintPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"


class ComplaintStatus(str, Enum):
    open = "open"
    assigned = "assigned"
    in_progress = "in_progress"
    resolved = "resolved"
    closed = "closed"


class ComplaintType(str, Enum):
    complaint = "complaint"
    maintenance_request = "maintenance_request"


class MaintenanceCategory(str, Enum):
    plumbing = "plumbing"
    electrical = "electrical"
    hvac = "hvac"
    appliance = "appliance"
    structural = "structural"
    other = "other"


class Urgency(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    emergency = "emergency"
