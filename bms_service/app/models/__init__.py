# Importing every model registers its table on Base.metadata.
from shared.models import users, user_login_session  # noqa: F401
from .space_sites import organizations, buildings, units  # noqa: F401
from .leasing_tenants import tenants, leases  # noqa: F401
from .financials import invoices, payments, utility_payments  # noqa: F401
from .energy_iot import meters, meter_readings  # noqa: F401
from .maintenance_assets import (  # noqa: F401
    assets, complaints, maintenance_history, maintenance_tasks, work_orders)
from .security import access_permissions, security_incidents, visitor_logs, security_staff  # noqa: F401
from .system import feature_flags, system_settings  # noqa: F401
