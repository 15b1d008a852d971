from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from shared.core.config import settings
from shared.core.database import Base, engine
from shared.core.logging_config import configure_logging
from shared.exception_handler import setup_exception_handlers

from . import models  # noqa: F401
from .router.common import export_router
from .router.energy_iot import meter_readings_router, meters_router
from .router.financials import (
    invoices_router, payments_router, reports_router, utility_payments_router)
from .router.leasing_tenants import leases_router, rent_router, tenants_router
from .router.maintenance_assets import (
    assets_router, complaints_router, maintenance_tasks_router, work_orders_router)
from .router.security import (
    access_control_router, security_incidents_router, security_staff_router, visitor_logs_router)
from .router.space_sites import buildings_router, organizations_router, units_router
from .router.system import (
    auth_router, feature_flags_router, settings_router, users_router)

configure_logging()

app = FastAPI(title=settings.APP_NAME)

# Create all tables
Base.metadata.create_all(bind=engine)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

# Include routers
app.include_router(auth_router.router)
app.include_router(users_router.router)
app.include_router(settings_router.router)
app.include_router(feature_flags_router.router)
app.include_router(organizations_router.router)
app.include_router(buildings_router.router)
app.include_router(units_router.router)
app.include_router(tenants_router.router)
app.include_router(leases_router.router)
app.include_router(rent_router.router)
app.include_router(invoices_router.router)
app.include_router(payments_router.router)
app.include_router(utility_payments_router.router)
app.include_router(reports_router.router)
app.include_router(export_router.router)
app.include_router(meters_router.router)
app.include_router(meter_readings_router.router)
app.include_router(assets_router.router)
app.include_router(maintenance_tasks_router.router)
app.include_router(work_orders_router.router)
app.include_router(complaints_router.router)
app.include_router(access_control_router.router)
app.include_router(security_incidents_router.router)
app.include_router(visitor_logs_router.router)
app.include_router(security_staff_router.router)

# Uploaded receipts are served as public files
app.mount(settings.UPLOAD_URL_PREFIX,
          StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
          name="uploads")


@app.get("/health")
def health():
    return {"status": "ok"}
