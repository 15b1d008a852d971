"""
Pytest configuration and shared fixtures.

Every test gets a fresh in-memory SQLite database shared by the test session
and the application through `app.dependency_overrides[get_db]`.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["CHAPA_SECRET_KEY"] = ""
os.environ["SMTP_HOST"] = ""

from datetime import timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from shared.core.database import Base, get_db, utc_now  # noqa: E402
from shared.models.users import Users  # noqa: E402
from bms_service.app.main import app  # noqa: E402
from bms_service.app.crud.leasing_tenants import leases_crud, tenants_crud  # noqa: E402
from bms_service.app.crud.financials import invoices_crud  # noqa: E402
from bms_service.app.crud.space_sites import buildings_crud, units_crud  # noqa: E402
from bms_service.app.models.space_sites.organizations import Organization  # noqa: E402
from bms_service.app.schemas.financials.invoices_schemas import InvoiceCreate  # noqa: E402
from bms_service.app.schemas.leasing_tenants.leases_schemas import LeaseCreate  # noqa: E402
from bms_service.app.schemas.leasing_tenants.tenants_schemas import TenantCreate  # noqa: E402
from bms_service.app.schemas.space_sites.buildings_schemas import BuildingCreate  # noqa: E402
from bms_service.app.schemas.space_sites.units_schemas import UnitCreate  # noqa: E402

PASSWORD = "Secret123!"
ORG_ROLES = [
    "ORG_ADMIN", "BUILDING_MANAGER", "FACILITY_MANAGER", "ACCOUNTANT",
    "SECURITY", "TECHNICIAN", "TENANT", "AUDITOR",
]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture(autouse=True)
def override_db(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def org(db):
    organization = Organization(name="Addis Properties", code="ADDIS")
    db.add(organization)
    db.commit()
    db.refresh(organization)
    return organization


@pytest.fixture
def other_org(db):
    organization = Organization(name="Bole Estates", code="BOLE")
    db.add(organization)
    db.commit()
    db.refresh(organization)
    return organization


def make_user(db, email, roles, org_id=None, status="active"):
    user = Users(org_id=org_id, name=email.split("@")[0], email=email,
                 roles=roles, status=status)
    user.set_password(PASSWORD)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def users(db, org, other_org):
    seeded = {
        role: make_user(db, f"{role.lower()}@addisproperties.com", [role], org.id)
        for role in ORG_ROLES
    }
    seeded["SUPER_ADMIN"] = make_user(db, "root@bmsplatform.com", ["SUPER_ADMIN"])
    seeded["OTHER_ADMIN"] = make_user(db, "admin@boleestates.com", ["ORG_ADMIN"], other_org.id)
    return seeded


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def login(users):
    """Return a client logged in (session cookie) as the seeded user for `key`."""

    def _login(key="ORG_ADMIN"):
        client = TestClient(app)
        response = client.post("/api/auth/login",
                               json={"email": users[key].email, "password": PASSWORD})
        assert response.status_code == 200, response.text
        return client

    return _login


@pytest.fixture
def building(db, org):
    return buildings_crud.create(db, org.id, BuildingCreate(
        name="Bole Tower",
        total_floors=6,
        rent_policy={"baseRatePerSqm": 500, "decrementPerFloor": 20,
                     "groundFloorMultiplier": 1.2, "minRatePerSqm": 400},
    ))


@pytest.fixture
def unit(db, org, building):
    return units_crud.create(db, org.id, UnitCreate(
        building_id=building.id, unit_number="101", floor=1, area=50))


@pytest.fixture
def tenant(db, org):
    return tenants_crud.create(db, org.id, TenantCreate(
        first_name="Abebe", last_name="Kebede", primary_phone="+251911000001",
        email="abebe@tenantmail.com"))


@pytest.fixture
def lease(db, org, tenant, unit):
    return leases_crud.create(db, org.id, LeaseCreate(
        tenant_id=tenant.id, unit_id=unit.id,
        start_date=utc_now() - timedelta(days=90), rent_amount=25000))


@pytest.fixture
def invoice(db, org, lease):
    now = utc_now()
    return invoices_crud.create(db, org.id, InvoiceCreate(
        lease_id=lease.id, tenant_id=lease.tenant_id, unit_id=lease.unit_id,
        due_date=now + timedelta(days=10),
        period_start=now - timedelta(days=20), period_end=now + timedelta(days=10),
        items=[{"description": "Monthly rent", "amount": 25000, "type": "rent"}],
        vat_rate=15, status="sent",
    ))
