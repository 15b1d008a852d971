from datetime import datetime, timedelta

import pytest

from shared.core.database import utc_now
from bms_service.app.crud.maintenance_assets.maintenance_tasks_crud import (
    advance_due_date, compute_status
)
from bms_service.app.models.maintenance_assets.maintenance_tasks import MaintenanceTask

NOW = datetime(2024, 6, 1, 9, 0)


@pytest.mark.parametrize("status, due, expected", [
    ("pending", NOW - timedelta(days=1), "overdue"),
    ("pending", NOW + timedelta(days=3), "due"),
    ("due", NOW + timedelta(days=30), "pending"),
    ("pending", None, "pending"),
    ("completed", NOW - timedelta(days=10), "completed"),
    ("cancelled", NOW - timedelta(days=10), "cancelled"),
])
def test_compute_status(status, due, expected):
    task = MaintenanceTask(status=status, next_due_date=due)
    assert compute_status(task, NOW) == expected


def test_advance_due_date_by_calendar_month():
    assert advance_due_date(datetime(2024, 1, 31), {"interval": 1, "unit": "months"}) == \
        datetime(2024, 2, 29)
    assert advance_due_date(NOW, {"interval": 2, "unit": "weeks"}) == NOW + timedelta(weeks=2)
    assert advance_due_date(NOW, {"interval": 5, "unit": "usage_cycles"}) is None
    assert advance_due_date(NOW, None) is None


def _task_body(building, **overrides):
    body = {
        "buildingId": str(building.id),
        "taskName": "Generator service",
        "description": "Change oil and filters",
        "scheduleType": "time-based",
        "frequency": {"interval": 30, "unit": "days"},
        "lastPerformed": (utc_now() - timedelta(days=26)).isoformat(),
        "autoGenerateWorkOrder": True,
    }
    body.update(overrides)
    return body


@pytest.mark.parametrize("overrides, message", [
    ({"description": ""}, "taskName, description, and scheduleType are required"),
    ({"frequency": None}, "frequency is required for time-based schedules"),
    ({"scheduleType": "usage-based", "frequency": None},
     "usageThreshold is required for usage-based schedules"),
])
def test_task_validation(login, building, overrides, message):
    response = login("FACILITY_MANAGER").post("/api/maintenance-tasks",
                                              json=_task_body(building, **overrides))
    assert response.status_code == 400
    assert response.json() == {"error": message}


def test_create_task_computes_next_due(login, building):
    response = login("FACILITY_MANAGER").post("/api/maintenance-tasks", json=_task_body(building))
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "due"
    assert body["nextDueDate"] is not None


def test_due_listing(login, building):
    client = login("FACILITY_MANAGER")
    client.post("/api/maintenance-tasks", json=_task_body(building))
    client.post("/api/maintenance-tasks", json=_task_body(
        building, taskName="Roof inspection", lastPerformed=utc_now().isoformat()))

    due = client.get("/api/maintenance-tasks/due").json()
    assert [t["taskName"] for t in due["maintenanceTasks"]] == ["Generator service"]

    wider = client.get("/api/maintenance-tasks/due", params={"daysAhead": 31}).json()
    assert wider["total"] == 2


def test_complete_task_advances_schedule(login, building):
    client = login("FACILITY_MANAGER")
    task = client.post("/api/maintenance-tasks", json=_task_body(building)).json()

    response = login("TECHNICIAN").post(f"/api/maintenance-tasks/{task['id']}/complete", json={})
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "pending"
    assert body["lastPerformed"] is not None
    assert body["nextDueDate"] > task["nextDueDate"]


def test_usage_based_task_completes(login, building):
    client = login("FACILITY_MANAGER")
    task = client.post("/api/maintenance-tasks", json=_task_body(
        building, scheduleType="usage-based", frequency=None, usageThreshold=500)).json()
    assert task["status"] == "pending"

    done = client.post(f"/api/maintenance-tasks/{task['id']}/complete", json={}).json()
    assert done["status"] == "completed"


def test_generate_work_orders_once_per_task(login, building):
    client = login("FACILITY_MANAGER")
    task = client.post("/api/maintenance-tasks", json=_task_body(
        building, lastPerformed=(utc_now() - timedelta(days=40)).isoformat())).json()
    assert task["status"] == "overdue"

    first = client.post("/api/maintenance-tasks/generate-work-orders").json()
    assert first["created"] == 1

    order = client.get(f"/api/work-orders/{first['workOrderIds'][0]}").json()
    assert order["status"] == "open"
    assert order["priority"] == "high"
    assert order["maintenanceTaskId"] == task["id"]
    assert order["title"] == "Scheduled maintenance: Generator service"

    second = client.post("/api/maintenance-tasks/generate-work-orders").json()
    assert second == {"created": 0, "workOrderIds": []}


def test_work_order_lifecycle(login, users, building):
    manager = login("FACILITY_MANAGER")
    created = manager.post("/api/work-orders", json={
        "buildingId": str(building.id),
        "title": "Leaking pipe",
        "description": "Water leak on floor 3 corridor",
        "category": "plumbing",
        "assignedTo": str(users["TECHNICIAN"].id),
    })
    assert created.status_code == 201
    order = created.json()
    assert order["status"] == "assigned"

    technician = login("TECHNICIAN")
    started = technician.patch(f"/api/work-orders/{order['id']}/status",
                               json={"status": "in_progress"}).json()
    assert started["status"] == "in_progress"
    assert started["startedAt"] is not None

    done = technician.post(f"/api/work-orders/{order['id']}/complete",
                           json={"actualCost": 3200, "notes": "Replaced joint"}).json()
    assert done["status"] == "completed"
    assert done["completedAt"] is not None
    assert done["actualCost"] == 3200

    overview = manager.get("/api/work-orders/overview").json()
    assert overview["totalWorkOrders"] == 1
    assert overview["completedWorkOrders"] == 1


def test_work_order_requires_description(login, building):
    response = login("FACILITY_MANAGER").post("/api/work-orders", json={
        "buildingId": str(building.id), "title": "Broken lamp", "category": "electrical"})
    assert response.status_code == 400
    assert response.json() == {"error": "title, description, and category are required"}


def test_cancelled_work_order_cannot_complete(login, building):
    client = login("FACILITY_MANAGER")
    order = client.post("/api/work-orders", json={
        "buildingId": str(building.id), "title": "Paint lobby",
        "description": "Repaint lobby walls", "category": "other"}).json()
    client.patch(f"/api/work-orders/{order['id']}/status", json={"status": "cancelled"})

    response = client.post(f"/api/work-orders/{order['id']}/complete", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "Cancelled work orders cannot be completed"}
