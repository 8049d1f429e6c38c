from decimal import Decimal

import pytest

from tests.conftest import auth_headers, make_student

pytestmark = pytest.mark.anyio


async def create_route(client, admin, name="Mirpur Line", fee="1200.00"):
    response = await client.post(
        "/api/transport/routes",
        json={
            "route_name": name,
            "pickup_points": [{"name": "Mirpur 10", "time": "07:10"}, {"name": "Kazipara", "time": "07:20"}],
            "timings": {"morning": "07:00", "afternoon": "13:30"},
            "monthly_fee": fee,
        },
        headers=auth_headers(admin),
    )
    assert response.status_code == 201
    return response.json()["data"]


async def create_vehicle(client, admin, route_id=None, number="DHAKA-METRO-11-2233", capacity=1):
    response = await client.post(
        "/api/transport/vehicles",
        json={"vehicle_number": number, "capacity": capacity, "driver_name": "Abul Kashem", "route_id": route_id},
        headers=auth_headers(admin),
    )
    assert response.status_code == 201
    return response.json()["data"]


async def assign(client, admin, student, route_id, vehicle_id=None, **extra):
    return await client.post(
        "/api/transport/assignments",
        json={
            "student_id": str(student.id),
            "route_id": route_id,
            "vehicle_id": vehicle_id,
            "pickup_point": "Mirpur 10",
            **extra,
        },
        headers=auth_headers(admin),
    )


async def test_route_keeps_pickup_points(client, admin):
    route = await create_route(client, admin)

    assert [p["name"] for p in route["pickup_points"]] == ["Mirpur 10", "Kazipara"]
    assert route["timings"]["morning"] == "07:00"
    assert Decimal(route["monthly_fee"]) == Decimal("1200.00")


async def test_vehicle_shows_route_name(client, admin):
    route = await create_route(client, admin)
    vehicle = await create_vehicle(client, admin, route_id=route["id"])

    assert vehicle["route_name"] == "Mirpur Line"
    assert vehicle["type"] == "bus"


async def test_duplicate_vehicle_number(client, admin):
    await create_vehicle(client, admin)

    response = await client.post(
        "/api/transport/vehicles",
        json={"vehicle_number": "DHAKA-METRO-11-2233", "capacity": 30},
        headers=auth_headers(admin),
    )

    assert response.status_code == 409


async def test_assignment_fee_defaults_to_route(client, admin, student):
    route = await create_route(client, admin)

    response = await assign(client, admin, student, route["id"])

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["student_name"] == "Rahim Uddin"
    assert data["route_name"] == "Mirpur Line"
    assert Decimal(data["monthly_fee"]) == Decimal("1200.00")


async def test_student_has_one_active_assignment(client, admin, student):
    route = await create_route(client, admin)
    await assign(client, admin, student, route["id"])

    response = await assign(client, admin, student, route["id"])

    assert response.status_code == 409


async def test_vehicle_capacity_is_enforced(client, db, admin, school, student):
    route = await create_route(client, admin)
    vehicle = await create_vehicle(client, admin, route_id=route["id"], capacity=1)
    second = await make_student(db, school, "STU-2", "Fatema Akter")

    first = await assign(client, admin, student, route["id"], vehicle["id"])
    assert first.status_code == 201

    full = await assign(client, admin, second, route["id"], vehicle["id"])
    assert full.status_code == 409
    assert full.json()["error"] == "Vehicle DHAKA-METRO-11-2233 is at full capacity"


async def test_route_with_assignments_cannot_be_deleted(client, admin, student):
    route = await create_route(client, admin)
    assignment = await assign(client, admin, student, route["id"])

    blocked = await client.delete(f"/api/transport/routes/{route['id']}", headers=auth_headers(admin))
    assert blocked.status_code == 409

    await client.delete(
        f"/api/transport/assignments/{assignment.json()['data']['id']}", headers=auth_headers(admin)
    )
    allowed = await client.delete(f"/api/transport/routes/{route['id']}", headers=auth_headers(admin))
    assert allowed.status_code == 200


async def test_transport_stats(client, admin, student):
    route = await create_route(client, admin, fee="900.00")
    await create_vehicle(client, admin, route_id=route["id"], capacity=40)
    await create_vehicle(client, admin, number="DHAKA-METRO-11-9999", capacity=20)
    await assign(client, admin, student, route["id"])

    response = await client.get("/api/transport/stats", headers=auth_headers(admin))

    stats = response.json()["data"]
    assert stats["total_routes"] == 1
    assert stats["total_vehicles"] == 2
    assert stats["total_capacity"] == 60
    assert stats["active_assignments"] == 1
    assert Decimal(stats["monthly_revenue"]) == Decimal("900.00")


async def test_teacher_reads_but_cannot_create_routes(client, admin, teacher):
    await create_route(client, admin)

    listing = await client.get("/api/transport/routes", headers=auth_headers(teacher))
    assert listing.status_code == 200
    assert len(listing.json()["data"]) == 1

    response = await client.post(
        "/api/transport/routes", json={"route_name": "Uttara"}, headers=auth_headers(teacher)
    )
    assert response.status_code == 403


async def test_patch_rejects_vehicle_from_another_school(client, admin, other_admin, student):
    route = await create_route(client, admin)
    assignment = await assign(client, admin, student, route["id"], is_active=False)
    assert assignment.status_code == 201
    foreign = await create_vehicle(client, other_admin, number="CTG-METRO-22-1111", capacity=40)

    response = await client.patch(
        f"/api/transport/assignments/{assignment.json()['data']['id']}",
        json={"vehicle_id": foreign["id"]},
        headers=auth_headers(admin),
    )

    assert response.status_code == 404
    assert response.json()["error"] == "Vehicle not found"


async def test_patch_moves_assignment_to_another_vehicle(client, admin, student):
    route = await create_route(client, admin)
    first = await create_vehicle(client, admin, route_id=route["id"], capacity=10)
    second = await create_vehicle(client, admin, number="DHAKA-METRO-11-4455", capacity=10)
    assignment = await assign(client, admin, student, route["id"], first["id"])

    response = await client.patch(
        f"/api/transport/assignments/{assignment.json()['data']['id']}",
        json={"vehicle_id": second["id"]},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["data"]["vehicle_id"] == second["id"]


async def test_patch_to_full_vehicle_is_refused(client, db, admin, school, student):
    route = await create_route(client, admin)
    full = await create_vehicle(client, admin, route_id=route["id"], capacity=1)
    spare = await create_vehicle(client, admin, number="DHAKA-METRO-11-4455", capacity=10)
    second = await make_student(db, school, "STU-2", "Fatema Akter")
    await assign(client, admin, student, route["id"], full["id"])
    moving = await assign(client, admin, second, route["id"], spare["id"])

    response = await client.patch(
        f"/api/transport/assignments/{moving.json()['data']['id']}",
        json={"vehicle_id": full["id"]},
        headers=auth_headers(admin),
    )

    assert response.status_code == 409


async def test_reactivation_respects_one_active_assignment(client, admin, student):
    route = await create_route(client, admin)
    old = await assign(client, admin, student, route["id"], is_active=False)
    current = await assign(client, admin, student, route["id"])
    assert current.status_code == 201

    response = await client.patch(
        f"/api/transport/assignments/{old.json()['data']['id']}",
        json={"is_active": True},
        headers=auth_headers(admin),
    )

    assert response.status_code == 409
    assert response.json()["error"] == "Student already has an active transport assignment"


async def test_reactivation_when_no_other_assignment_is_active(client, admin, student):
    route = await create_route(client, admin)
    assignment = await assign(client, admin, student, route["id"], is_active=False)

    response = await client.patch(
        f"/api/transport/assignments/{assignment.json()['data']['id']}",
        json={"is_active": True},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["data"]["is_active"] is True


async def test_null_clears_vehicle_but_keeps_pickup_point(client, admin, student):
    route = await create_route(client, admin)
    vehicle = await create_vehicle(client, admin, route_id=route["id"], capacity=10)
    assignment = await assign(client, admin, student, route["id"], vehicle["id"])

    response = await client.patch(
        f"/api/transport/assignments/{assignment.json()['data']['id']}",
        json={"vehicle_id": None, "pickup_point": None},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["vehicle_id"] is None
    assert data["pickup_point"] == "Mirpur 10"
