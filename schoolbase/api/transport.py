"""Transport API endpoints: routes, vehicles and student assignments."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.database import get_db
from schoolbase.schemas.common import APIResponse
from schoolbase.schemas.transport import (
    AssignmentCreate,
    AssignmentResponse,
    AssignmentUpdate,
    RouteCreate,
    RouteResponse,
    RouteUpdate,
    TransportStats,
    VehicleCreate,
    VehicleResponse,
    VehicleUpdate,
)
from schoolbase.services.transport_service import get_transport_service
from schoolbase.utils.permissions import require_school_admin, require_staff

router = APIRouter()


# Routes

@router.get("/routes", response_model=APIResponse[list[RouteResponse]])
@require_staff()
async def list_routes(
    search: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    """List transport routes."""
    service = get_transport_service()
    routes = await service.get_routes(db, search=search)

    return APIResponse(data=[RouteResponse.model_validate(r) for r in routes])


@router.post("/routes", response_model=APIResponse[RouteResponse], status_code=201)
@require_school_admin()
async def create_route(
    data: RouteCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a route."""
    service = get_transport_service()
    route = await service.create_route(db, data)
    await db.commit()

    return APIResponse(
        data=RouteResponse.model_validate(route),
        message="Route created successfully",
    )


@router.get("/routes/{route_id}", response_model=APIResponse[RouteResponse])
@require_staff()
async def get_route(
    route_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get a route."""
    service = get_transport_service()
    route = await service.get_route(db, route_id)

    return APIResponse(data=RouteResponse.model_validate(route))


@router.patch("/routes/{route_id}", response_model=APIResponse[RouteResponse])
@require_school_admin()
async def update_route(
    route_id: uuid.UUID,
    data: RouteUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a route."""
    service = get_transport_service()
    route = await service.update_route(db, route_id, data)
    await db.commit()

    return APIResponse(
        data=RouteResponse.model_validate(route),
        message="Route updated successfully",
    )


@router.delete("/routes/{route_id}", response_model=APIResponse[None])
@require_school_admin()
async def delete_route(
    route_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a route with no active assignments."""
    service = get_transport_service()
    await service.delete_route(db, route_id)
    await db.commit()

    return APIResponse(message="Route deleted successfully")


# Vehicles

@router.get("/vehicles", response_model=APIResponse[list[VehicleResponse]])
@require_staff()
async def list_vehicles(
    route_id: uuid.UUID | None = None,
    is_active: bool | None = None,
    db: AsyncSession = Depends(get_db),
):
    """List vehicles with their route names."""
    service = get_transport_service()
    vehicles = await service.get_vehicles(db, route_id=route_id, is_active=is_active)

    return APIResponse(data=vehicles)


@router.post("/vehicles", response_model=APIResponse[VehicleResponse], status_code=201)
@require_school_admin()
async def create_vehicle(
    data: VehicleCreate,
    db: AsyncSession = Depends(get_db),
):
    """Register a vehicle."""
    service = get_transport_service()
    vehicle = await service.create_vehicle(db, data)
    await db.commit()

    return APIResponse(data=vehicle, message="Vehicle created successfully")


@router.get("/vehicles/{vehicle_id}", response_model=APIResponse[VehicleResponse])
@require_staff()
async def get_vehicle(
    vehicle_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get a vehicle."""
    service = get_transport_service()
    vehicle = await service.get_vehicle_detail(db, vehicle_id)

    return APIResponse(data=vehicle)


@router.patch("/vehicles/{vehicle_id}", response_model=APIResponse[VehicleResponse])
@require_school_admin()
async def update_vehicle(
    vehicle_id: uuid.UUID,
    data: VehicleUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a vehicle."""
    service = get_transport_service()
    vehicle = await service.update_vehicle(db, vehicle_id, data)
    await db.commit()

    return APIResponse(data=vehicle, message="Vehicle updated successfully")


@router.delete("/vehicles/{vehicle_id}", response_model=APIResponse[None])
@require_school_admin()
async def delete_vehicle(
    vehicle_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a vehicle."""
    service = get_transport_service()
    await service.delete_vehicle(db, vehicle_id)
    await db.commit()

    return APIResponse(message="Vehicle deleted successfully")


# Student assignments

@router.get("/assignments", response_model=APIResponse[list[AssignmentResponse]])
@require_staff()
async def list_assignments(
    route_id: uuid.UUID | None = None,
    vehicle_id: uuid.UUID | None = None,
    student_id: uuid.UUID | None = None,
    is_active: bool | None = None,
    db: AsyncSession = Depends(get_db),
):
    """List student transport assignments."""
    service = get_transport_service()
    assignments = await service.get_assignments(
        db,
        route_id=route_id,
        vehicle_id=vehicle_id,
        student_id=student_id,
        is_active=is_active,
    )

    return APIResponse(data=assignments)


@router.post("/assignments", response_model=APIResponse[AssignmentResponse], status_code=201)
@require_school_admin()
async def create_assignment(
    data: AssignmentCreate,
    db: AsyncSession = Depends(get_db),
):
    """Assign a student to a route."""
    service = get_transport_service()
    assignment = await service.create_assignment(db, data)
    await db.commit()

    return APIResponse(data=assignment, message="Assignment created successfully")


@router.get("/assignments/{assignment_id}", response_model=APIResponse[AssignmentResponse])
@require_staff()
async def get_assignment(
    assignment_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get an assignment."""
    service = get_transport_service()
    assignment = await service.get_assignment(db, assignment_id)

    return APIResponse(data=assignment)


@router.patch("/assignments/{assignment_id}", response_model=APIResponse[AssignmentResponse])
@require_school_admin()
async def update_assignment(
    assignment_id: uuid.UUID,
    data: AssignmentUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update an assignment."""
    service = get_transport_service()
    assignment = await service.update_assignment(db, assignment_id, data)
    await db.commit()

    return APIResponse(data=assignment, message="Assignment updated successfully")


@router.delete("/assignments/{assignment_id}", response_model=APIResponse[None])
@require_school_admin()
async def delete_assignment(
    assignment_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete an assignment."""
    service = get_transport_service()
    await service.delete_assignment(db, assignment_id)
    await db.commit()

    return APIResponse(message="Assignment deleted successfully")


@router.get("/stats", response_model=APIResponse[TransportStats])
@require_staff()
async def get_transport_stats(db: AsyncSession = Depends(get_db)):
    """Transport headline numbers."""
    service = get_transport_service()
    stats = await service.get_stats(db)

    return APIResponse(data=stats)
