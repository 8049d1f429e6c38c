"""Transport service for routes, vehicles and student assignments."""

import logging
import uuid

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.exceptions import ConflictException, NotFoundException
from schoolbase.models import Student, TransportRoute, TransportStudentAssignment, TransportVehicle
from schoolbase.schemas.transport import (
    AssignmentCreate,
    AssignmentResponse,
    AssignmentUpdate,
    RouteCreate,
    RouteUpdate,
    TransportStats,
    VehicleCreate,
    VehicleResponse,
    VehicleUpdate,
)
from schoolbase.utils.money import to_money
from schoolbase.utils.school_context import get_school_id

logger = logging.getLogger(__name__)


class TransportService:
    """Service for school transport."""

    # Routes

    async def get_routes(self, db: AsyncSession, search: str | None = None) -> list[TransportRoute]:
        """Get routes ordered by name."""
        query = select(TransportRoute).where(
            TransportRoute.school_id == get_school_id(),
            TransportRoute.deleted_at.is_(None),
        )
        if search:
            query = query.where(TransportRoute.route_name.ilike(f"%{search}%"))

        result = await db.execute(query.order_by(TransportRoute.route_name))
        return list(result.scalars().all())

    async def get_route(self, db: AsyncSession, route_id: uuid.UUID) -> TransportRoute:
        """Get a single route by ID."""
        result = await db.execute(
            select(TransportRoute).where(
                TransportRoute.id == route_id,
                TransportRoute.school_id == get_school_id(),
                TransportRoute.deleted_at.is_(None),
            )
        )
        route = result.scalar_one_or_none()

        if not route:
            raise NotFoundException("Route")

        return route

    async def create_route(self, db: AsyncSession, data: RouteCreate) -> TransportRoute:
        """Create a route."""
        route = TransportRoute(school_id=get_school_id(), **data.model_dump())
        db.add(route)
        await db.flush()
        await db.refresh(route)

        return route

    async def update_route(
        self, db: AsyncSession, route_id: uuid.UUID, data: RouteUpdate
    ) -> TransportRoute:
        """Update a route."""
        route = await self.get_route(db, route_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and not TransportRoute.__table__.c[field].nullable:
                continue
            setattr(route, field, value)

        await db.flush()
        await db.refresh(route)

        return route

    async def delete_route(self, db: AsyncSession, route_id: uuid.UUID) -> None:
        """Soft delete a route with no active assignments; its vehicles are detached."""
        route = await self.get_route(db, route_id)

        active = await db.execute(
            select(func.count(TransportStudentAssignment.id)).where(
                TransportStudentAssignment.route_id == route.id,
                TransportStudentAssignment.is_active.is_(True),
                TransportStudentAssignment.deleted_at.is_(None),
            )
        )
        if (active.scalar() or 0) > 0:
            raise ConflictException("Route has active student assignments and cannot be deleted")

        vehicles = await db.execute(
            select(TransportVehicle).where(
                TransportVehicle.route_id == route.id,
                TransportVehicle.deleted_at.is_(None),
            )
        )
        for vehicle in vehicles.scalars().all():
            vehicle.route_id = None

        route.soft_delete()
        await db.flush()

    # Vehicles

    def _vehicle_query(self):
        return (
            select(TransportVehicle, TransportRoute.route_name)
            .outerjoin(TransportRoute, TransportRoute.id == TransportVehicle.route_id)
            .where(
                TransportVehicle.school_id == get_school_id(),
                TransportVehicle.deleted_at.is_(None),
            )
        )

    def _vehicle_response(self, vehicle: TransportVehicle, route_name: str | None) -> VehicleResponse:
        response = VehicleResponse.model_validate(vehicle)
        response.route_name = route_name
        return response

    async def get_vehicles(
        self,
        db: AsyncSession,
        route_id: uuid.UUID | None = None,
        is_active: bool | None = None,
    ) -> list[VehicleResponse]:
        """Get vehicles with their route names."""
        query = self._vehicle_query()
        if route_id:
            query = query.where(TransportVehicle.route_id == route_id)
        if is_active is not None:
            query = query.where(TransportVehicle.is_active == is_active)

        result = await db.execute(query.order_by(TransportVehicle.vehicle_number))
        return [self._vehicle_response(vehicle, name) for vehicle, name in result.all()]

    async def get_vehicle(self, db: AsyncSession, vehicle_id: uuid.UUID) -> TransportVehicle:
        """Get a single vehicle by ID."""
        result = await db.execute(
            select(TransportVehicle).where(
                TransportVehicle.id == vehicle_id,
                TransportVehicle.school_id == get_school_id(),
                TransportVehicle.deleted_at.is_(None),
            )
        )
        vehicle = result.scalar_one_or_none()

        if not vehicle:
            raise NotFoundException("Vehicle")

        return vehicle

    async def get_vehicle_detail(self, db: AsyncSession, vehicle_id: uuid.UUID) -> VehicleResponse:
        """Get a vehicle with its route name."""
        result = await db.execute(self._vehicle_query().where(TransportVehicle.id == vehicle_id))
        row = result.one_or_none()

        if not row:
            raise NotFoundException("Vehicle")

        return self._vehicle_response(*row)

    async def create_vehicle(self, db: AsyncSession, data: VehicleCreate) -> VehicleResponse:
        """Create a vehicle, optionally on a route."""
        await self._check_vehicle_number(db, data.vehicle_number)
        if data.route_id:
            await self.get_route(db, data.route_id)

        vehicle = TransportVehicle(school_id=get_school_id(), **data.model_dump())
        db.add(vehicle)
        await db.flush()

        return await self.get_vehicle_detail(db, vehicle.id)

    async def update_vehicle(
        self, db: AsyncSession, vehicle_id: uuid.UUID, data: VehicleUpdate
    ) -> VehicleResponse:
        """Update a vehicle."""
        vehicle = await self.get_vehicle(db, vehicle_id)
        update_data = data.model_dump(exclude_unset=True)

        if update_data.get("vehicle_number") and update_data["vehicle_number"] != vehicle.vehicle_number:
            await self._check_vehicle_number(db, update_data["vehicle_number"])
        if update_data.get("route_id"):
            await self.get_route(db, update_data["route_id"])

        for field, value in update_data.items():
            if value is None and not TransportVehicle.__table__.c[field].nullable:
                continue
            setattr(vehicle, field, value)

        await db.flush()

        return await self.get_vehicle_detail(db, vehicle.id)

    async def delete_vehicle(self, db: AsyncSession, vehicle_id: uuid.UUID) -> None:
        """Soft delete a vehicle; assignments riding it keep their route."""
        vehicle = await self.get_vehicle(db, vehicle_id)

        assignments = await db.execute(
            select(TransportStudentAssignment).where(
                TransportStudentAssignment.vehicle_id == vehicle.id,
                TransportStudentAssignment.deleted_at.is_(None),
            )
        )
        for assignment in assignments.scalars().all():
            assignment.vehicle_id = None

        vehicle.soft_delete()
        vehicle.is_active = False
        await db.flush()

    async def _check_vehicle_number(self, db: AsyncSession, vehicle_number: str) -> None:
        existing = await db.execute(
            select(TransportVehicle.id).where(
                TransportVehicle.school_id == get_school_id(),
                TransportVehicle.vehicle_number == vehicle_number,
                TransportVehicle.deleted_at.is_(None),
            )
        )
        if existing.scalar_one_or_none():
            raise ConflictException(f"Vehicle '{vehicle_number}' already exists")

    # Assignments

    def _assignment_query(self):
        return (
            select(
                TransportStudentAssignment,
                Student.name,
                TransportRoute.route_name,
                TransportVehicle.vehicle_number,
            )
            .join(Student, Student.id == TransportStudentAssignment.student_id)
            .join(TransportRoute, TransportRoute.id == TransportStudentAssignment.route_id)
            .outerjoin(TransportVehicle, TransportVehicle.id == TransportStudentAssignment.vehicle_id)
            .where(
                TransportStudentAssignment.school_id == get_school_id(),
                TransportStudentAssignment.deleted_at.is_(None),
            )
        )

    def _assignment_response(
        self,
        assignment: TransportStudentAssignment,
        student_name: str | None,
        route_name: str | None,
        vehicle_number: str | None,
    ) -> AssignmentResponse:
        return AssignmentResponse(
            id=assignment.id,
            student_id=assignment.student_id,
            student_name=student_name,
            route_id=assignment.route_id,
            route_name=route_name,
            vehicle_id=assignment.vehicle_id,
            vehicle_number=vehicle_number,
            pickup_point=assignment.pickup_point,
            drop_point=assignment.drop_point,
            monthly_fee=to_money(assignment.monthly_fee),
            is_active=assignment.is_active,
            created_at=assignment.created_at,
        )

    async def get_assignments(
        self,
        db: AsyncSession,
        route_id: uuid.UUID | None = None,
        vehicle_id: uuid.UUID | None = None,
        student_id: uuid.UUID | None = None,
        is_active: bool | None = None,
    ) -> list[AssignmentResponse]:
        """Get assignments with student, route and vehicle labels."""
        query = self._assignment_query()
        if route_id:
            query = query.where(TransportStudentAssignment.route_id == route_id)
        if vehicle_id:
            query = query.where(TransportStudentAssignment.vehicle_id == vehicle_id)
        if student_id:
            query = query.where(TransportStudentAssignment.student_id == student_id)
        if is_active is not None:
            query = query.where(TransportStudentAssignment.is_active == is_active)

        result = await db.execute(query.order_by(TransportRoute.route_name, Student.name))
        return [self._assignment_response(*row) for row in result.all()]

    async def get_assignment(self, db: AsyncSession, assignment_id: uuid.UUID) -> AssignmentResponse:
        """Get a single assignment with labels."""
        result = await db.execute(
            self._assignment_query().where(TransportStudentAssignment.id == assignment_id)
        )
        row = result.one_or_none()

        if not row:
            raise NotFoundException("Assignment")

        return self._assignment_response(*row)

    async def create_assignment(self, db: AsyncSession, data: AssignmentCreate) -> AssignmentResponse:
        """Assign a student to a route; the fee defaults to the route's monthly fee."""
        school_id = get_school_id()

        student = await db.execute(
            select(Student.id).where(
                Student.id == data.student_id,
                Student.school_id == school_id,
                Student.deleted_at.is_(None),
            )
        )
        if student.scalar_one_or_none() is None:
            raise NotFoundException("Student")

        route = await self.get_route(db, data.route_id)

        if data.is_active:
            await self._check_no_active_assignment(db, data.student_id)

        if data.vehicle_id and data.is_active:
            await self._check_capacity(db, data.vehicle_id)
        elif data.vehicle_id:
            await self.get_vehicle(db, data.vehicle_id)

        values = data.model_dump()
        if values["monthly_fee"] is None:
            values["monthly_fee"] = route.monthly_fee

        assignment = TransportStudentAssignment(school_id=school_id, **values)
        db.add(assignment)
        await db.flush()

        return await self.get_assignment(db, assignment.id)

    async def update_assignment(
        self, db: AsyncSession, assignment_id: uuid.UUID, data: AssignmentUpdate
    ) -> AssignmentResponse:
        """Update an assignment."""
        result = await db.execute(
            select(TransportStudentAssignment).where(
                TransportStudentAssignment.id == assignment_id,
                TransportStudentAssignment.school_id == get_school_id(),
                TransportStudentAssignment.deleted_at.is_(None),
            )
        )
        assignment = result.scalar_one_or_none()
        if not assignment:
            raise NotFoundException("Assignment")

        update_data = data.model_dump(exclude_unset=True)

        if update_data.get("route_id"):
            await self.get_route(db, update_data["route_id"])

        vehicle_id = update_data.get("vehicle_id", assignment.vehicle_id)
        becomes_active = update_data.get("is_active")
        if becomes_active is None:
            becomes_active = assignment.is_active
        vehicle_changed = vehicle_id != assignment.vehicle_id
        activated = becomes_active and not assignment.is_active

        if activated:
            await self._check_no_active_assignment(db, assignment.student_id, exclude_id=assignment.id)

        if vehicle_id and becomes_active and (vehicle_changed or activated):
            await self._check_capacity(db, vehicle_id)
        elif vehicle_id and vehicle_changed:
            await self.get_vehicle(db, vehicle_id)

        for field, value in update_data.items():
            if value is None and not TransportStudentAssignment.__table__.c[field].nullable:
                continue
            setattr(assignment, field, value)

        await db.flush()

        return await self.get_assignment(db, assignment.id)

    async def delete_assignment(self, db: AsyncSession, assignment_id: uuid.UUID) -> None:
        """Soft delete an assignment."""
        result = await db.execute(
            select(TransportStudentAssignment).where(
                TransportStudentAssignment.id == assignment_id,
                TransportStudentAssignment.school_id == get_school_id(),
                TransportStudentAssignment.deleted_at.is_(None),
            )
        )
        assignment = result.scalar_one_or_none()
        if not assignment:
            raise NotFoundException("Assignment")

        assignment.soft_delete()
        assignment.is_active = False
        await db.flush()

    async def _check_no_active_assignment(
        self, db: AsyncSession, student_id: uuid.UUID, exclude_id: uuid.UUID | None = None
    ) -> None:
        """A student rides on at most one active assignment."""
        query = select(TransportStudentAssignment.id).where(
            TransportStudentAssignment.student_id == student_id,
            TransportStudentAssignment.is_active.is_(True),
            TransportStudentAssignment.deleted_at.is_(None),
        )
        if exclude_id:
            query = query.where(TransportStudentAssignment.id != exclude_id)

        existing = await db.execute(query)
        if existing.first() is not None:
            raise ConflictException("Student already has an active transport assignment")

    async def _check_capacity(self, db: AsyncSession, vehicle_id: uuid.UUID) -> None:
        """Lock a vehicle and make sure it has a free seat."""
        result = await db.execute(
            select(TransportVehicle)
            .where(
                TransportVehicle.id == vehicle_id,
                TransportVehicle.school_id == get_school_id(),
                TransportVehicle.deleted_at.is_(None),
            )
            .with_for_update()
        )
        vehicle = result.scalar_one_or_none()
        if not vehicle:
            raise NotFoundException("Vehicle")

        seated = await db.execute(
            select(func.count(TransportStudentAssignment.id)).where(
                TransportStudentAssignment.vehicle_id == vehicle.id,
                TransportStudentAssignment.is_active.is_(True),
                TransportStudentAssignment.deleted_at.is_(None),
            )
        )
        if (seated.scalar() or 0) >= vehicle.capacity:
            raise ConflictException(f"Vehicle {vehicle.vehicle_number} is at full capacity")

    async def get_stats(self, db: AsyncSession) -> TransportStats:
        """Transport headline numbers."""
        school_id = get_school_id()

        routes = await db.execute(
            select(func.count(TransportRoute.id)).where(
                TransportRoute.school_id == school_id,
                TransportRoute.deleted_at.is_(None),
            )
        )
        vehicles = await db.execute(
            select(
                func.count(TransportVehicle.id),
                func.count(case((TransportVehicle.is_active.is_(True), TransportVehicle.id))),
                func.coalesce(func.sum(TransportVehicle.capacity), 0),
            ).where(
                TransportVehicle.school_id == school_id,
                TransportVehicle.deleted_at.is_(None),
            )
        )
        total_vehicles, active_vehicles, capacity = vehicles.one()
        assignments = await db.execute(
            select(
                func.count(TransportStudentAssignment.id),
                func.sum(TransportStudentAssignment.monthly_fee),
            ).where(
                TransportStudentAssignment.school_id == school_id,
                TransportStudentAssignment.deleted_at.is_(None),
                TransportStudentAssignment.is_active.is_(True),
            )
        )
        active_assignments, revenue = assignments.one()

        return TransportStats(
            total_routes=routes.scalar() or 0,
            total_vehicles=total_vehicles or 0,
            active_vehicles=active_vehicles or 0,
            active_assignments=active_assignments or 0,
            total_capacity=int(capacity),
            monthly_revenue=to_money(revenue),
        )


def get_transport_service() -> TransportService:
    """Get transport service instance."""
    return TransportService()
