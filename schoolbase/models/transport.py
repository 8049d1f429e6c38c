"""Transport models for routes, vehicles and student assignments."""

import uuid
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from schoolbase.models.base import JSONType, SchoolScopedModel


class TransportRoute(SchoolScopedModel):
    """A bus route with its stops and monthly fee."""

    __tablename__ = "transport_routes"
    __table_args__ = (
        Index(
            "idx_transport_routes_school",
            "school_id",
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    route_name: Mapped[str] = mapped_column(String(255), nullable=False)
    # [{"name": "...", "time": "07:15"}, ...]
    pickup_points: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    # {"morning": "07:00", "afternoon": "14:00"}
    timings: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)
    monthly_fee: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00")
    )


class TransportVehicle(SchoolScopedModel):
    """A vehicle serving a route."""

    __tablename__ = "transport_vehicles"
    __table_args__ = (
        Index(
            "idx_transport_vehicles_school_number",
            "school_id",
            "vehicle_number",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
        Index("idx_transport_vehicles_route", "route_id"),
    )

    vehicle_number: Mapped[str] = mapped_column(String(50), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False, default="bus")
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    driver_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    driver_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    helper_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    helper_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    route_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("transport_routes.id", ondelete="SET NULL"),
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class TransportStudentAssignment(SchoolScopedModel):
    """A student's seat on a route (and optionally a vehicle)."""

    __tablename__ = "transport_student_assignments"
    __table_args__ = (
        Index("idx_transport_assignments_student", "student_id"),
        Index("idx_transport_assignments_route", "route_id"),
        Index("idx_transport_assignments_vehicle", "vehicle_id"),
    )

    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
    )
    route_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("transport_routes.id", ondelete="CASCADE"),
        nullable=False,
    )
    vehicle_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("transport_vehicles.id", ondelete="SET NULL"),
        nullable=True,
    )
    pickup_point: Mapped[str] = mapped_column(String(255), nullable=False)
    drop_point: Mapped[str | None] = mapped_column(String(255), nullable=True)
    monthly_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
