"""Pydantic schemas for transport routes, vehicles and assignments."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RouteCreate(BaseModel):
    """Schema for creating a route."""

    route_name: str = Field(..., min_length=1, max_length=255)
    pickup_points: list[dict[str, Any]] = Field(default_factory=list)
    timings: dict[str, Any] = Field(default_factory=dict)
    monthly_fee: Decimal = Field(Decimal("0.00"), ge=0, max_digits=10, decimal_places=2)


class RouteUpdate(BaseModel):
    """Schema for updating a route."""

    route_name: str | None = Field(None, min_length=1, max_length=255)
    pickup_points: list[dict[str, Any]] | None = None
    timings: dict[str, Any] | None = None
    monthly_fee: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)


class RouteResponse(RouteCreate):
    """Schema for route response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class VehicleCreate(BaseModel):
    """Schema for creating a vehicle."""

    vehicle_number: str = Field(..., min_length=1, max_length=50)
    type: str = Field("bus", max_length=50)
    capacity: int = Field(..., ge=1)
    driver_name: str | None = Field(None, max_length=200)
    driver_phone: str | None = Field(None, max_length=50)
    helper_name: str | None = Field(None, max_length=200)
    helper_phone: str | None = Field(None, max_length=50)
    route_id: uuid.UUID | None = None
    is_active: bool = True


class VehicleUpdate(BaseModel):
    """Schema for updating a vehicle."""

    vehicle_number: str | None = Field(None, min_length=1, max_length=50)
    type: str | None = Field(None, max_length=50)
    capacity: int | None = Field(None, ge=1)
    driver_name: str | None = Field(None, max_length=200)
    driver_phone: str | None = Field(None, max_length=50)
    helper_name: str | None = Field(None, max_length=200)
    helper_phone: str | None = Field(None, max_length=50)
    route_id: uuid.UUID | None = None
    is_active: bool | None = None


class VehicleResponse(VehicleCreate):
    """Schema for vehicle response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    route_name: str | None = None
    created_at: datetime
    updated_at: datetime


class AssignmentCreate(BaseModel):
    """Schema for assigning a student to a route."""

    student_id: uuid.UUID
    route_id: uuid.UUID
    vehicle_id: uuid.UUID | None = None
    pickup_point: str = Field(..., min_length=1, max_length=255)
    drop_point: str | None = Field(None, max_length=255)
    monthly_fee: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    is_active: bool = True


class AssignmentUpdate(BaseModel):
    """Schema for updating an assignment."""

    route_id: uuid.UUID | None = None
    vehicle_id: uuid.UUID | None = None
    pickup_point: str | None = Field(None, min_length=1, max_length=255)
    drop_point: str | None = Field(None, max_length=255)
    monthly_fee: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    is_active: bool | None = None


class AssignmentResponse(BaseModel):
    """An assignment with student, route and vehicle labels joined in."""

    id: uuid.UUID
    student_id: uuid.UUID
    student_name: str | None = None
    route_id: uuid.UUID
    route_name: str | None = None
    vehicle_id: uuid.UUID | None
    vehicle_number: str | None = None
    pickup_point: str
    drop_point: str | None
    monthly_fee: Decimal
    is_active: bool
    created_at: datetime


class TransportStats(BaseModel):
    """Transport headline numbers."""

    total_routes: int
    total_vehicles: int
    active_vehicles: int
    active_assignments: int
    total_capacity: int
    monthly_revenue: Decimal
