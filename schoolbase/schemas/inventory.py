"""Pydantic schemas for inventory items and stock movements."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from schoolbase.models.inventory import ItemCondition, MovementType


class ItemBase(BaseModel):
    """Base schema for inventory item data."""

    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(..., min_length=1, max_length=255)
    name_bn: str | None = Field(None, max_length=255)
    category: str = Field(..., min_length=1, max_length=100)
    subcategory: str | None = Field(None, max_length=100)
    brand: str | None = Field(None, max_length=100)
    model: str | None = Field(None, max_length=100)
    serial_number: str | None = Field(None, max_length=100)
    unit_price: Decimal = Field(Decimal("0.00"), ge=0, max_digits=10, decimal_places=2)
    minimum_threshold: int = Field(10, ge=0)
    unit: str = Field("pcs", max_length=20)
    supplier: str | None = Field(None, max_length=255)
    location: str | None = Field(None, max_length=100)
    condition: ItemCondition = Field(ItemCondition.GOOD, validate_default=True)
    description: str | None = None


class ItemCreate(ItemBase):
    """Schema for creating an item."""

    current_quantity: int = Field(0, ge=0)


class ItemUpdate(BaseModel):
    """Schema for updating an item.

    Quantity is not editable here; record a movement instead.
    """

    model_config = ConfigDict(use_enum_values=True)

    name: str | None = Field(None, min_length=1, max_length=255)
    name_bn: str | None = Field(None, max_length=255)
    category: str | None = Field(None, min_length=1, max_length=100)
    subcategory: str | None = Field(None, max_length=100)
    brand: str | None = Field(None, max_length=100)
    model: str | None = Field(None, max_length=100)
    serial_number: str | None = Field(None, max_length=100)
    unit_price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    minimum_threshold: int | None = Field(None, ge=0)
    unit: str | None = Field(None, max_length=20)
    supplier: str | None = Field(None, max_length=255)
    location: str | None = Field(None, max_length=100)
    condition: ItemCondition | None = None
    description: str | None = None


class ItemResponse(ItemBase):
    """Schema for item response."""

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: uuid.UUID
    current_quantity: int
    condition: str
    stock_status: str
    total_value: Decimal
    created_at: datetime
    updated_at: datetime


class MovementCreate(BaseModel):
    """Schema for recording a stock movement."""

    model_config = ConfigDict(use_enum_values=True)

    item_id: uuid.UUID
    type: MovementType
    quantity: int = Field(..., ge=0)
    reason: str = Field(..., min_length=1, max_length=255)
    reference: str | None = Field(None, max_length=100)
    notes: str | None = None


class MovementResponse(BaseModel):
    """A stock movement with the item name joined in."""

    id: uuid.UUID
    item_id: uuid.UUID
    item_name: str | None = None
    type: str
    quantity: int
    reason: str
    reference: str | None
    notes: str | None
    created_by: uuid.UUID | None
    created_at: datetime


class InventoryStats(BaseModel):
    """Inventory headline numbers."""

    total_items: int
    total_quantity: int
    low_stock_items: int
    out_of_stock_items: int
    total_value: Decimal
