"""Inventory models for stock items and their movements."""

import uuid
from decimal import Decimal
from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from schoolbase.models.base import SchoolScopedModel


class MovementType(str, Enum):
    """Kinds of stock movement."""

    IN = "in"
    OUT = "out"
    ADJUSTMENT = "adjustment"


class StockStatus(str, Enum):
    """Computed stock level of an item."""

    AVAILABLE = "available"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


class ItemCondition(str, Enum):
    """Physical condition of an item."""

    NEW = "new"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    DAMAGED = "damaged"


class InventoryItem(SchoolScopedModel):
    """A stock-keeping item owned by the school."""

    __tablename__ = "inventory_items"
    __table_args__ = (
        CheckConstraint("current_quantity >= 0", name="ck_inventory_items_quantity"),
        Index(
            "idx_inventory_items_school_category",
            "school_id",
            "category",
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    name_bn: Mapped[str | None] = mapped_column(String(255), nullable=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    subcategory: Mapped[str | None] = mapped_column(String(100), nullable=True)
    brand: Mapped[str | None] = mapped_column(String(100), nullable=True)
    model: Mapped[str | None] = mapped_column(String(100), nullable=True)
    serial_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    unit_price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00")
    )
    current_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    minimum_threshold: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    unit: Mapped[str] = mapped_column(String(20), nullable=False, default="pcs")
    supplier: Mapped[str | None] = mapped_column(String(255), nullable=True)
    location: Mapped[str | None] = mapped_column(String(100), nullable=True)
    condition: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ItemCondition.GOOD.value
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def stock_status(self) -> str:
        """Derive the stock level from quantity and threshold."""
        if self.current_quantity <= 0:
            return StockStatus.OUT_OF_STOCK.value
        if self.current_quantity <= self.minimum_threshold:
            return StockStatus.LOW_STOCK.value
        return StockStatus.AVAILABLE.value

    @property
    def total_value(self) -> Decimal:
        """Stock value at unit price."""
        return Decimal(self.unit_price or 0) * self.current_quantity


class InventoryMovement(SchoolScopedModel):
    """A recorded stock change for an item."""

    __tablename__ = "inventory_movements"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_inventory_movements_quantity"),
        Index("idx_inventory_movements_item", "item_id"),
    )

    item_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("inventory_items.id", ondelete="CASCADE"),
        nullable=False,
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(String(255), nullable=False)
    reference: Mapped[str | None] = mapped_column(String(100), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
