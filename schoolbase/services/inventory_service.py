"""Inventory service for items, stock movements and CSV export."""

import csv
import io
import logging
import uuid

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.exceptions import NotFoundException, ValidationException
from schoolbase.models import InventoryItem, InventoryMovement
from schoolbase.models.inventory import MovementType, StockStatus
from schoolbase.schemas.inventory import (
    InventoryStats,
    ItemCreate,
    ItemUpdate,
    MovementCreate,
    MovementResponse,
)
from schoolbase.utils.money import to_money
from schoolbase.utils.school_context import get_current_user_id_or_none, get_school_id

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "name",
    "name_bn",
    "category",
    "subcategory",
    "brand",
    "model",
    "serial_number",
    "unit_price",
    "current_quantity",
    "minimum_threshold",
    "unit",
    "supplier",
    "location",
    "condition",
    "stock_status",
]


def _stock_status_clause(status: str):
    """SQL condition for a computed stock status."""
    if status == StockStatus.OUT_OF_STOCK.value:
        return InventoryItem.current_quantity <= 0
    if status == StockStatus.LOW_STOCK.value:
        return (InventoryItem.current_quantity > 0) & (
            InventoryItem.current_quantity <= InventoryItem.minimum_threshold
        )
    return InventoryItem.current_quantity > InventoryItem.minimum_threshold


class InventoryService:
    """Service for school inventory."""

    async def get_items(
        self,
        db: AsyncSession,
        category: str | None = None,
        stock_status: str | None = None,
        search: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[InventoryItem], int]:
        """Get items with optional filters."""
        query = select(InventoryItem).where(
            InventoryItem.school_id == get_school_id(),
            InventoryItem.deleted_at.is_(None),
        )

        if category:
            query = query.where(InventoryItem.category == category)
        if stock_status:
            query = query.where(_stock_status_clause(stock_status))
        if search:
            search_term = f"%{search}%"
            query = query.where(
                (InventoryItem.name.ilike(search_term))
                | (InventoryItem.name_bn.ilike(search_term))
                | (InventoryItem.brand.ilike(search_term))
                | (InventoryItem.serial_number.ilike(search_term))
            )

        # Get total count
        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar() or 0

        query = query.order_by(InventoryItem.name).offset((page - 1) * page_size).limit(page_size)
        result = await db.execute(query)

        return list(result.scalars().all()), total

    async def get_item(
        self, db: AsyncSession, item_id: uuid.UUID, for_update: bool = False
    ) -> InventoryItem:
        """Get a single item by ID, optionally locking its row."""
        query = select(InventoryItem).where(
            InventoryItem.id == item_id,
            InventoryItem.school_id == get_school_id(),
            InventoryItem.deleted_at.is_(None),
        )
        if for_update:
            query = query.with_for_update()

        result = await db.execute(query)
        item = result.scalar_one_or_none()

        if not item:
            raise NotFoundException("Inventory item")

        return item

    async def create_item(self, db: AsyncSession, data: ItemCreate) -> InventoryItem:
        """Create an item; a non-zero opening quantity is logged as a stock-in movement."""
        item = InventoryItem(school_id=get_school_id(), **data.model_dump())
        db.add(item)
        await db.flush()

        if item.current_quantity > 0:
            db.add(InventoryMovement(
                school_id=item.school_id,
                item_id=item.id,
                type=MovementType.IN.value,
                quantity=item.current_quantity,
                reason="Opening stock",
                created_by=get_current_user_id_or_none(),
            ))
            await db.flush()

        await db.refresh(item)

        return item

    async def update_item(
        self, db: AsyncSession, item_id: uuid.UUID, data: ItemUpdate
    ) -> InventoryItem:
        """Update item details."""
        item = await self.get_item(db, item_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and not InventoryItem.__table__.c[field].nullable:
                continue
            setattr(item, field, value)

        await db.flush()
        await db.refresh(item)

        return item

    async def delete_item(self, db: AsyncSession, item_id: uuid.UUID) -> None:
        """Soft delete an item."""
        item = await self.get_item(db, item_id)
        item.soft_delete()
        await db.flush()

    async def get_movements(
        self,
        db: AsyncSession,
        item_id: uuid.UUID | None = None,
        type: str | None = None,
        search: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[MovementResponse], int]:
        """Get stock movements, newest first, with the item name joined in."""
        query = (
            select(InventoryMovement, InventoryItem.name)
            .join(InventoryItem, InventoryItem.id == InventoryMovement.item_id)
            .where(
                InventoryMovement.school_id == get_school_id(),
                InventoryMovement.deleted_at.is_(None),
            )
        )

        if item_id:
            query = query.where(InventoryMovement.item_id == item_id)
        if type:
            query = query.where(InventoryMovement.type == type)
        if search:
            search_term = f"%{search}%"
            query = query.where(
                (InventoryItem.name.ilike(search_term))
                | (InventoryMovement.reason.ilike(search_term))
                | (InventoryMovement.reference.ilike(search_term))
            )

        # Get total count
        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar() or 0

        query = query.order_by(InventoryMovement.created_at.desc()).offset((page - 1) * page_size).limit(page_size)
        result = await db.execute(query)

        movements = [self._movement_response(movement, name) for movement, name in result.all()]

        return movements, total

    async def record_movement(
        self, db: AsyncSession, data: MovementCreate
    ) -> tuple[MovementResponse, InventoryItem]:
        """Record a stock movement and apply it to the item's quantity.

        The item row is locked while the quantity is read and written. ``in``
        adds, ``out`` subtracts and ``adjustment`` sets the quantity outright.

        Raises:
            ValidationException: If an ``out`` movement exceeds the stock on hand
        """
        item = await self.get_item(db, data.item_id, for_update=True)

        if data.type == MovementType.IN.value:
            if data.quantity <= 0:
                raise ValidationException(
                    [{"field": "quantity", "message": "Quantity must be greater than 0"}],
                    message="Quantity must be greater than 0",
                )
            item.current_quantity += data.quantity
        elif data.type == MovementType.OUT.value:
            if data.quantity <= 0:
                raise ValidationException(
                    [{"field": "quantity", "message": "Quantity must be greater than 0"}],
                    message="Quantity must be greater than 0",
                )
            if data.quantity > item.current_quantity:
                raise ValidationException(
                    [{
                        "field": "quantity",
                        "message": f"Only {item.current_quantity} {item.unit} in stock",
                    }],
                    message="Insufficient stock",
                )
            item.current_quantity -= data.quantity
        else:
            item.current_quantity = data.quantity

        movement = InventoryMovement(
            school_id=item.school_id,
            item_id=item.id,
            type=data.type,
            quantity=data.quantity,
            reason=data.reason,
            reference=data.reference,
            notes=data.notes,
            created_by=get_current_user_id_or_none(),
        )
        db.add(movement)
        await db.flush()
        await db.refresh(movement)
        await db.refresh(item)

        if item.stock_status != StockStatus.AVAILABLE.value:
            logger.info(f"Item {item.id} ({item.name}) is now {item.stock_status}")

        return self._movement_response(movement, item.name), item

    async def get_stats(self, db: AsyncSession) -> InventoryStats:
        """Inventory headline numbers."""
        query = select(
            func.count(InventoryItem.id),
            func.coalesce(func.sum(InventoryItem.current_quantity), 0),
            func.count(case((_stock_status_clause(StockStatus.LOW_STOCK.value), InventoryItem.id))),
            func.count(case((_stock_status_clause(StockStatus.OUT_OF_STOCK.value), InventoryItem.id))),
            func.sum(InventoryItem.unit_price * InventoryItem.current_quantity),
        ).where(
            InventoryItem.school_id == get_school_id(),
            InventoryItem.deleted_at.is_(None),
        )
        total, quantity, low, out, value = (await db.execute(query)).one()

        return InventoryStats(
            total_items=total or 0,
            total_quantity=int(quantity),
            low_stock_items=low or 0,
            out_of_stock_items=out or 0,
            total_value=to_money(value),
        )

    async def export_csv(self, db: AsyncSession) -> str:
        """Render every item of the school as CSV."""
        result = await db.execute(
            select(InventoryItem)
            .where(
                InventoryItem.school_id == get_school_id(),
                InventoryItem.deleted_at.is_(None),
            )
            .order_by(InventoryItem.category, InventoryItem.name)
        )

        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(EXPORT_COLUMNS)
        for item in result.scalars().all():
            writer.writerow([
                to_money(item.unit_price) if column == "unit_price" else getattr(item, column)
                for column in EXPORT_COLUMNS
            ])

        return buffer.getvalue()

    def _movement_response(self, movement: InventoryMovement, item_name: str | None) -> MovementResponse:
        return MovementResponse(
            id=movement.id,
            item_id=movement.item_id,
            item_name=item_name,
            type=movement.type,
            quantity=movement.quantity,
            reason=movement.reason,
            reference=movement.reference,
            notes=movement.notes,
            created_by=movement.created_by,
            created_at=movement.created_at,
        )


def get_inventory_service() -> InventoryService:
    """Get inventory service instance."""
    return InventoryService()
