"""Notification service for in-app notifications."""

import logging
import uuid

from sqlalchemy import case, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.exceptions import ForbiddenException, NotFoundException
from schoolbase.models import Notification, User
from schoolbase.models.base import utcnow
from schoolbase.models.notification import NotificationPriority, NotificationType
from schoolbase.schemas.notification import NotificationCreate, NotificationStats
from schoolbase.utils.school_context import get_current_user_id, get_school_id, is_staff

logger = logging.getLogger(__name__)


def _visible_to(user_id: uuid.UUID):
    """Notifications addressed to the user, to the whole school, or public."""
    return or_(
        Notification.recipient_id == user_id,
        Notification.recipient_id.is_(None),
        Notification.is_public.is_(True),
    )


class NotificationService:
    """Service for managing in-app notifications."""

    def _base_filter(self) -> list:
        return [
            Notification.school_id == get_school_id(),
            Notification.deleted_at.is_(None),
            _visible_to(get_current_user_id()),
        ]

    async def get_notifications(
        self,
        db: AsyncSession,
        unread_only: bool = False,
        category: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Notification], int]:
        """Get notifications visible to the current user, newest first."""
        base_filter = self._base_filter()
        if unread_only:
            base_filter.append(Notification.is_read.is_(False))
        if category:
            base_filter.append(Notification.category == category)

        # Count
        count_query = select(func.count(Notification.id)).where(*base_filter)
        total = (await db.execute(count_query)).scalar() or 0

        query = (
            select(Notification)
            .where(*base_filter)
            .order_by(Notification.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await db.execute(query)

        return list(result.scalars().all()), total

    async def get_notification(self, db: AsyncSession, notification_id: uuid.UUID) -> Notification:
        """Get a notification visible to the current user."""
        result = await db.execute(
            select(Notification).where(Notification.id == notification_id, *self._base_filter())
        )
        notification = result.scalar_one_or_none()

        if not notification:
            raise NotFoundException("Notification")

        return notification

    async def create_notification(
        self, db: AsyncSession, data: NotificationCreate
    ) -> Notification:
        """Send a notification to one user or to the whole school."""
        school_id = get_school_id()

        if data.recipient_id:
            recipient = await db.execute(
                select(User.id).where(
                    User.id == data.recipient_id,
                    User.school_id == school_id,
                    User.deleted_at.is_(None),
                )
            )
            if recipient.scalar_one_or_none() is None:
                raise NotFoundException("Recipient")

        sender = await db.get(User, get_current_user_id())

        notification = Notification(
            school_id=school_id,
            sender=sender.full_name if sender else None,
            is_read=False,
            **data.model_dump(),
        )
        db.add(notification)
        await db.flush()
        await db.refresh(notification)

        logger.info(
            f"Notification {notification.id} sent to "
            f"{data.recipient_id or 'whole school'} (priority={notification.priority})"
        )

        return notification

    async def mark_as_read(self, db: AsyncSession, notification_ids: list[uuid.UUID]) -> int:
        """Mark notifications as read; ids the user cannot see are ignored."""
        result = await db.execute(
            update(Notification)
            .where(
                Notification.id.in_(notification_ids),
                Notification.is_read.is_(False),
                *self._base_filter(),
            )
            .values(is_read=True, read_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def mark_one_as_read(self, db: AsyncSession, notification_id: uuid.UUID) -> Notification:
        """Mark a single notification as read."""
        notification = await self.get_notification(db, notification_id)

        if not notification.is_read:
            notification.is_read = True
            notification.read_at = utcnow()
            await db.flush()
            await db.refresh(notification)

        return notification

    async def get_stats(self, db: AsyncSession) -> NotificationStats:
        """Counts of notifications visible to the current user."""
        unread = Notification.is_read.is_(False)
        query = select(
            func.count(Notification.id),
            func.count(case((unread, Notification.id))),
            func.count(
                case((
                    or_(
                        Notification.type == NotificationType.URGENT.value,
                        Notification.priority == NotificationPriority.URGENT.value,
                    ),
                    Notification.id,
                ))
            ),
            func.count(case((Notification.action_required.is_(True) & unread, Notification.id))),
        ).where(*self._base_filter())
        total, unread_count, urgent, action_required = (await db.execute(query)).one()

        return NotificationStats(
            total=total or 0,
            unread=unread_count or 0,
            urgent=urgent or 0,
            action_required=action_required or 0,
        )

    async def delete_notification(self, db: AsyncSession, notification_id: uuid.UUID) -> None:
        """Delete a notification.

        Staff may delete any notification of the school; other users only
        notifications addressed to them.
        """
        notification = await self.get_notification(db, notification_id)

        if not is_staff() and notification.recipient_id != get_current_user_id():
            raise ForbiddenException("You can only delete your own notifications")

        notification.soft_delete()
        await db.flush()


def get_notification_service() -> NotificationService:
    """Get notification service instance."""
    return NotificationService()
