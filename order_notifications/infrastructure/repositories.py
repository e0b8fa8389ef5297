import uuid
from datetime import datetime, timezone
from typing import Optional, List
from sqlalchemy import String, and_, cast, insert, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from order_notifications.domain.exceptions import NotificationStoreError
from order_notifications.domain.models import ChannelSwitches, NotificationEvent, Order
from order_notifications.infrastructure.db_schema import notifications_tbl, orders_tbl, store_settings_tbl
from order_notifications.application.interfaces import (
    NotificationRepository,
    OrderRepository,
    StoreSettingsRepository,
)


class SQLAlchemyOrderRepository(OrderRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, order_id: str) -> Optional[Order]:
        result = await self._session.execute(
            select(orders_tbl).where(orders_tbl.c.id == str(order_id))
        )
        row = result.fetchone()
        return self._to_domain(row) if row else None

    async def update_status(self, order_id: str, status: str) -> None:
        stmt = (
            update(orders_tbl)
            .where(orders_tbl.c.id == str(order_id))
            .values(
                status=status,
                updated_at=datetime.now(timezone.utc)
            )
        )
        await self._session.execute(stmt)

    def _to_domain(self, row) -> Order:
        """DB -> Domain, validated here so the rest of the code can trust the shape"""
        return Order.model_validate({
            "id": row.id,
            "status": row.status,
            "total": row.total,
            "shipping_address": row.shipping_address,
            "user_id": row.user_id,
            "created_at": row.created_at,
        })


class SQLAlchemyNotificationRepository(NotificationRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(self, event: NotificationEvent) -> str:
        event_id = str(uuid.uuid4())
        stmt = insert(notifications_tbl).values(
            id=event_id,
            user_id=event.user_id,
            type=event.type,
            order_id=event.order_id,
            data=event.data,
            is_read=event.is_read,
            created_at=event.created_at or datetime.now(timezone.utc)
        )
        try:
            await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise NotificationStoreError(f"Could not store {event.type} notification: {e}") from e
        return event_id

    async def get_by_type(self, event_type: str) -> List[NotificationEvent]:
        result = await self._session.execute(
            select(notifications_tbl)
            .where(notifications_tbl.c.type == event_type)
            .order_by(notifications_tbl.c.created_at.desc())
        )
        return [self._to_domain(row) for row in result.fetchall()]

    async def get_by_type_and_order(self, event_type: str, order_id: str) -> List[NotificationEvent]:
        order_id = str(order_id)
        # rows written before the order_id column existed only carry data.orderId
        legacy_match = and_(
            notifications_tbl.c.order_id.is_(None),
            cast(notifications_tbl.c.data["orderId"].as_string(), String) == order_id,
        )
        result = await self._session.execute(
            select(notifications_tbl)
            .where(
                notifications_tbl.c.type == event_type,
                or_(notifications_tbl.c.order_id == order_id, legacy_match)
            )
            .order_by(notifications_tbl.c.created_at.desc())
        )
        return [self._to_domain(row) for row in result.fetchall()]

    async def get_by_type_since(self, event_type: str, since: datetime) -> List[NotificationEvent]:
        result = await self._session.execute(
            select(notifications_tbl)
            .where(
                notifications_tbl.c.type == event_type,
                notifications_tbl.c.created_at >= since
            )
            .order_by(notifications_tbl.c.created_at.desc())
        )
        return [self._to_domain(row) for row in result.fetchall()]

    def _to_domain(self, row) -> NotificationEvent:
        return NotificationEvent(
            id=row.id,
            type=row.type,
            user_id=row.user_id,
            order_id=row.order_id,
            data=row.data or {},
            is_read=row.is_read,
            created_at=row.created_at
        )


class SQLAlchemyStoreSettingsRepository(StoreSettingsRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_channel_switches(self) -> ChannelSwitches:
        result = await self._session.execute(
            select(
                store_settings_tbl.c.enable_email_notifications,
                store_settings_tbl.c.enable_whatsapp_notifications,
            ).limit(1)
        )
        row = result.fetchone()
        if row is None:
            return ChannelSwitches()
        return ChannelSwitches(
            email=row.enable_email_notifications,
            whatsapp=row.enable_whatsapp_notifications,
        )
