import logging
from typing import Union

from pydantic import BaseModel

from order_notifications.application.notify_status_change import NotifyStatusChangeUseCase
from order_notifications.domain.exceptions import OrderNotFoundError
from order_notifications.domain.models import (
    ChannelError,
    NotificationChannel,
    NotificationResult,
    Order,
    OrderStatus,
)
from order_notifications.domain.status_config import status_code


logger = logging.getLogger(__name__)


class StatusUpdateOutcome(BaseModel):
    order: Order
    previous_status: str
    notifications: NotificationResult


class UpdateOrderStatusUseCase:
    """Persists a status change, then notifies. Notification trouble never undoes the change."""

    def __init__(self, unit_of_work, notifier: NotifyStatusChangeUseCase):
        self._uow = unit_of_work
        self._notifier = notifier

    async def __call__(self, order_id: str, new_status: Union[OrderStatus, str]) -> StatusUpdateOutcome:
        new_status = status_code(new_status)

        async with self._uow() as uow:
            order = await uow.orders.get_by_id(order_id)
            if not order:
                raise OrderNotFoundError(order_id)
            previous_status = order.status
            if previous_status != new_status:
                await uow.orders.update_status(order_id, new_status)
                await uow.commit()
                logger.info(f"Order {order_id} status: {previous_status} -> {new_status}")

        updated = order.model_copy(update={"status": new_status})
        try:
            notifications = await self._notifier(updated, new_status, previous_status)
        except Exception as e:
            logger.exception(f"Notification fan-out crashed for order {order_id}")
            notifications = NotificationResult(
                errors=[ChannelError(type=NotificationChannel.INTERNAL, error=str(e))]
            )

        return StatusUpdateOutcome(order=updated, previous_status=previous_status, notifications=notifications)
