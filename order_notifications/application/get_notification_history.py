import logging
from typing import List, Union

from order_notifications.domain.models import NotificationEvent, NotificationType


logger = logging.getLogger(__name__)


class GetNotificationHistoryUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_id: Union[str, int]) -> List[NotificationEvent]:
        """Status update records of one order, most recent first. Never raises."""
        try:
            async with self._uow() as uow:
                events = await uow.notifications.get_by_type_and_order(
                    NotificationType.STATUS_UPDATE.value, str(order_id)
                )
        except Exception as e:
            logger.error(f"Failed to load notification history for order {order_id}: {e}")
            return []

        return sorted(events, key=_created_at_key, reverse=True)


def _created_at_key(event: NotificationEvent):
    return event.created_at.timestamp() if event.created_at else 0.0
