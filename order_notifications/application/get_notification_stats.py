import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from order_notifications.domain.models import NotificationStats, NotificationType


logger = logging.getLogger(__name__)


class GetNotificationStatsUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, days: int = 30) -> Optional[NotificationStats]:
        since = datetime.now(timezone.utc) - timedelta(days=days)
        try:
            async with self._uow() as uow:
                events = await uow.notifications.get_by_type_since(NotificationType.STATUS_UPDATE.value, since)
        except Exception as e:
            logger.error(f"Failed to load notification stats: {e}")
            return None

        # customer copies duplicate the admin record of the same attempt
        events = [event for event in events if event.is_admin]
        stats = NotificationStats(total=len(events))
        for event in events:
            data = event.data or {}
            if data.get("emailSent"):
                stats.email += 1
            if data.get("whatsappSent"):
                stats.whatsapp += 1
            if data.get("errors"):
                stats.failed += 1
            status = data.get("newStatus")
            if status:
                stats.by_status[status] = stats.by_status.get(status, 0) + 1
        return stats
