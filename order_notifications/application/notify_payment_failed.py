import logging
from datetime import datetime, timezone

from order_notifications.application.interfaces import MessagingSender
from order_notifications.application.messages import payment_failed_whatsapp
from order_notifications.application.outcome import MultiChannelOutcome, attempt_channel
from order_notifications.config import Settings
from order_notifications.domain.models import (
    AdminAlertPayload,
    NotificationChannel,
    NotificationEvent,
    NotificationResult,
    NotificationType,
    Order,
)


logger = logging.getLogger(__name__)


class NotifyPaymentFailedUseCase:
    """Alerts the admin over WhatsApp that an order's payment failed, and keeps an admin record."""

    def __init__(self, unit_of_work, messaging_sender: MessagingSender, settings: Settings):
        self._uow = unit_of_work
        self._messaging = messaging_sender
        self._settings = settings

    async def __call__(self, order: Order) -> NotificationResult:
        if order is None:
            raise ValueError("order is required")

        logger.warning(f"Payment failed for order {order.id}")
        outcome = MultiChannelOutcome()

        if self._settings.ADMIN_WHATSAPP_NUMBER:
            await attempt_channel(
                outcome,
                NotificationChannel.WHATSAPP,
                self._messaging.send_message(
                    self._settings.ADMIN_WHATSAPP_NUMBER,
                    payment_failed_whatsapp(order, self._settings),
                ),
                self._settings.CHANNEL_TIMEOUT_SECONDS,
            )
        else:
            logger.info("ADMIN_WHATSAPP_NUMBER not set, skipping payment failed alert")

        payload = AdminAlertPayload(
            order_id=order.id,
            customer_name=order.shipping_address.name or "Client invité",
            email_sent=False,
            whatsapp_sent=outcome.was_sent(NotificationChannel.WHATSAPP),
            sent_at=datetime.now(timezone.utc),
            errors=outcome.errors,
        )
        try:
            async with self._uow() as uow:
                await uow.notifications.create(NotificationEvent(
                    type=NotificationType.PAYMENT_FAILED,
                    user_id=None,
                    order_id=order.id,
                    data=payload.to_document(),
                ))
                await uow.commit()
            outcome.succeeded(NotificationChannel.INTERNAL)
        except Exception as e:
            logger.error(f"payment_failed record failed for order {order.id}: {e}")
            outcome.failed(NotificationChannel.INTERNAL, str(e))

        return outcome.finalize()
