import logging
from datetime import datetime, timezone

from order_notifications.application.interfaces import EmailSender, MessagingSender
from order_notifications.application.messages import (
    order_confirmation_whatsapp,
    order_received_email,
    order_received_whatsapp,
)
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


class NotifyOrderReceivedUseCase:
    """Alerts the shop admin about a completed checkout."""

    def __init__(
        self,
        unit_of_work,
        email_sender: EmailSender,
        messaging_sender: MessagingSender,
        settings: Settings,
    ):
        self._uow = unit_of_work
        self._email = email_sender
        self._messaging = messaging_sender
        self._settings = settings

    async def __call__(self, order: Order) -> NotificationResult:
        if order is None:
            raise ValueError("order is required")

        logger.info(f"Admin notifications for new order {order.id}")
        outcome = MultiChannelOutcome()

        if self._settings.ADMIN_WHATSAPP_NUMBER:
            await attempt_channel(
                outcome,
                NotificationChannel.WHATSAPP,
                self._messaging.send_message(
                    self._settings.ADMIN_WHATSAPP_NUMBER,
                    order_received_whatsapp(order, self._settings),
                ),
                self._settings.CHANNEL_TIMEOUT_SECONDS,
            )
        else:
            logger.info("ADMIN_WHATSAPP_NUMBER not set, skipping WhatsApp alert")

        if self._settings.ADMIN_EMAIL:
            content = order_received_email(order, self._settings)
            await attempt_channel(
                outcome,
                NotificationChannel.EMAIL,
                self._email.send_email(self._settings.ADMIN_EMAIL, content.subject, content.html, content.text),
                self._settings.CHANNEL_TIMEOUT_SECONDS,
            )
        else:
            logger.info("ADMIN_EMAIL not set, skipping email alert")

        payload = AdminAlertPayload(
            order_id=order.id,
            customer_name=order.shipping_address.name or "Client invité",
            email_sent=outcome.was_sent(NotificationChannel.EMAIL),
            whatsapp_sent=outcome.was_sent(NotificationChannel.WHATSAPP),
            sent_at=datetime.now(timezone.utc),
            errors=outcome.errors,
        )
        try:
            async with self._uow() as uow:
                await uow.notifications.create(NotificationEvent(
                    type=NotificationType.ORDER_RECEIVED,
                    user_id=None,
                    order_id=order.id,
                    data=payload.to_document(),
                ))
                await uow.commit()
            outcome.succeeded(NotificationChannel.INTERNAL)
        except Exception as e:
            logger.error(f"order_received record failed for order {order.id}: {e}")
            outcome.failed(NotificationChannel.INTERNAL, str(e))

        return outcome.finalize()



class NotifyOrderConfirmationUseCase:
    """WhatsApp confirmation to the customer who placed the order.

    Nothing is recorded: the customer's inbox starts with the first status update.
    """

    def __init__(self, messaging_sender: MessagingSender, settings: Settings):
        self._messaging = messaging_sender
        self._settings = settings

    async def __call__(self, order: Order) -> NotificationResult:
        if order is None:
            raise ValueError("order is required")

        outcome = MultiChannelOutcome()
        if order.customer_phone:
            await attempt_channel(
                outcome,
                NotificationChannel.WHATSAPP,
                self._messaging.send_message(
                    order.customer_phone,
                    order_confirmation_whatsapp(order, self._settings),
                ),
                self._settings.CHANNEL_TIMEOUT_SECONDS,
            )
        else:
            logger.info(f"Order {order.id} has no phone, no WhatsApp confirmation")

        return outcome.finalize()
