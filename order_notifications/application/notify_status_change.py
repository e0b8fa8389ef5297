import logging
from datetime import datetime, timezone
from typing import Optional, Union

from order_notifications.application.interfaces import EmailSender, MessagingSender
from order_notifications.application.messages import status_update_whatsapp
from order_notifications.application.outcome import MultiChannelOutcome, attempt_channel
from order_notifications.config import Settings
from order_notifications.domain.models import (
    ChannelSwitches,
    NotificationChannel,
    NotificationEvent,
    NotificationResult,
    NotificationType,
    Order,
    OrderStatus,
    StatusUpdatePayload,
)
from order_notifications.domain.status_config import get_status_config, is_known_status, status_code


logger = logging.getLogger(__name__)


class NotifyStatusChangeUseCase:
    """Fans an order status change out to email, WhatsApp and internal records.

    Channels are attempted in a fixed order (email, WhatsApp, admin record,
    customer record). A failing channel is recorded in the result and never
    stops the ones after it.
    """

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

    async def __call__(
        self,
        order: Order,
        new_status: Union[OrderStatus, str],
        previous_status: Union[OrderStatus, str, None] = None,
    ) -> NotificationResult:
        if order is None:
            raise ValueError("order is required")

        new_status = status_code(new_status)
        previous_status = status_code(previous_status) if previous_status is not None else None

        if previous_status == new_status:
            logger.info(f"Order {order.id}: status unchanged ({new_status}), no notification")
            return NotificationResult()

        logger.info(f"Notifying order {order.id}: {previous_status} -> {new_status}")
        if not is_known_status(new_status):
            logger.warning(f"Order {order.id}: unknown status '{new_status}', using generic display")

        status_config = get_status_config(new_status)
        is_guest_customer = order.is_guest
        switches = await self._channel_switches()
        outcome = MultiChannelOutcome()

        # 1. Email
        if not switches.email:
            logger.info(f"Email notifications disabled, skipping email for order {order.id}")
        elif order.customer_email:
            await attempt_channel(
                outcome,
                NotificationChannel.EMAIL,
                self._email.send_status_update(order, new_status, is_guest_customer),
                self._settings.CHANNEL_TIMEOUT_SECONDS,
            )

        # 2. WhatsApp
        if not switches.whatsapp:
            logger.info(f"WhatsApp notifications disabled, skipping WhatsApp for order {order.id}")
        elif order.customer_phone:
            body = status_update_whatsapp(order, status_config, is_guest_customer, self._settings)
            await attempt_channel(
                outcome,
                NotificationChannel.WHATSAPP,
                self._messaging.send_message(order.customer_phone, body),
                self._settings.CHANNEL_TIMEOUT_SECONDS,
            )

        if not order.customer_email and not order.customer_phone:
            logger.info(f"Order {order.id} has no email or phone, only internal records are written")

        payload = StatusUpdatePayload(
            order_id=order.id,
            customer_name=order.customer_name,
            customer_email=order.customer_email,
            customer_phone=order.customer_phone,
            previous_status=previous_status,
            new_status=new_status,
            status_config=status_config,
            email_sent=outcome.was_sent(NotificationChannel.EMAIL),
            whatsapp_sent=outcome.was_sent(NotificationChannel.WHATSAPP),
            sent_at=datetime.now(timezone.utc),
            errors=outcome.errors,
        )

        # 3. Admin record
        try:
            await self._persist(NotificationEvent(
                type=NotificationType.STATUS_UPDATE,
                user_id=None,
                order_id=order.id,
                data=payload.to_document(),
            ))
            outcome.succeeded(NotificationChannel.INTERNAL)
            logger.info(f"Admin notification recorded for order {order.id}")
        except Exception as e:
            logger.error(f"Admin notification record failed for order {order.id}: {e}")
            outcome.failed(NotificationChannel.INTERNAL, str(e))

        # 4. Customer record, registered accounts only
        if not is_guest_customer:
            customer_payload = payload.model_copy(update={"is_customer_notification": True})
            try:
                await self._persist(NotificationEvent(
                    type=NotificationType.STATUS_UPDATE,
                    user_id=order.user_id,
                    order_id=order.id,
                    data=customer_payload.to_document(),
                ))
                logger.info(f"Customer notification recorded for order {order.id}, user {order.user_id}")
            except Exception as e:
                logger.error(f"Customer notification record failed for order {order.id}: {e}")
                outcome.failed(NotificationChannel.INTERNAL, str(e))

        result = outcome.finalize()
        logger.info(
            f"Order {order.id} notified: email={result.email} whatsapp={result.whatsapp} "
            f"internal={result.internal} errors={len(result.errors)}"
        )
        return result

    async def _persist(self, event: NotificationEvent) -> Optional[str]:
        async with self._uow() as uow:
            event_id = await uow.notifications.create(event)
            await uow.commit()
        return event_id

    async def _channel_switches(self) -> ChannelSwitches:
        """Shop settings for the customer channels, both enabled if unreadable."""
        try:
            async with self._uow() as uow:
                return await uow.store_settings.get_channel_switches()
        except Exception as e:
            logger.error(f"Could not read notification settings, all channels enabled: {e}")
            return ChannelSwitches()
