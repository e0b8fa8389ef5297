"""
Admin diagnostics for the notification channels.

Thin wrappers around the same senders the notifiers use, for checking
credentials and replaying notifications by hand.
"""

import logging
from datetime import datetime, timezone

from order_notifications.application.interfaces import EmailSender, MessagingSender
from order_notifications.application.messages import (
    connection_test_email,
    connection_test_whatsapp,
    status_update_whatsapp,
)
from order_notifications.application.notify_status_change import NotifyStatusChangeUseCase
from order_notifications.config import Settings
from order_notifications.domain.exceptions import OrderNotFoundError
from order_notifications.domain.models import DiagnosticResult, NotificationChannel, Order
from order_notifications.domain.status_config import get_status_config


logger = logging.getLogger(__name__)

TEST_STATUS = "test"


class WhatsAppConnectionCheckUseCase:
    def __init__(self, messaging_sender: MessagingSender, settings: Settings):
        self._messaging = messaging_sender
        self._settings = settings

    async def __call__(self) -> DiagnosticResult:
        admin_number = self._settings.ADMIN_WHATSAPP_NUMBER
        if not admin_number:
            return DiagnosticResult(success=False, error="Admin WhatsApp number not configured")
        try:
            response = await self._messaging.send_message(
                admin_number, connection_test_whatsapp(self._settings, datetime.now(timezone.utc))
            )
        except Exception as e:
            logger.error(f"WhatsApp connection test failed: {e}")
            return DiagnosticResult(success=False, error=str(e))
        return DiagnosticResult(success=True, message="Test message sent successfully", response=response)


class EmailConnectionCheckUseCase:
    def __init__(self, email_sender: EmailSender, settings: Settings):
        self._email = email_sender
        self._settings = settings

    async def __call__(self) -> DiagnosticResult:
        if not self._settings.ADMIN_EMAIL:
            return DiagnosticResult(success=False, error="Admin email not configured")
        content = connection_test_email(self._settings)
        try:
            response = await self._email.send_email(
                self._settings.ADMIN_EMAIL, content.subject, content.html, content.text
            )
        except Exception as e:
            logger.error(f"Email connection test failed: {e}")
            return DiagnosticResult(success=False, error=str(e))
        return DiagnosticResult(success=True, message="Test email sent successfully", response=response)


class DebugOrderNotificationUseCase:
    """Replays the status notification of an order with its current status."""

    def __init__(self, unit_of_work, notifier: NotifyStatusChangeUseCase):
        self._uow = unit_of_work
        self._notifier = notifier

    async def __call__(self, order_id: str) -> DiagnosticResult:
        try:
            order = await _load_order(self._uow, order_id)
        except OrderNotFoundError:
            return DiagnosticResult(success=False, error="Order not found")
        except Exception as e:
            logger.error(f"Debug: failed to load order {order_id}: {e}")
            return DiagnosticResult(success=False, error=str(e))

        result = await self._notifier(order, order.status, None)
        return DiagnosticResult(
            success=True,
            message="Order notification test completed",
            result=result,
        )


class SendDirectMessageUseCase:
    def __init__(self, messaging_sender: MessagingSender):
        self._messaging = messaging_sender

    async def __call__(self, destination: str, body: str) -> DiagnosticResult:
        try:
            response = await self._messaging.send_message(destination, body)
        except Exception as e:
            logger.error(f"Direct message to {destination} failed: {e}")
            return DiagnosticResult(success=False, error=str(e))
        return DiagnosticResult(success=True, message="Direct message sent successfully", response=response)


class SendTestNotificationUseCase:
    """Sends one channel's status message for an order, with the pseudo status "test".

    Unlike the other diagnostics this one raises, so the caller sees the
    sender's own exception.
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

    async def __call__(self, order_id: str, channel: str = NotificationChannel.EMAIL.value) -> DiagnosticResult:
        if channel not in (NotificationChannel.EMAIL.value, NotificationChannel.WHATSAPP.value):
            raise ValueError(f"Unknown test type: {channel}")

        order = await _load_order(self._uow, order_id)

        if channel == NotificationChannel.EMAIL.value:
            if not order.customer_email:
                raise ValueError(f"Order {order.id} has no email address")
            await self._email.send_status_update(order, TEST_STATUS, order.is_guest)
            return DiagnosticResult(success=True, message=f"Test email sent to {order.customer_email}")

        if not order.customer_phone:
            raise ValueError(f"Order {order.id} has no phone number")
        body = status_update_whatsapp(order, get_status_config(TEST_STATUS), order.is_guest, self._settings)
        response = await self._messaging.send_message(order.customer_phone, body)
        return DiagnosticResult(
            success=True,
            message=f"Test WhatsApp sent to {order.customer_phone}",
            response=response,
        )


async def _load_order(unit_of_work, order_id: str) -> Order:
    async with unit_of_work() as uow:
        order = await uow.orders.get_by_id(str(order_id))
    if not order:
        raise OrderNotFoundError(str(order_id))
    return order
