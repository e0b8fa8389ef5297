"""
Pytest fixtures: in-memory implementations of the application ports.

Use cases are async; tests drive them with asyncio.run so the suite only
needs pytest.
"""
import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone

import pytest

from order_notifications.application.interfaces import (
    EmailSender,
    MessagingSender,
    NotificationRepository,
    OrderRepository,
    StoreSettingsRepository,
)
from order_notifications.application.notify_status_change import NotifyStatusChangeUseCase
from order_notifications.config import Settings
from order_notifications.domain.models import ChannelSwitches, NotificationEvent, Order


ORDER_CREATED_AT = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


class InMemoryOrderRepository(OrderRepository):
    def __init__(self):
        self.orders = {}
        self.fail_with = None

    def add(self, order: Order) -> Order:
        self.orders[order.id] = order
        return order

    async def get_by_id(self, order_id):
        if self.fail_with:
            raise self.fail_with
        return self.orders.get(str(order_id))

    async def update_status(self, order_id, status):
        order = self.orders[str(order_id)]
        self.orders[order.id] = order.model_copy(update={"status": status})


class InMemoryNotificationRepository(NotificationRepository):
    def __init__(self):
        self.events = []
        # popped one per create(); an exception instance makes that insert fail
        self.create_outcomes = []
        self.fail_reads_with = None

    def _check_read(self):
        if self.fail_reads_with:
            raise self.fail_reads_with

    async def create(self, event: NotificationEvent) -> str:
        if self.create_outcomes:
            outcome = self.create_outcomes.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
        event_id = f"notif-{len(self.events) + 1}"
        stored = event.model_copy(update={
            "id": event_id,
            "created_at": event.created_at or datetime.now(timezone.utc) + timedelta(milliseconds=len(self.events)),
        })
        self.events.append(stored)
        return event_id

    async def get_by_type(self, event_type):
        self._check_read()
        return [e for e in self.events if e.type == event_type]

    async def get_by_type_and_order(self, event_type, order_id):
        self._check_read()
        return [e for e in self.events if e.type == event_type and e.order_id == str(order_id)]

    async def get_by_type_since(self, event_type, since):
        self._check_read()
        return [e for e in self.events if e.type == event_type and e.created_at >= since]


class InMemoryStoreSettingsRepository(StoreSettingsRepository):
    def __init__(self):
        self.switches = ChannelSwitches()
        self.fail_with = None

    async def get_channel_switches(self):
        if self.fail_with:
            raise self.fail_with
        return self.switches


class FakeUnitOfWork:
    def __init__(
        self,
        orders: InMemoryOrderRepository,
        notifications: InMemoryNotificationRepository,
        store_settings: InMemoryStoreSettingsRepository,
    ):
        self.orders = orders
        self.notifications = notifications
        self.store_settings = store_settings
        self.commits = 0

    @asynccontextmanager
    async def __call__(self):
        yield self

    async def commit(self):
        self.commits += 1

    async def rollback(self):
        pass


class RecordingEmailSender(EmailSender):
    def __init__(self):
        self.status_updates = []
        self.emails = []
        self.error = None
        self.delay = 0

    async def send_email(self, to, subject, html, text):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        self.emails.append({"to": to, "subject": subject, "html": html, "text": text})
        return {"id": f"email-{len(self.emails)}"}

    async def send_status_update(self, order, new_status, is_guest_customer):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        self.status_updates.append({"order_id": order.id, "status": new_status, "is_guest": is_guest_customer})
        return True


class RecordingMessagingSender(MessagingSender):
    def __init__(self):
        self.messages = []
        self.error = None
        self.delay = 0

    async def send_message(self, destination, body):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        self.messages.append({"to": destination, "body": body})
        return {"sid": f"SM{len(self.messages):04d}", "status": "queued"}


@pytest.fixture
def settings():
    return Settings(
        ADMIN_API_TOKEN="test-admin-token",
        SITE_URL="https://shop.test",
        STORE_NAME="Kapital Stores",
        SUPPORT_PHONE="+221 77 000 00 00",
        SUPPORT_EMAIL="support@shop.test",
        TWILIO_ACCOUNT_SID="AC123",
        TWILIO_AUTH_TOKEN="twilio-token",
        TWILIO_WHATSAPP_NUMBER="+14155238886",
        ADMIN_WHATSAPP_NUMBER="+221770000001",
        RESEND_EDGE_FUNCTION_URL="https://edge.test/functions/v1/resend-email",
        RESEND_API_KEY="resend-key",
        ADMIN_EMAIL="admin@shop.test",
        EMAIL_FROM="Kapital Stores <noreply@shop.test>",
        CHANNEL_TIMEOUT_SECONDS=0.2,
    )


@pytest.fixture
def order_repo():
    return InMemoryOrderRepository()


@pytest.fixture
def notification_repo():
    return InMemoryNotificationRepository()


@pytest.fixture
def store_settings_repo():
    return InMemoryStoreSettingsRepository()


@pytest.fixture
def uow(order_repo, notification_repo, store_settings_repo):
    return FakeUnitOfWork(order_repo, notification_repo, store_settings_repo)


@pytest.fixture
def email_sender():
    return RecordingEmailSender()


@pytest.fixture
def messaging_sender():
    return RecordingMessagingSender()


@pytest.fixture
def notifier(uow, email_sender, messaging_sender, settings):
    return NotifyStatusChangeUseCase(uow, email_sender, messaging_sender, settings)


@pytest.fixture
def make_order():
    def _make(**overrides):
        data = {
            "id": "1001",
            "status": "pending",
            "total": 25000,
            "shipping_address": {
                "name": "Awa Diop",
                "email": "awa@example.com",
                "phone": "+221771234567",
                "address": "Rue 10",
                "city": "Dakar",
            },
            "user_id": None,
            "created_at": ORDER_CREATED_AT,
        }
        data.update(overrides)
        return Order.model_validate(data)
    return _make
