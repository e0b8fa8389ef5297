import asyncio

from order_notifications.application.notify_order_received import (
    NotifyOrderConfirmationUseCase,
    NotifyOrderReceivedUseCase,
)
from order_notifications.domain.exceptions import MessagingSendError
from order_notifications.domain.models import NotificationChannel


def _use_case(uow, email_sender, messaging_sender, settings):
    return NotifyOrderReceivedUseCase(uow, email_sender, messaging_sender, settings)


def test_admin_is_alerted_on_both_channels(uow, email_sender, messaging_sender, settings, make_order, notification_repo):
    order = make_order(id="2001", total=1250000)

    result = asyncio.run(_use_case(uow, email_sender, messaging_sender, settings)(order))

    assert result.whatsapp is True
    assert result.email is True
    assert result.internal is True

    message = messaging_sender.messages[0]
    assert message["to"] == settings.ADMIN_WHATSAPP_NUMBER
    assert "#2001" in message["body"]
    assert "1 250 000 FCFA" in message["body"]
    assert "https://shop.test/admin/orders-page/2001" in message["body"]

    email = email_sender.emails[0]
    assert email["to"] == settings.ADMIN_EMAIL
    assert "2001" in email["subject"]

    event = notification_repo.events[0]
    assert event.type == "order_received"
    assert event.user_id is None
    assert event.data["whatsappSent"] is True


def test_whatsapp_failure_is_recorded(uow, email_sender, messaging_sender, settings, make_order, notification_repo):
    messaging_sender.error = MessagingSendError("Twilio API error: unauthorized")

    result = asyncio.run(_use_case(uow, email_sender, messaging_sender, settings)(make_order()))

    assert result.whatsapp is False
    assert result.email is True
    assert result.errors[0].type == NotificationChannel.WHATSAPP
    assert notification_repo.events[0].data["errors"][0]["type"] == "whatsapp"


def test_unconfigured_admin_contacts_are_skipped(uow, email_sender, messaging_sender, settings, make_order):
    settings = settings.model_copy(update={"ADMIN_WHATSAPP_NUMBER": "", "ADMIN_EMAIL": ""})

    result = asyncio.run(_use_case(uow, email_sender, messaging_sender, settings)(make_order()))

    assert result.whatsapp is None
    assert result.email is None
    assert result.internal is True
    assert messaging_sender.messages == []
    assert email_sender.emails == []


def test_customer_confirmation_over_whatsapp(messaging_sender, settings, make_order, notification_repo):
    order = make_order(id="2002", total=45000)

    result = asyncio.run(NotifyOrderConfirmationUseCase(messaging_sender, settings)(order))

    assert result.whatsapp is True
    assert result.email is None
    assert result.internal is False
    message = messaging_sender.messages[0]
    assert message["to"] == "+221771234567"
    assert "CONFIRMATION DE COMMANDE" in message["body"]
    assert "#2002" in message["body"]
    assert "45 000 FCFA" in message["body"]
    assert settings.SUPPORT_EMAIL in message["body"]
    assert notification_repo.events == []


def test_customer_confirmation_needs_a_phone(messaging_sender, settings, make_order):
    order = make_order(shipping_address={"email": "a@example.com"})

    result = asyncio.run(NotifyOrderConfirmationUseCase(messaging_sender, settings)(order))

    assert result.whatsapp is None
    assert messaging_sender.messages == []


def test_customer_confirmation_failure_is_reported(messaging_sender, settings, make_order):
    messaging_sender.error = MessagingSendError("Twilio API error: invalid number")

    result = asyncio.run(NotifyOrderConfirmationUseCase(messaging_sender, settings)(make_order()))

    assert result.whatsapp is False
    assert result.errors[0].type == NotificationChannel.WHATSAPP
