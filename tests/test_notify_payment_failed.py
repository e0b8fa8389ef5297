import asyncio

from order_notifications.application.notify_payment_failed import NotifyPaymentFailedUseCase
from order_notifications.domain.exceptions import MessagingSendError, NotificationStoreError
from order_notifications.domain.models import NotificationChannel


def test_admin_is_alerted_and_record_kept(uow, messaging_sender, settings, make_order, notification_repo):
    order = make_order(id="3001", total=99000)

    result = asyncio.run(NotifyPaymentFailedUseCase(uow, messaging_sender, settings)(order))

    assert result.whatsapp is True
    assert result.email is None
    assert result.internal is True

    message = messaging_sender.messages[0]
    assert message["to"] == settings.ADMIN_WHATSAPP_NUMBER
    assert "PAIEMENT ÉCHOUÉ" in message["body"]
    assert "99 000 FCFA" in message["body"]
    assert "https://shop.test/admin/orders-page/3001" in message["body"]

    event = notification_repo.events[0]
    assert event.type == "payment_failed"
    assert event.user_id is None
    assert event.order_id == "3001"
    assert event.data["whatsappSent"] is True


def test_guest_name_fallback(uow, messaging_sender, settings, make_order):
    order = make_order(shipping_address={"phone": "+221771234567"})

    asyncio.run(NotifyPaymentFailedUseCase(uow, messaging_sender, settings)(order))

    assert "Client invité" in messaging_sender.messages[0]["body"]


def test_whatsapp_failure_still_records(uow, messaging_sender, settings, make_order, notification_repo):
    messaging_sender.error = MessagingSendError("Twilio API unreachable: timeout")

    result = asyncio.run(NotifyPaymentFailedUseCase(uow, messaging_sender, settings)(make_order()))

    assert result.whatsapp is False
    assert result.internal is True
    assert notification_repo.events[0].data["errors"] == [
        {"type": "whatsapp", "error": "Twilio API unreachable: timeout"}
    ]


def test_unconfigured_admin_number(uow, messaging_sender, settings, make_order, notification_repo):
    settings = settings.model_copy(update={"ADMIN_WHATSAPP_NUMBER": ""})

    result = asyncio.run(NotifyPaymentFailedUseCase(uow, messaging_sender, settings)(make_order()))

    assert result.whatsapp is None
    assert messaging_sender.messages == []
    assert len(notification_repo.events) == 1


def test_record_failure_is_reported(uow, messaging_sender, settings, make_order, notification_repo):
    notification_repo.create_outcomes = [NotificationStoreError("insert failed")]

    result = asyncio.run(NotifyPaymentFailedUseCase(uow, messaging_sender, settings)(make_order()))

    assert result.whatsapp is True
    assert result.internal is False
    assert result.errors[-1].type == NotificationChannel.INTERNAL
