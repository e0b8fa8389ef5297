import asyncio
from datetime import datetime, timezone

from order_notifications.application.get_notification_history import GetNotificationHistoryUseCase
from order_notifications.domain.models import NotificationEvent, NotificationType


def _store(repo, order_id, created_at=None, event_type=NotificationType.STATUS_UPDATE, user_id=None):
    event = NotificationEvent(
        type=event_type,
        user_id=user_id,
        order_id=order_id,
        data={"orderId": order_id, "newStatus": "shipped"},
        created_at=created_at,
    )
    asyncio.run(repo.create(event))


def test_numeric_and_string_order_ids_match(uow, notification_repo):
    _store(notification_repo, 42)
    _store(notification_repo, "42")
    _store(notification_repo, "43")

    history = asyncio.run(GetNotificationHistoryUseCase(uow)("42"))

    assert len(history) == 2
    assert {event.order_id for event in history} == {"42"}


def test_records_keyed_only_by_data_order_id_are_found(uow, notification_repo):
    for order_id in (42, "42"):
        asyncio.run(notification_repo.create(NotificationEvent(
            type=NotificationType.STATUS_UPDATE,
            data={"orderId": order_id, "newStatus": "shipped"},
        )))

    history = asyncio.run(GetNotificationHistoryUseCase(uow)("42"))

    assert len(history) == 2
    assert {event.order_id for event in history} == {"42"}


def test_integer_lookup_matches_string_ids(uow, notification_repo):
    _store(notification_repo, "42")

    assert len(asyncio.run(GetNotificationHistoryUseCase(uow)(42))) == 1


def test_unknown_order_returns_empty(uow, notification_repo):
    _store(notification_repo, "42")

    assert asyncio.run(GetNotificationHistoryUseCase(uow)("does-not-exist")) == []


def test_only_status_updates_are_returned(uow, notification_repo):
    _store(notification_repo, "42", event_type=NotificationType.ORDER_RECEIVED)
    _store(notification_repo, "42")

    history = asyncio.run(GetNotificationHistoryUseCase(uow)("42"))

    assert [event.type for event in history] == ["status_update"]


def test_most_recent_first(uow, notification_repo):
    _store(notification_repo, "42", created_at=datetime(2026, 1, 1, tzinfo=timezone.utc))
    _store(notification_repo, "42", created_at=datetime(2026, 3, 1, tzinfo=timezone.utc))
    _store(notification_repo, "42", created_at=datetime(2026, 2, 1, tzinfo=timezone.utc))

    history = asyncio.run(GetNotificationHistoryUseCase(uow)("42"))

    assert [event.created_at.month for event in history] == [3, 2, 1]


def test_store_failure_degrades_to_empty(uow, notification_repo):
    _store(notification_repo, "42")
    notification_repo.fail_reads_with = ConnectionError("database unavailable")

    assert asyncio.run(GetNotificationHistoryUseCase(uow)("42")) == []


def test_history_after_fan_out(notifier, make_order, uow):
    order = make_order(id="77", user_id="user-1")
    asyncio.run(notifier(order, "processing", "pending"))
    asyncio.run(notifier(order.model_copy(update={"status": "processing"}), "shipped", "processing"))

    history = asyncio.run(GetNotificationHistoryUseCase(uow)("77"))

    assert len(history) == 4
    assert history[0].data["newStatus"] == "shipped"
