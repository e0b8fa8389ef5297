import secrets
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from order_notifications.application.diagnostics import (
    DebugOrderNotificationUseCase,
    EmailConnectionCheckUseCase,
    SendDirectMessageUseCase,
    SendTestNotificationUseCase,
    WhatsAppConnectionCheckUseCase,
)
from order_notifications.application.get_notification_history import GetNotificationHistoryUseCase
from order_notifications.application.get_notification_stats import GetNotificationStatsUseCase
from order_notifications.application.notify_order_received import (
    NotifyOrderConfirmationUseCase,
    NotifyOrderReceivedUseCase,
)
from order_notifications.application.notify_payment_failed import NotifyPaymentFailedUseCase
from order_notifications.application.notify_status_change import NotifyStatusChangeUseCase
from order_notifications.application.update_order_status import UpdateOrderStatusUseCase
from order_notifications.config import Settings, settings
from order_notifications.database import AsyncSessionLocal
from order_notifications.domain.exceptions import OrderNotFoundError
from order_notifications.domain.models import (
    DiagnosticResult,
    NotificationChannel,
    NotificationResult,
    NotificationStats,
    Order,
)
from order_notifications.infrastructure.http_clients import ResendEmailClient, TwilioWhatsAppClient
from order_notifications.infrastructure.unit_of_work import UnitOfWork
from order_notifications.presentation.schemas import (
    DirectMessageRequest,
    ErrorResponse,
    NotificationResponse,
    OrderResponse,
    StatusUpdateResponse,
    UpdateStatusRequest,
)


def get_settings() -> Settings:
    return settings


def require_admin(
    x_admin_token: Optional[str] = Header(default=None),
    cfg: Settings = Depends(get_settings),
):
    """Diagnostics and status changes are admin only."""
    if not cfg.ADMIN_API_TOKEN or not x_admin_token:
        raise HTTPException(status_code=401, detail="Admin token required")
    if not secrets.compare_digest(x_admin_token, cfg.ADMIN_API_TOKEN):
        raise HTTPException(status_code=403, detail="Invalid admin token")


router = APIRouter(dependencies=[Depends(require_admin)])


# Factories for collaborators and use cases
def get_unit_of_work():
    return UnitOfWork(AsyncSessionLocal)


def get_email_sender(cfg: Settings = Depends(get_settings)):
    return ResendEmailClient(cfg)


def get_messaging_sender(cfg: Settings = Depends(get_settings)):
    return TwilioWhatsAppClient(cfg)


def get_notify_status_change_use_case(
    uow=Depends(get_unit_of_work),
    email=Depends(get_email_sender),
    messaging=Depends(get_messaging_sender),
    cfg: Settings = Depends(get_settings),
):
    return NotifyStatusChangeUseCase(uow, email, messaging, cfg)


def get_update_order_status_use_case(
    uow=Depends(get_unit_of_work),
    notifier: NotifyStatusChangeUseCase = Depends(get_notify_status_change_use_case),
):
    return UpdateOrderStatusUseCase(uow, notifier)


def get_notify_order_received_use_case(
    uow=Depends(get_unit_of_work),
    email=Depends(get_email_sender),
    messaging=Depends(get_messaging_sender),
    cfg: Settings = Depends(get_settings),
):
    return NotifyOrderReceivedUseCase(uow, email, messaging, cfg)


def get_order_confirmation_use_case(
    messaging=Depends(get_messaging_sender),
    cfg: Settings = Depends(get_settings),
):
    return NotifyOrderConfirmationUseCase(messaging, cfg)


def get_payment_failed_use_case(
    uow=Depends(get_unit_of_work),
    messaging=Depends(get_messaging_sender),
    cfg: Settings = Depends(get_settings),
):
    return NotifyPaymentFailedUseCase(uow, messaging, cfg)


def get_history_use_case(uow=Depends(get_unit_of_work)):
    return GetNotificationHistoryUseCase(uow)


def get_stats_use_case(uow=Depends(get_unit_of_work)):
    return GetNotificationStatsUseCase(uow)


@router.patch(
    "/orders/{order_id}/status",
    response_model=StatusUpdateResponse,
    responses={404: {"model": ErrorResponse}}
)
async def update_order_status(
    order_id: str,
    request: UpdateStatusRequest,
    use_case: UpdateOrderStatusUseCase = Depends(get_update_order_status_use_case)
):
    """Change an order's status and notify the customer"""
    try:
        outcome = await use_case(order_id, request.status)
    except OrderNotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    return StatusUpdateResponse(
        order=OrderResponse.from_domain(outcome.order),
        previous_status=outcome.previous_status,
        notifications=outcome.notifications
    )


@router.post(
    "/orders/{order_id}/order-received",
    response_model=NotificationResult,
    responses={404: {"model": ErrorResponse}}
)
async def notify_order_received(
    order_id: str,
    uow=Depends(get_unit_of_work),
    use_case: NotifyOrderReceivedUseCase = Depends(get_notify_order_received_use_case)
):
    """Alert the admin about a completed checkout"""
    order = await _get_order_or_404(uow, order_id)
    return await use_case(order)


@router.post(
    "/orders/{order_id}/confirmation",
    response_model=NotificationResult,
    responses={404: {"model": ErrorResponse}}
)
async def notify_order_confirmation(
    order_id: str,
    uow=Depends(get_unit_of_work),
    use_case: NotifyOrderConfirmationUseCase = Depends(get_order_confirmation_use_case)
):
    """Confirm a new order to the customer over WhatsApp"""
    order = await _get_order_or_404(uow, order_id)
    return await use_case(order)


@router.post(
    "/orders/{order_id}/payment-failed",
    response_model=NotificationResult,
    responses={404: {"model": ErrorResponse}}
)
async def notify_payment_failed(
    order_id: str,
    uow=Depends(get_unit_of_work),
    use_case: NotifyPaymentFailedUseCase = Depends(get_payment_failed_use_case)
):
    """Alert the admin that an order's payment failed"""
    order = await _get_order_or_404(uow, order_id)
    return await use_case(order)


@router.get("/orders/{order_id}/notifications", response_model=List[NotificationResponse])
async def get_order_notifications(
    order_id: str,
    use_case: GetNotificationHistoryUseCase = Depends(get_history_use_case)
):
    """Status notification history of an order, most recent first"""
    events = await use_case(order_id)
    return [NotificationResponse.from_domain(event) for event in events]


@router.get(
    "/notifications/stats",
    response_model=NotificationStats,
    responses={503: {"model": ErrorResponse}}
)
async def get_notification_stats(
    days: int = Query(default=30, ge=1, le=365),
    use_case: GetNotificationStatsUseCase = Depends(get_stats_use_case)
):
    stats = await use_case(days)
    if stats is None:
        raise HTTPException(status_code=503, detail="Notification stats unavailable")
    return stats


@router.post("/diagnostics/whatsapp/connection", response_model=DiagnosticResult)
async def check_whatsapp_connection(
    messaging=Depends(get_messaging_sender),
    cfg: Settings = Depends(get_settings)
):
    return await WhatsAppConnectionCheckUseCase(messaging, cfg)()


@router.post("/diagnostics/email/connection", response_model=DiagnosticResult)
async def check_email_connection(
    email=Depends(get_email_sender),
    cfg: Settings = Depends(get_settings)
):
    return await EmailConnectionCheckUseCase(email, cfg)()


@router.post("/diagnostics/orders/{order_id}/debug", response_model=DiagnosticResult)
async def debug_order_notification(
    order_id: str,
    uow=Depends(get_unit_of_work),
    notifier: NotifyStatusChangeUseCase = Depends(get_notify_status_change_use_case)
):
    """Replay an order's status notification"""
    return await DebugOrderNotificationUseCase(uow, notifier)(order_id)


@router.post("/diagnostics/whatsapp/message", response_model=DiagnosticResult)
async def send_direct_message(
    request: DirectMessageRequest,
    messaging=Depends(get_messaging_sender)
):
    return await SendDirectMessageUseCase(messaging)(request.phone, request.message)


@router.post(
    "/diagnostics/orders/{order_id}/test",
    response_model=DiagnosticResult,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}}
)
async def send_test_notification(
    order_id: str,
    channel: NotificationChannel = Query(default=NotificationChannel.EMAIL),
    uow=Depends(get_unit_of_work),
    email=Depends(get_email_sender),
    messaging=Depends(get_messaging_sender),
    cfg: Settings = Depends(get_settings)
):
    """Send one channel's status message for an order"""
    use_case = SendTestNotificationUseCase(uow, email, messaging, cfg)
    try:
        return await use_case(order_id, channel.value)
    except OrderNotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=502, detail=f"Test notification failed: {str(e)}")


async def _get_order_or_404(uow, order_id: str) -> Order:
    async with uow() as tx:
        order = await tx.orders.get_by_id(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order
