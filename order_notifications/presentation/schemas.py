from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from order_notifications.domain.models import (
    NotificationEvent,
    NotificationResult,
    Order,
    OrderStatus,
    ShippingAddress,
)


class UpdateStatusRequest(BaseModel):
    status: OrderStatus


class OrderResponse(BaseModel):
    id: str
    status: str
    total: int
    user_id: Optional[str] = None
    shipping_address: ShippingAddress
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, order: Order):
        return cls(
            id=order.id,
            status=order.status,
            total=order.total,
            user_id=order.user_id,
            shipping_address=order.shipping_address,
            created_at=order.created_at
        )


class StatusUpdateResponse(BaseModel):
    """The status change and its notifications are reported separately."""
    order: OrderResponse
    previous_status: str
    notifications: NotificationResult


class NotificationResponse(BaseModel):
    id: Optional[str] = None
    type: str
    user_id: Optional[str] = None
    order_id: Optional[str] = None
    data: dict
    is_read: bool
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, event: NotificationEvent):
        return cls(
            id=event.id,
            type=event.type,
            user_id=event.user_id,
            order_id=event.order_id,
            data=event.data,
            is_read=event.is_read,
            created_at=event.created_at
        )


class DirectMessageRequest(BaseModel):
    phone: str = Field(min_length=1)
    message: str = Field(min_length=1)


class ErrorResponse(BaseModel):
    detail: str
