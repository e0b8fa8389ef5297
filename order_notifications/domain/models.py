from datetime import datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class NotificationType(str, Enum):
    STATUS_UPDATE = "status_update"
    ORDER_RECEIVED = "order_received"
    ORDER_CREATED = "order_created"
    ORDER_CANCELLED = "order_cancelled"
    PAYMENT_RECEIVED = "payment_received"
    PAYMENT_FAILED = "payment_failed"
    SHIPPING_UPDATE = "shipping_update"


class NotificationChannel(str, Enum):
    EMAIL = "email"
    WHATSAPP = "whatsapp"
    INTERNAL = "internal"


class ShippingAddress(BaseModel):
    """Value Object: customer contact and delivery details"""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None

    @field_validator("name", "email", "phone", "address", "city", "state", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if value is None:
            return None
        value = str(value).strip()
        return value or None


class Order(BaseModel):
    """Domain Entity: order as read from the order store"""
    id: str
    status: str
    total: int = Field(default=0, ge=0)
    shipping_address: ShippingAddress = Field(default_factory=ShippingAddress)
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        if value is None:
            return None
        return str(value)

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value):
        return value.value if isinstance(value, Enum) else value

    @field_validator("shipping_address", mode="before")
    @classmethod
    def _default_address(cls, value):
        return {} if value is None else value

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    @property
    def customer_email(self) -> Optional[str]:
        return self.shipping_address.email

    @property
    def customer_phone(self) -> Optional[str]:
        return self.shipping_address.phone

    @property
    def customer_name(self) -> str:
        return self.shipping_address.name or "Cher client"


class StatusDisplay(BaseModel):
    """Value Object: how a status is labelled in messages and in the admin UI"""
    model_config = ConfigDict(frozen=True)

    label: str
    emoji: str
    description: str
    color: str
    phrase: str


class ChannelError(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: NotificationChannel
    error: str


class NotificationResult(BaseModel):
    """Outcome of one fan-out. None means the channel was not attempted."""
    email: Optional[bool] = None
    whatsapp: Optional[bool] = None
    internal: bool = False
    errors: list[ChannelError] = Field(default_factory=list)


class _CamelPayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    order_id: str

    @field_validator("order_id", mode="before")
    @classmethod
    def _canonical_order_id(cls, value):
        return str(value)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class StatusUpdatePayload(_CamelPayload):
    customer_name: str
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    previous_status: Optional[str] = None
    new_status: str
    status_config: StatusDisplay
    email_sent: bool
    whatsapp_sent: bool
    sent_at: datetime
    errors: list[ChannelError] = Field(default_factory=list)
    is_customer_notification: bool = False


class AdminAlertPayload(_CamelPayload):
    """Document of an admin alert record (order received, payment failed)."""
    customer_name: str
    email_sent: bool
    whatsapp_sent: bool
    sent_at: datetime
    errors: list[ChannelError] = Field(default_factory=list)


class NotificationEvent(BaseModel):
    """Persisted record of one notification attempt. user_id None targets the admin."""
    id: Optional[str] = None
    type: str
    user_id: Optional[str] = None
    order_id: Optional[str] = None
    data: dict[str, Any] = Field(default_factory=dict)
    is_read: bool = False
    created_at: Optional[datetime] = None

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value):
        return value.value if isinstance(value, Enum) else value

    @field_validator("order_id", "user_id", mode="before")
    @classmethod
    def _coerce_ids(cls, value):
        if value is None:
            return None
        return str(value)

    @model_validator(mode="after")
    def _order_id_from_data(self):
        """order_id is the canonical string copy of data['orderId']"""
        data_order_id = self.data.get("orderId")
        if data_order_id is None:
            return self
        if self.order_id is None:
            self.order_id = str(data_order_id)
        elif self.order_id != str(data_order_id):
            raise ValueError(
                f"order_id {self.order_id!r} does not match data orderId {data_order_id!r}"
            )
        return self

    @property
    def is_admin(self) -> bool:
        return self.user_id is None


class ChannelSwitches(BaseModel):
    """Shop-wide on/off switches for customer channels. Unset means enabled."""
    email: bool = True
    whatsapp: bool = True

    @field_validator("email", "whatsapp", mode="before")
    @classmethod
    def _unset_is_enabled(cls, value):
        return True if value is None else value


class NotificationStats(BaseModel):
    total: int = 0
    email: int = 0
    whatsapp: int = 0
    failed: int = 0
    by_status: dict[str, int] = Field(default_factory=dict)


class EmailContent(BaseModel):
    subject: str
    html: str
    text: str


class DiagnosticResult(BaseModel):
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    response: Optional[dict[str, Any]] = None
    result: Optional[NotificationResult] = None
