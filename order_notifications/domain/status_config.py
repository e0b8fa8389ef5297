"""Display table for order statuses.

Shared by the message builders (French wording sent to customers) and by the
admin UI (label, emoji, Tailwind colour class). Entries are immutable, so the
lookup is a pure function of the status code.
"""
from enum import Enum
from types import MappingProxyType
from typing import Union

from order_notifications.domain.models import OrderStatus, StatusDisplay


ORDER_STATUS_CONFIG = MappingProxyType({
    OrderStatus.PENDING.value: StatusDisplay(
        label="En attente",
        emoji="⏳",
        description="Votre commande est en attente de traitement",
        color="text-yellow-600",
        phrase="en attente",
    ),
    OrderStatus.PROCESSING.value: StatusDisplay(
        label="En cours de traitement",
        emoji="⚙️",
        description="Votre commande est en cours de traitement",
        color="text-blue-600",
        phrase="en cours de traitement",
    ),
    OrderStatus.SHIPPED.value: StatusDisplay(
        label="Expédiée",
        emoji="📦",
        description="Votre commande a été expédiée",
        color="text-purple-600",
        phrase="expédiée",
    ),
    OrderStatus.DELIVERED.value: StatusDisplay(
        label="Livrée",
        emoji="✅",
        description="Votre commande a été livrée",
        color="text-green-600",
        phrase="livrée",
    ),
    OrderStatus.CANCELLED.value: StatusDisplay(
        label="Annulée",
        emoji="❌",
        description="Votre commande a été annulée",
        color="text-red-600",
        phrase="annulée",
    ),
})

FALLBACK_EMOJI = "📋"
FALLBACK_COLOR = "text-gray-600"


def status_code(status: Union[OrderStatus, str, None]) -> str:
    """Raw string for an enum member or an arbitrary status value."""
    if status is None:
        return ""
    if isinstance(status, Enum):
        return str(status.value)
    return str(status)


def get_status_config(status: Union[OrderStatus, str]) -> StatusDisplay:
    code = status_code(status)
    config = ORDER_STATUS_CONFIG.get(code)
    if config is not None:
        return config
    return StatusDisplay(
        label=code,
        emoji=FALLBACK_EMOJI,
        description=f"Statut : {code}",
        color=FALLBACK_COLOR,
        phrase=code,
    )


def is_known_status(status: Union[OrderStatus, str]) -> bool:
    return status_code(status) in ORDER_STATUS_CONFIG
