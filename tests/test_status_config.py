import pytest

from order_notifications.domain.models import OrderStatus
from order_notifications.domain.status_config import (
    ORDER_STATUS_CONFIG,
    get_status_config,
    is_known_status,
    status_code,
)


@pytest.mark.parametrize("status", list(OrderStatus))
def test_every_status_has_an_entry(status):
    config = get_status_config(status)

    assert config is ORDER_STATUS_CONFIG[status.value]
    assert config.label and config.emoji and config.description and config.color


def test_shipped_wording():
    config = get_status_config("shipped")

    assert config.label == "Expédiée"
    assert config.phrase == "expédiée"
    assert config.emoji == "📦"


def test_unknown_status_falls_back_to_raw_string():
    config = get_status_config("on_hold")

    assert config.label == "on_hold"
    assert config.phrase == "on_hold"
    assert config.emoji == "📋"
    assert config.description == "Statut : on_hold"
    assert config.color == "text-gray-600"


def test_lookup_is_repeatable():
    assert get_status_config("delivered") == get_status_config("delivered")
    assert get_status_config("mystery").model_dump() == get_status_config("mystery").model_dump()


def test_entries_cannot_be_mutated():
    config = get_status_config("pending")

    with pytest.raises(Exception):
        config.label = "changed"
    with pytest.raises(TypeError):
        ORDER_STATUS_CONFIG["pending"] = config

    assert get_status_config("pending").label == "En attente"


def test_status_code_normalizes_enum_members():
    assert status_code(OrderStatus.CANCELLED) == "cancelled"
    assert status_code("cancelled") == "cancelled"
    assert status_code(None) == ""
    assert is_known_status(OrderStatus.PROCESSING)
    assert not is_known_status("refunded")
