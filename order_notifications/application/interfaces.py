from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, List

from order_notifications.domain.models import ChannelSwitches, NotificationEvent, Order


class OrderRepository(ABC):
    @abstractmethod
    async def get_by_id(self, order_id: str) -> Optional[Order]:
        pass

    @abstractmethod
    async def update_status(self, order_id: str, status: str) -> None:
        pass


class NotificationRepository(ABC):
    @abstractmethod
    async def create(self, event: NotificationEvent) -> str:
        pass

    @abstractmethod
    async def get_by_type(self, event_type: str) -> List[NotificationEvent]:
        pass

    @abstractmethod
    async def get_by_type_and_order(self, event_type: str, order_id: str) -> List[NotificationEvent]:
        pass

    @abstractmethod
    async def get_by_type_since(self, event_type: str, since: datetime) -> List[NotificationEvent]:
        pass


class StoreSettingsRepository(ABC):
    @abstractmethod
    async def get_channel_switches(self) -> ChannelSwitches:
        pass


class UnitOfWork(ABC):
    @property
    @abstractmethod
    def orders(self) -> OrderRepository:
        pass

    @property
    @abstractmethod
    def notifications(self) -> NotificationRepository:
        pass

    @property
    @abstractmethod
    def store_settings(self) -> StoreSettingsRepository:
        pass

    @abstractmethod
    async def __call__(self):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass


class EmailSender(ABC):
    @abstractmethod
    async def send_email(self, to: str, subject: str, html: str, text: str) -> dict:
        pass

    @abstractmethod
    async def send_status_update(self, order: Order, new_status: str, is_guest_customer: bool) -> bool:
        pass


class MessagingSender(ABC):
    @abstractmethod
    async def send_message(self, destination: str, body: str) -> dict:
        pass
