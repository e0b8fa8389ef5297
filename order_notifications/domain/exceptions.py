class DomainException(Exception):
    pass


class ConfigurationError(DomainException):
    pass


class ChannelSendError(DomainException):
    pass


class EmailSendError(ChannelSendError):
    pass


class MessagingSendError(ChannelSendError):
    pass


class NotificationStoreError(DomainException):
    pass


class OrderNotFoundError(DomainException):
    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")
