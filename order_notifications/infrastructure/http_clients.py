import httpx
import logging
from typing import Optional

from order_notifications.application.interfaces import EmailSender, MessagingSender
from order_notifications.application.messages import status_update_email
from order_notifications.config import Settings
from order_notifications.domain.exceptions import ConfigurationError, EmailSendError, MessagingSendError
from order_notifications.domain.models import Order
from order_notifications.domain.status_config import get_status_config

logger = logging.getLogger(__name__)

WHATSAPP_PREFIX = "whatsapp:"


def whatsapp_address(number: str) -> str:
    number = number.strip()
    return number if number.startswith(WHATSAPP_PREFIX) else f"{WHATSAPP_PREFIX}{number}"


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.reason_phrase or f"HTTP {response.status_code}"
    if isinstance(data, dict):
        return str(data.get("message") or data.get("error") or response.reason_phrase)
    return response.reason_phrase or f"HTTP {response.status_code}"


class TwilioWhatsAppClient(MessagingSender):
    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._base_url = settings.TWILIO_API_BASE_URL.rstrip("/")
        self._account_sid = settings.TWILIO_ACCOUNT_SID
        self._auth_token = settings.TWILIO_AUTH_TOKEN
        self._from_number = settings.TWILIO_WHATSAPP_NUMBER
        self._timeout = settings.CHANNEL_TIMEOUT_SECONDS
        self._transport = transport

    async def send_message(self, destination: str, body: str) -> dict:
        if not destination:
            raise MessagingSendError("Phone number is required")
        if not body:
            raise MessagingSendError("Message is required")
        if not (self._account_sid and self._auth_token and self._from_number):
            raise MessagingSendError(
                "Missing required configuration (Account SID, Auth Token, or WhatsApp Number)"
            )

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    f"{self._base_url}/2010-04-01/Accounts/{self._account_sid}/Messages.json",
                    data={
                        "From": whatsapp_address(self._from_number),
                        "To": whatsapp_address(destination),
                        "Body": body,
                    },
                    auth=(self._account_sid, self._auth_token),
                    timeout=self._timeout
                )
        except httpx.RequestError as e:
            logger.error(f"Twilio connection error: {e}")
            raise MessagingSendError(f"Twilio API unreachable: {str(e)}")

        if not response.is_success:
            raise MessagingSendError(f"Twilio API error: {_error_message(response)}")

        result = response.json()
        logger.info(f"WhatsApp message queued: {result.get('sid')}")
        return result


class ResendEmailClient(EmailSender):
    """Sends through the Resend edge function, which holds the Resend key server side."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._settings = settings
        self._url = settings.RESEND_EDGE_FUNCTION_URL
        self._api_key = settings.RESEND_API_KEY
        self._from = settings.EMAIL_FROM
        self._timeout = settings.CHANNEL_TIMEOUT_SECONDS
        self._transport = transport

    async def send_email(self, to: str, subject: str, html: str, text: str) -> dict:
        if not self._url:
            raise ConfigurationError("Resend Edge Function URL not configured")
        if not to or not subject or not (html or text):
            raise EmailSendError("Missing required email parameters")

        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    self._url,
                    json={
                        "from": self._from,
                        "to": to,
                        "subject": subject,
                        "html": html,
                        "text": text
                    },
                    headers=headers,
                    timeout=self._timeout
                )
        except httpx.RequestError as e:
            logger.error(f"Email service connection error: {e}")
            raise EmailSendError(f"Email service unreachable: {str(e)}")

        if not response.is_success:
            raise EmailSendError(f"Failed to send email: {_error_message(response)}")

        logger.info(f"Email sent to {to}: {subject}")
        return response.json()

    async def send_status_update(self, order: Order, new_status: str, is_guest_customer: bool) -> bool:
        if not order.customer_email:
            raise EmailSendError(f"Order {order.id} has no email address")
        content = status_update_email(order, get_status_config(new_status), is_guest_customer, self._settings)
        await self.send_email(order.customer_email, content.subject, content.html, content.text)
        return True
