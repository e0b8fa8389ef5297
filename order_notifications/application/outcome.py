import asyncio
import logging
from typing import Awaitable, Optional

from order_notifications.domain.models import ChannelError, NotificationChannel, NotificationResult


logger = logging.getLogger(__name__)


class MultiChannelOutcome:
    """Collects per-channel results of one fan-out, in attempt order.

    A channel that is never recorded stays None in the final result, which
    is how "not attempted" is told apart from "failed".
    """

    def __init__(self):
        self._sent: dict[NotificationChannel, Optional[bool]] = {
            NotificationChannel.EMAIL: None,
            NotificationChannel.WHATSAPP: None,
        }
        self._internal = False
        self._errors: list[ChannelError] = []

    def succeeded(self, channel: NotificationChannel) -> None:
        if channel == NotificationChannel.INTERNAL:
            self._internal = True
        else:
            self._sent[channel] = True

    def failed(self, channel: NotificationChannel, error: str) -> None:
        if channel != NotificationChannel.INTERNAL:
            self._sent[channel] = False
        self._errors.append(ChannelError(type=channel, error=error))

    def was_sent(self, channel: NotificationChannel) -> bool:
        return bool(self._sent.get(channel))

    @property
    def errors(self) -> list[ChannelError]:
        return list(self._errors)

    def finalize(self) -> NotificationResult:
        return NotificationResult(
            email=self._sent[NotificationChannel.EMAIL],
            whatsapp=self._sent[NotificationChannel.WHATSAPP],
            internal=self._internal,
            errors=list(self._errors),
        )


async def attempt_channel(
    outcome: MultiChannelOutcome,
    channel: NotificationChannel,
    call: Awaitable,
    timeout: float,
) -> None:
    """Await one channel send, bounded by timeout, and record how it went."""
    try:
        response = await asyncio.wait_for(call, timeout=timeout)
    except asyncio.TimeoutError:
        logger.error(f"{channel.value} notification timed out after {timeout}s")
        outcome.failed(channel, f"timed out after {timeout}s")
        return
    except Exception as e:
        logger.error(f"{channel.value} notification failed: {e}")
        outcome.failed(channel, str(e) or e.__class__.__name__)
        return

    if response:
        logger.info(f"{channel.value} notification sent")
        outcome.succeeded(channel)
    else:
        logger.error(f"{channel.value} sender returned no confirmation")
        outcome.failed(channel, "no delivery confirmation")
