"""
Pushover notification client.
Delivers plain-text messages to a single user key.
"""
import asyncio
import logging
from typing import Optional

import aiohttp

from core.exceptions import NotificationSendError

logger = logging.getLogger(__name__)


class PushoverNotifier:
    """
    Sends push notifications through the Pushover messages API.

    The response is only logged: a non-success status from Pushover does
    not raise. Transport failures raise NotificationSendError.
    """

    def __init__(
        self,
        token: str,
        user_key: str,
        api_url: str = "https://api.pushover.net/1/messages.json",
        timeout: float = 10.0,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """Initialize notifier with static app token and user key."""
        self.token = token
        self.user_key = user_key
        self.api_url = api_url
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    async def _ensure_session(self):
        """Ensure aiohttp session exists."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True

    async def close(self):
        """Close the aiohttp session if this notifier created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def send(self, message: str):
        """
        Send a message.

        Args:
            message: Plain text message body

        Raises:
            NotificationSendError: if the POST could not be made
        """
        await self._ensure_session()
        form = {
            "token": self.token,
            "user": self.user_key,
            "message": message,
        }

        try:
            async with self._session.post(
                self.api_url,
                data=form,
                timeout=self._timeout
            ) as response:
                if response.status != 200:
                    body = await response.text(errors="replace")
                    logger.warning(f"Pushover answered HTTP {response.status}: {body}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NotificationSendError(f"Failed to send Pushover message: {e!r}") from e
