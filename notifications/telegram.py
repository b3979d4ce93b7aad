"""
Telegram Notifier — Event sink that posts hatches and newly filled
incubators to a Telegram chat.

Registered on the EventDispatcher for EggHatchedEvent and
EggIncubatorStatusEvent. Delivery is best effort: failures are logged and
never interrupt the incubator task.
"""

from __future__ import annotations
import aiohttp
from typing import Optional
from game.models import EggHatchedEvent, EggIncubatorStatusEvent
import logging

logger = logging.getLogger(__name__)


class TelegramNotifier:
    """Sends messages via Telegram Bot API."""

    def __init__(self, bot_token: str, chat_id: str, enabled: bool = True):
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.enabled = enabled and bool(bot_token) and bool(chat_id)
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self):
        if self._session and not self._session.closed:
            await self._session.close()

    async def send(self, message: str, parse_mode: str = "HTML"):
        """Send a message to the configured chat."""
        if not self.enabled:
            logger.debug(f"[TG] (disabled) Would send: {message[:100]}...")
            return

        try:
            session = await self._get_session()
            url = f"https://api.telegram.org/bot{self.bot_token}/sendMessage"
            payload = {
                "chat_id": self.chat_id,
                "text": message,
                "parse_mode": parse_mode,
                "disable_web_page_preview": True,
            }

            async with session.post(url, json=payload) as resp:
                if resp.status != 200:
                    body = await resp.text()
                    logger.warning(f"[TG] Send failed ({resp.status}): {body[:200]}")
                else:
                    logger.debug(f"[TG] Sent: {message[:80]}...")

        except Exception as e:
            logger.warning(f"[TG] Error sending message: {e}")

    @staticmethod
    def format_egg_hatched(event: EggHatchedEvent) -> str:
        return (
            f"🐣 <b>EGG HATCHED</b>\n\n"
            f"Pokemon: #{event.pokemon_id} (Lvl {event.level:g})\n"
            f"CP: <code>{event.cp}/{event.max_cp}</code>\n"
            f"IV: <code>{event.perfection:.2f}%</code>"
        )

    @staticmethod
    def format_incubator_status(event: EggIncubatorStatusEvent) -> str:
        return (
            f"🥚 <b>EGG INCUBATING</b>\n\n"
            f"Incubator: <code>{event.incubator_id}</code>\n"
            f"Egg: <code>{event.pokemon_id}</code> ({event.km_to_walk:g}km)\n"
            f"Remaining: <code>{event.km_remaining:.2f}km</code>"
        )

    async def on_egg_hatched(self, event: EggHatchedEvent):
        await self.send(self.format_egg_hatched(event))

    async def on_incubator_status(self, event: EggIncubatorStatusEvent):
        """Only newly filled incubators are worth a message."""
        if event.was_added_now:
            await self.send(self.format_incubator_status(event))

    async def send_bot_status(self, status: str):
        """Send bot lifecycle status."""
        await self.send(f"🤖 <b>BOT</b>: {status}")
