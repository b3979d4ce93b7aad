"""
Incubator Bot — Main Orchestrator.
Wires the game client, inventory, allocator and notifier together and runs
the incubator task on a fixed interval until shutdown.
"""

from __future__ import annotations
import asyncio
import os
import sys
import signal
import logging

from dotenv import load_dotenv

# Load .env file before anything else
load_dotenv()

# Create data dir before FileHandler
os.makedirs("data", exist_ok=True)

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s | %(levelname)-7s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler("data/bot.log"),
    ],
)
logger = logging.getLogger(__name__)

from config import BotConfig
from core.cancellation import CancellationToken, OperationCancelledError
from core.incubator_allocator import IncubatorAllocator
from game.client import GameClient
from game.inventory import Inventory
from game.models import EggHatchedEvent, EggIncubatorStatusEvent
from notifications.events import EventDispatcher
from notifications.telegram import TelegramNotifier
from storage.usage_store import IncubatorUsageStore, UsageStoreError
from tasks.use_incubators import UseIncubatorsTask


class Bot:
    """Main bot orchestrator."""

    def __init__(self, config: BotConfig):
        self.config = config
        self.cancel_token = CancellationToken()

        self.client = GameClient(
            base_url=config.game.base_url,
            auth_token=config.game.auth_token,
            timeout_sec=config.game.request_timeout_sec,
        )
        self.notifier = TelegramNotifier(
            bot_token=config.notifications.telegram_bot_token,
            chat_id=config.notifications.telegram_chat_id,
            enabled=config.notifications.enabled,
        )

        self.dispatcher = EventDispatcher()
        self.dispatcher.on(EggHatchedEvent, self.notifier.on_egg_hatched)
        self.dispatcher.on(EggIncubatorStatusEvent, self.notifier.on_incubator_status)

        self.inventory = Inventory(self.client)
        self.allocator = IncubatorAllocator(
            commit=self.client.use_item_egg_incubator,
            min_km=config.incubators.use_egg_incubator_min_km,
            long_egg_km=config.incubators.long_egg_km,
            long_egg_min_level=config.incubators.long_egg_min_level,
        )
        self.store = IncubatorUsageStore(config.profile.incubators_file)
        self.task = UseIncubatorsTask(self.inventory, self.allocator, self.store, self.dispatcher)

    async def start(self):
        logger.info("=" * 60)
        logger.info("   INCUBATOR BOT — STARTING")
        logger.info("=" * 60)
        logger.info(
            f"[BOOT] Profile: {self.config.profile.profile_path}, "
            f"min km for limited incubators: {self.config.incubators.use_egg_incubator_min_km:g}"
        )

        await self.notifier.send_bot_status("Started ✅")
        await self._run_loop()

    def stop(self):
        logger.info("[SHUTDOWN] Stopping bot...")
        self.cancel_token.cancel()

    async def close(self):
        await self.client.close()
        await self.notifier.send_bot_status("Stopped 🔴")
        await self.notifier.close()
        logger.info("[SHUTDOWN] Complete.")

    async def _run_loop(self):
        interval = self.config.incubators.run_interval_sec

        while not self.cancel_token.is_cancelled:
            try:
                await self.task.execute(self.cancel_token)
            except OperationCancelledError:
                break
            except UsageStoreError:
                logger.critical(f"[STORE] Cannot read {self.store.path}, stopping")
                raise
            except Exception as e:
                logger.error(f"[INCUBATOR] Task error: {e}", exc_info=True)

            if await self.cancel_token.wait(interval):
                break


async def main():
    """Entry point."""
    config = BotConfig.from_env()
    logging.getLogger().setLevel(config.log_level.upper())
    bot = Bot(config)

    # Graceful shutdown handler
    if sys.platform != "win32":
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, bot.stop)

    try:
        await bot.start()
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt received in main loop.")
    except Exception as e:
        logger.critical(f"Fatal error: {e}", exc_info=True)
        await bot.close()
        sys.exit(1)

    await bot.close()


if __name__ == "__main__":
    asyncio.run(main())
