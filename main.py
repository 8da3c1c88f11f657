"""
Funding Rate Alert Bot - Main Entry Point
Pushes Bybit perpetual funding rates to Pushover at configured times of day.
"""
import asyncio
import logging
import sys
from typing import Optional

import aiohttp

from config import Settings, ScheduleConfig, get_settings, load_schedule_config
from core.bybit_client import BybitClient
from core.exceptions import (
    ConfigLoadError, MarketDataError, MissingCredentialError, NetworkError
)
from core.scheduler import NotificationScheduler
from notifiers.pushover import PushoverNotifier
from utils.formatting import format_funding_notification, seconds_to_time_string
from utils.logging_config import log_funding_rate, setup_logging

logger = logging.getLogger(__name__)


class FundingAlertBot:
    """Main application wiring the scheduler to the Bybit and Pushover clients."""

    def __init__(self, settings: Settings, schedule: ScheduleConfig):
        """Initialize bot components."""
        self.settings = settings
        self.schedule = schedule

        self.session: Optional[aiohttp.ClientSession] = None
        self.bybit: Optional[BybitClient] = None
        self.notifier: Optional[PushoverNotifier] = None
        self.scheduler: Optional[NotificationScheduler] = None

    async def setup(self):
        """Setup HTTP session, clients and scheduler."""
        logger.info("Setting up Funding Rate Alert Bot...")

        self.session = aiohttp.ClientSession()
        self.bybit = BybitClient(
            rest_url=self.settings.bybit_rest_url,
            timeout=self.settings.request_timeout,
            session=self.session
        )
        self.notifier = PushoverNotifier(
            token=self.settings.pushover_token,
            user_key=self.settings.pushover_user_key,
            api_url=self.settings.pushover_api_url,
            timeout=self.settings.request_timeout,
            session=self.session
        )
        self.scheduler = NotificationScheduler(
            self.schedule.notification_times,
            self.run_notification_cycle,
            poll_interval=self.settings.poll_interval,
            max_catchup_seconds=self.settings.max_catchup_seconds
        )

        logger.info("Setup complete!")

    async def notify_symbol(self, symbol: str, debug: bool = False) -> bool:
        """
        Fetch the funding rate for one symbol and push it.

        Failures are logged and reported through the return value only.
        """
        logger.info(f"Fetching FR for {symbol}...")
        try:
            funding = await self.bybit.get_funding_rate(symbol)
        except MarketDataError as e:
            logger.error(f"Failed to fetch FR for {symbol}: {e}")
            return False

        log_funding_rate(funding.symbol, funding.rate, debug=debug)

        message = format_funding_notification(funding, debug=debug)
        try:
            await self.notifier.send(message)
        except NetworkError as e:
            logger.error(f"Failed to send notification for {symbol}: {e}")
            return False

        logger.info(f"Sent {'debug ' if debug else ''}FR notification for {symbol}")
        return True

    async def run_notification_cycle(self, debug: bool = False) -> int:
        """
        Notify every configured symbol in order.

        Returns:
            Number of symbols notified successfully
        """
        sent = 0
        for symbol in self.schedule.symbols:
            if await self.notify_symbol(symbol, debug=debug):
                sent += 1
        logger.info(f"Notification cycle finished: {sent}/{len(self.schedule.symbols)} sent")
        return sent

    def log_startup_info(self):
        times = [seconds_to_time_string(t) for t in self.schedule.notification_times]
        logger.info("Starting funding rate notifications...")
        logger.info(f"Watched symbols: {self.schedule.symbols}")
        logger.info(f"Notification times: {times}")
        logger.info(f"Debug push: {'enabled' if self.schedule.debug_push else 'disabled'}")

    async def start(self):
        """Run the debug push if enabled, then the scheduler loop."""
        self.log_startup_info()

        try:
            if self.schedule.debug_push:
                logger.info("Debug push enabled. Sending test notifications...")
                await self.run_notification_cycle(debug=True)
                logger.info("Debug notifications done")

            self.scheduler.log_next_notification_time()
            await self.scheduler.run_forever()
        finally:
            await self.shutdown()

    async def shutdown(self):
        """Graceful shutdown."""
        logger.info("Shutting down Funding Rate Alert Bot...")

        if self.scheduler:
            self.scheduler.stop()

        if self.session and not self.session.closed:
            await self.session.close()

        logger.info("Shutdown complete")


async def main():
    """Main entry point."""
    try:
        settings = get_settings()
    except (MissingCredentialError, ConfigLoadError) as e:
        setup_logging()
        logger.error(f"Startup failed: {e}")
        sys.exit(1)

    setup_logging(log_level=settings.log_level, log_dir=settings.log_dir)

    try:
        schedule = load_schedule_config(settings.config_path)
    except ConfigLoadError as e:
        logger.error(f"Startup failed: {e}")
        sys.exit(1)

    bot = FundingAlertBot(settings, schedule)
    await bot.setup()
    await bot.start()


def run():
    """Console script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")


if __name__ == "__main__":
    run()
