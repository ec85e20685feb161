"""
Browser session manager for the Screenshot Service
Owns the process-wide Playwright driver and launches one isolated browser per request
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Callable, Optional

from playwright.async_api import async_playwright, Browser, Page

from config import Settings

logger = logging.getLogger(__name__)


class BrowserLauncher:
    """
    Starts the Playwright driver once per process and hands out one fresh
    browser per capture request. Browsers are never pooled or shared.
    """

    def __init__(self, settings: Settings, playwright_factory: Callable = async_playwright):
        """
        Initialize browser launcher.

        Args:
            settings: Application settings (timeouts, user agent)
            playwright_factory: Callable returning a Playwright context manager
        """
        self.settings = settings
        self.playwright_factory = playwright_factory

        self.playwright = None
        self._lock = asyncio.Lock()
        self._started_at: Optional[datetime] = None
        self.active_sessions = 0
        self.sessions_served = 0
        self.close_failures = 0

    @property
    def started(self) -> bool:
        return self.playwright is not None

    async def start(self):
        """Start the Playwright driver"""
        if self.playwright is not None:
            return

        async with self._lock:
            if self.playwright is not None:
                return

            logger.info("🚀 Starting Playwright driver...")
            self.playwright = await self.playwright_factory().start()
            self._started_at = datetime.now()
            logger.info("✅ Playwright driver started")

    async def stop(self):
        """Stop the Playwright driver"""
        async with self._lock:
            if self.playwright is None:
                return

            try:
                await self.playwright.stop()
                logger.info("✅ Playwright driver stopped")
            except Exception as e:
                logger.warning(f"⚠️  Error stopping Playwright: {str(e)}")
            finally:
                self.playwright = None
                self._started_at = None

    async def _launch_browser(self) -> Browser:
        """Create a new browser instance with container-friendly settings"""
        return await self.playwright.chromium.launch(
            headless=True,
            timeout=self.settings.BROWSER_LAUNCH_TIMEOUT * 1000,
            args=[
                "--disable-blink-features=AutomationControlled",
                "--disable-dev-shm-usage",  # Prevents memory issues in Docker
                "--no-sandbox",  # Required in some containerized environments
                "--disable-setuid-sandbox",
                "--disable-gpu",
            ],
        )

    async def _close_browser(self, browser: Browser):
        try:
            await asyncio.wait_for(browser.close(), timeout=self.settings.BROWSER_CLOSE_TIMEOUT)
            logger.info("✅ Browser closed")
        except Exception as e:
            self.close_failures += 1
            logger.error(f"⚠️  Error closing browser: {str(e) or type(e).__name__}")

    @asynccontextmanager
    async def session(self, viewport: dict) -> AsyncIterator[Page]:
        """
        Launch a browser for one request and yield a ready page.

        The browser is closed exactly once when the block exits, whether it
        exits normally or with an exception. Close failures are logged only.

        Args:
            viewport: Playwright viewport dict ({"width": ..., "height": ...})

        Yields:
            Page configured with the viewport and user agent
        """
        await self.start()

        try:
            browser = await self._launch_browser()
        except Exception as e:
            logger.error(f"❌ Browser launch failed: {str(e)}")
            raise RuntimeError(f"Failed to launch browser: {str(e)}") from e

        self.active_sessions += 1
        self.sessions_served += 1
        logger.info(f"✅ Browser launched (viewport {viewport['width']}x{viewport['height']})")

        try:
            context = await browser.new_context(
                viewport=viewport,
                user_agent=self.settings.USER_AGENT,
            )
            page = await context.new_page()
            yield page
        finally:
            self.active_sessions -= 1
            await self._close_browser(browser)

    def health_check(self) -> dict:
        """
        Report launcher status.

        Returns:
            Dictionary with health status
        """
        uptime = (
            (datetime.now() - self._started_at).total_seconds() if self._started_at else 0
        )
        return {
            "driver_started": self.started,
            "uptime_seconds": round(uptime, 2),
            "active_sessions": self.active_sessions,
            "sessions_served": self.sessions_served,
            "close_failures": self.close_failures,
            "status": "healthy" if self.started else "not_started",
        }
