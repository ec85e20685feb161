"""
Page navigation with a single wait-strategy fallback.
"""

import logging
import time

from playwright.async_api import Page, Error as PlaywrightError, TimeoutError as PlaywrightTimeout

from config import Settings
from errors import NavigationFailedError

logger = logging.getLogger(__name__)


async def navigate(page: Page, url: str, settings: Settings) -> str:
    """
    Load url in page.

    The first attempt waits for NAVIGATION_WAIT_UNTIL. If it times out the
    page is loaded once more waiting only for NAVIGATION_FALLBACK_WAIT_UNTIL.

    Returns:
        The wait milestone that succeeded

    Raises:
        NavigationFailedError: If both attempts fail or the browser reports a non-timeout error
    """
    nav_start = time.time()
    strategies = [settings.NAVIGATION_WAIT_UNTIL, settings.NAVIGATION_FALLBACK_WAIT_UNTIL]

    for attempt, wait_until in enumerate(strategies, start=1):
        try:
            logger.info(
                f"🔄 Navigation attempt {attempt} to {url} "
                f"(wait_until={wait_until}, timeout={settings.NAVIGATION_TIMEOUT_MS / 1000}s)"
            )
            await page.goto(url, wait_until=wait_until, timeout=settings.NAVIGATION_TIMEOUT_MS)
            logger.info(
                f"⏱️  Page navigation completed in {time.time() - nav_start:.2f}s (attempt {attempt})"
            )
            return wait_until
        except PlaywrightTimeout as e:
            if attempt < len(strategies):
                logger.warning(
                    f"⚠️  Navigation timeout waiting for '{wait_until}', "
                    f"retrying with '{strategies[attempt]}'"
                )
                continue
            raise NavigationFailedError(
                f"Timed out loading {url} after {attempt} attempts: {str(e)}", stage="navigate"
            ) from e
        except PlaywrightError as e:
            raise NavigationFailedError(f"Failed to load {url}: {str(e)}", stage="navigate") from e

    raise NavigationFailedError(f"Failed to navigate to {url}", stage="navigate")
