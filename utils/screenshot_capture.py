"""
Screenshot capture pipeline for the Screenshot Service.

Sequences URL normalization, navigation, password gate handling, overlay
sanitizing and capture for one request:

    Normalize -> Navigate -> CheckPasswordGate -> [Authenticate] -> Sanitize -> Capture

The browser for the request is owned by BrowserLauncher.session() and is
closed before this module returns or raises.
"""

import logging
import time
from datetime import datetime, timezone
from enum import Enum

from playwright.async_api import Page

from browser_session import BrowserLauncher
from config import Settings
from errors import (
    CaptureError,
    CaptureFailedError,
    InternalCaptureError,
    InvalidUrlError,
    PasswordRequiredError,
)
from models import CaptureRequest, CaptureResult
from utils.content_sanitizer import sanitize_page
from utils.image_processor import encode_png_data_uri
from utils.navigation import navigate
from utils.password_gate import AuthOutcome, PasswordGateHandler
from utils.url_normalizer import normalize_url

logger = logging.getLogger(__name__)


class CaptureStage(str, Enum):
    START = "start"
    NORMALIZE = "normalize"
    NAVIGATE = "navigate"
    CHECK_PASSWORD_GATE = "check_password_gate"
    SANITIZE = "sanitize"
    CAPTURE = "capture"
    RESPOND = "respond"


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with a trailing Z"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def capture_page(page: Page, full_page: bool, settings: Settings):
    """
    Wait for the injected stylesheet to render and take the screenshot.

    Raises:
        CaptureFailedError: On any browser or encoding error
    """
    try:
        await page.wait_for_timeout(settings.STYLE_SETTLE_MS)
        screenshot_bytes = await page.screenshot(full_page=full_page, type="png")
    except Exception as e:
        raise CaptureFailedError(f"Screenshot capture failed: {str(e)}", stage=CaptureStage.CAPTURE.value) from e

    return encode_png_data_uri(screenshot_bytes, max_dimension=settings.MAX_SCREENSHOT_DIMENSION)


async def capture_screenshot(
    request: CaptureRequest, launcher: BrowserLauncher, settings: Settings
) -> CaptureResult:
    """
    Capture a screenshot for one request.

    Args:
        request: Validated capture request
        launcher: Process-wide browser launcher
        settings: Application settings

    Returns:
        CaptureResult with the PNG data URI

    Raises:
        CaptureError: InvalidUrl, PasswordRequired, NavigationFailed, CaptureFailed
            or InternalError (wrapping any unexpected exception)
    """
    stage = CaptureStage.START
    start_time = time.time()

    try:
        stage = CaptureStage.NORMALIZE
        clean_url = normalize_url(request.url, settings.HOSTING_PROVIDER_DOMAIN)
        logger.info(f"📡 Capture requested for {request.url} -> {clean_url}")

        viewport = request.resolve_viewport(
            {"width": settings.VIEWPORT_WIDTH, "height": settings.VIEWPORT_HEIGHT}
        )

        async with launcher.session(viewport) as page:
            stage = CaptureStage.NAVIGATE
            await navigate(page, clean_url, settings)

            # Wait for dynamic content
            await page.wait_for_timeout(settings.CONTENT_SETTLE_MS)

            stage = CaptureStage.CHECK_PASSWORD_GATE
            gate = PasswordGateHandler.from_settings(page, settings)
            outcome = await gate.handle(request.password)

            if outcome == AuthOutcome.ATTEMPTED_BUT_FAILED:
                logger.warning(f"⚠️  Password gate not unlocked for {clean_url}, capturing current content")
            elif outcome == AuthOutcome.AUTHENTICATED:
                logger.info(f"🔓 Password gate unlocked for {clean_url}")

            stage = CaptureStage.SANITIZE
            await sanitize_page(page)

            stage = CaptureStage.CAPTURE
            image = await capture_page(page, request.full_page, settings)

        stage = CaptureStage.RESPOND
        logger.info(
            f"📸 Captured {clean_url} ({image.width}x{image.height}, "
            f"{round(image.size_bytes / 1024)} KB) in {time.time() - start_time:.2f}s"
        )

        return CaptureResult(
            success=True,
            image_data=image.data_uri,
            size_bytes=image.size_bytes,
            width=image.width,
            height=image.height,
            original_url=request.url,
            normalized_url=clean_url,
            timestamp=utc_timestamp(),
        )

    except PasswordRequiredError:
        logger.info(f"🔒 Password required for {request.url}")
        raise
    except InvalidUrlError as e:
        logger.warning(f"⚠️  Rejected URL {request.url!r}: {e.message}")
        raise
    except CaptureError as e:
        logger.error(f"❌ {e.kind.value} at stage '{e.stage or stage.value}' for {request.url}: {e.message}")
        if e.stage is None:
            e.stage = stage.value
        raise
    except Exception as e:
        logger.exception(f"❌ Unexpected failure at stage '{stage.value}' for {request.url}")
        raise InternalCaptureError(str(e) or type(e).__name__, stage=stage.value) from e
