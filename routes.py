from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from browser_session import BrowserLauncher
from config import Settings, get_settings
from errors import CaptureError, CaptureErrorKind, CaptureUnavailableError, InvalidUrlError
from models import CaptureRequest, CaptureResponse, UrlTestResponse
from utils.screenshot_capture import capture_screenshot, utc_timestamp
from utils.url_normalizer import normalize_url
import logging

logger = logging.getLogger(__name__)

# Create router
router = APIRouter()


def get_browser_launcher(request: Request) -> BrowserLauncher:
    """Browser launcher created at startup (created lazily if startup was skipped)"""
    launcher = getattr(request.app.state, "browser_launcher", None)
    if launcher is None:
        launcher = BrowserLauncher(get_settings())
        request.app.state.browser_launcher = launcher
    return launcher


def error_response(error: CaptureError, url: str = None) -> JSONResponse:
    """Map a pipeline error to the JSON body the feedback UI expects"""
    if error.kind == CaptureErrorKind.INVALID_URL:
        if error.message == "URL parameter is required":
            body = {"error": "URL parameter is required"}
        else:
            body = {"error": "Invalid URL format"}
    elif error.kind == CaptureErrorKind.PASSWORD_REQUIRED:
        body = {"error": "Password required", "message": error.message}
    elif error.kind == CaptureErrorKind.CAPTURE_UNAVAILABLE:
        body = {
            "error": "Screenshot service temporarily unavailable",
            "message": error.message,
            "url": url,
            "timestamp": utc_timestamp(),
        }
    else:
        body = {"error": "Failed to capture screenshot", "details": error.message}
    return JSONResponse(status_code=error.status_code, content=body)


@router.get("/")
async def root():
    return {
        "service": "Screenshot Service",
        "status": "running",
        "endpoints": {
            "screenshot": "/screenshot (POST)",
            "screenshot_test": "/screenshot-test (POST)",
        },
    }


@router.post("/screenshot", response_model=CaptureResponse)
async def take_screenshot(
    request: CaptureRequest,
    launcher: BrowserLauncher = Depends(get_browser_launcher),
    settings: Settings = Depends(get_settings),
):
    """
    Captures a screenshot of a website and returns it as a PNG data URI.

    - Missing scheme defaults to https://
    - Hosted site URLs are truncated to the site root
    - Password-protected pages need `password`; without it the response is 401
    - `fullPage` (default true) captures the whole scrollable page
    - `viewport` or `device` (desktop, tablet, mobile) sets the browser size
    """
    if not request.url or not request.url.strip():
        return error_response(InvalidUrlError("URL parameter is required"))

    if not settings.CAPTURE_ENABLED:
        return error_response(
            CaptureUnavailableError(
                "The screenshot feature is being configured. Please use image upload for now."
            ),
            url=request.url,
        )

    try:
        result = await capture_screenshot(request, launcher, settings)
    except CaptureError as e:
        return error_response(e, url=request.url)

    return CaptureResponse.from_result(result)


@router.post("/screenshot-test", response_model=UrlTestResponse)
async def check_screenshot_url(
    request: CaptureRequest,
    settings: Settings = Depends(get_settings),
):
    """
    Runs URL cleaning only, without launching a browser.
    Useful to check what URL a capture request would navigate to.
    """
    try:
        clean_url = normalize_url(request.url, settings.HOSTING_PROVIDER_DOMAIN)
    except InvalidUrlError as e:
        return error_response(e, url=request.url)

    logger.info(f"Original URL: {request.url} -> Cleaned URL: {clean_url}")

    return UrlTestResponse(
        success=True,
        message="URL processing test successful",
        originalUrl=request.url,
        cleanedUrl=clean_url,
        timestamp=utc_timestamp(),
        note="This is a test version - no actual screenshot taken",
    )


@router.get("/health")
async def health_check():
    return {"status": "healthy"}


@router.get("/status/detailed")
async def detailed_status_check(
    launcher: BrowserLauncher = Depends(get_browser_launcher),
    settings: Settings = Depends(get_settings),
):
    """
    Status check with browser launcher health and capture configuration.
    """
    return {
        "api": "healthy",
        "capture_enabled": settings.CAPTURE_ENABLED,
        "browser": launcher.health_check(),
        "overall_status": "healthy" if settings.CAPTURE_ENABLED else "degraded",
    }
