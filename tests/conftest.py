"""
In-memory stand-ins for the Playwright driver, browser and page.

FakePage models just enough of a password-protected hosted site: while gated
it exposes a password field, a password-page container and (optionally) a
submit button; submitting the accepted password removes them.
"""

import asyncio
import io

import pytest
from PIL import Image
from playwright.async_api import TimeoutError as PlaywrightTimeout

from browser_session import BrowserLauncher
from config import Settings


def make_png(width: int = 40, height: int = 30) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), (200, 120, 40)).save(buffer, format="PNG")
    return buffer.getvalue()


class FakeElement:
    def __init__(self, page, role: str):
        self.page = page
        self.role = role

    async def fill(self, value):
        if self.page.fill_error:
            raise self.page.fill_error
        self.page.calls.append(("fill", self.role, value))
        self.page.typed = value

    async def click(self):
        self.page.calls.append(("click", self.role))
        self.page.submit()

    async def press(self, key):
        self.page.calls.append(("press", self.role, key))
        if key == "Enter":
            self.page.submit()


class FakePage:
    def __init__(
        self,
        gated: bool = False,
        accepted_password: str = "secret",
        submit_button: bool = True,
        goto_errors=None,
        screenshot_bytes: bytes = None,
        screenshot_error: Exception = None,
        style_error: Exception = None,
        idle_error: Exception = None,
        fill_error: Exception = None,
        broken_selectors=(),
        wait_error: Exception = None,
    ):
        self.gated = gated
        self.accepted_password = accepted_password
        self.submit_button = submit_button
        self.goto_errors = list(goto_errors or [])
        self.screenshot_bytes = screenshot_bytes if screenshot_bytes is not None else make_png()
        self.screenshot_error = screenshot_error
        self.style_error = style_error
        self.idle_error = idle_error
        self.fill_error = fill_error
        self.broken_selectors = set(broken_selectors)
        self.wait_error = wait_error
        self.typed = None
        self.calls = []

    # Page state

    def submit(self):
        self.calls.append(("submit", self.typed))
        if self.typed == self.accepted_password:
            self.gated = False

    def _elements(self):
        if not self.gated:
            return {}
        elements = {
            'input[type="password"]': FakeElement(self, "password_field"),
            ".password-page": FakeElement(self, "password_page"),
        }
        if self.submit_button:
            elements['button[type="submit"]'] = FakeElement(self, "submit_button")
        return elements

    # Playwright Page API

    async def goto(self, url, wait_until=None, timeout=None):
        self.calls.append(("goto", url, wait_until, timeout))
        if self.goto_errors:
            error = self.goto_errors.pop(0)
            if error is not None:
                raise error

    async def query_selector(self, selector):
        self.calls.append(("query_selector", selector))
        if selector in self.broken_selectors:
            raise RuntimeError(f"Frame was detached while querying {selector}")
        return self._elements().get(selector)

    async def wait_for_timeout(self, ms):
        self.calls.append(("wait_for_timeout", ms))
        if self.wait_error:
            raise self.wait_error

    async def wait_for_load_state(self, state=None, timeout=None):
        self.calls.append(("wait_for_load_state", state, timeout))
        if self.idle_error:
            raise self.idle_error

    async def add_style_tag(self, content=None):
        self.calls.append(("add_style_tag", content))
        if self.style_error:
            raise self.style_error

    async def screenshot(self, full_page=False, type="png"):
        self.calls.append(("screenshot", full_page, type))
        if self.screenshot_error:
            raise self.screenshot_error
        return self.screenshot_bytes

    def called(self, name):
        return [call for call in self.calls if call[0] == name]


class FakeContext:
    def __init__(self, page):
        self.page = page

    async def new_page(self):
        return self.page


class FakeBrowser:
    def __init__(self, page, close_error: Exception = None, close_delay: float = 0):
        self.page = page
        self.close_error = close_error
        self.close_delay = close_delay
        self.close_calls = 0
        self.contexts = []

    async def new_context(self, viewport=None, user_agent=None):
        self.contexts.append({"viewport": viewport, "user_agent": user_agent})
        return FakeContext(self.page)

    async def close(self):
        self.close_calls += 1
        if self.close_delay:
            await asyncio.sleep(self.close_delay)
        if self.close_error:
            raise self.close_error


class FakeChromium:
    def __init__(self, browser, launch_error: Exception = None):
        self.browser = browser
        self.launch_error = launch_error
        self.launches = 0

    async def launch(self, **kwargs):
        if self.launch_error:
            raise self.launch_error
        self.launches += 1
        return self.browser


class FakePlaywright:
    def __init__(self, chromium):
        self.chromium = chromium
        self.stopped = False

    async def stop(self):
        self.stopped = True


class FakePlaywrightManager:
    def __init__(self, playwright):
        self.playwright = playwright

    async def start(self):
        return self.playwright


@pytest.fixture
def settings():
    return Settings(CONTENT_SETTLE_MS=0, STYLE_SETTLE_MS=0)


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def make_launcher(settings):
    """Build a BrowserLauncher whose driver hands out a FakeBrowser around page"""

    def _make(page, close_error=None, launch_error=None, close_delay=0, settings=settings):
        browser = FakeBrowser(page, close_error=close_error, close_delay=close_delay)
        chromium = FakeChromium(browser, launch_error=launch_error)
        playwright = FakePlaywright(chromium)
        launcher = BrowserLauncher(settings, playwright_factory=lambda: FakePlaywrightManager(playwright))
        return launcher, browser, chromium

    return _make


@pytest.fixture
def navigation_timeout():
    return PlaywrightTimeout("Timeout 30000ms exceeded.")
