"""
Password Gate Handler

Detects password-protected pages (e.g. Squarespace site passwords), submits the
supplied password and reports the outcome as a tri-state AuthOutcome.

Authentication is best-effort: a failed login is reported, not raised, so the
capture can still proceed with whatever content the page shows.
"""

import logging
from enum import Enum
from typing import List, Optional, Sequence

from playwright.async_api import ElementHandle, Page, TimeoutError as PlaywrightTimeout

from config import Settings
from errors import PasswordRequiredError

logger = logging.getLogger(__name__)


class AuthOutcome(str, Enum):
    AUTHENTICATED = "authenticated"
    ATTEMPTED_BUT_FAILED = "attempted_but_failed"
    NOT_APPLICABLE = "not_applicable"


async def first_match(page: Page, selectors: Sequence[str]) -> Optional[ElementHandle]:
    """
    Try each selector in priority order and return the first element found.

    A selector that errors (invalid syntax, detached frame) counts as no match.
    """
    for selector in selectors:
        try:
            element = await page.query_selector(selector)
        except Exception as e:
            logger.debug(f"Selector probe failed for {selector!r}: {str(e)}")
            continue
        if element is not None:
            logger.debug(f"Selector probe matched {selector!r}")
            return element
    return None


class PasswordGateHandler:
    """
    Detects and unlocks a password gate on the loaded page.
    """

    def __init__(
        self,
        page: Page,
        gate_selectors: List[str],
        field_selectors: List[str],
        submit_selectors: List[str],
        idle_timeout_ms: int = 10000,
    ):
        self.page = page
        self.gate_selectors = gate_selectors
        self.field_selectors = field_selectors
        self.submit_selectors = submit_selectors
        self.idle_timeout_ms = idle_timeout_ms

    @classmethod
    def from_settings(cls, page: Page, settings: Settings) -> "PasswordGateHandler":
        return cls(
            page,
            gate_selectors=settings.PASSWORD_GATE_SELECTORS,
            field_selectors=settings.PASSWORD_FIELD_SELECTORS,
            submit_selectors=settings.SUBMIT_SELECTORS,
            idle_timeout_ms=settings.POST_AUTH_IDLE_TIMEOUT_MS,
        )

    async def is_gated(self) -> bool:
        """Check the DOM for a password prompt"""
        return await first_match(self.page, self.gate_selectors) is not None

    async def handle(self, password: Optional[str]) -> AuthOutcome:
        """
        Unlock the page if it is gated.

        Raises:
            PasswordRequiredError: If the page is gated and no password was supplied
        """
        if not await self.is_gated():
            return AuthOutcome.NOT_APPLICABLE

        if not password:
            raise PasswordRequiredError(
                "This site is password protected. Please provide the password.",
                stage="check_password_gate",
            )

        return await self.authenticate(password)

    async def authenticate(self, password: str) -> AuthOutcome:
        """
        Fill and submit the password form.

        Returns:
            AUTHENTICATED if the gate is gone afterwards, ATTEMPTED_BUT_FAILED otherwise
        """
        try:
            field = await first_match(self.page, self.field_selectors)
            if field is None:
                logger.warning("⚠️  Password gate detected but no password field found")
                return AuthOutcome.ATTEMPTED_BUT_FAILED

            await field.fill(password)

            submit = await first_match(self.page, self.submit_selectors)
            if submit is not None:
                logger.info("🔑 Submitting password via submit button")
                await submit.click()
            else:
                logger.info("🔑 No submit button found, pressing Enter in password field")
                await field.press("Enter")

            await self._wait_for_idle()

            if await self.is_gated():
                logger.warning("⚠️  Password gate still present after submitting password")
                return AuthOutcome.ATTEMPTED_BUT_FAILED

            logger.info("✅ Password accepted")
            return AuthOutcome.AUTHENTICATED

        except Exception as e:
            logger.warning(f"⚠️  Password authentication failed: {str(e)}")
            return AuthOutcome.ATTEMPTED_BUT_FAILED

    async def _wait_for_idle(self) -> None:
        try:
            await self.page.wait_for_load_state("networkidle", timeout=self.idle_timeout_ms)
        except PlaywrightTimeout:
            logger.info(
                f"Network not idle {self.idle_timeout_ms / 1000}s after password submit, continuing"
            )
