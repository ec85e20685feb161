"""
Content Sanitizer for the Screenshot Service

Hides overlays (cookie banners, popups, modals, lightboxes, announcement bars
and ads) before screenshot capture by injecting a stylesheet.

This is a heuristic layer: it does not guarantee a clean page, and failing to
inject the stylesheet never fails the capture.
"""

import logging
from typing import Dict, List

from playwright.async_api import Page

logger = logging.getLogger(__name__)


HIDE_DECLARATIONS = "display: none !important; visibility: hidden !important;"

# Base rules applied to every page regardless of hidden overlays
BASE_CSS = """
html, body {
    -webkit-font-smoothing: antialiased !important;
    -moz-osx-font-smoothing: grayscale !important;
    overflow-x: visible !important;
}
"""

# Hide rules per overlay type. Each keyword matches case-insensitively as a
# substring of the class or id attribute; "exclude" keywords veto the match on
# either attribute, "exclude_class" keywords only on the class attribute.
HIDE_RULES: Dict[str, Dict[str, List[str]]] = {
    "cookie_banner": {
        "keywords": ["cookie", "consent", "gdpr"],
        "exclude": [],
        "exclude_class": ["policy"],
    },
    "popup": {
        "keywords": ["popup", "modal", "overlay"],
        "exclude": ["whiteboard"],
    },
    "lightbox": {
        "keywords": ["lightbox", "announcement-bar"],
        "exclude": [],
    },
    "advertisement": {
        "keywords": ["ad-", "ads-", "advert", "banner-ad"],
        "exclude": ["head", "read"],
    },
}


def _selectors_for_rule(keywords: List[str], exclude: List[str], exclude_class: List[str] = ()) -> List[str]:
    vetoes = "".join(
        f':not([{veto_attr}*="{word}" i])'
        for word in exclude
        for veto_attr in ("class", "id")
    )
    vetoes += "".join(f':not([class*="{word}" i])' for word in exclude_class)

    selectors = []
    for attribute in ("class", "id"):
        for keyword in keywords:
            selectors.append(f'[{attribute}*="{keyword}" i]{vetoes}')
    return selectors


def build_sanitizer_css(rules: Dict[str, Dict[str, List[str]]] = HIDE_RULES) -> str:
    """
    Build the stylesheet injected before capture.

    Args:
        rules: Overlay type -> {"keywords": [...], "exclude": [...], "exclude_class": [...]}

    Returns:
        CSS text
    """
    blocks = [BASE_CSS.strip()]
    for overlay_type, rule in rules.items():
        selectors = _selectors_for_rule(
            rule.get("keywords", []), rule.get("exclude", []), rule.get("exclude_class", [])
        )
        if not selectors:
            continue
        blocks.append(
            f"/* {overlay_type} */\n" + ",\n".join(selectors) + f" {{ {HIDE_DECLARATIONS} }}"
        )
    return "\n\n".join(blocks)


class ContentSanitizer:
    """
    Injects the overlay-hiding stylesheet into a page.
    """

    def __init__(self, page: Page, css: str = None):
        self.page = page
        self.css = css if css is not None else build_sanitizer_css()

    async def sanitize(self) -> bool:
        """
        Inject the stylesheet.

        Returns:
            True if the stylesheet was injected, False if injection failed
        """
        try:
            await self.page.add_style_tag(content=self.css)
            logger.info("🧹 Injected overlay-hiding stylesheet")
            return True
        except Exception as e:
            logger.warning(f"⚠️  Stylesheet injection failed, capturing raw page: {str(e)}")
            return False


# Convenience function for the capture pipeline
async def sanitize_page(page: Page) -> bool:
    """
    Convenience function to hide overlays before taking screenshots.

    Args:
        page: Playwright Page object

    Returns:
        True if the stylesheet was injected
    """
    return await ContentSanitizer(page).sanitize()
