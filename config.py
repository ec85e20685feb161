"""
Centralized configuration for the Screenshot Service
All environment variables and settings are defined here
"""

from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Provides centralized configuration with validation and defaults.
    """

    # ======================
    # Service Configuration
    # ======================
    CAPTURE_ENABLED: bool = Field(
        default=True,
        description="Set to False to answer capture requests with 501"
    )
    HOSTING_PROVIDER_DOMAIN: str = Field(
        default="squarespace.com",
        description="Hosting domain whose site URLs are truncated to the subdomain root"
    )

    # ======================
    # Browser Configuration
    # ======================
    BROWSER_LAUNCH_TIMEOUT: int = Field(
        default=20,
        description="Timeout for launching browser in seconds"
    )
    BROWSER_CLOSE_TIMEOUT: float = Field(
        default=10,
        description="Timeout for closing browser in seconds"
    )
    USER_AGENT: str = Field(
        default=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        description="User agent sent by the capture browser"
    )
    VIEWPORT_WIDTH: int = Field(
        default=1920,
        description="Default browser viewport width"
    )
    VIEWPORT_HEIGHT: int = Field(
        default=1080,
        description="Default browser viewport height"
    )

    # ======================
    # Navigation Configuration
    # ======================
    NAVIGATION_TIMEOUT_MS: int = Field(
        default=30000,
        description="Timeout for each navigation attempt in milliseconds"
    )
    NAVIGATION_WAIT_UNTIL: str = Field(
        default="networkidle",
        description="Load milestone for the first navigation attempt"
    )
    NAVIGATION_FALLBACK_WAIT_UNTIL: str = Field(
        default="domcontentloaded",
        description="Looser load milestone used after a navigation timeout"
    )

    # ======================
    # Password Gate Configuration
    # ======================
    PASSWORD_GATE_SELECTORS: List[str] = Field(
        default=[
            'input[type="password"]',
            'input[name="password"]',
            ".password-page",
            '[class*="password-page"]',
            '[class*="password-container"]',
        ],
        description="Selectors that reveal a password-protected page, in priority order"
    )
    PASSWORD_FIELD_SELECTORS: List[str] = Field(
        default=[
            'input[type="password"]',
            'input[name="password"]',
            "#password",
        ],
        description="Selectors for the password input, in priority order"
    )
    SUBMIT_SELECTORS: List[str] = Field(
        default=[
            'button[type="submit"]',
            'input[type="submit"]',
            'button:has-text("Enter")',
            'button:has-text("Submit")',
            '[class*="password"] button',
        ],
        description="Selectors for the password form submit control, in priority order"
    )
    POST_AUTH_IDLE_TIMEOUT_MS: int = Field(
        default=10000,
        description="Max wait for network idle after submitting a password"
    )

    # ======================
    # Screenshot Configuration
    # ======================
    CONTENT_SETTLE_MS: int = Field(
        default=2000,
        description="Wait after navigation for late-loading content"
    )
    STYLE_SETTLE_MS: int = Field(
        default=1000,
        description="Wait after stylesheet injection before capture"
    )
    MAX_SCREENSHOT_DIMENSION: int = Field(
        default=0,
        description="Maximum screenshot dimension in pixels (0 disables resizing)"
    )

    # ======================
    # Logging Configuration
    # ======================
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"  # Allow extra env vars in .env file


# Global settings instance
settings = Settings()


# ======================
# Convenience Functions
# ======================

def get_settings() -> Settings:
    """Get the global settings instance"""
    return settings
