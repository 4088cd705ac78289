"""Browser session utilities — launch Chromium and open per-job contexts."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from playwright.async_api import Browser, BrowserContext, Playwright

from webscrs.errors import ValidationError
from webscrs.models.config import BrowserConfig

DEVICE_DOCS_URL = "https://playwright.dev/python/docs/emulation#devices"


async def launch_browser(playwright: Playwright, config: BrowserConfig) -> Browser:
    """Launch the single Chromium instance shared by every job in a run."""
    return await playwright.chromium.launch(
        headless=config.headless,
        args=list(config.launch_args),
    )


def resolve_device(devices: Mapping[str, dict], name: Optional[str]) -> Optional[dict]:
    """Look up a device descriptor by name, or raise ValidationError.

    The returned dict holds only the options ``browser.new_context`` accepts.
    """
    if not name:
        return None
    descriptor = devices.get(name)
    if descriptor is None:
        raise ValidationError(f"Unknown device specified. See details at {DEVICE_DOCS_URL}")
    return {k: v for k, v in descriptor.items() if k != "default_browser_type"}


async def open_context(
    browser: Browser,
    device: Optional[dict] = None,
) -> BrowserContext:
    """Create a fresh browser context, emulating *device* when given."""
    context_kwargs: dict[str, Any] = dict(device) if device else {}
    return await browser.new_context(**context_kwargs)
