"""Pytest configuration and shared fixtures."""

import io
from dataclasses import dataclass
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from PIL import Image
from rich.console import Console

from webscrs.models.config import BrowserConfig, WebscrsConfig
from webscrs.progress import ProgressReporter


# ============================================================================
# Image Helpers
# ============================================================================


def png_bytes(size: tuple[int, int], color=(255, 255, 255, 255), box=None, box_color=(0, 0, 0, 255)) -> bytes:
    """Encode a solid RGBA image as PNG, optionally with a filled rectangle."""
    image = Image.new("RGBA", size, color)
    if box is not None:
        x0, y0, x1, y1 = box
        for x in range(x0, x1):
            for y in range(y0, y1):
                image.putpixel((x, y), box_color)
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


# ============================================================================
# Fake Browser
# ============================================================================


@dataclass
class BrokenScreenshot:
    """Page loads fine but the screenshot call raises *error*."""
    error: Exception


def make_fake_browser(pages: dict) -> Mock:
    """Build a Playwright-like browser serving canned pages.

    ``pages`` maps URL to one of: PNG bytes (200 response), an int status
    code, ``None`` (no response), an Exception raised by ``goto``, or a
    ``BrokenScreenshot``.
    """
    browser = Mock()
    browser.contexts = []

    async def new_context(**kwargs):
        context = Mock()
        context.options = kwargs
        page = Mock()
        page.viewport_size = {"width": 1280, "height": 720}
        page.set_viewport_size = AsyncMock()

        async def goto(url, **goto_kwargs):
            page.url = url
            outcome = pages[url]
            if isinstance(outcome, Exception):
                raise outcome
            if outcome is None:
                return None
            status = outcome if isinstance(outcome, int) else 200
            response = Mock()
            response.status = status
            response.ok = 200 <= status < 300
            return response

        async def screenshot(path=None, full_page=True):
            outcome = pages[page.url]
            if isinstance(outcome, BrokenScreenshot):
                raise outcome.error
            if path:
                Path(path).write_bytes(outcome)
            return outcome

        page.goto = AsyncMock(side_effect=goto)
        page.screenshot = AsyncMock(side_effect=screenshot)
        context.page = page
        context.new_page = AsyncMock(return_value=page)
        context.close = AsyncMock()
        browser.contexts.append(context)
        return context

    browser.new_context = AsyncMock(side_effect=new_context)
    browser.close = AsyncMock()
    return browser


def make_fake_playwright(browser: Mock, devices: dict | None = None) -> MagicMock:
    """Return a stand-in for ``async_playwright()`` yielding *browser*."""
    p = Mock()
    p.devices = devices or {}
    p.chromium = Mock()
    p.chromium.launch = AsyncMock(return_value=browser)

    manager = MagicMock()
    manager.__aenter__ = AsyncMock(return_value=p)
    manager.__aexit__ = AsyncMock(return_value=False)
    manager.playwright = p
    return manager


IPHONE_SE = {
    "user_agent": "Mozilla/5.0 (iPhone; CPU iPhone OS 11_0 like Mac OS X)",
    "viewport": {"width": 320, "height": 568},
    "device_scale_factor": 2,
    "is_mobile": True,
    "has_touch": True,
    "default_browser_type": "webkit",
}


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "screenshots"


@pytest.fixture
def webscrs_config(output_dir: Path) -> WebscrsConfig:
    """Create a capture-mode configuration writing into a temp directory."""
    return WebscrsConfig(output_dir=str(output_dir))


@pytest.fixture
def compare_config(output_dir: Path) -> WebscrsConfig:
    """Create a compare-mode configuration writing into a temp directory."""
    return WebscrsConfig(output_dir=str(output_dir), compare=True)


@pytest.fixture
def browser_config() -> BrowserConfig:
    return BrowserConfig()


# ============================================================================
# Output Fixtures
# ============================================================================


@pytest.fixture
def console_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def progress(console_output: io.StringIO) -> ProgressReporter:
    """Progress reporter writing plain text into ``console_output``."""
    return ProgressReporter(Console(file=console_output, force_terminal=False, width=200))


@pytest.fixture
def white_png() -> bytes:
    return png_bytes((20, 10))
