"""Capture job — takes one screenshot and reports success or failure."""

from __future__ import annotations

import logging
from typing import Optional

from playwright.async_api import Browser, Page
from rich.markup import escape

from webscrs.models.capture import CaptureFailure, CaptureRequest, CaptureResult, CaptureSuccess
from webscrs.models.config import BrowserConfig
from webscrs.progress import ProgressReporter

from .session import open_context

logger = logging.getLogger(__name__)


class CaptureJob:
    """Runs a single screenshot against a shared browser.

    ``run`` never raises: every navigation or capture problem is returned as
    a ``CaptureFailure`` so the caller can move on to the next target.
    """

    def __init__(
        self,
        browser: Browser,
        browser_config: BrowserConfig,
        device: Optional[dict] = None,
        progress: ProgressReporter | None = None,
    ):
        self.browser = browser
        self.browser_config = browser_config
        self.device = device
        self.progress = progress or ProgressReporter()

    async def run(self, request: CaptureRequest) -> CaptureResult:
        step = self.progress.start(f"{request.label}.[cyan]Loading page:[/cyan] {escape(request.target)}")
        context = None
        try:
            context = await open_context(self.browser, self.device)
            page = await context.new_page()
            await self._apply_viewport(page, request)
            response = await page.goto(
                request.target,
                wait_until=self.browser_config.wait_until,
                timeout=self.browser_config.navigation_timeout_ms,
            )
        except Exception as e:
            logger.debug("Navigation to %s failed: %s", request.target, e)
            step.fail(str(e), error_name=type(e).__name__)
            await self._close(context)
            return CaptureFailure(reason=str(e))

        if response is None or not response.ok:
            reason = f"Not Found: {request.target}"
            logger.debug("%s (status=%s)", reason, response.status if response else None)
            step.fail(reason)
            await self._close(context)
            return CaptureFailure(reason=reason)
        step.succeed()

        shot = self.progress.start(
            f"[cyan]Capturing screenshot:[/cyan] {escape(request.output_path)}", prefix="=>"
        )
        try:
            # Playwright writes the file and returns the same bytes.
            image_bytes = await page.screenshot(
                path=request.output_path,
                full_page=request.full_page,
            )
        except Exception as e:
            logger.debug("Screenshot of %s failed: %s", request.target, e)
            shot.fail(str(e), error_name=type(e).__name__)
            return CaptureFailure(reason=str(e))
        else:
            shot.succeed()
            return CaptureSuccess(image_bytes=image_bytes)
        finally:
            await self._close(context)

    async def _apply_viewport(self, page: Page, request: CaptureRequest) -> None:
        # A device profile fixes its own viewport.
        if self.device:
            return
        if request.viewport_width is None and request.viewport_height is None:
            return
        current = page.viewport_size or {"width": 0, "height": 0}
        await page.set_viewport_size({
            "width": request.viewport_width or current["width"],
            "height": request.viewport_height or current["height"],
        })

    @staticmethod
    async def _close(context) -> None:
        if context is None:
            return
        try:
            await context.close()
        except Exception as e:
            logger.warning("Failed to close browser context: %s", e)
