"""Batch orchestrator — validates input, runs capture jobs, and diffs pairs."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

from playwright.async_api import Browser, async_playwright
from rich.markup import escape

from webscrs.browser.capture_job import CaptureJob
from webscrs.browser.session import launch_browser, resolve_device
from webscrs.errors import DecodeError, ValidationError
from webscrs.models.capture import CaptureRequest, CaptureSuccess, JobRecord, RunStatus
from webscrs.models.config import WebscrsConfig
from webscrs.progress import ProgressReporter
from webscrs.url_utils import load_targets, url_to_filename
from webscrs.visual.diff_engine import diff
from webscrs.visual.reconciler import reconcile

logger = logging.getLogger(__name__)

DIFF_FILENAME = "screenshot-diff.png"


def check_pair_count(urls: list[str], compare: bool) -> None:
    if compare and len(urls) % 2:
        raise ValidationError("Compare URLs must be even")


class BatchOrchestrator:
    """Runs every capture (or compare) job of a batch, one at a time.

    A failing job never stops the batch; it only flips the run's
    ``any_failure`` flag. Input problems raise ``ValidationError`` before
    any file is written.
    """

    def __init__(self, config: WebscrsConfig, progress: ProgressReporter | None = None):
        self.config = config
        self.output_dir = Path(config.output_dir)
        self.progress = progress or ProgressReporter()

    def run(self, inputs: list[str]) -> RunStatus:
        """Validate *inputs* and run the whole batch."""
        return asyncio.run(self.run_async(inputs))

    async def run_async(self, inputs: list[str]) -> RunStatus:
        urls = load_targets(inputs)
        check_pair_count(urls, self.config.compare)

        async with async_playwright() as p:
            device = resolve_device(p.devices, self.config.device)

            self.output_dir.mkdir(parents=True, exist_ok=True)
            logger.debug("Launching Chromium (headless=%s)", self.config.browser.headless)
            browser = await launch_browser(p, self.config.browser)
            try:
                return await self.run_jobs(browser, urls, device)
            finally:
                await browser.close()

    async def run_jobs(
        self, browser: Browser, urls: list[str], device: Optional[dict] = None,
    ) -> RunStatus:
        """Run all jobs for already validated *urls* against *browser*."""
        status = RunStatus()
        job = CaptureJob(browser, self.config.browser, device=device, progress=self.progress)

        if self.config.compare:
            self.progress.banner("Starting screenshot comparison...")
            for i in range(0, len(urls), 2):
                await self._compare_pair(job, str(i // 2 + 1), urls[i], urls[i + 1], status)
        else:
            self.progress.banner("Starting screenshot capture...")
            for index, target in enumerate(urls, 1):
                await self._capture(job, str(index), target, f"{index}-", status)

        logger.debug("Batch finished: %d job step(s), any_failure=%s",
                     len(status.records), status.any_failure)
        self.progress.summary(status.succeeded)
        return status

    def build_request(self, label: str, target: str, prefix: str) -> CaptureRequest:
        return CaptureRequest(
            target=target,
            output_path=str(self.output_dir / url_to_filename(target, prefix)),
            viewport_width=self.config.viewport.width,
            viewport_height=self.config.viewport.height,
            full_page=not self.config.short,
            label=label,
        )

    async def _capture(
        self, job: CaptureJob, label: str, target: str, prefix: str, status: RunStatus,
    ) -> bytes | None:
        request = self.build_request(label, target, prefix)
        result = await job.run(request)
        if isinstance(result, CaptureSuccess):
            status.record(JobRecord(label=label, kind="capture", target=target,
                                    output_path=request.output_path))
            return result.image_bytes

        logger.debug("Capture %s failed for %s: %s", label, target, result.reason)
        status.record(JobRecord(label=label, kind="capture", target=target,
                                output_path=request.output_path, ok=False,
                                reason=result.reason))
        return None

    async def _compare_pair(
        self, job: CaptureJob, number: str, url_a: str, url_b: str, status: RunStatus,
    ) -> None:
        bytes_a = await self._capture(job, number, url_a, f"{number}a-", status)
        bytes_b = await self._capture(job, number, url_b, f"{number}b-", status)
        if bytes_a is None or bytes_b is None:
            logger.debug("Skipping diff %s: a capture in the pair failed", number)
            return

        path = self.output_dir / f"{number}c-{DIFF_FILENAME}"
        step = self.progress.start(f"{number}.[cyan]Generating diff:[/cyan] {escape(str(path))}")
        try:
            outcome = diff(reconcile(bytes_a, bytes_b))
            outcome.save(path)
        except (DecodeError, OSError) as e:
            logger.debug("Diff %s failed: %s", number, e)
            step.fail(str(e), error_name=type(e).__name__)
            status.record(JobRecord(label=number, kind="diff", output_path=str(path),
                                    ok=False, reason=str(e)))
            return

        if outcome.mismatched_pixels:
            step.warn(f"{outcome.mismatched_pixels} pixels different")
        else:
            step.succeed("No differences found")
        status.record(JobRecord(label=number, kind="diff", output_path=str(path),
                                mismatched_pixels=outcome.mismatched_pixels))
