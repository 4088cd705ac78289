"""Diff engine — pixel-level comparison of two reconciled screenshots."""

from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path

from PIL import Image
from pixelmatch.contrib.PIL import pixelmatch

from .reconciler import ReconciledPair

DIFF_THRESHOLD = 0.1


@dataclass(frozen=True)
class DiffOutcome:
    diff_bytes: bytes  # PNG encoded
    mismatched_pixels: int

    def save(self, path: str | Path) -> None:
        Path(path).write_bytes(self.diff_bytes)


def diff(pair: ReconciledPair, threshold: float = DIFF_THRESHOLD) -> DiffOutcome:
    """Compare both images of *pair* and render the differences.

    Matching pixels are drawn as a faded grayscale copy of the first image
    and mismatches in red, following pixelmatch's output convention.
    """
    output = Image.new("RGBA", (pair.width, pair.height))
    mismatched = pixelmatch(pair.image_a, pair.image_b, output, threshold=threshold)

    buf = io.BytesIO()
    output.save(buf, format="PNG")
    return DiffOutcome(diff_bytes=buf.getvalue(), mismatched_pixels=mismatched)
