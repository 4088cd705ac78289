"""Dimension reconciler — brings two screenshots onto a shared canvas."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass

from PIL import Image, ImageOps

from webscrs.errors import DecodeError

logger = logging.getLogger(__name__)

# White at 50% opacity, so padding reads as white once blended.
PAD_COLOR = (255, 255, 255, 128)


@dataclass
class ReconciledPair:
    image_a: Image.Image
    image_b: Image.Image
    width: int
    height: int


def decode_image(data: bytes, name: str = "image") -> Image.Image:
    """Decode PNG (or any Pillow-readable) bytes into an RGBA image."""
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (OSError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Could not decode {name}: {e}") from e
    return image.convert("RGBA")


def fit_to_canvas(image: Image.Image, size: tuple[int, int]) -> Image.Image:
    """Resize *image* to fit inside *size* and pad the rest.

    The aspect ratio is kept and the content is anchored top-left; the
    uncovered area is filled with ``PAD_COLOR``. An image that already has
    the canvas size is returned unchanged.
    """
    if image.size == size:
        return image
    fitted = ImageOps.contain(image, size, method=Image.Resampling.LANCZOS)
    canvas = Image.new("RGBA", size, PAD_COLOR)
    canvas.paste(fitted, (0, 0))
    return canvas


def reconcile(data_a: bytes, data_b: bytes) -> ReconciledPair:
    """Decode two screenshots and return them at a common size."""
    image_a = decode_image(data_a, "first screenshot")
    image_b = decode_image(data_b, "second screenshot")

    width = max(image_a.width, image_b.width)
    height = max(image_a.height, image_b.height)
    if image_a.size != image_b.size:
        logger.debug("Reconciling %dx%d and %dx%d onto %dx%d canvas",
                     image_a.width, image_a.height, image_b.width, image_b.height,
                     width, height)
        image_a = fit_to_canvas(image_a, (width, height))
        image_b = fit_to_canvas(image_b, (width, height))

    return ReconciledPair(image_a=image_a, image_b=image_b, width=width, height=height)
