"""Exception types raised by webscrs."""

from __future__ import annotations


class WebscrsError(Exception):
    """Base class for webscrs errors."""


class ValidationError(WebscrsError, ValueError):
    """Run input was rejected before any browser work started."""


class DecodeError(WebscrsError):
    """A screenshot buffer could not be decoded as an image."""
