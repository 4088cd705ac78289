"""Shared URL utilities — validate targets and derive screenshot filenames."""

from __future__ import annotations

import os
import re
from pathlib import Path
from urllib.parse import urlsplit

from webscrs.errors import ValidationError

MAX_NAME_LENGTH = 250

# Schemes that are meaningless without a host component.
_HOST_SCHEMES = {"http", "https", "ftp", "ws", "wss"}
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
_QUERY_PUNCTUATION_RE = re.compile(r"[?&=/]")


def is_valid_url(url: str) -> bool:
    """Return True if *url* is a well-formed absolute URL."""
    if not url or any(ch.isspace() for ch in url):
        return False
    try:
        parsed = urlsplit(url)
        parsed.port  # raises ValueError on a malformed port
    except ValueError:
        return False
    if not parsed.scheme or not _SCHEME_RE.match(parsed.scheme):
        return False
    if parsed.scheme.lower() in _HOST_SCHEMES and not parsed.hostname:
        return False
    return True


def _is_readable_file(path: str) -> bool:
    candidate = Path(path)
    return candidate.is_file() and os.access(candidate, os.R_OK)


def load_targets(inputs: list[str]) -> list[str]:
    """Resolve positional inputs into a validated list of target URLs.

    A single input that is not itself a URL but names a readable file is
    replaced by the whitespace-separated contents of that file.
    """
    urls = list(inputs)
    if len(urls) == 1 and not is_valid_url(urls[0]) and _is_readable_file(urls[0]):
        try:
            data = Path(urls[0]).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ValidationError(f'Could not read URL list "{urls[0]}": {e}') from e
        urls = data.split() or [""]

    for index, url in enumerate(urls, 1):
        if not is_valid_url(url):
            raise ValidationError(f'arg{index} - invalid URL "{url}"')
    return urls


def url_to_filename(url: str, prefix: str = "") -> str:
    """Derive a filesystem-safe ``.png`` name from a URL.

    ``https://example.com/docs/intro?page=2`` with prefix ``"1-"`` becomes
    ``1-example.com-docs_intropage2.png``.
    """
    parsed = urlsplit(url)
    path = parsed.path
    if path.startswith("/"):
        path = path[1:]
    if path.endswith("/"):
        path = path[:-1]
    path = path.replace("/", "_")
    query = _QUERY_PUNCTUATION_RE.sub("", parsed.query)

    suffix = f"-{path}{query}" if path + query else ""
    name = f"{prefix}{parsed.hostname or ''}{suffix}"[:MAX_NAME_LENGTH]
    return f"{name}.png"
