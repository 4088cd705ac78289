"""Configuration models for webscrs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


class ViewportConfig(BaseModel):
    width: Optional[int] = None
    height: Optional[int] = None

    @field_validator("width", "height")
    @classmethod
    def positive_dimension(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError("viewport dimensions must be positive")
        return v

    @property
    def is_set(self) -> bool:
        return self.width is not None or self.height is not None


class BrowserConfig(BaseModel):
    headless: bool = True
    launch_args: list[str] = Field(
        default_factory=lambda: ["--no-sandbox", "--disable-setuid-sandbox"]
    )
    navigation_timeout_ms: int = 30000
    wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = "load"


class WebscrsConfig(BaseModel):
    # Output
    output_dir: str = "./screenshots"

    # Mode
    compare: bool = False
    short: bool = False  # viewport-only capture

    # Emulation
    device: Optional[str] = None
    viewport: ViewportConfig = Field(default_factory=ViewportConfig)

    browser: BrowserConfig = Field(default_factory=BrowserConfig)

    @classmethod
    def load(cls, path: str | Path) -> "WebscrsConfig":
        """Load config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)
