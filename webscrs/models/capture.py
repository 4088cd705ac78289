"""Capture job and run status data structures."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from pydantic import BaseModel, Field


class CaptureRequest(BaseModel):
    target: str
    output_path: str
    viewport_width: Optional[int] = None
    viewport_height: Optional[int] = None
    full_page: bool = True
    label: str = ""  # job index shown in progress output, e.g. "3"


@dataclass(frozen=True)
class CaptureSuccess:
    image_bytes: bytes
    ok = True


@dataclass(frozen=True)
class CaptureFailure:
    reason: str
    ok = False


CaptureResult = Union[CaptureSuccess, CaptureFailure]


class JobRecord(BaseModel):
    """Outcome of one capture or diff step, in execution order."""
    label: str
    kind: str  # capture, diff
    target: str = ""
    output_path: str = ""
    ok: bool = True
    reason: Optional[str] = None
    mismatched_pixels: Optional[int] = None


class RunStatus(BaseModel):
    any_failure: bool = False
    records: list[JobRecord] = Field(default_factory=list)

    def record(self, record: JobRecord) -> None:
        self.records.append(record)
        if not record.ok:
            self.any_failure = True

    @property
    def succeeded(self) -> bool:
        return not self.any_failure
