"""Job and node-classification models.

- Job / JobResult: persisted job records (pydantic, JSON round-trippable)
- ClassifiedNode: derived view of a text-encode node, never persisted
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .document import TextValueSlot


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------


class JobStatus(str, Enum):
    """Lifecycle states of a generation job.

    Only SUBMITTED and COMPLETE are ever stored. RUNNING is reported when
    the backend has no history entry yet; FAILED is never recorded.
    """
    SUBMITTED = "submitted"
    RUNNING = "running"
    COMPLETE = "complete"
    FAILED = "failed"


class NodeKind(str, Enum):
    """Role of a text-encode node in the generation pipeline."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    UNKNOWN = "unknown"


# -----------------------------------------------------------------------------
# Jobs
# -----------------------------------------------------------------------------


class JobResult(BaseModel):
    """Location of the first image produced by a finished job."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    filename: str
    subfolder: str = ""
    type: str = "output"
    full_path: str = Field(alias="fullPath")
    view_url: str = Field(alias="viewUrl")

    @classmethod
    def from_image(cls, image: Dict[str, Any], view_url: str) -> "JobResult":
        filename = str(image["filename"])
        subfolder = image.get("subfolder") or ""
        return cls(
            filename=filename,
            subfolder=subfolder,
            type=image.get("type") or "output",
            full_path=f"{subfolder}/{filename}" if subfolder else filename,
            view_url=view_url,
        )

    def to_payload(self) -> Dict[str, Any]:
        """Wire shape shown to callers."""
        return {"status": JobStatus.COMPLETE.value, **self.model_dump(by_alias=True)}


class Job(BaseModel):
    """A submitted generation job, keyed by the backend prompt id."""

    prompt_id: str
    status: JobStatus = JobStatus.SUBMITTED
    prompt_text: Optional[str] = None
    created_at: str = Field(default_factory=utc_now)
    result: Optional[JobResult] = None

    @model_validator(mode="after")
    def _result_iff_complete(self) -> "Job":
        if (self.status == JobStatus.COMPLETE) != (self.result is not None):
            raise ValueError("result must be set exactly when status is complete")
        return self

    @property
    def is_complete(self) -> bool:
        return self.status == JobStatus.COMPLETE and self.result is not None

    def completed(self, result: JobResult) -> "Job":
        return self.model_copy(update={"status": JobStatus.COMPLETE, "result": result})

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


# -----------------------------------------------------------------------------
# Classification
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class ClassifiedNode:
    id: str
    kind: NodeKind
    current_text: str
    title: str
    slot: TextValueSlot
