"""Wire schemas for the remote job queue.

POST /jobs        -> {"job_id": str, "status": str}
GET  /jobs/{id}   -> {"job_id": str, "status": str, ...arbitrary payload}

The server's status vocabulary is open-ended: only "done" is known to mean
success, so the raw string is kept and JobState is a best-effort mapping.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DONE_STATUS = "done"


class JobState(str, Enum):
    """Known job states. Anything else reported by the server is UNKNOWN."""
    PENDING = "pending"
    DONE = "done"
    FAILED = "failed"
    UNKNOWN = "unknown"


class JobCreated(BaseModel):
    """Response body of a successful POST /jobs."""

    job_id: str = Field(min_length=1)
    status: str


class JobStatusResponse(BaseModel):
    """Response body of GET /jobs/{job_id}. Extra keys are payload."""

    model_config = ConfigDict(extra="allow")

    status: str
    job_id: Optional[str] = None


class JobStatus(BaseModel):
    """One observation of a job's server-side status."""

    model_config = ConfigDict(frozen=True)

    job_id: str
    status: str
    payload: Optional[str] = Field(
        default=None,
        description="Raw response body the status was decoded from",
    )

    @property
    def is_done(self) -> bool:
        return self.status == DONE_STATUS

    @property
    def state(self) -> JobState:
        try:
            return JobState(self.status)
        except ValueError:
            return JobState.UNKNOWN
