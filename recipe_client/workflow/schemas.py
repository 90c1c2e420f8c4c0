"""Externally observed workflow state.

    Idle -> Uploading -> Polling -> Succeeded
      |         |           |
      +---------+-----------+----> Failed(reason)

Succeeded and Failed are terminal. States are immutable snapshots; the UI
renders whichever one it received last.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class WorkflowPhase(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TERMINAL_PHASES = frozenset({WorkflowPhase.SUCCEEDED, WorkflowPhase.FAILED})


class ClientState(BaseModel):
    """One state of the upload workflow."""

    model_config = ConfigDict(frozen=True)

    phase: WorkflowPhase = WorkflowPhase.IDLE
    job_id: Optional[str] = None
    payload: Optional[str] = Field(default=None, description="Raw body of the final status")
    reason: Optional[str] = Field(default=None, description="User-facing failure message")
    error_kind: Optional[str] = Field(
        default=None,
        description="Machine-readable failure kind, e.g. 'bad_input' or 'timeout'",
    )
    skipped: int = Field(default=0, description="Photos dropped because they could not be decoded")

    @property
    def is_terminal(self) -> bool:
        return self.phase in TERMINAL_PHASES

    @classmethod
    def idle(cls) -> "ClientState":
        return cls()

    @classmethod
    def uploading(cls) -> "ClientState":
        return cls(phase=WorkflowPhase.UPLOADING)

    @classmethod
    def polling(cls, job_id: str) -> "ClientState":
        return cls(phase=WorkflowPhase.POLLING, job_id=job_id)

    @classmethod
    def succeeded(cls, job_id: str, payload: Optional[str]) -> "ClientState":
        return cls(phase=WorkflowPhase.SUCCEEDED, job_id=job_id, payload=payload)

    @classmethod
    def failed(cls, reason: str, error_kind: str, job_id: Optional[str] = None) -> "ClientState":
        return cls(phase=WorkflowPhase.FAILED, reason=reason, error_kind=error_kind, job_id=job_id)
