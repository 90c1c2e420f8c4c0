"""Error taxonomy for the recipe job client.

Every component raises its own error type and leaves recovery to the caller:
- EncodingError: an attachment or field could not be framed into a multipart body
- SubmissionError: the create-job request failed (see SubmissionErrorKind)
- PollError: status polling ended without a "done" job (see PollErrorKind)

The workflow orchestrator maps all of them into a Failed state, keeping
``str(error)`` verbatim as the user-facing reason.
"""

from enum import Enum
from typing import Optional


class EncodingErrorKind(str, Enum):
    """Why a multipart body could not be built."""
    INVALID_CONTENT = "invalid_content"
    INVALID_HEADER = "invalid_header"


class SubmissionErrorKind(str, Enum):
    """Failure modes of POST /jobs."""
    BAD_INPUT = "bad_input"
    SERVER_REJECTED = "server_rejected"
    MALFORMED_RESPONSE = "malformed_response"
    TRANSPORT = "transport"


class PollErrorKind(str, Enum):
    """Failure modes of GET /jobs/{job_id} polling."""
    SERVER_REJECTED = "server_rejected"
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    JOB_FAILED = "job_failed"


class RecipeClientError(Exception):
    """Base class for all client errors."""

    def __init__(self, kind: Enum, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class EncodingError(RecipeClientError):
    def __init__(self, message: str, kind: EncodingErrorKind = EncodingErrorKind.INVALID_CONTENT):
        super().__init__(kind, message)


class SubmissionError(RecipeClientError):
    def __init__(self, kind: SubmissionErrorKind, message: str, status_code: Optional[int] = None):
        super().__init__(kind, message, status_code)


class PollError(RecipeClientError):
    def __init__(self, kind: PollErrorKind, message: str, status_code: Optional[int] = None):
        super().__init__(kind, message, status_code)
