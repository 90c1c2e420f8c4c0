"""Recipe job client.

Turns a recipe name plus photos into a server-side recipe job and waits for
the result:
- multipart: photo decoding and multipart/form-data encoding
- jobs: job submission (POST /jobs) and status polling (GET /jobs/{id})
- workflow: the Idle -> Uploading -> Polling -> Succeeded/Failed state machine
"""

from recipe_client.config import ClientSettings
from recipe_client.errors import (
    EncodingError,
    PollError,
    PollErrorKind,
    RecipeClientError,
    SubmissionError,
    SubmissionErrorKind,
)
from recipe_client.workflow import ClientState, RecipeWorkflow, WorkflowPhase, upload_recipe

__version__ = "0.1.0"

__all__ = [
    "ClientSettings",
    "ClientState",
    "RecipeWorkflow",
    "WorkflowPhase",
    "upload_recipe",
    "RecipeClientError",
    "EncodingError",
    "SubmissionError",
    "SubmissionErrorKind",
    "PollError",
    "PollErrorKind",
]
