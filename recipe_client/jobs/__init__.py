"""Remote job queue access: submission and status polling."""

from recipe_client.jobs.http import create_http_client
from recipe_client.jobs.poller import JobPoller
from recipe_client.jobs.schemas import JobCreated, JobState, JobStatus, JobStatusResponse
from recipe_client.jobs.submission import JobSubmissionClient

__all__ = [
    "create_http_client",
    "JobPoller",
    "JobSubmissionClient",
    "JobCreated",
    "JobState",
    "JobStatus",
    "JobStatusResponse",
]
