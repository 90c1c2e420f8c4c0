"""Job submission: POST an encoded recipe to the job queue.

Single attempt, no retries and no idempotency key. Retrying at the caller
level creates a duplicate job on the server.
"""

import logging

import httpx
from pydantic import ValidationError

from recipe_client.errors import SubmissionError, SubmissionErrorKind
from recipe_client.jobs.http import JSON_ACCEPT
from recipe_client.jobs.schemas import JobCreated
from recipe_client.multipart.schemas import MultipartRequest

logger = logging.getLogger(__name__)

JOBS_PATH = "/jobs"


class JobSubmissionClient:
    """Creates jobs on the remote queue.

    The base URL is whatever the injected httpx client was built with
    (see recipe_client.jobs.http.create_http_client).
    """

    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    async def submit(self, request: MultipartRequest) -> str:
        """Submit an encoded request and return the new job id.

        Raises:
            SubmissionError: BAD_INPUT (no attachments, nothing sent),
                SERVER_REJECTED (non-2xx), MALFORMED_RESPONSE (body is not
                {job_id, status}), TRANSPORT (network-layer failure).
        """
        if request.attachment_count < 1:
            raise SubmissionError(
                SubmissionErrorKind.BAD_INPUT,
                "Select at least one photo before uploading",
            )

        try:
            response = await self._http.post(
                JOBS_PATH,
                content=request.body,
                headers={
                    "Content-Type": request.content_type,
                    "Accept": JSON_ACCEPT,
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            error_body = e.response.text[:500]
            logger.error(f"Job submission rejected: {status_code}: {error_body}")
            raise SubmissionError(
                SubmissionErrorKind.SERVER_REJECTED,
                f"Server rejected the upload (HTTP {status_code})",
                status_code=status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Job submission transport error: {e!r}")
            raise SubmissionError(
                SubmissionErrorKind.TRANSPORT,
                f"Upload failed: {str(e) or type(e).__name__}",
            ) from e

        try:
            created = JobCreated.model_validate_json(response.content)
        except ValidationError as e:
            logger.error(f"Malformed job submission response: {response.text[:500]}")
            raise SubmissionError(
                SubmissionErrorKind.MALFORMED_RESPONSE,
                "Server returned an unreadable response",
                status_code=response.status_code,
            ) from e

        logger.info(
            f"Created job {created.job_id} (status: {created.status}, "
            f"{request.attachment_count} photo(s), HTTP {response.status_code})"
        )
        return created.job_id
