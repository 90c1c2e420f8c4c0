"""Job status polling under a wall-clock deadline.

Policy:
- Before every request, check the deadline; nothing is sent at or after it.
- Non-2xx response -> PollError(SERVER_REJECTED) immediately (fail-fast).
- Network-layer failure -> PollError(TRANSPORT) immediately, unless it is a
  request timeout bounded by the deadline, which is PollError(TIMEOUT).
- Malformed body -> logged and treated as still running.
- status == "done" -> return it, whatever the payload.
- status in failure_statuses -> PollError(JOB_FAILED).
- Anything else -> sleep a fixed interval and ask again (no backoff). The
  last sleep is cut short at the deadline.

Each HTTP call gets its own timeout, capped by the remaining budget, so one
slow request cannot overshoot the deadline by more than a request timeout.
Both the request and the sleep are plain awaits, so cancelling the caller
interrupts whichever is in flight.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Iterable, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from recipe_client.config import (
    DEFAULT_FAILURE_STATUSES,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
)
from recipe_client.errors import PollError, PollErrorKind
from recipe_client.jobs.http import JSON_ACCEPT
from recipe_client.jobs.schemas import JobStatus, JobStatusResponse

logger = logging.getLogger(__name__)


def job_path(job_id: str) -> str:
    return f"/jobs/{quote(job_id, safe='')}"


class JobPoller:
    """Polls GET /jobs/{job_id} until the job is done or the deadline passes.

    ``clock`` and ``sleep`` default to time.monotonic and asyncio.sleep;
    deadlines passed to poll() must be expressed on the same clock.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        interval: float = DEFAULT_POLL_INTERVAL,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        failure_statuses: Iterable[str] = DEFAULT_FAILURE_STATUSES,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._http = http
        self.interval = interval
        self.request_timeout = request_timeout
        self.failure_statuses = frozenset(failure_statuses)
        self._clock = clock
        self._sleep = sleep

    def deadline_in(self, seconds: float) -> float:
        """Absolute deadline ``seconds`` from now on this poller's clock."""
        return self._clock() + seconds

    async def poll(
        self,
        job_id: str,
        deadline: float,
        interval: Optional[float] = None,
    ) -> JobStatus:
        """Poll until a terminal status.

        Returns:
            The JobStatus whose status is "done".

        Raises:
            PollError: SERVER_REJECTED, TRANSPORT, JOB_FAILED or TIMEOUT.
        """
        interval = self.interval if interval is None else interval
        attempts = 0

        while True:
            remaining = deadline - self._clock()
            if remaining <= 0:
                break
            attempts += 1

            status = await self._fetch(job_id, deadline, attempt=attempts)
            if status is not None:
                if status.is_done:
                    logger.info(f"Job {job_id} done after {attempts} poll(s)")
                    return status
                if status.status in self.failure_statuses:
                    logger.error(f"Job {job_id} reported failure status {status.status!r}")
                    raise PollError(
                        PollErrorKind.JOB_FAILED,
                        f"Recipe job failed on the server (status: {status.status})",
                    )

            remaining = deadline - self._clock()
            if remaining > 0:
                await self._sleep(min(interval, remaining))

        logger.error(f"Job {job_id} not done before deadline ({attempts} poll(s))")
        raise PollError(
            PollErrorKind.TIMEOUT,
            "Timed out waiting for the recipe to be ready",
        )

    async def _fetch(self, job_id: str, deadline: float, attempt: int) -> Optional[JobStatus]:
        """One status request. Returns None when the body cannot be decoded.

        A request cut short by the remaining budget, or one that times out
        at or past the deadline, counts as a poll timeout, not a transport error.
        """
        remaining = deadline - self._clock()
        timeout = min(self.request_timeout, remaining)
        logger.debug(f"Polling job {job_id} (attempt {attempt}, timeout {timeout:.2f}s)")
        try:
            response = await self._http.get(
                job_path(job_id),
                headers={"Accept": JSON_ACCEPT},
                timeout=timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(f"Polling job {job_id} rejected: {status_code}: {e.response.text[:500]}")
            raise PollError(
                PollErrorKind.SERVER_REJECTED,
                f"Server rejected the status check (HTTP {status_code})",
                status_code=status_code,
            ) from e
        except httpx.TimeoutException as e:
            if remaining <= self.request_timeout or self._clock() >= deadline:
                logger.error(f"Job {job_id} status check ran into the deadline: {e!r}")
                raise PollError(
                    PollErrorKind.TIMEOUT,
                    "Timed out waiting for the recipe to be ready",
                ) from e
            logger.error(f"Polling job {job_id} request timed out: {e!r}")
            raise PollError(
                PollErrorKind.TRANSPORT,
                f"Status check failed: {str(e) or type(e).__name__}",
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Polling job {job_id} transport error: {e!r}")
            raise PollError(
                PollErrorKind.TRANSPORT,
                f"Status check failed: {str(e) or type(e).__name__}",
            ) from e

        try:
            decoded = JobStatusResponse.model_validate_json(response.content)
        except ValidationError:
            logger.warning(
                f"Ignoring malformed status body for job {job_id}: {response.text[:200]!r}"
            )
            return None

        logger.debug(f"Job {job_id} status: {decoded.status}")
        return JobStatus(
            job_id=decoded.job_id or job_id,
            status=decoded.status,
            payload=response.text,
        )
