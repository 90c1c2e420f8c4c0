"""Upload workflow: encode -> submit -> poll, exposed as one state stream.

A RecipeWorkflow instance runs exactly once. Every component error is
mapped into a Failed state carrying the error's message verbatim; nothing
is retried here. Re-running means building a fresh workflow, which also
creates a fresh server-side job.

Cancellation is not a failure: cancelling the task that drives the stream
interrupts the active submit or poll and the CancelledError propagates.
"""

import logging
from contextlib import aclosing
from typing import AsyncIterator, Callable, Optional, Sequence

import httpx

from recipe_client.config import ClientSettings
from recipe_client.errors import EncodingError, PollError, SubmissionError, SubmissionErrorKind
from recipe_client.jobs.http import create_http_client
from recipe_client.jobs.poller import JobPoller
from recipe_client.jobs.submission import JobSubmissionClient
from recipe_client.multipart.encoder import encode
from recipe_client.multipart.photos import load_photos
from recipe_client.multipart.schemas import Attachment
from recipe_client.workflow.schemas import ClientState

logger = logging.getLogger(__name__)

NO_PHOTOS_REASON = "Select at least one photo before uploading"


class RecipeWorkflow:
    """Single-use state machine for one recipe upload."""

    def __init__(
        self,
        submitter: JobSubmissionClient,
        poller: JobPoller,
        settings: Optional[ClientSettings] = None,
    ):
        self._submitter = submitter
        self._poller = poller
        # Without explicit settings the poller keeps its own interval
        self._interval = settings.poll_interval if settings is not None else None
        self._settings = settings or ClientSettings()
        self._started = False
        self.history: list[ClientState] = [ClientState.idle()]

    @classmethod
    def from_http(cls, http: httpx.AsyncClient, settings: ClientSettings, **poller_kwargs) -> "RecipeWorkflow":
        """Wire a workflow to an open HTTP client using ``settings``."""
        poller = JobPoller(
            http,
            interval=settings.poll_interval,
            request_timeout=settings.request_timeout,
            failure_statuses=settings.failure_statuses,
            **poller_kwargs,
        )
        return cls(JobSubmissionClient(http), poller, settings)

    @property
    def state(self) -> ClientState:
        return self.history[-1]

    def _enter(self, state: ClientState) -> ClientState:
        logger.info(
            f"Workflow {self.state.phase.value} -> {state.phase.value}"
            + (f" (job {state.job_id})" if state.job_id else "")
            + (f": {state.reason}" if state.reason else "")
        )
        self.history.append(state)
        return state

    def stream(self, text: str, attachments: Sequence[Attachment]) -> AsyncIterator[ClientState]:
        """Start the workflow and iterate over the states it enters.

        Raises:
            RuntimeError: This instance has already been started.
        """
        if self._started:
            raise RuntimeError("RecipeWorkflow instances are single-use; create a new one")
        self._started = True
        return self._run_states(text, list(attachments))

    async def _run_states(self, text: str, attachments: list[Attachment]) -> AsyncIterator[ClientState]:
        if not attachments:
            yield self._enter(ClientState.failed(NO_PHOTOS_REASON, SubmissionErrorKind.BAD_INPUT.value))
            return

        yield self._enter(ClientState.uploading())
        try:
            request = encode({self._settings.recipe_field: text}, attachments)
            job_id = await self._submitter.submit(request)
        except (EncodingError, SubmissionError) as e:
            logger.error(f"Upload failed ({e.kind.value}): {e}")
            yield self._enter(ClientState.failed(str(e), e.kind.value))
            return

        yield self._enter(ClientState.polling(job_id))
        deadline = self._poller.deadline_in(self._settings.poll_timeout)
        try:
            status = await self._poller.poll(job_id, deadline, self._interval)
        except PollError as e:
            logger.error(f"Polling job {job_id} failed ({e.kind.value}): {e}")
            yield self._enter(ClientState.failed(str(e), e.kind.value, job_id=job_id))
            return

        yield self._enter(ClientState.succeeded(job_id, status.payload))

    async def run(
        self,
        text: str,
        attachments: Sequence[Attachment],
        on_state: Optional[Callable[[ClientState], None]] = None,
    ) -> ClientState:
        """Drive the workflow to a terminal state and return it."""
        async with aclosing(self.stream(text, attachments)) as states:
            async for state in states:
                if on_state is not None:
                    on_state(state)
        return self.state


async def upload_recipe(
    text: str,
    photos: Sequence[bytes],
    settings: Optional[ClientSettings] = None,
    on_state: Optional[Callable[[ClientState], None]] = None,
    **http_kwargs,
) -> ClientState:
    """Decode photos, upload them with ``text`` and wait for the recipe.

    Undecodable photos are left out and counted in the returned state's
    ``skipped``. Extra keyword arguments go to the httpx client.
    """
    settings = settings or ClientSettings.from_env()
    loaded = await load_photos(photos, max_concurrency=settings.max_decode_concurrency)

    async with create_http_client(settings, **http_kwargs) as http:
        workflow = RecipeWorkflow.from_http(http, settings)
        final = await workflow.run(text, loaded.attachments, on_state=on_state)

    if loaded.skipped:
        final = final.model_copy(update={"skipped": loaded.skipped})
    return final
