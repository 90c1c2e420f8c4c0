"""Client configuration.

The base URL used to be a constant baked into the app. It is now injected
through ClientSettings, either built directly or read from the environment:

    RECIPE_API_BASE_URL            server root (default http://127.0.0.1:8000)
    RECIPE_POLL_INTERVAL           seconds between status polls (default 1)
    RECIPE_POLL_TIMEOUT            overall polling deadline in seconds (default 120)
    RECIPE_REQUEST_TIMEOUT         per HTTP call timeout in seconds (default 10, or the
                                   polling deadline when that is shorter)
    RECIPE_FAILURE_STATUSES        comma-separated terminal failure statuses (default "failed")
    RECIPE_MAX_DECODE_CONCURRENCY  parallel photo decodes (default 4)
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:8000"
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_POLL_TIMEOUT = 120.0
DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_FAILURE_STATUSES = ("failed",)
DEFAULT_RECIPE_FIELD = "recipe_name"
DEFAULT_MAX_DECODE_CONCURRENCY = 4


@dataclass(frozen=True)
class ClientSettings:
    """Settings shared by the submission client, poller and workflow."""

    base_url: str = DEFAULT_BASE_URL
    poll_interval: float = DEFAULT_POLL_INTERVAL
    poll_timeout: float = DEFAULT_POLL_TIMEOUT
    request_timeout: Optional[float] = None
    failure_statuses: tuple[str, ...] = DEFAULT_FAILURE_STATUSES
    recipe_field: str = DEFAULT_RECIPE_FIELD
    max_decode_concurrency: int = DEFAULT_MAX_DECODE_CONCURRENCY

    def __post_init__(self):
        if not self.base_url:
            raise ValueError("base_url must not be empty")
        # Strip trailing slash so "<base>/jobs" never contains "//"
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        if self.request_timeout is None:
            object.__setattr__(self, "request_timeout", min(DEFAULT_REQUEST_TIMEOUT, self.poll_timeout))

        for name in ("poll_interval", "poll_timeout", "request_timeout"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be > 0")
        if self.request_timeout > self.poll_timeout:
            raise ValueError("request_timeout must not exceed poll_timeout")
        if self.max_decode_concurrency < 1:
            raise ValueError("max_decode_concurrency must be >= 1")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientSettings":
        """Build settings from environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ

        failure_raw = env.get("RECIPE_FAILURE_STATUSES")
        if failure_raw is None:
            failure_statuses = DEFAULT_FAILURE_STATUSES
        else:
            failure_statuses = tuple(s.strip() for s in failure_raw.split(",") if s.strip())

        try:
            settings = cls(
                base_url=env.get("RECIPE_API_BASE_URL", DEFAULT_BASE_URL),
                poll_interval=_float(env, "RECIPE_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
                poll_timeout=_float(env, "RECIPE_POLL_TIMEOUT", DEFAULT_POLL_TIMEOUT),
                request_timeout=_float(env, "RECIPE_REQUEST_TIMEOUT", None),
                failure_statuses=failure_statuses,
                max_decode_concurrency=_int(
                    env, "RECIPE_MAX_DECODE_CONCURRENCY", DEFAULT_MAX_DECODE_CONCURRENCY
                ),
            )
        except ValueError as e:
            raise ValueError(f"Invalid recipe client environment: {e}") from e

        logger.debug(f"Loaded client settings from environment: {settings}")
        return settings


def _float(env: Mapping[str, str], name: str, default: Optional[float]) -> Optional[float]:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
