"""Error taxonomy shared by every stage of the scrape pipeline."""

from __future__ import annotations

import enum
from typing import Optional


class ErrorKind(enum.Enum):
    """What went wrong, independent of which exception caused it."""

    INVALID_URL = "invalid daily mail article url"
    RENDER_TIMEOUT = "timed out waiting for comments to load"
    RENDER_FAILURE = "failed to render comments page"
    DECODE_ERROR = "failed to decode comment response"
    RETRIES_EXHAUSTED = "gave up after repeated decode failures"
    EXPORT_ERROR = "failed to export comments"

    @property
    def retryable(self) -> bool:
        return self is ErrorKind.DECODE_ERROR


class ScrapeError(Exception):
    """Single failure type raised by the pipeline.

    The originating exception, if any, is attached with ``raise ... from`` and
    is included in ``str(error)`` so the CLI can report the whole chain.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str = "",
        *,
        attempts: Optional[int] = None,
    ) -> None:
        super().__init__(kind, message)
        self.kind = kind
        self.message = message
        self.attempts = attempts

    @property
    def retryable(self) -> bool:
        return self.kind.retryable

    def __str__(self) -> str:
        text = self.kind.value
        if self.message:
            text = f"{text}: {self.message}"
        cause = self.__cause__
        if cause is not None:
            text = f"{text}: {cause}"
        return text
