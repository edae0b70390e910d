"""Configuration objects and constants for the comment scraper."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_HOST = "www.dailymail.co.uk"
DEFAULT_MAX_COMMENTS = 506
DEFAULT_TIMEOUT = 15.0
DEFAULT_RETRIES = 3
JSON_TAG = "pre"


@dataclass(frozen=True)
class ScrapeConfig:
    """Settings that control how the comment endpoint is requested and rendered."""

    max_comments: int = DEFAULT_MAX_COMMENTS
    timeout: float = DEFAULT_TIMEOUT
    wait_after_load: float = 0.0
    headless: bool = True
    host: str = DEFAULT_HOST

    def __post_init__(self) -> None:
        if self.max_comments <= 0:
            raise ValueError(f"max_comments must be positive, got {self.max_comments}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.wait_after_load < 0:
            raise ValueError(
                f"wait_after_load cannot be negative, got {self.wait_after_load}"
            )
        if not self.host:
            raise ValueError("host cannot be empty")
