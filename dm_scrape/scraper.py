"""High-level orchestration for scraping an article's comments to CSV."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import AsyncContextManager, Callable, Optional

from .config import DEFAULT_RETRIES, ScrapeConfig
from .decoder import decode_response
from .errors import ErrorKind, ScrapeError
from .export import comments_to_csv, write_comments_file
from .models import ArticleRef, CommentResponse
from .render import PlaywrightRenderClient, RenderClient
from .urls import ArticleResolver, build_endpoint

logger = logging.getLogger("dm_scrape")

ClientFactory = Callable[[ScrapeConfig], AsyncContextManager[RenderClient]]


class CommentScraper:
    """Render the comment endpoint and decode it, retrying partial pages.

    Rendering errors end the scrape straight away. A decode error means the
    page was read before its script finished, so the endpoint is rendered again
    from scratch, up to ``max_retries`` more times.
    """

    def __init__(
        self,
        client: RenderClient,
        config: ScrapeConfig,
        max_retries: int = DEFAULT_RETRIES,
        log: Optional[logging.Logger] = None,
    ) -> None:
        if max_retries < 0:
            raise ValueError(f"max_retries cannot be negative, got {max_retries}")
        self.client = client
        self.config = config
        self.max_retries = max_retries
        self.logger = log or logger
        self.attempts = 0

    async def scrape(self, article: ArticleRef) -> CommentResponse:
        endpoint = build_endpoint(article, self.config)
        self.attempts = 0
        last_error: Optional[ScrapeError] = None

        while self.attempts <= self.max_retries:
            self.attempts += 1
            raw = await self.client.render(endpoint, self.config.timeout)

            self.logger.info(
                "Parsing response from browser", extra={"attempt": self.attempts}
            )
            try:
                return decode_response(raw)
            except ScrapeError as exc:
                if not exc.retryable:
                    raise
                last_error = exc
                self.logger.warning(
                    "Scrape failed - retrying",
                    extra={"attempt": self.attempts, "err": str(exc)},
                )

        raise ScrapeError(
            ErrorKind.RETRIES_EXHAUSTED,
            f"{self.attempts} attempts",
            attempts=self.attempts,
        ) from last_error


async def run_scrape(
    raw_url: str,
    config: ScrapeConfig,
    output_dir: Path = Path("."),
    max_retries: int = DEFAULT_RETRIES,
    validate_host: bool = True,
    client_factory: ClientFactory = PlaywrightRenderClient,
) -> Path:
    """Scrape every comment for ``raw_url`` and save them next to ``output_dir``."""
    start = time.perf_counter()
    resolver = ArticleResolver(host=config.host, validate_host=validate_host)
    article = resolver.resolve(raw_url)
    logger.info(
        "Resolved article", extra={"article_id": article.id, "slug": article.slug}
    )

    async with client_factory(config) as client:
        scraper = CommentScraper(client, config, max_retries=max_retries)
        response = await scraper.scrape(article)

    payload = response.payload
    logger.info(
        "Saving comments as csv",
        extra={
            "status": response.status,
            "total": payload.total,
            "max": payload.max,
            "comments": len(payload.page),
            "attempts": scraper.attempts,
        },
    )
    data = comments_to_csv(payload.page)
    path = write_comments_file(data, article.slug, output_dir)

    logger.info(
        "Scrape successful!",
        extra={"path": str(path), "seconds": round(time.perf_counter() - start, 2)},
    )
    return path
