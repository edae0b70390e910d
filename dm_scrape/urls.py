"""Article URL parsing and comment endpoint construction."""

from __future__ import annotations

import logging
import re
from typing import Optional, Pattern
from urllib.parse import urlparse

from .config import DEFAULT_HOST, ScrapeConfig
from .decoder import INT64_MAX
from .errors import ErrorKind, ScrapeError
from .models import ArticleRef

ARTICLE_URL_PATTERN = re.compile(r"[\w:/.]+-(\d+)/([\w-]+)\.html", re.ASCII)
ENDPOINT_TEMPLATE = (
    "https://{host}/reader-comments/p/asset/readcomments/{id}?max={max}&order=desc"
)


class ArticleResolver:
    """Turn a Daily Mail article URL into an :class:`ArticleRef`.

    The pattern must capture the numeric article ID as group 1 and the slug as
    group 2. Host validation compares the URL's hostname to ``host`` and can be
    switched off to accept mirrors or archived copies.
    """

    def __init__(
        self,
        pattern: Pattern[str] = ARTICLE_URL_PATTERN,
        host: str = DEFAULT_HOST,
        validate_host: bool = True,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.pattern = pattern
        self.host = host.lower()
        self.validate_host = validate_host
        self.logger = logger or logging.getLogger("dm_scrape.urls")

    def resolve(self, raw_url: str) -> ArticleRef:
        try:
            parsed = urlparse(raw_url.strip())
        except ValueError as exc:
            raise ScrapeError(ErrorKind.INVALID_URL, "URL could not be parsed") from exc

        if not parsed.scheme or not parsed.hostname:
            raise ScrapeError(ErrorKind.INVALID_URL, "URL is missing a scheme or host")
        if self.validate_host and parsed.hostname != self.host:
            raise ScrapeError(
                ErrorKind.INVALID_URL,
                f"expected host {self.host}, got {parsed.hostname}",
            )

        match = self.pattern.search(parsed.geturl())
        if match is None:
            raise ScrapeError(
                ErrorKind.INVALID_URL, "URL didn't match expected structure"
            )

        try:
            article_id = int(match.group(1))
        except (TypeError, ValueError) as exc:
            raise ScrapeError(
                ErrorKind.INVALID_URL, "couldn't convert article ID to an integer"
            ) from exc
        if article_id <= 0:
            raise ScrapeError(ErrorKind.INVALID_URL, "article ID must be positive")
        if article_id > INT64_MAX:
            raise ScrapeError(ErrorKind.INVALID_URL, "article ID does not fit in 64 bits")

        slug = match.group(2) or ""
        if not slug:
            raise ScrapeError(
                ErrorKind.INVALID_URL, "failed to parse name from daily mail URL"
            )

        self.logger.debug(
            "Resolved article URL", extra={"article_id": article_id, "slug": slug}
        )
        return ArticleRef(id=article_id, slug=slug)


def resolve_article(
    raw_url: str,
    host: str = DEFAULT_HOST,
    validate_host: bool = True,
) -> ArticleRef:
    """Resolve ``raw_url`` with the default article pattern."""
    return ArticleResolver(host=host, validate_host=validate_host).resolve(raw_url)


def build_endpoint(article: ArticleRef, config: ScrapeConfig) -> str:
    """Return the comment API URL for ``article``, newest comments first."""
    return ENDPOINT_TEMPLATE.format(
        host=config.host, id=article.id, max=config.max_comments
    )
