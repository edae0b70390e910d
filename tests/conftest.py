"""Shared fixtures: an in-memory render client and sample comment payloads."""

from __future__ import annotations

import json
from typing import List, Sequence, Union

import pytest

from dm_scrape.config import ScrapeConfig
from dm_scrape.errors import ScrapeError
from dm_scrape.models import ArticleRef

ARTICLE_URL = "https://www.dailymail.co.uk/news/article-1234567/some-headline.html"


class StubRenderClient:
    """Render client that replays a fixed script of texts or errors."""

    def __init__(self, outcomes: Sequence[Union[str, ScrapeError]]) -> None:
        self.outcomes = list(outcomes)
        self.calls: List[tuple] = []
        self.entered = False
        self.closed = False

    async def render(self, url: str, timeout: float) -> str:
        self.calls.append((url, timeout))
        index = min(len(self.calls), len(self.outcomes)) - 1
        outcome = self.outcomes[index]
        if isinstance(outcome, ScrapeError):
            raise outcome
        return outcome

    async def __aenter__(self) -> "StubRenderClient":
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.closed = True


def make_comment(**overrides) -> dict:
    comment = {
        "userAlias": "reader",
        "userLocation": "London",
        "formattedDateAndTime": "19 Oct 2026, 10:00",
        "assetId": 1234567,
        "voteCount": 12,
        "id": 987654321012,
        "userIdentifier": "u-1",
        "hasProfilePicture": False,
        "voteRating": 4,
        "dateCreated": "2026-10-19T10:00:00",
        "assetCommentCount": 2,
        "assetUrl": "https://www.dailymail.co.uk/news/article-1234567/some-headline.html",
        "message": "First!",
    }
    comment.update(overrides)
    return comment


def make_response_text(comments: Sequence[dict] = ()) -> str:
    return json.dumps(
        {
            "status": "success",
            "code": "200",
            "payload": {"total": len(comments), "max": 506, "page": list(comments)},
        }
    )


@pytest.fixture
def config() -> ScrapeConfig:
    return ScrapeConfig(timeout=1.0)


@pytest.fixture
def article() -> ArticleRef:
    return ArticleRef(id=1234567, slug="some-headline")
