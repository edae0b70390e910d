"""Data models used throughout the scrape pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class ArticleRef:
    """Identifies a single article by its numeric ID and URL slug."""

    id: int
    slug: str


@dataclass(frozen=True)
class CommentRecord:
    """One reader comment exactly as the comment API returned it."""

    user_alias: str = ""
    user_location: str = ""
    formatted_date: str = ""
    asset_id: Optional[int] = None
    vote_count: Optional[int] = None
    id: Optional[int] = None
    user_identifier: str = ""
    has_profile_picture: bool = False
    vote_rating: Optional[int] = None
    date_created: str = ""
    asset_comment_count: Optional[int] = None
    asset_url: str = ""
    message: str = ""


@dataclass(frozen=True)
class CommentPayload:
    """Page of comments plus the counts reported alongside it."""

    total: int = 0
    max: int = 0
    page: Tuple[CommentRecord, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class CommentResponse:
    """Envelope returned by the comment API."""

    status: str = ""
    code: str = ""
    payload: CommentPayload = field(default_factory=CommentPayload)
