"""CSV export of scraped comments."""

from __future__ import annotations

import csv
import io
import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional

from .errors import ErrorKind, ScrapeError
from .models import CommentRecord

logger = logging.getLogger("dm_scrape.export")

CSV_HEADERS = (
    "user-alias",
    "user-location",
    "formatted-date-and-time",
    "asset-id",
    "vote-count",
    "id",
    "user-identifier",
    "has-profile-picture",
    "vote-rating",
    "date-created",
    "asset-comment-count",
    "asset-url",
    "message",
)
OUTPUT_MODE = 0o777


def _number(value: Optional[int]) -> str:
    return "" if value is None else str(value)


def comment_row(comment: CommentRecord) -> List[str]:
    """Render one comment as CSV cells in header order."""
    return [
        comment.user_alias,
        comment.user_location,
        comment.formatted_date,
        _number(comment.asset_id),
        _number(comment.vote_count),
        _number(comment.id),
        comment.user_identifier,
        "true" if comment.has_profile_picture else "false",
        _number(comment.vote_rating),
        comment.date_created,
        _number(comment.asset_comment_count),
        comment.asset_url,
        comment.message,
    ]


def comments_to_csv(comments: Iterable[CommentRecord]) -> bytes:
    """Serialise ``comments`` to UTF-8 CSV, header first, input order kept."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    # Only the line terminator triggers minimal quoting, so a bare \r would
    # otherwise split the row for readers.
    quoted = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_ALL)
    try:
        writer.writerow(CSV_HEADERS)
        for comment in comments:
            row = comment_row(comment)
            if any("\r" in cell for cell in row):
                quoted.writerow(row)
            else:
                writer.writerow(row)
        text = buffer.getvalue()
    except (csv.Error, OSError) as exc:
        raise ScrapeError(ErrorKind.EXPORT_ERROR, "failed to format comments as CSV") from exc
    # Lone surrogates can arrive via JSON escapes; they cannot be encoded.
    return text.encode("utf-8", errors="replace")


def output_path(slug: str, output_dir: Path = Path(".")) -> Path:
    return Path(output_dir) / f"{slug}-comments.csv"


def write_comments_file(data: bytes, slug: str, output_dir: Path = Path(".")) -> Path:
    """Write ``data`` to ``<slug>-comments.csv``, replacing any earlier file."""
    path = output_path(slug, output_dir)
    try:
        path.write_bytes(data)
        os.chmod(path, OUTPUT_MODE)
    except OSError as exc:
        raise ScrapeError(
            ErrorKind.EXPORT_ERROR, f"failed to save comments to {path}"
        ) from exc
    logger.info("Saved comments to %s", path)
    return path
