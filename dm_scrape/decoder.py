"""Decode the comment API's JSON into response models, and back again."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple

from .errors import ErrorKind, ScrapeError
from .models import CommentPayload, CommentRecord, CommentResponse

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# (attribute, JSON key, value type)
COMMENT_FIELDS: Tuple[Tuple[str, str, type], ...] = (
    ("user_alias", "userAlias", str),
    ("user_location", "userLocation", str),
    ("formatted_date", "formattedDateAndTime", str),
    ("asset_id", "assetId", int),
    ("vote_count", "voteCount", int),
    ("id", "id", int),
    ("user_identifier", "userIdentifier", str),
    ("has_profile_picture", "hasProfilePicture", bool),
    ("vote_rating", "voteRating", int),
    ("date_created", "dateCreated", str),
    ("asset_comment_count", "assetCommentCount", int),
    ("asset_url", "assetUrl", str),
    ("message", "message", str),
)


class _ShapeError(ValueError):
    """The document parsed as JSON but does not have the expected structure."""


def _expect_object(value: Any, where: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise _ShapeError(f"{where} must be an object, got {type(value).__name__}")
    return value


def _string(value: Any, where: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise _ShapeError(f"{where} must be a string, got {type(value).__name__}")
    return value


def _integer(value: Any, where: str) -> Optional[int]:
    if value is None:
        return None
    # bool is an int subclass; a JSON true/false is not a number here.
    if isinstance(value, bool) or not isinstance(value, int):
        raise _ShapeError(f"{where} must be an integer, got {type(value).__name__}")
    if not INT64_MIN <= value <= INT64_MAX:
        raise _ShapeError(f"{where} does not fit in 64 bits: {value}")
    return value


def _flag(value: Any, where: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise _ShapeError(f"{where} must be a boolean, got {type(value).__name__}")
    return value


_CONVERTERS = {str: _string, int: _integer, bool: _flag}


def _comment_from_dict(raw: Any, index: int) -> CommentRecord:
    data = _expect_object(raw, f"payload.page[{index}]")
    values = {
        attr: _CONVERTERS[kind](data.get(key), f"payload.page[{index}].{key}")
        for attr, key, kind in COMMENT_FIELDS
    }
    return CommentRecord(**values)


def _response_from_dict(raw: Any) -> CommentResponse:
    data = _expect_object(raw, "response")
    payload = data.get("payload")
    payload = _expect_object({} if payload is None else payload, "payload")

    page = payload.get("page")
    if page is None:
        page = []
    if not isinstance(page, list):
        raise _ShapeError(f"payload.page must be a list, got {type(page).__name__}")

    return CommentResponse(
        status=_string(data.get("status"), "status"),
        code=_string(data.get("code"), "code"),
        payload=CommentPayload(
            total=_integer(payload.get("total"), "payload.total") or 0,
            max=_integer(payload.get("max"), "payload.max") or 0,
            page=tuple(_comment_from_dict(item, i) for i, item in enumerate(page)),
        ),
    )


def decode_response(raw_text: str) -> CommentResponse:
    """Parse the text of the rendered ``<pre>`` element.

    Text captured before the page script finished writing the element is
    usually truncated JSON; that surfaces as a ``DECODE_ERROR`` so the caller
    can render again.
    """
    try:
        document = json.loads(raw_text)
    except (TypeError, ValueError) as exc:
        raise ScrapeError(ErrorKind.DECODE_ERROR, "malformed JSON") from exc

    try:
        return _response_from_dict(document)
    except _ShapeError as exc:
        raise ScrapeError(ErrorKind.DECODE_ERROR, "unexpected structure") from exc


def _comment_to_dict(comment: CommentRecord) -> Dict[str, Any]:
    return {key: getattr(comment, attr) for attr, key, _ in COMMENT_FIELDS}


def encode_response(response: CommentResponse) -> str:
    """Serialise ``response`` using the API's own field names."""
    page: List[Dict[str, Any]] = [
        _comment_to_dict(comment) for comment in response.payload.page
    ]
    document = {
        "status": response.status,
        "code": response.code,
        "payload": {
            "total": response.payload.total,
            "max": response.payload.max,
            "page": page,
        },
    }
    return json.dumps(document, ensure_ascii=False)
