"""CSV exporter tests."""

import csv
import io
import os
import stat

import pytest

from dm_scrape.decoder import decode_response
from dm_scrape.errors import ErrorKind, ScrapeError
from dm_scrape.export import CSV_HEADERS, comments_to_csv, write_comments_file
from dm_scrape.models import CommentRecord

from conftest import make_comment, make_response_text

HEADER_LINE = (
    "user-alias,user-location,formatted-date-and-time,asset-id,vote-count,id,"
    "user-identifier,has-profile-picture,vote-rating,date-created,"
    "asset-comment-count,asset-url,message\n"
)


def test_header_only_for_no_comments():
    assert comments_to_csv([]) == HEADER_LINE.encode("utf-8")


def test_documented_example_row():
    record = CommentRecord(
        user_alias="x", id=42, vote_rating=-3, has_profile_picture=True, message="hi"
    )
    assert comments_to_csv([record]) == (HEADER_LINE + "x,,,,,42,,true,-3,,,,hi\n").encode()


def test_full_row_rendering():
    comment = decode_response(make_response_text([make_comment()])).payload.page[0]
    lines = comments_to_csv([comment]).decode("utf-8").splitlines()
    assert lines[1] == (
        "reader,London,\"19 Oct 2026, 10:00\",1234567,12,987654321012,u-1,false,4,"
        "2026-10-19T10:00:00,2,"
        "https://www.dailymail.co.uk/news/article-1234567/some-headline.html,First!"
    )


def test_zero_values_are_rendered():
    record = CommentRecord(asset_id=0, vote_count=0, id=0, vote_rating=0, asset_comment_count=0)
    row = comments_to_csv([record]).decode().splitlines()[1]
    assert row == ",,,0,0,0,,false,0,,0,,"


def test_row_order_matches_input():
    records = [CommentRecord(user_alias=name) for name in ("c", "a", "b")]
    rows = comments_to_csv(records).decode().splitlines()[1:]
    assert [row.split(",")[0] for row in rows] == ["c", "a", "b"]


def test_export_is_deterministic():
    records = [CommentRecord(user_alias="x", id=i, message=f"msg {i}") for i in range(20)]
    assert comments_to_csv(records) == comments_to_csv(list(records))


def test_special_characters_are_quoted():
    record = CommentRecord(message='He said "no", then\nleft', user_location="Zoë's place")
    data = comments_to_csv([record]).decode("utf-8")
    assert '"He said ""no"", then\nleft"' in data
    assert "Zoë's place" in data


def test_header_constant_matches_column_count():
    assert len(CSV_HEADERS) == 13


def test_write_comments_file(tmp_path):
    path = write_comments_file(b"data\n", "some-headline", tmp_path)
    assert path == tmp_path / "some-headline-comments.csv"
    assert path.read_bytes() == b"data\n"
    assert stat.S_IMODE(os.stat(path).st_mode) == 0o777


def test_write_comments_file_overwrites(tmp_path):
    write_comments_file(b"first run with more data\n", "slug", tmp_path)
    path = write_comments_file(b"second\n", "slug", tmp_path)
    assert path.read_bytes() == b"second\n"


def test_write_fault_is_export_error(tmp_path):
    missing_dir = tmp_path / "does-not-exist"
    with pytest.raises(ScrapeError) as excinfo:
        write_comments_file(b"data", "slug", missing_dir)
    assert excinfo.value.kind is ErrorKind.EXPORT_ERROR
    assert isinstance(excinfo.value.__cause__, OSError)


def test_carriage_return_keeps_row_intact():
    record = CommentRecord(user_alias="x", message="a\rb")
    text = comments_to_csv([record]).decode("utf-8")

    rows = list(csv.reader(io.StringIO(text, newline="")))

    assert len(rows) == 2
    assert rows[1][0] == "x"
    assert rows[1][-1] == "a\rb"


def test_carriage_return_rows_mix_with_plain_rows():
    records = [
        CommentRecord(user_alias="a", message="plain"),
        CommentRecord(user_alias="b", message="line\r\nbreak"),
        CommentRecord(user_alias="c", message="plain"),
    ]
    text = comments_to_csv(records).decode("utf-8")

    rows = list(csv.reader(io.StringIO(text, newline="")))

    assert [row[0] for row in rows[1:]] == ["a", "b", "c"]
    assert rows[2][-1] == "line\r\nbreak"
