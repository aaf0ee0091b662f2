import pytest

from adapters.http.responses import check_status, extract_text
from domain.errors import ApiError, DecodingError, UnauthorizedError

from fakes import make_response


def test_text_field_has_priority() -> None:
    body = b'{"text": "direct", "results": [{"text": "from results"}]}'
    assert extract_text(body) == "direct"


def test_results_used_when_text_empty() -> None:
    body = b'{"text": "", "results": [{"text": "foo"}, {"text": "bar"}, {"confidence": 0.3}]}'
    assert extract_text(body) == "foobar"


def test_segments_results_used_last() -> None:
    body = (
        b'{"results": [], "segments": ['
        b'{"results": [{"text": "one"}]}, {"results": [{"text": "two"}, {"text": "three"}]}'
        b']}'
    )
    assert extract_text(body) == "onetwothree"


def test_json_without_text_returns_empty_string() -> None:
    assert extract_text(b'{"sessionid": "abc", "code": ""}') == ""
    assert extract_text(b'["not", "an", "object"]') == ""


def test_non_json_body_is_plain_text() -> None:
    assert extract_text("こんにちは".encode("utf-8")) == "こんにちは"


def test_blank_or_undecodable_body_is_decoding_error() -> None:
    with pytest.raises(DecodingError):
        extract_text(b"")
    with pytest.raises(DecodingError):
        extract_text(b"   ")
    with pytest.raises(DecodingError):
        extract_text(b"\xff\xfe\x00garbage")


def test_check_status_maps_errors() -> None:
    check_status(make_response(200, {"text": "ok"}))
    check_status(make_response(204))

    with pytest.raises(UnauthorizedError):
        check_status(make_response(401, "bad key"))

    with pytest.raises(ApiError) as exc_info:
        check_status(make_response(429, "rate limited"))
    assert exc_info.value.code == "429"
    assert exc_info.value.message == "rate limited"
