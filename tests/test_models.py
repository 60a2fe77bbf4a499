"""Tests for schemas, request bodies and content encoding."""

import pytest

from ghfiles import GitHubReference, SchemaValidationError
from ghfiles.models import (
    CreateOrUpdateFileRequest,
    CreateTreeRequest,
    TreeEntry,
    decode_content,
    encode_content,
    parse_response,
    request_body,
)

from conftest import ref_payload


@pytest.mark.parametrize(
    "text",
    ["", "hello", "línea 1\nlínea 2\n", "emoji 🚀 and tabs\t", "x" * 1000],
)
def test_content_round_trip(text):
    assert decode_content(encode_content(text)) == text


def test_decode_tolerates_line_wrapping():
    assert decode_content("aGVs\nbG8=\n") == "hello"


def test_request_body_omits_unset_fields():
    body = request_body(CreateOrUpdateFileRequest(message="m", content="eA==", branch="main"))
    assert body == {"message": "m", "content": "eA==", "branch": "main"}

    tree = request_body(CreateTreeRequest(tree=[TreeEntry(path="a", content="b")]))
    assert "base_tree" not in tree
    assert tree["tree"] == [{"path": "a", "mode": "100644", "type": "blob", "content": "b"}]


def test_parse_response_ignores_extra_fields():
    payload = ref_payload("main", "abc")
    payload["extra"] = {"anything": True}

    ref = parse_response(GitHubReference, payload, "reference")

    assert ref.object.sha == "abc"


def test_parse_response_reports_mismatch():
    payload = ref_payload("main", "abc")
    del payload["object"]

    with pytest.raises(SchemaValidationError) as exc_info:
        parse_response(GitHubReference, payload, "reference")

    err = exc_info.value
    assert "Unexpected reference response" in str(err)
    assert "object" in str(err)
    assert err.response is payload
    assert err.cause is not None
