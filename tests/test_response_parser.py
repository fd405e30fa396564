import json

import pytest

from utils.response_parser import ResponseParseError, parse_release_notes, parse_review_text


def test_valid_release_notes():
    raw = json.dumps({"changelogBlock": "- Added X", "whatsNewBlock": "X is here"})
    result = parse_release_notes(raw)
    assert result.changelog_block == "- Added X"
    assert result.whats_new_block == "X is here"


def test_extra_keys_ignored():
    raw = json.dumps({"changelogBlock": "a", "whatsNewBlock": "b", "notes": 1})
    assert parse_release_notes(raw).whats_new_block == "b"


def test_fenced_reply_is_unwrapped():
    raw = '```json\n{"changelogBlock": "a", "whatsNewBlock": "b"}\n```'
    assert parse_release_notes(raw).changelog_block == "a"


def test_empty_strings_are_valid_strings():
    result = parse_release_notes('{"changelogBlock": "", "whatsNewBlock": ""}')
    assert result.changelog_block == ""


@pytest.mark.parametrize("raw, code", [
    ("not json at all", "JSON_DECODE"),
    ('{"changelogBlock": "a", "whatsNewBlock": ', "JSON_DECODE"),
    ('{"whatsNewBlock": "b"}', "VALIDATION"),
    ('{"changelogBlock": "a"}', "VALIDATION"),
    ('{"changelogBlock": 1, "whatsNewBlock": "b"}', "VALIDATION"),
    ('{"changelogBlock": "a", "whatsNewBlock": null}', "VALIDATION"),
    ('{"changelogBlock": "a", "whatsNewBlock": ["b"]}', "VALIDATION"),
    ('["a", "b"]', "VALIDATION"),
    ("   ", "EMPTY"),
])
def test_invalid_release_notes_raise(raw, code):
    with pytest.raises(ResponseParseError) as exc:
        parse_release_notes(raw)
    assert exc.value.code == code


def test_python_attribute_names_are_not_accepted():
    with pytest.raises(ResponseParseError):
        parse_release_notes('{"changelog_block": "a", "whats_new_block": "b"}')


def test_review_text_is_trimmed():
    assert parse_review_text("\n  ## Summary\n- ok\n  ") == "## Summary\n- ok"


@pytest.mark.parametrize("raw", ["", "   \n", None])
def test_empty_review_raises(raw):
    with pytest.raises(ResponseParseError) as exc:
        parse_review_text(raw)
    assert exc.value.code == "EMPTY"
