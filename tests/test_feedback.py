import json

import pytest

from essay_annotator.errors import CorrectionFormatError
from essay_annotator.feedback import (
    extract_json_text,
    load_correction,
    parse_correction,
    parse_correction_text,
    save_correction,
)


def test_parse_valid_payload(payload):
    result = parse_correction(payload)
    assert result.score == 7.4
    assert [b.label for b in result.breakdown] == ["词汇", "语法", "逻辑", "连贯性"]
    ann = result.annotation("ann-2")
    assert ann.type == "grammar"
    assert ann.original_text.startswith("They provides")


def test_to_dict_uses_provider_keys(payload):
    assert parse_correction(payload).to_dict() == payload


@pytest.mark.parametrize("mutate", [
    lambda p: p.pop("score"),
    lambda p: p.update(score=12),
    lambda p: p.update(score=True),
    lambda p: p.update(summary=None),
    lambda p: p.update(breakdown={"label": "x"}),
    lambda p: p["breakdown"].append({"label": "x", "value": "high"}),
    lambda p: p.update(annotations=None),
    lambda p: p["annotations"][0].update(type="style"),
    lambda p: p["annotations"][0].update(originalText="  "),
    lambda p: p["annotations"][0].pop("id"),
    lambda p: p["annotations"][1].update(id="ann-1"),
    lambda p: p["annotations"][2].update(suggestion=3),
])
def test_malformed_payloads_rejected(payload, mutate):
    mutate(payload)
    with pytest.raises(CorrectionFormatError):
        parse_correction(payload)


def test_reason_is_optional_and_suggestion_may_be_empty(payload):
    payload["annotations"][0].pop("reason")
    payload["annotations"][0]["suggestion"] = ""
    ann = parse_correction(payload).annotations[0]
    assert ann.reason == ""
    assert ann.suggestion == ""


def test_extract_json_from_fenced_reply(payload):
    reply = "Here is the feedback:\n```json\n" + json.dumps(payload) + "\n```"
    assert parse_correction_text(reply).score == 7.4


def test_extract_json_with_leading_prose():
    assert extract_json_text('Sure! {"a": 1} ') == '{"a": 1}'


def test_reply_without_json():
    with pytest.raises(CorrectionFormatError):
        parse_correction_text("I cannot grade this essay.")
    with pytest.raises(CorrectionFormatError):
        parse_correction_text("{not json}")


def test_save_and_load(tmp_path, correction):
    path = str(tmp_path / "feedback.json")
    save_correction(path, correction)
    assert load_correction(path) == correction
    with open(path, encoding="utf-8") as f:
        assert "词汇" in f.read()


def test_bare_reply_with_code_fence_inside_text(payload):
    payload["annotations"][0]["reason"] = "Quote code as ```print(x)``` instead."
    result = parse_correction_text(json.dumps(payload))
    assert result.annotations[0].reason == "Quote code as ```print(x)``` instead."


def test_provider_schema_accepts_snake_case_and_reports_field(payload):
    from essay_annotator.feedback import ProviderAnnotation
    ann = ProviderAnnotation(id="a", type="logic", original_text="x", suggestion="y")
    assert ann.to_annotation().original_text == "x"

    payload["annotations"][1]["type"] = "style"
    with pytest.raises(CorrectionFormatError) as exc:
        parse_correction(payload)
    assert "type" in str(exc.value)


def test_integer_scores_accepted(payload):
    payload["score"] = 7
    payload["breakdown"][0]["value"] = 8
    result = parse_correction(payload)
    assert result.score == 7.0
    assert result.breakdown[0].value == 8.0
