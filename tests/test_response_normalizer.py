import json
import logging

import pytest

from agents.response_normalizer import (
    extract_json_array,
    normalize_response,
    strip_code_fences,
)
from services.errors import (
    MalformedResponseError,
    NoStructuredDataError,
    RecordSchemaError,
)


def test_fenced_response_matches_plain_array(model_text, sample_payload):
    from_fenced = normalize_response(model_text)
    from_plain = normalize_response(json.dumps(sample_payload))

    assert from_fenced == from_plain
    assert [r.term for r in from_fenced] == [k["term"] for k in sample_payload]


def test_leading_and_trailing_prose_is_ignored(sample_payload):
    text = "I have analyzed the ASINs.\n" + json.dumps(sample_payload) + "\nLet me know!"
    records = normalize_response(text)
    assert len(records) == 5
    assert records[1].intent_score == 8
    assert records[1].is_organic is False


def test_strip_code_fences():
    assert strip_code_fences("```json\n[1]\n```") == "[1]"
    assert strip_code_fences("```JSON [] ```") == "[]"


def test_no_array_is_extraction_error():
    with pytest.raises(NoStructuredDataError) as exc:
        normalize_response("Sorry, I could not find those products.")
    assert exc.value.kind == "extraction"
    assert "did not return structured data" in exc.value.message


def test_malformed_json_is_parse_error(caplog):
    with caplog.at_level(logging.ERROR, logger="agents.response_normalizer"):
        with pytest.raises(MalformedResponseError) as exc:
            normalize_response("[{malformed")

    assert exc.value.kind == "parse"
    assert "invalid JSON" in exc.value.message
    # 生テキストはログにだけ残し、ユーザー向け文言には含めない
    assert "{malformed" in caplog.text
    assert "{malformed" not in exc.value.message


def test_parse_and_extraction_errors_are_distinct():
    assert not issubclass(MalformedResponseError, NoStructuredDataError)
    assert not issubclass(NoStructuredDataError, MalformedResponseError)


def test_extract_json_array_uses_first_and_last_bracket():
    assert extract_json_array('note: [1, [2]] end') == "[1, [2]]"


def test_non_object_items_are_parse_errors():
    with pytest.raises(MalformedResponseError):
        normalize_response("[1, 2, 3]")


def test_uncoercible_field_is_parse_error(sample_payload):
    sample_payload[0]["intentScore"] = "very high"
    with pytest.raises(MalformedResponseError):
        normalize_response(json.dumps(sample_payload))


def test_empty_array_gives_no_records():
    assert normalize_response("[]") == []


def test_parenthesized_ppc_spelling_is_read(sample_payload):
    sample_payload[0]["recommendation"] = "PPC (Exact)"
    sample_payload[1]["recommendation"] = "PPC (Phrase)"
    records = normalize_response(json.dumps(sample_payload))
    assert records[0].recommendation == "PPC-Exact"
    assert records[1].recommendation == "PPC-Phrase"
    assert records[0].schema_issues == []


def test_out_of_enum_values_are_flagged_not_rejected(sample_payload):
    sample_payload[2]["classification"] = "Maybe"
    sample_payload[3]["competition"] = "Extreme"

    records = normalize_response(json.dumps(sample_payload))

    assert len(records) == 5
    assert records[2].classification == "Maybe"
    assert records[2].schema_issues == ["classification"]
    assert records[3].schema_issues == ["competition"]
    assert records[0].schema_issues == []


def test_strict_mode_rejects_out_of_enum_values(sample_payload):
    sample_payload[4]["recommendation"] = "Sponsor it"
    with pytest.raises(RecordSchemaError) as exc:
        normalize_response(json.dumps(sample_payload), strict=True)
    assert exc.value.kind == "schema"
    assert "noise cancelling earbuds" in exc.value.message


def test_strict_mode_accepts_valid_payload(sample_payload):
    records = normalize_response(json.dumps(sample_payload), strict=True)
    assert len(records) == 5


@pytest.mark.parametrize(
    "field",
    ["term", "intentScore", "searchVolumeEst", "isOrganic", "isSponsored", "asinOverlap"],
)
def test_missing_required_field_is_parse_error(sample_payload, field):
    del sample_payload[1][field]
    with pytest.raises(MalformedResponseError) as exc:
        normalize_response(json.dumps(sample_payload))
    assert exc.value.kind == "parse"


@pytest.mark.parametrize("field", ["classification", "competition", "recommendation"])
def test_missing_enum_field_is_flagged(sample_payload, field):
    del sample_payload[1][field]

    records = normalize_response(json.dumps(sample_payload))

    assert getattr(records[1], field) == ""
    assert records[1].schema_issues == [field]


@pytest.mark.parametrize("field", ["classification", "competition", "recommendation"])
def test_strict_mode_rejects_missing_enum_field(sample_payload, field):
    del sample_payload[1][field]
    with pytest.raises(RecordSchemaError) as exc:
        normalize_response(json.dumps(sample_payload), strict=True)
    assert "bluetooth earbuds for running" in exc.value.message


@pytest.mark.parametrize("term", ["", "   ", None])
@pytest.mark.parametrize("strict", [False, True])
def test_blank_term_is_parse_error(sample_payload, term, strict):
    sample_payload[0]["term"] = term
    with pytest.raises(MalformedResponseError):
        normalize_response(json.dumps(sample_payload), strict=strict)


def test_term_is_trimmed(sample_payload):
    sample_payload[0]["term"] = "  wireless earbuds \n"
    records = normalize_response(json.dumps(sample_payload))
    assert records[0].term == "wireless earbuds"
