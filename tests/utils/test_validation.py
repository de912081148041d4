from __future__ import annotations

import pandas as pd
import pytest

from pmatrix_encoder.utils.validation import (
    CandidateTypeError,
    DataFrameValidationError,
    PMatrixError,
    RecordParseError,
    ensure_columns_present,
    ensure_mapping,
    parse_candidates,
)


def test_parse_candidates_single_object() -> None:
    out = parse_candidates('{"a": 1}')
    assert out == [{"a": 1}]


def test_parse_candidates_array_of_objects() -> None:
    out = parse_candidates('[{"timestamp": 1}, {"timestamp": 2}]')
    assert [c["timestamp"] for c in out] == [1, 2]


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   \n",
        "{not json",
        "[]",
        "42",
        '"record"',
        "[1, {}]",
    ],
)
def test_parse_candidates_rejects_malformed_input(text: str) -> None:
    with pytest.raises(RecordParseError):
        parse_candidates(text)


def test_parse_candidates_rejects_integer_over_digit_limit() -> None:
    with pytest.raises(RecordParseError):
        parse_candidates("{\"timestamp\": " + "9" * 5000 + "}")


def test_parse_candidates_context_in_message() -> None:
    with pytest.raises(RecordParseError, match=r"\[record.json\]"):
        parse_candidates("{", context="record.json")


def test_error_hierarchy() -> None:
    assert issubclass(RecordParseError, PMatrixError)
    assert issubclass(RecordParseError, ValueError)
    assert issubclass(CandidateTypeError, PMatrixError)
    assert issubclass(CandidateTypeError, TypeError)
    assert issubclass(DataFrameValidationError, ValueError)


def test_ensure_mapping() -> None:
    data = {"x": 1}
    assert ensure_mapping(data) is data
    with pytest.raises(CandidateTypeError, match=r"\[ctx\] candidate must be a JSON object"):
        ensure_mapping([data], context="ctx")


def test_ensure_columns_present_passes() -> None:
    df = pd.DataFrame({"a": [1], "b": [2]})
    ensure_columns_present(df, ["a", "b"])


def test_ensure_columns_present_raises_with_context() -> None:
    df = pd.DataFrame({"a": [1]})
    with pytest.raises(DataFrameValidationError) as excinfo:
        ensure_columns_present(df, ["a", "b"], context="pass_rates")
    msg = str(excinfo.value)
    assert "[pass_rates]" in msg
    assert "b" in msg
