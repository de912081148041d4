"""
Unit tests for the runtime state record model.

These tests cover construction (derived fields, no validation), canonical
serialization order, equality, and the strict mapping parser.
"""

from __future__ import annotations

import dataclasses

import pytest

from pmatrix_encoder.conformance.record import (
    FUNCTION_FIELDS,
    REQUIRED_FIELDS,
    Functions,
    RuntimeStateRecord,
)
from pmatrix_encoder.utils.validation import RecordParseError


def _sample_mapping() -> dict[str, object]:
    return {
        "spec_version": "pmatrix-3.5",
        "schema_version": "1.0.0",
        "timestamp": 1707500000,
        "functions": {
            "baseline": 0.25,
            "norm": 0.70,
            "stability": 0.30,
            "meta_control": 0.20,
        },
        "stability_score": 0.3625,
        "risk_score": 0.6375,
        "mode": "Alert",
        "risk_level": "L4",
    }


def test_from_functions_computes_derived_fields() -> None:
    rec = RuntimeStateRecord.from_functions(0.25, 0.70, 0.30, 0.20, 1707500000)

    assert rec.spec_version == "pmatrix-3.5"
    assert rec.schema_version == "1.0.0"
    assert rec.timestamp == 1707500000
    assert rec.functions == Functions(0.25, 0.70, 0.30, 0.20)
    assert rec.stability_score == pytest.approx(0.3625)
    assert rec.risk_score == pytest.approx(0.6375)
    assert rec.mode == "Alert"
    assert rec.risk_level == "L4"


def test_from_functions_does_not_validate() -> None:
    rec = RuntimeStateRecord.from_functions(1.5, 0.5, 0.5, 0.5, -3)
    assert rec.functions.baseline == 1.5
    assert rec.timestamp == -3


def test_from_functions_leaves_mode_empty_when_risk_out_of_domain() -> None:
    # risk = 1 - mean(2, 2, 2, 2) = -1.0, outside the partition.
    rec = RuntimeStateRecord.from_functions(2.0, 2.0, 2.0, 2.0, 1000)
    assert rec.risk_score == pytest.approx(-1.0)
    assert rec.mode == ""
    assert rec.risk_level == ""


def test_to_dict_uses_canonical_field_order() -> None:
    rec = RuntimeStateRecord.from_functions(0.25, 0.70, 0.30, 0.20, 1000)
    d = rec.to_dict()

    assert tuple(d.keys()) == REQUIRED_FIELDS
    assert tuple(d["functions"].keys()) == FUNCTION_FIELDS


def test_record_equality_is_fieldwise() -> None:
    a = RuntimeStateRecord.from_functions(0.1, 0.2, 0.3, 0.4, 1000)
    b = RuntimeStateRecord.from_functions(0.1, 0.2, 0.3, 0.4, 1000)
    c = RuntimeStateRecord.from_functions(0.1, 0.2, 0.3, 0.4, 1001)

    assert a == b
    assert a != c
    assert dataclasses.replace(a, mode="Halt") != a


def test_record_is_immutable() -> None:
    rec = RuntimeStateRecord.from_functions(0.1, 0.2, 0.3, 0.4, 1000)
    with pytest.raises(dataclasses.FrozenInstanceError):
        rec.timestamp = 5  # type: ignore[misc]


def test_from_mapping_rebuilds_record() -> None:
    rec = RuntimeStateRecord.from_mapping(_sample_mapping())
    assert rec.mode == "Alert"
    assert rec.functions.as_tuple() == (0.25, 0.70, 0.30, 0.20)
    assert rec.to_dict() == _sample_mapping()


def test_from_mapping_rejects_extra_fields() -> None:
    data = _sample_mapping()
    data["extra_field"] = "should_fail"
    with pytest.raises(RecordParseError, match="extra_field"):
        RuntimeStateRecord.from_mapping(data)


def test_from_mapping_rejects_extra_function_fields() -> None:
    data = _sample_mapping()
    data["functions"] = {**data["functions"], "bonus": 0.1}  # type: ignore[dict-item]
    with pytest.raises(RecordParseError, match="bonus"):
        RuntimeStateRecord.from_mapping(data)


def test_from_mapping_rejects_missing_fields() -> None:
    data = _sample_mapping()
    del data["mode"]
    with pytest.raises(RecordParseError, match="mode"):
        RuntimeStateRecord.from_mapping(data)


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("timestamp", "1000"),
        ("timestamp", True),
        ("risk_score", "0.5"),
        ("mode", 3),
        ("functions", [0.1, 0.2, 0.3, 0.4]),
    ],
)
def test_from_mapping_rejects_wrong_types(key: str, value: object) -> None:
    data = _sample_mapping()
    data[key] = value
    with pytest.raises(RecordParseError):
        RuntimeStateRecord.from_mapping(data)


def test_from_mapping_rejects_oversized_integers() -> None:
    data = _sample_mapping()
    data["functions"] = {**data["functions"], "norm": 10**400}  # type: ignore[dict-item]
    with pytest.raises(RecordParseError, match="functions.norm"):
        RuntimeStateRecord.from_mapping(data)

    data = _sample_mapping()
    data["risk_score"] = -(10**400)
    with pytest.raises(RecordParseError, match="risk_score"):
        RuntimeStateRecord.from_mapping(data)


def test_record_parse_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        RuntimeStateRecord.from_mapping({})
