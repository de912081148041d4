"""
Invariant checks for candidate runtime state records.

The candidate is an untyped key/value mapping, so every field is first
extracted into a tagged :class:`ExtractedField` (valid / invalid / absent).
Each of the twelve checks then reads only the extractions it needs and always
returns an :class:`InvariantResult`; a missing or mistyped field fails the
check with an explanatory message instead of raising.

Range invariants
    INV-R1  function values are numbers in [0.0, 1.0]
    INV-R2  stability_score in [0.0, 1.0] and equal to its re-derived value
    INV-R3  risk_score in [0.0, 1.0] and equal to its re-derived value
    INV-R4  timestamp is an integer > 0

Consistency invariants
    INV-C1  mode == threshold_map(risk_score)
    INV-C2  risk_level == level_map(mode)
    INV-C3  (mode, risk_level) is the pair both maps jointly produce

Structural invariants
    INV-S1  all eight required fields present
    INV-S2  no additional fields (top level or inside ``functions``)
    INV-S3  spec_version literal
    INV-S4  schema_version is a semantic version

Temporal invariant
    INV-T1  timestamp >= every prior timestamp of the stream
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Final

from .classification import consistent_pairs, level_map, threshold_map
from .config import EncoderConfig
from .record import FUNCTION_FIELDS, REQUIRED_FIELDS, Functions, is_integer, is_real
from .results import InvariantId, InvariantResult
from .scoring import risk_score, stability_score

# semver.org 2.0.0 grammar.
_SEMVER_RE: Final[re.Pattern[str]] = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


class FieldStatus(str, Enum):
    """Extraction outcome for one candidate field."""

    VALID = "valid"
    INVALID = "invalid"
    ABSENT = "absent"


@dataclass(frozen=True)
class ExtractedField:
    """Tagged extraction of one field: status, value (when valid) and reason."""

    name: str
    status: FieldStatus
    value: Any = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status is FieldStatus.VALID


@dataclass(frozen=True)
class CandidateFields:
    """All extractions for one candidate, computed once per validation."""

    keys: frozenset[str]
    spec_version: ExtractedField
    schema_version: ExtractedField
    timestamp: ExtractedField
    functions: ExtractedField
    stability_score: ExtractedField
    risk_score: ExtractedField
    mode: ExtractedField
    risk_level: ExtractedField
    extra_function_keys: tuple[str, ...] = ()


def _in_unit_interval(v: float) -> bool:
    # NaN compares False on both sides.
    return 0.0 <= v <= 1.0


def _extract(
    candidate: Mapping[str, Any],
    name: str,
    predicate: Callable[[object], bool],
    expected: str,
) -> ExtractedField:
    if name not in candidate:
        return ExtractedField(name, FieldStatus.ABSENT, reason=f"{name} is absent")
    value = candidate[name]
    if not predicate(value):
        return ExtractedField(
            name,
            FieldStatus.INVALID,
            reason=f"{name} must be {expected}, got {value!r}",
        )
    return ExtractedField(name, FieldStatus.VALID, value=value)


def _extract_functions(candidate: Mapping[str, Any]) -> tuple[ExtractedField, tuple[str, ...]]:
    """
    Extract the function values.

    VALID means all four values are present, numeric and representable as
    floats (range is not checked here), which is what score re-derivation
    needs.
    """
    if "functions" not in candidate:
        return ExtractedField("functions", FieldStatus.ABSENT, reason="functions is absent"), ()

    funcs = candidate["functions"]
    if not isinstance(funcs, Mapping):
        return (
            ExtractedField(
                "functions",
                FieldStatus.INVALID,
                reason=f"functions must be an object, got {funcs!r}",
            ),
            (),
        )

    extra = tuple(sorted(str(k) for k in funcs if k not in FUNCTION_FIELDS))
    missing = [k for k in FUNCTION_FIELDS if k not in funcs]
    non_numeric = [k for k in FUNCTION_FIELDS if k in funcs and not is_real(funcs[k])]

    problems: list[str] = []
    if missing:
        problems.append(f"missing function value(s): {', '.join(missing)}")
    if non_numeric:
        problems.append(
            "non-numeric or non-float-representable function value(s): "
            + ", ".join(f"{k}={funcs[k]!r}" for k in non_numeric)
        )
    if problems:
        return (
            ExtractedField("functions", FieldStatus.INVALID, reason="; ".join(problems)),
            extra,
        )

    values = Functions(**{k: funcs[k] for k in FUNCTION_FIELDS})
    return ExtractedField("functions", FieldStatus.VALID, value=values), extra


def extract_fields(candidate: Mapping[str, Any]) -> CandidateFields:
    """Extract every field of a candidate into tagged results."""
    functions, extra_function_keys = _extract_functions(candidate)
    return CandidateFields(
        keys=frozenset(str(k) for k in candidate),
        spec_version=_extract(candidate, "spec_version", lambda v: isinstance(v, str), "a string"),
        schema_version=_extract(
            candidate, "schema_version", lambda v: isinstance(v, str), "a string"
        ),
        timestamp=_extract(candidate, "timestamp", is_integer, "an integer"),
        functions=functions,
        stability_score=_extract(
            candidate, "stability_score", is_real, "a float-representable number"
        ),
        risk_score=_extract(candidate, "risk_score", is_real, "a float-representable number"),
        mode=_extract(candidate, "mode", lambda v: isinstance(v, str), "a string"),
        risk_level=_extract(candidate, "risk_level", lambda v: isinstance(v, str), "a string"),
        extra_function_keys=extra_function_keys,
    )


def _result(inv: InvariantId, passed: bool, message: str) -> InvariantResult:
    return InvariantResult(invariant_id=inv, passed=passed, message=message)


# ---------------------------------------------------------------------
# Range invariants
# ---------------------------------------------------------------------


def check_r1(fields: CandidateFields) -> InvariantResult:
    f = fields.functions
    if not f.ok:
        return _result(InvariantId.R1, False, f.reason)

    out_of_range = [
        f"{k}={v!r}" for k, v in f.value.to_dict().items() if not _in_unit_interval(v)
    ]
    if out_of_range:
        return _result(
            InvariantId.R1,
            False,
            "Function value(s) out of range [0.0, 1.0]: " + ", ".join(out_of_range),
        )
    return _result(InvariantId.R1, True, "All function values in [0.0, 1.0].")


def _check_score(
    inv: InvariantId,
    declared: ExtractedField,
    functions: ExtractedField,
    derive: Callable[..., float],
    config: EncoderConfig,
) -> InvariantResult:
    if not declared.ok:
        return _result(inv, False, declared.reason)

    name = declared.name
    value = declared.value
    if not _in_unit_interval(value):
        return _result(inv, False, f"{name}={value!r} is outside [0.0, 1.0]")

    if not functions.ok:
        return _result(inv, False, f"cannot re-derive {name}: {functions.reason}")

    expected = derive(*functions.value.as_tuple(), weights=config.weights)
    # Negated comparison so a NaN expected value fails.
    if not abs(value - expected) <= config.tolerance:
        return _result(
            inv,
            False,
            f"{name}={value!r} does not match re-derived value {expected!r}",
        )
    return _result(inv, True, f"{name}={value!r} matches re-derived value.")


def check_r2(fields: CandidateFields, config: EncoderConfig) -> InvariantResult:
    return _check_score(
        InvariantId.R2, fields.stability_score, fields.functions, stability_score, config
    )


def check_r3(fields: CandidateFields, config: EncoderConfig) -> InvariantResult:
    return _check_score(InvariantId.R3, fields.risk_score, fields.functions, risk_score, config)


def check_r4(fields: CandidateFields) -> InvariantResult:
    ts = fields.timestamp
    if not ts.ok:
        return _result(InvariantId.R4, False, ts.reason)
    if ts.value <= 0:
        return _result(InvariantId.R4, False, f"timestamp={ts.value} must be > 0")
    return _result(InvariantId.R4, True, f"timestamp={ts.value}")


# ---------------------------------------------------------------------
# Consistency invariants
# ---------------------------------------------------------------------


def check_c1(fields: CandidateFields, config: EncoderConfig) -> InvariantResult:
    risk, mode = fields.risk_score, fields.mode
    for f in (risk, mode):
        if not f.ok:
            return _result(InvariantId.C1, False, f.reason)

    expected = threshold_map(risk.value, config.partition)
    if expected is None:
        return _result(
            InvariantId.C1,
            False,
            f"risk_score={risk.value!r} is outside the partition domain; no mode applies",
        )
    passed = mode.value == expected.value
    return _result(
        InvariantId.C1,
        passed,
        f"risk_score={risk.value!r} → expected mode={expected.value}, actual mode={mode.value}",
    )


def check_c2(fields: CandidateFields) -> InvariantResult:
    mode, level = fields.mode, fields.risk_level
    for f in (mode, level):
        if not f.ok:
            return _result(InvariantId.C2, False, f.reason)

    expected = level_map(mode.value)
    if expected is None:
        return _result(InvariantId.C2, False, f"mode={mode.value!r} is not a known mode")
    passed = level.value == expected.value
    return _result(
        InvariantId.C2,
        passed,
        f"mode={mode.value} → expected risk_level={expected.value}, "
        f"actual risk_level={level.value}",
    )


def check_c3(fields: CandidateFields, config: EncoderConfig) -> InvariantResult:
    risk, mode, level = fields.risk_score, fields.mode, fields.risk_level
    for f in (risk, mode, level):
        if not f.ok:
            return _result(InvariantId.C3, False, f.reason)

    pair = (mode.value, level.value)
    known_pair = any(pair == (m.value, lv.value) for m, lv in consistent_pairs())

    expected_mode = threshold_map(risk.value, config.partition)
    if expected_mode is None:
        return _result(
            InvariantId.C3,
            False,
            f"risk_score={risk.value!r} determines no mode/risk_level pair",
        )
    expected_level = level_map(expected_mode)
    expected_pair = (expected_mode.value, expected_level.value if expected_level else "")

    if known_pair and pair == expected_pair:
        return _result(
            InvariantId.C3,
            True,
            "mode and risk_level are mutually consistent with risk_score.",
        )
    if not known_pair:
        detail = f"({mode.value}, {level.value}) is not a pair the maps can produce"
    else:
        detail = (
            f"({mode.value}, {level.value}) is not determined by risk_score={risk.value!r}; "
            f"expected ({expected_pair[0]}, {expected_pair[1]})"
        )
    return _result(InvariantId.C3, False, f"Mutual consistency violation: {detail}")


# ---------------------------------------------------------------------
# Structural invariants
# ---------------------------------------------------------------------


def check_s1(fields: CandidateFields) -> InvariantResult:
    missing = [k for k in REQUIRED_FIELDS if k not in fields.keys]
    if missing:
        return _result(InvariantId.S1, False, f"Missing required field(s): {', '.join(missing)}")
    return _result(InvariantId.S1, True, "All eight required fields present.")


def check_s2(fields: CandidateFields) -> InvariantResult:
    extra = sorted(k for k in fields.keys if k not in REQUIRED_FIELDS)
    extra += [f"functions.{k}" for k in fields.extra_function_keys]
    if extra:
        return _result(InvariantId.S2, False, f"Unrecognized field(s): {', '.join(extra)}")
    return _result(InvariantId.S2, True, "No additional fields.")


def check_s3(fields: CandidateFields, config: EncoderConfig) -> InvariantResult:
    sv = fields.spec_version
    if not sv.ok:
        return _result(InvariantId.S3, False, sv.reason)
    return _result(
        InvariantId.S3,
        sv.value == config.spec_version,
        f"spec_version={sv.value}, expected={config.spec_version}",
    )


def check_s4(fields: CandidateFields) -> InvariantResult:
    sv = fields.schema_version
    if not sv.ok:
        return _result(InvariantId.S4, False, sv.reason)
    if _SEMVER_RE.fullmatch(sv.value) is None:
        return _result(
            InvariantId.S4,
            False,
            f"schema_version={sv.value!r} is not a valid semantic version (MAJOR.MINOR.PATCH)",
        )
    return _result(InvariantId.S4, True, f"schema_version={sv.value}")


# ---------------------------------------------------------------------
# Temporal invariant
# ---------------------------------------------------------------------


def check_t1(fields: CandidateFields, prior_timestamps: Sequence[int]) -> InvariantResult:
    if not prior_timestamps:
        return _result(InvariantId.T1, True, "No prior timestamps; ordering trivially holds.")

    ts = fields.timestamp
    if not ts.ok:
        return _result(InvariantId.T1, False, f"cannot check stream ordering: {ts.reason}")

    latest = max(prior_timestamps)
    if ts.value < latest:
        return _result(
            InvariantId.T1,
            False,
            f"timestamp={ts.value} precedes prior timestamp {latest}; "
            "stream is not monotonically non-decreasing",
        )
    return _result(InvariantId.T1, True, f"timestamp={ts.value} >= latest prior {latest}")


def check_all(
    fields: CandidateFields,
    prior_timestamps: Sequence[int],
    config: EncoderConfig,
) -> list[InvariantResult]:
    """Run all twelve checks in display order. Never short-circuits."""
    return [
        check_r1(fields),
        check_r2(fields, config),
        check_r3(fields, config),
        check_r4(fields),
        check_c1(fields, config),
        check_c2(fields),
        check_c3(fields, config),
        check_s1(fields),
        check_s2(fields),
        check_s3(fields, config),
        check_s4(fields),
        check_t1(fields, prior_timestamps),
    ]
