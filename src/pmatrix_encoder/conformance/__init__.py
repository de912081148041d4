"""
Conformance core for P-MATRIX runtime state records.

This subpackage holds everything with real semantics: the demonstration
scoring functions, the risk partition, the record model, the emitter and the
twelve-invariant validator.

Public API
----------
stability_score / risk_score
    Weighted-sum demonstration scores over the four function values.
threshold_map / level_map
    risk_score -> Mode and Mode -> RiskLevel lookups.
EncoderConfig / DEMO_CONFIG
    Immutable constants shared by emission and validation.
RuntimeStateRecord / Functions
    Canonical record model.
emit / emit_json
    Build a record from four function values and a timestamp.
validate / validate_stream / is_conforming
    Check candidates against all twelve invariants.
ValidationReport / StreamReport / InvariantResult
    Portable, ordered result artifacts.

Notes
-----
The scoring formulas are a demonstration stand-in for schema conformance.
They do not reflect any production evaluation logic.
"""

from __future__ import annotations

from .classification import (
    Mode,
    PartitionThresholds,
    RiskLevel,
    consistent_pairs,
    level_map,
    threshold_map,
)
from .config import DEMO_CONFIG, SCHEMA_VERSION, SPEC_VERSION, EncoderConfig
from .emit import emit, emit_json
from .record import FUNCTION_FIELDS, REQUIRED_FIELDS, Functions, RuntimeStateRecord
from .results import (
    INVARIANT_ORDER,
    InvariantId,
    InvariantResult,
    StreamReport,
    ValidationReport,
    Verdict,
)
from .scoring import ScoringWeights, risk_score, stability_score
from .validate import (
    first_temporal_violation,
    is_conforming,
    validate,
    validate_stream,
)

__all__ = [
    "DEMO_CONFIG",
    "FUNCTION_FIELDS",
    "INVARIANT_ORDER",
    "REQUIRED_FIELDS",
    "SCHEMA_VERSION",
    "SPEC_VERSION",
    "EncoderConfig",
    "Functions",
    "InvariantId",
    "InvariantResult",
    "Mode",
    "PartitionThresholds",
    "RiskLevel",
    "RuntimeStateRecord",
    "ScoringWeights",
    "StreamReport",
    "ValidationReport",
    "Verdict",
    "consistent_pairs",
    "emit",
    "emit_json",
    "first_temporal_violation",
    "is_conforming",
    "level_map",
    "risk_score",
    "stability_score",
    "threshold_map",
    "validate",
    "validate_stream",
]
