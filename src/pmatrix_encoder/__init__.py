"""
P-MATRIX Runtime State Reference Encoder

This package emits demonstration runtime state records and validates
candidate records (or streams of records) against the twelve schema
invariants. It is a schema conformance tool, not an execution engine.
"""

from .conformance import (
    DEMO_CONFIG,
    EncoderConfig,
    Mode,
    RiskLevel,
    RuntimeStateRecord,
    ValidationReport,
    Verdict,
    emit,
    is_conforming,
    validate,
    validate_stream,
)

from .dataframe import (
    invariant_pass_rates,
    stream_report_df,
    stream_summary_df,
)

__version__ = "0.1.0"

__all__ = [
    "DEMO_CONFIG",
    "EncoderConfig",
    "Mode",
    "RiskLevel",
    "RuntimeStateRecord",
    "ValidationReport",
    "Verdict",
    "emit",
    "is_conforming",
    "validate",
    "validate_stream",
    "invariant_pass_rates",
    "stream_report_df",
    "stream_summary_df",
]
