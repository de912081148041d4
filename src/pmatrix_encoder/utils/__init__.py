"""
Utility helpers for the pmatrix-encoder package.

Currently includes:
    - Error types for malformed input
    - JSON candidate parsing
    - DataFrame validation utilities
"""

from .validation import (
    CandidateTypeError,
    DataFrameValidationError,
    PMatrixError,
    RecordParseError,
    ensure_columns_present,
    ensure_mapping,
    parse_candidates,
)

__all__ = [
    "CandidateTypeError",
    "DataFrameValidationError",
    "PMatrixError",
    "RecordParseError",
    "ensure_columns_present",
    "ensure_mapping",
    "parse_candidates",
]
