"""
Fixed encoder configuration.

This module bundles the constant data shared by the emitter and the validator:
scoring weights, partition thresholds, the version literals and the numeric
tolerance used when re-deriving scores. The bundle is:

- immutable (frozen dataclasses, declared once as ``Final`` constants),
- explicit (no environment variables, no config files),
- shared (both code paths default to ``DEMO_CONFIG``, so they cannot drift).

Callers may pass a different ``EncoderConfig`` explicitly; this is mostly
useful in tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .classification import DEMO_PARTITION, PartitionThresholds
from .scoring import DEMO_WEIGHTS, ScoringWeights

SPEC_VERSION: Final[str] = "pmatrix-3.5"
SCHEMA_VERSION: Final[str] = "1.0.0"
DEFAULT_TOLERANCE: Final[float] = 1e-9


@dataclass(frozen=True)
class EncoderConfig:
    """
    Named bundle of the constants used by emission and validation.

    Parameters
    ----------
    weights:
        Linear weights for the demonstration scores.
    partition:
        Band lower bounds for ``risk_score -> mode``.
    spec_version:
        Literal required in ``spec_version`` (INV-S3).
    schema_version:
        Version string written by the emitter.
    tolerance:
        Absolute tolerance when comparing declared and re-derived scores.
    """

    weights: ScoringWeights = DEMO_WEIGHTS
    partition: PartitionThresholds = DEMO_PARTITION
    spec_version: str = SPEC_VERSION
    schema_version: str = SCHEMA_VERSION
    tolerance: float = DEFAULT_TOLERANCE


DEMO_CONFIG: Final[EncoderConfig] = EncoderConfig()
