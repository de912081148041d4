"""
Runtime state record model.

This module defines the canonical in-memory representation of one record and
its serialized field order. Construction performs no validation: the
constructor only computes derived fields and assembles the eight-field
structure. Conformance is decided by the validator.

Canonical field order
---------------------
spec_version, schema_version, timestamp, functions, stability_score,
risk_score, mode, risk_level
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final

from ..utils.validation import RecordParseError
from .classification import level_map, threshold_map
from .config import DEMO_CONFIG, EncoderConfig
from .scoring import risk_score, stability_score

FUNCTION_FIELDS: Final[tuple[str, ...]] = (
    "baseline",
    "norm",
    "stability",
    "meta_control",
)

REQUIRED_FIELDS: Final[tuple[str, ...]] = (
    "spec_version",
    "schema_version",
    "timestamp",
    "functions",
    "stability_score",
    "risk_score",
    "mode",
    "risk_level",
)


@dataclass(frozen=True)
class Functions:
    """The four evaluation function values, each nominally in [0.0, 1.0]."""

    baseline: float
    norm: float
    stability: float
    meta_control: float

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.baseline, self.norm, self.stability, self.meta_control)

    def to_dict(self) -> dict[str, float]:
        return {
            "baseline": self.baseline,
            "norm": self.norm,
            "stability": self.stability,
            "meta_control": self.meta_control,
        }


@dataclass(frozen=True)
class RuntimeStateRecord:
    """
    One runtime state record.

    Instances are immutable. Two records are equal iff every field matches.
    """

    spec_version: str
    schema_version: str
    timestamp: int
    functions: Functions
    stability_score: float
    risk_score: float
    mode: str
    risk_level: str

    @classmethod
    def from_functions(
        cls,
        baseline: float,
        norm: float,
        stability: float,
        meta_control: float,
        timestamp: int,
        *,
        config: EncoderConfig | None = None,
    ) -> RuntimeStateRecord:
        """
        Build a record from four function values and a timestamp.

        Derived fields come from the shared scoring and classification
        functions. When the risk score falls outside the partition domain no
        mode exists; ``mode`` and ``risk_level`` are then left empty so the
        validator can report the inconsistency.
        """
        cfg = config or DEMO_CONFIG
        stab = stability_score(baseline, norm, stability, meta_control, weights=cfg.weights)
        risk = risk_score(baseline, norm, stability, meta_control, weights=cfg.weights)

        mode = threshold_map(risk, cfg.partition)
        level = level_map(mode) if mode is not None else None

        return cls(
            spec_version=cfg.spec_version,
            schema_version=cfg.schema_version,
            timestamp=timestamp,
            functions=Functions(
                baseline=baseline,
                norm=norm,
                stability=stability,
                meta_control=meta_control,
            ),
            stability_score=stab,
            risk_score=risk,
            mode=mode.value if mode is not None else "",
            risk_level=level.value if level is not None else "",
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-friendly dict in canonical field order."""
        return {
            "spec_version": self.spec_version,
            "schema_version": self.schema_version,
            "timestamp": self.timestamp,
            "functions": self.functions.to_dict(),
            "stability_score": self.stability_score,
            "risk_score": self.risk_score,
            "mode": self.mode,
            "risk_level": self.risk_level,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RuntimeStateRecord:
        """
        Strictly rebuild a record from a parsed mapping.

        Unknown or missing keys (top level or inside ``functions``) and
        values of the wrong type are rejected. Ranges and derived-field
        consistency are not checked here; use the validator for that.

        Raises
        ------
        RecordParseError
            If the mapping does not have the record's exact shape.
        """
        _ensure_exact_keys(data, REQUIRED_FIELDS, where="record")

        funcs = data["functions"]
        if not isinstance(funcs, Mapping):
            raise RecordParseError("functions must be an object")
        _ensure_exact_keys(funcs, FUNCTION_FIELDS, where="functions")

        for key in ("spec_version", "schema_version", "mode", "risk_level"):
            if not isinstance(data[key], str):
                raise RecordParseError(f"{key} must be a string")
        if not is_integer(data["timestamp"]):
            raise RecordParseError("timestamp must be an integer")
        for key in ("stability_score", "risk_score"):
            if not is_real(data[key]):
                raise RecordParseError(f"{key} must be a float-representable number")
        for key in FUNCTION_FIELDS:
            if not is_real(funcs[key]):
                raise RecordParseError(f"functions.{key} must be a float-representable number")

        return cls(
            spec_version=data["spec_version"],
            schema_version=data["schema_version"],
            timestamp=data["timestamp"],
            functions=Functions(**{k: float(funcs[k]) for k in FUNCTION_FIELDS}),
            stability_score=float(data["stability_score"]),
            risk_score=float(data["risk_score"]),
            mode=data["mode"],
            risk_level=data["risk_level"],
        )


def is_integer(v: object) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def is_real(v: object) -> bool:
    """True for int or float values (bool excluded) that convert to a float."""
    if not isinstance(v, (int, float)) or isinstance(v, bool):
        return False
    try:
        float(v)
    except OverflowError:
        return False
    return True


def _ensure_exact_keys(data: Mapping[str, Any], expected: tuple[str, ...], *, where: str) -> None:
    missing = [k for k in expected if k not in data]
    extra = sorted(str(k) for k in data if k not in expected)
    if missing or extra:
        raise RecordParseError(f"{where} keys mismatch: missing={missing}, unexpected={extra}")
