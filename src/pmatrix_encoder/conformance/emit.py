"""
Record emission.

The emitter composes scoring -> classification -> record for four function
values and a timestamp. It performs no range enforcement: emitting with
out-of-range inputs is allowed, and produces records the validator flags
under INV-R1 (and, when the derived scores leave [0, 1], INV-R2/R3/C1).
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable

from .config import DEMO_CONFIG, EncoderConfig
from .record import RuntimeStateRecord

logger = logging.getLogger(__name__)


def emit(
    baseline: float,
    norm: float,
    stability: float,
    meta_control: float,
    now: int | None = None,
    *,
    clock: Callable[[], float] | None = None,
    config: EncoderConfig | None = None,
) -> RuntimeStateRecord:
    """
    Emit a demonstration record.

    Parameters
    ----------
    baseline, norm, stability, meta_control:
        Function values. Nominally in [0.0, 1.0]; not enforced here.
    now:
        Explicit integer timestamp. When omitted the clock is read.
    clock:
        Time source returning seconds since the epoch. Defaults to
        ``time.time``; the reading is truncated to whole seconds.
    config:
        Optional encoder configuration. Defaults to ``DEMO_CONFIG``.

    Returns
    -------
    RuntimeStateRecord
        Fully populated record.
    """
    if now is None:
        now = int((clock or time.time)())

    record = RuntimeStateRecord.from_functions(
        baseline,
        norm,
        stability,
        meta_control,
        now,
        config=config or DEMO_CONFIG,
    )
    logger.debug(
        "emitted record ts=%d stability_score=%r risk_score=%r mode=%s risk_level=%s",
        record.timestamp,
        record.stability_score,
        record.risk_score,
        record.mode or "<none>",
        record.risk_level or "<none>",
    )
    return record


def emit_json(
    baseline: float,
    norm: float,
    stability: float,
    meta_control: float,
    now: int | None = None,
    *,
    clock: Callable[[], float] | None = None,
    config: EncoderConfig | None = None,
    indent: int | None = 2,
) -> str:
    """Emit a record and serialize it as JSON in canonical field order."""
    record = emit(
        baseline,
        norm,
        stability,
        meta_control,
        now,
        clock=clock,
        config=config,
    )
    return json.dumps(record.to_dict(), indent=indent)
