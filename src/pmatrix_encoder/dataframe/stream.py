from __future__ import annotations

from collections.abc import Iterable

import numpy as np
import pandas as pd

from ..conformance.results import INVARIANT_ORDER, StreamReport, ValidationReport
from ..utils.validation import ensure_columns_present

_LONG_COLUMNS = ["record", "timestamp", "invariant", "passed", "message"]


def stream_report_df(
    reports: StreamReport | Iterable[ValidationReport],
) -> pd.DataFrame:
    """
    Flatten per-record validation reports into a long-form (tidy) DataFrame.

    Parameters
    ----------
    reports : StreamReport or iterable of ValidationReport
        Reports in stream order, e.g. the output of ``validate_stream``.

    Returns
    -------
    pandas.DataFrame
        One row per record and invariant, with columns:

            record | timestamp | invariant | passed | message

        ``record`` is the position of the record in the stream and
        ``timestamp`` is NaN where the record carried no valid timestamp.
    """
    rows: list[dict[str, object]] = []
    for i, report in enumerate(reports):
        ts = np.nan if report.timestamp is None else report.timestamp
        for r in report.results:
            rows.append(
                {
                    "record": i,
                    "timestamp": ts,
                    "invariant": r.invariant_id.value,
                    "passed": bool(r.passed),
                    "message": r.message,
                }
            )

    return pd.DataFrame(rows, columns=_LONG_COLUMNS)


def stream_summary_df(
    reports: StreamReport | Iterable[ValidationReport],
) -> pd.DataFrame:
    """
    Summarize a stream as one row per record.

    Parameters
    ----------
    reports : StreamReport or iterable of ValidationReport
        Reports in stream order.

    Returns
    -------
    pandas.DataFrame
        Wide table with columns:

            record | timestamp | INV-R1 ... INV-T1 | n_failed | conforming

        Each invariant column is a boolean pass flag.
    """
    long_df = stream_report_df(reports)
    inv_cols = [i.value for i in INVARIANT_ORDER]

    if long_df.empty:
        return pd.DataFrame(
            columns=["record", "timestamp"] + inv_cols + ["n_failed", "conforming"]
        )

    wide = long_df.pivot(index="record", columns="invariant", values="passed")
    wide = wide[inv_cols].astype(bool)

    ts = long_df.groupby("record")["timestamp"].first()

    out = wide.reset_index()
    out.columns.name = None
    out.insert(1, "timestamp", ts.to_numpy())
    out["n_failed"] = (~out[inv_cols]).sum(axis=1).astype(int)
    out["conforming"] = out["n_failed"] == 0

    return out


def invariant_pass_rates(df: pd.DataFrame) -> pd.DataFrame:
    """
    Compute per-invariant pass rates over a long-form stream report.

    Parameters
    ----------
    df : pandas.DataFrame
        Output of ``stream_report_df`` (must contain ``invariant`` and
        ``passed`` columns).

    Returns
    -------
    pandas.DataFrame
        One row per invariant in display order, with columns:

            invariant | n_records | n_passed | pass_rate

        ``pass_rate`` is NaN for invariants with no rows.

    Raises
    ------
    DataFrameValidationError
        If required columns are missing.
    """
    ensure_columns_present(df, ["invariant", "passed"], context="invariant_pass_rates")

    order = [i.value for i in INVARIANT_ORDER]
    grouped = df.groupby("invariant")["passed"]
    n_records = grouped.size().reindex(order, fill_value=0)
    n_passed = grouped.sum().reindex(order, fill_value=0).astype(int)

    n = n_records.to_numpy(dtype=float)
    k = n_passed.to_numpy(dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        rate = np.where(n > 0, k / n, np.nan)

    return pd.DataFrame(
        {
            "invariant": order,
            "n_records": n_records.to_numpy(dtype=int),
            "n_passed": n_passed.to_numpy(dtype=int),
            "pass_rate": rate,
        }
    )
