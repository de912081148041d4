"""
DataFrame-based reporting over validated record streams.

These helpers turn ValidationReport / StreamReport artifacts into pandas
tables for inspection, audit exports and pass-rate summaries.
"""

from .stream import invariant_pass_rates, stream_report_df, stream_summary_df

__all__ = [
    "invariant_pass_rates",
    "stream_report_df",
    "stream_summary_df",
]
