from __future__ import annotations

from ..models.comparison import ComparisonReport

"""Summary line rendering for the comparison tool.

Format:
SUMMARY sheets={compared}/{requested} failed={failed} differing={n}
new={n} deleted={n} modified={n} duplicates={n} elapsed_sec={elapsed}
(single line)
"""


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # avoid scientific notation for very small numbers
        return f"{seconds:.6f}".rstrip('0').rstrip('.')
    return f"{seconds:.3f}".rstrip('0').rstrip('.')


def render_summary_line(report: ComparisonReport, elapsed_seconds: float) -> str:
    """Render the SUMMARY line for a finished comparison.

    Examples:
        >>> from wbcompare.models.comparison import ComparisonReport
        >>> report = ComparisonReport(
        ...     header_row=1, key_spec="A", sheet_names=("S",), results={}, errors={}
        ... )
        >>> render_summary_line(report, 2.0)
        'SUMMARY sheets=0/1 failed=0 differing=0 new=0 deleted=0 modified=0 duplicates=0 elapsed_sec=2'
    """
    s = report.summary
    return (
        f"SUMMARY sheets={s.sheets_compared}/{s.sheets_requested} "
        f"failed={s.sheets_failed} "
        f"differing={len(s.sheets_with_differences)} "
        f"new={s.total_new_rows} "
        f"deleted={s.total_deleted_rows} "
        f"modified={s.total_modified_rows} "
        f"duplicates={s.duplicate_warnings} "
        f"elapsed_sec={_format_seconds(elapsed_seconds)}"
    )
