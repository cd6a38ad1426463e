from __future__ import annotations

from ..models.outcome import OperationOutcome

"""Summary line rendering for the SUMMARY log output.

Format:
SUMMARY operation={sort|restore} status={ok|failed|aborted} rows={n}
direction={desc|asc|-} error={kind|-} elapsed_sec={elapsed}
"""


def _format_elapsed(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # Avoid scientific notation for very small durations
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.3f}".rstrip("0").rstrip(".")


def render_summary_line(outcome: OperationOutcome) -> str:
    """Render a SUMMARY line from an OperationOutcome.

    Examples:
        >>> from download_sorter.models.outcome import SortDirection
        >>> outcome = OperationOutcome(
        ...     operation="sort", ok=True, message="done", rows=4,
        ...     direction=SortDirection.DESC, snapshot_saved=True, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(outcome)
        'SUMMARY operation=sort status=ok rows=4 direction=desc error=- elapsed_sec=2'
    """
    direction = outcome.direction.value if outcome.direction is not None else "-"
    error = outcome.error_kind.value if outcome.error_kind is not None else "-"
    return (
        f"SUMMARY operation={outcome.operation} "
        f"status={outcome.status} "
        f"rows={outcome.rows} "
        f"direction={direction} "
        f"error={error} "
        f"elapsed_sec={_format_elapsed(outcome.elapsed_seconds)}"
    )
