"""Terminal outcome classification.

The diagnostic text attached to a failed outcome is the tail of the
engine's log. It is meant for operators and is never parsed for control
decisions.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from transcode_controller.domain import JobStatus, Outcome

SUCCESS_RETURN_CODE = 0
DEFAULT_TAIL_LINES = 10

CANCELLED_DIAGNOSTIC = "Cancelled by caller"


def tail_diagnostic(
    lines: Sequence[str], limit: int = DEFAULT_TAIL_LINES
) -> str | None:
    """Join the last ``limit`` log lines, or None if there are none."""
    if not lines or limit <= 0:
        return None
    return "\n".join(line.rstrip("\n") for line in lines[-limit:])


def classify_outcome(
    return_code: int | None,
    cancel_requested: bool,
    diagnostic_lines: Sequence[str] = (),
    *,
    output_path: Path | None = None,
    elapsed_seconds: float | None = None,
    tail_lines: int = DEFAULT_TAIL_LINES,
    cancel_note: str | None = None,
) -> Outcome:
    """Map a terminal engine status to an Outcome.

    Cancellation pre-empts status interpretation: a cancelled job never
    succeeds, even if the engine finished cleanly.

    Args:
        return_code: Engine exit status, or None if it never produced one.
        cancel_requested: Whether the caller cancelled the job.
        diagnostic_lines: Captured engine log lines.
        output_path: Output artifact, reported only on success.
        elapsed_seconds: Wall-clock job duration.
        tail_lines: Number of log lines kept in the diagnostic.
        cancel_note: Diagnostic for cancelled outcomes.

    Returns:
        The classified Outcome.
    """
    if cancel_requested:
        return Outcome(
            succeeded=False,
            status=JobStatus.CANCELLED,
            diagnostic=cancel_note or CANCELLED_DIAGNOSTIC,
            return_code=return_code,
            elapsed_seconds=elapsed_seconds,
        )

    if return_code == SUCCESS_RETURN_CODE:
        return Outcome(
            succeeded=True,
            status=JobStatus.COMPLETED,
            return_code=return_code,
            output_path=output_path,
            elapsed_seconds=elapsed_seconds,
        )

    tail = tail_diagnostic(diagnostic_lines, tail_lines)
    if tail is None:
        tail = f"Encoder exited with code {return_code}"
    return Outcome(
        succeeded=False,
        status=JobStatus.FAILED,
        diagnostic=tail,
        return_code=return_code,
        elapsed_seconds=elapsed_seconds,
    )
