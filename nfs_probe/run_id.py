"""Run identifiers used to name per-run directories and marker files."""

import os
import time
import uuid


def new_run_id() -> str:
    """Return a run identifier unique across processes and sequential runs.

    The nanosecond timestamp comes first and is fixed width, so ids from any
    host sort in creation order.
    """
    return f"{time.time_ns()}-{os.getpid()}-{uuid.uuid4().hex[:6]}"


def validate_run_id(run_id: str) -> str:
    """Ensure a run identifier is safe to use as a single path segment.

    Raises:
        ValueError: If the identifier is empty, a dot segment, or contains a
            path separator or NUL byte.

    """
    if not run_id or run_id in {".", ".."}:
        raise ValueError(f"Invalid run id {run_id!r}")

    separators = {os.sep, "\0"}
    if os.altsep:
        separators.add(os.altsep)
    if any(sep in run_id for sep in separators):
        raise ValueError(f"Run id {run_id!r} must not contain path separators")

    return run_id
