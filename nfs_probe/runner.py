"""Execution engine running a probe catalogue against one directory."""

import logging
import time
from collections.abc import Iterable, Sequence
from pathlib import Path

from nfs_probe.models.result import ProbeOutcome, ProbeResult, SuiteSummary
from nfs_probe.probes.base import Probe, ProbeFailure

log = logging.getLogger(__name__)

PANIC_PREFIX = "panic: "


def run_probes(directory: Path, probes: Iterable[Probe]) -> Sequence[ProbeResult]:
    """Run every probe in order and return one result per probe.

    Failures never stop the catalogue. Assertion failures and filesystem errors
    are recorded as failed results; any other exception is an abnormal
    termination, recorded with a ``panic:`` prefix so cascading failures can be
    told apart from a probe's own assertions.
    """
    return tuple(run_probe(directory, probe) for probe in probes)


def run_probe(directory: Path, probe: Probe) -> ProbeResult:
    """Run a single probe, converting any failure into a result."""
    start = time.perf_counter()
    error_message: str | None = None
    outcome = ProbeOutcome()

    try:
        outcome = probe.run(directory)
    except ProbeFailure as exc:
        error_message = str(exc)
        outcome = exc.outcome
    except OSError as exc:
        error_message = f"{type(exc).__name__}: {exc}"
    except Exception as exc:
        log.error("Probe %s terminated abnormally: %s", probe.name, exc, exc_info=exc)
        error_message = f"{PANIC_PREFIX}{type(exc).__name__}: {exc}"

    duration_ms = int((time.perf_counter() - start) * 1000)
    log.debug(
        "Probe completed: name=%s passed=%s duration=%dms",
        probe.name,
        error_message is None,
        duration_ms,
    )

    return ProbeResult(
        name=probe.name,
        passed=error_message is None,
        duration_ms=duration_ms,
        outcome=outcome,
        error_message=error_message,
    )


def summarize(results: Sequence[ProbeResult]) -> SuiteSummary:
    """Count passed and failed results."""
    passed = sum(1 for result in results if result.passed)
    return SuiteSummary(passed=passed, failed=len(results) - passed, total=len(results))
