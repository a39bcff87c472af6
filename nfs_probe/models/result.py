"""Models for probe and suite execution results."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Literal

SuiteMode = Literal["isolated", "shared"]


@dataclass(frozen=True, kw_only=True)
class ProbeOutcome:
    """Human-readable observations made by a single probe.

    ``before`` and ``after`` describe the state around the probe's mutation,
    ``context`` names the API path exercised and ``details`` summarizes the
    result.
    """

    before: str | None = None
    after: str | None = None
    context: str | None = None
    details: str = ""


@dataclass(frozen=True, kw_only=True)
class ProbeResult:
    """Result of a single probe execution."""

    name: str
    passed: bool
    duration_ms: int
    outcome: ProbeOutcome
    error_message: str | None = None


@dataclass(frozen=True, kw_only=True)
class Snapshot:
    """Point-in-time observation of a directory."""

    timestamp: datetime
    directory_exists: bool
    entry_count: int = 0
    entry_names: Sequence[str] = ()
    error: str | None = None


@dataclass(frozen=True, kw_only=True)
class SuiteSummary:
    """Pass/fail counts for a set of probe results."""

    passed: int
    failed: int
    total: int

    @classmethod
    def combine(cls, *summaries: "SuiteSummary") -> "SuiteSummary":
        """Sum several summaries into one."""
        return cls(
            passed=sum(s.passed for s in summaries),
            failed=sum(s.failed for s in summaries),
            total=sum(s.total for s in summaries),
        )


@dataclass(frozen=True, kw_only=True)
class SuiteResult:
    """Result of running a catalogue against one target directory.

    ``preexisting_entries`` is only set for shared runs and lists what other
    runs or instances left in the shared root before this run started.
    """

    target_directory: Path
    mode: SuiteMode
    before: Snapshot
    results: Sequence[ProbeResult]
    after: Snapshot
    duration_ms: int
    summary: SuiteSummary
    preexisting_entries: Sequence[str] | None = None


@dataclass(frozen=True, kw_only=True)
class Identity:
    """User the suite ran as."""

    user: str
    uid: int
    gid: int


@dataclass(frozen=True, kw_only=True)
class FullSuiteResult:
    """Combined isolated and shared results for one invocation."""

    timestamp: datetime
    run_id: str
    identity: Identity
    mount_path: Path
    mount_info: str
    isolated: SuiteResult
    shared: SuiteResult
    overall_summary: SuiteSummary
