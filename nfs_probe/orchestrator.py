"""Suite orchestration over isolated and shared directories."""

import logging
import shutil
import time
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from nfs_probe.environment import current_identity, mount_info
from nfs_probe.models.result import (
    FullSuiteResult,
    ProbeResult,
    Snapshot,
    SuiteMode,
    SuiteResult,
    SuiteSummary,
)
from nfs_probe.probes import core_probes, shared_probes
from nfs_probe.run_id import validate_run_id
from nfs_probe.runner import run_probes, summarize
from nfs_probe.snapshot import take_snapshot

log = logging.getLogger(__name__)

SHARED_DIR = "shared"


def isolated_directory(base_path: Path, run_id: str) -> Path:
    """Scratch directory used by an isolated run."""
    return base_path / f"test-isolated-{run_id}"


def shared_run_directory(shared_root: Path, run_id: str) -> Path:
    """Per-run subdirectory of the shared root."""
    return shared_root / f"run-{run_id}"


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def remove_tree(directory: Path) -> None:
    """Remove ``directory`` recursively, logging instead of raising on failure."""
    try:
        shutil.rmtree(directory)
    except FileNotFoundError:
        pass
    except OSError as exc:
        log.warning("Cleanup of %s failed: %s", directory, exc)


@dataclass(frozen=True, kw_only=True)
class SuiteOrchestrator:
    """Runs the probe catalogues against directories beneath ``base_path``.

    Every method returns a result even when setup or cleanup fails; such
    failures only show up in the snapshots, the per-probe results and the log.
    """

    base_path: Path

    @property
    def shared_root(self) -> Path:
        """Persistent directory shared by all runs and instances."""
        return self.base_path / SHARED_DIR

    def run_isolated(self, run_id: str) -> SuiteResult:
        """Run the core catalogue in a fresh directory and remove it afterwards."""
        directory = isolated_directory(self.base_path, validate_run_id(run_id))
        probes = core_probes()
        log.info("Running isolated suite in %s (%d probes)", directory, len(probes))

        start = time.perf_counter()
        before = take_snapshot(directory)
        try:
            results = run_probes(directory, probes)
        finally:
            remove_tree(directory)
        after = take_snapshot(directory)

        if after.directory_exists:
            log.warning("Isolated directory %s still exists after cleanup", directory)

        return self._suite_result(
            directory, "isolated", before, results, after, _elapsed_ms(start)
        )

    def run_shared(self, run_id: str) -> SuiteResult:
        """Run the core catalogue in a per-run subdirectory of the shared root.

        The shared probes then run against the root itself. Only the per-run
        subdirectory is removed; markers from this and earlier runs remain.
        """
        run_directory = shared_run_directory(
            self.shared_root, validate_run_id(run_id)
        )
        probes = core_probes()
        extra = shared_probes(run_id)
        log.info(
            "Running shared suite in %s (%d probes + %d shared)",
            run_directory,
            len(probes),
            len(extra),
        )

        start = time.perf_counter()
        before = take_snapshot(self.shared_root)
        if before.entry_count:
            log.info(
                "Shared root holds %d entries from earlier runs", before.entry_count
            )

        try:
            results = (
                *run_probes(run_directory, probes),
                *run_probes(self.shared_root, extra),
            )
        finally:
            remove_tree(run_directory)
        after = take_snapshot(self.shared_root)

        return self._suite_result(
            self.shared_root,
            "shared",
            before,
            results,
            after,
            _elapsed_ms(start),
            preexisting_entries=before.entry_names,
        )

    def run_full(self, run_id: str) -> FullSuiteResult:
        """Run the isolated then the shared suite and combine their results."""
        timestamp = datetime.now(timezone.utc)
        isolated = self.run_isolated(run_id)
        shared = self.run_shared(run_id)

        return FullSuiteResult(
            timestamp=timestamp,
            run_id=run_id,
            identity=current_identity(),
            mount_path=self.base_path,
            mount_info=mount_info(self.base_path),
            isolated=isolated,
            shared=shared,
            overall_summary=SuiteSummary.combine(isolated.summary, shared.summary),
        )

    @staticmethod
    def _suite_result(
        directory: Path,
        mode: SuiteMode,
        before: Snapshot,
        results: Sequence[ProbeResult],
        after: Snapshot,
        duration_ms: int,
        preexisting_entries: Sequence[str] | None = None,
    ) -> SuiteResult:
        summary = summarize(results)
        log.info(
            "%s suite finished: %d/%d passed in %dms",
            mode.capitalize(),
            summary.passed,
            summary.total,
            duration_ms,
        )
        return SuiteResult(
            target_directory=directory,
            mode=mode,
            before=before,
            results=results,
            after=after,
            duration_ms=duration_ms,
            summary=summary,
            preexisting_entries=preexisting_entries,
        )


def run_isolated_suite(base_path: Path, run_id: str) -> SuiteResult:
    """Run the isolated suite beneath ``base_path``."""
    return SuiteOrchestrator(base_path=Path(base_path)).run_isolated(run_id)


def run_shared_suite(base_path: Path, run_id: str) -> SuiteResult:
    """Run the shared suite beneath ``base_path``."""
    return SuiteOrchestrator(base_path=Path(base_path)).run_shared(run_id)


def run_full_suite(base_path: Path, run_id: str) -> FullSuiteResult:
    """Run both suites beneath ``base_path`` and return the combined report."""
    return SuiteOrchestrator(base_path=Path(base_path)).run_full(run_id)
