"""CLI entry point for the NFS probe suite."""

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from typing import Any

from nfs_probe.models.config import SuiteConfig, default_mount_path
from nfs_probe.models.result import (
    FullSuiteResult,
    ProbeResult,
    Snapshot,
    SuiteResult,
    SuiteSummary,
)
from nfs_probe.orchestrator import SuiteOrchestrator
from nfs_probe.runner import PANIC_PREFIX

STATUS_SYMBOLS = {
    "pass": "✅",
    "fail": "❌",
    "panic": "❗",
}


def probe_status(result: ProbeResult) -> str:
    """Classify a probe result as pass, fail or panic."""
    if result.passed:
        return "pass"
    if result.error_message and result.error_message.startswith(PANIC_PREFIX):
        return "panic"
    return "fail"


def log_results_summary(log: logging.Logger, suites: Sequence[SuiteResult]) -> None:
    """Log a formatted table of probe results for each suite."""
    log.info("=" * 80)
    log.info("Probe Results Summary:")
    log.info("=" * 80)

    for suite in suites:
        log.info(
            "--- %s [%d/%d] %s (%dms) ---",
            suite.mode.upper(),
            suite.summary.passed,
            suite.summary.total,
            suite.target_directory,
            suite.duration_ms,
        )
        for index, result in enumerate(suite.results, start=1):
            status = probe_status(result)
            log.info(
                "%2d %s %s: %s (%dms)",
                index,
                STATUS_SYMBOLS[status],
                result.name,
                status,
                result.duration_ms,
            )
            if result.outcome.context:
                log.info("  Context: %s", result.outcome.context)
            if result.error_message:
                log.info("  Error: %s", result.error_message)

        if suite.preexisting_entries is not None:
            log.info(
                "  Shared dir before: %s",
                ", ".join(suite.preexisting_entries) or "(empty)",
            )
            log.info(
                "  Shared dir after:  %s",
                ", ".join(suite.after.entry_names) or "(empty)",
            )


def format_summary(summary: SuiteSummary) -> dict[str, int]:
    """Format a summary with the wire key names."""
    return {"pass": summary.passed, "fail": summary.failed, "total": summary.total}


def format_snapshot(snapshot: Snapshot) -> dict[str, Any]:
    """Format a snapshot for JSON output."""
    output: dict[str, Any] = {
        "timestamp": snapshot.timestamp.isoformat(),
        "exists": snapshot.directory_exists,
        "count": snapshot.entry_count,
        "files": list(snapshot.entry_names),
    }
    if snapshot.error is not None:
        output["error"] = snapshot.error
    return output


def format_probe(result: ProbeResult) -> dict[str, Any]:
    """Format a probe result, omitting empty optional fields."""
    output: dict[str, Any] = {
        "name": result.name,
        "pass": result.passed,
        "duration_ms": result.duration_ms,
    }
    optional = {
        "error": result.error_message,
        "context": result.outcome.context,
        "before": result.outcome.before,
        "after": result.outcome.after,
    }
    output.update({key: value for key, value in optional.items() if value})
    output["details"] = result.outcome.details
    return output


def format_suite(suite: SuiteResult) -> dict[str, Any]:
    """Format a suite result for JSON output."""
    output: dict[str, Any] = {
        "dir": str(suite.target_directory),
        "mode": suite.mode,
        "duration_ms": suite.duration_ms,
        "before": format_snapshot(suite.before),
        "tests": [format_probe(result) for result in suite.results],
        "after": format_snapshot(suite.after),
        "summary": format_summary(suite.summary),
    }
    if suite.preexisting_entries is not None:
        output["existing_files"] = list(suite.preexisting_entries)
    return output


def format_output(result: FullSuiteResult) -> dict[str, Any]:
    """Format the combined report for JSON output."""
    return {
        "timestamp": result.timestamp.isoformat(),
        "run_id": result.run_id,
        "user": result.identity.user,
        "uid": result.identity.uid,
        "gid": result.identity.gid,
        "mount_path": str(result.mount_path),
        "mount_info": result.mount_info,
        "isolated": format_suite(result.isolated),
        "shared": format_suite(result.shared),
        "overall_summary": format_summary(result.overall_summary),
    }


def run(config: SuiteConfig) -> int:
    """Run the configured suite(s), print JSON and return the exit code."""
    log = logging.getLogger("nfs_probe")
    log.info("Mount path: %s", config.mount_path)
    log.info("Run id: %s", config.run_id)

    orchestrator = SuiteOrchestrator(base_path=config.mount_path)
    suites: list[SuiteResult]
    output: dict[str, Any]

    if config.mode == "isolated":
        suite = orchestrator.run_isolated(config.run_id)
        suites, output = [suite], format_suite(suite)
    elif config.mode == "shared":
        suite = orchestrator.run_shared(config.run_id)
        suites, output = [suite], format_suite(suite)
    else:
        full = orchestrator.run_full(config.run_id)
        log.info(
            "Running as %s (uid=%d, gid=%d)",
            full.identity.user,
            full.identity.uid,
            full.identity.gid,
        )
        suites, output = [full.isolated, full.shared], format_output(full)

    log_results_summary(log, suites)

    overall = SuiteSummary.combine(*(suite.summary for suite in suites))
    if overall.failed:
        log.info(
            "RESULT: %d/%d (%d FAILED)", overall.passed, overall.total, overall.failed
        )
    else:
        log.info("RESULT: %d/%d PASS", overall.passed, overall.total)

    print(json.dumps(output, indent=2))

    return 1 if overall.failed else 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Verify POSIX filesystem semantics on a (network) mount"
    )
    parser.add_argument(
        "--mount-path",
        default=default_mount_path(),
        help="Root of the filesystem under test (default: $NFS_PATH or /mnt/nfs)",
    )
    parser.add_argument(
        "--mode",
        choices=["isolated", "shared", "full"],
        default="full",
        help="Suite to run",
    )
    parser.add_argument(
        "--run-id",
        default=None,
        help="Unique run identifier (default: <pid>-<nanoseconds>-<random>)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    settings: dict[str, Any] = {"mount_path": args.mount_path, "mode": args.mode}
    if args.run_id is not None:
        settings["run_id"] = args.run_id

    exit_code = run(SuiteConfig(**settings))
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
