"""Tests for CLI module."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import patch

import pytest

from nfs_probe.cli import (
    format_output,
    format_probe,
    format_suite,
    log_results_summary,
    main,
    probe_status,
    run,
)
from nfs_probe.models.config import SuiteConfig
from nfs_probe.models.result import (
    FullSuiteResult,
    Identity,
    ProbeOutcome,
    Snapshot,
    SuiteResult,
    SuiteSummary,
)
from nfs_probe.testing.factories import ProbeResultFactory

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _suite(**overrides: object) -> SuiteResult:
    values: dict[str, object] = {
        "target_directory": Path("/mnt/nfs/shared"),
        "mode": "shared",
        "before": Snapshot(timestamp=NOW, directory_exists=False),
        "results": [
            ProbeResultFactory.build(
                name="create_file",
                duration_ms=3,
                outcome=ProbeOutcome(context="write", details="created"),
            ),
            ProbeResultFactory.build(
                name="read_file",
                passed=False,
                duration_ms=1,
                error_message="content mismatch",
                outcome=ProbeOutcome(before="size=9"),
            ),
        ],
        "after": Snapshot(
            timestamp=NOW,
            directory_exists=True,
            entry_count=1,
            entry_names=("marker-1.txt",),
        ),
        "duration_ms": 12,
        "summary": SuiteSummary(passed=1, failed=1, total=2),
        "preexisting_entries": (),
    }
    values.update(overrides)
    return SuiteResult(**values)  # type: ignore[arg-type]


def test_probe_status_distinguishes_panic() -> None:
    """Panic-tagged failures get their own status."""
    assert probe_status(ProbeResultFactory.build()) == "pass"
    assert (
        probe_status(ProbeResultFactory.build(passed=False, error_message="boom"))
        == "fail"
    )
    assert (
        probe_status(
            ProbeResultFactory.build(passed=False, error_message="panic: KeyError")
        )
        == "panic"
    )


def test_log_results_summary(caplog: pytest.LogCaptureFixture) -> None:
    """Logs a row per probe plus shared directory listings."""
    with caplog.at_level(logging.INFO):
        log_results_summary(logging.getLogger(), [_suite()])

    assert "Probe Results Summary:" in caplog.text
    assert "--- SHARED [1/2] /mnt/nfs/shared (12ms) ---" in caplog.text
    assert " 1 ✅ create_file: pass (3ms)" in caplog.text
    assert " 2 ❌ read_file: fail (1ms)" in caplog.text
    assert "Error: content mismatch" in caplog.text
    assert "Shared dir before: (empty)" in caplog.text
    assert "Shared dir after:  marker-1.txt" in caplog.text


def test_format_probe_omits_empty_fields() -> None:
    """Optional fields only appear when set."""
    result = ProbeResultFactory.build(
        name="stat_file",
        duration_ms=2,
        outcome=ProbeOutcome(context="os.stat", details="size=9"),
    )

    assert format_probe(result) == {
        "name": "stat_file",
        "pass": True,
        "duration_ms": 2,
        "context": "os.stat",
        "details": "size=9",
    }


def test_format_suite_shared() -> None:
    """Shared suites include the preexisting entries."""
    output = format_suite(_suite(preexisting_entries=("marker-0.txt",)))

    assert output["dir"] == "/mnt/nfs/shared"
    assert output["mode"] == "shared"
    assert output["summary"] == {"pass": 1, "fail": 1, "total": 2}
    assert output["existing_files"] == ["marker-0.txt"]
    assert output["before"] == {
        "timestamp": NOW.isoformat(),
        "exists": False,
        "count": 0,
        "files": [],
    }
    assert [t["name"] for t in output["tests"]] == ["create_file", "read_file"]
    assert output["tests"][1]["error"] == "content mismatch"


def test_format_suite_isolated_has_no_existing_files() -> None:
    """Isolated suites omit existing_files."""
    output = format_suite(_suite(mode="isolated", preexisting_entries=None))

    assert "existing_files" not in output


def test_format_output() -> None:
    """The full report carries identity and mount information."""
    suite = _suite()
    full = FullSuiteResult(
        timestamp=NOW,
        run_id="42",
        identity=Identity(user="testuser", uid=1234, gid=2345),
        mount_path=Path("/mnt/nfs"),
        mount_info="server:/export on /mnt/nfs type nfs4",
        isolated=_suite(mode="isolated", preexisting_entries=None),
        shared=suite,
        overall_summary=SuiteSummary(passed=2, failed=2, total=4),
    )

    output = format_output(full)

    assert output["run_id"] == "42"
    assert (output["user"], output["uid"], output["gid"]) == ("testuser", 1234, 2345)
    assert output["mount_path"] == "/mnt/nfs"
    assert output["overall_summary"] == {"pass": 2, "fail": 2, "total": 4}
    assert output["isolated"]["mode"] == "isolated"
    json.dumps(output)


def test_run_isolated_prints_json(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """An isolated run on a healthy directory exits 0 and prints the suite."""
    config = SuiteConfig(mount_path=tmp_path, mode="isolated", run_id="cli")

    exit_code = run(config)

    output = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert output["mode"] == "isolated"
    assert output["summary"]["fail"] == 0
    assert output["after"]["exists"] is False


def test_run_full_returns_failure_exit_code(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Any failed probe makes the exit code 1."""
    base = tmp_path / "not-a-dir"
    base.write_text("x")
    config = SuiteConfig(mount_path=base, mode="full", run_id="bad")

    with patch("nfs_probe.orchestrator.mount_info", return_value=""):
        exit_code = run(config)

    output = json.loads(capsys.readouterr().out)
    assert exit_code == 1
    assert output["overall_summary"]["pass"] == 0
    assert set(output) >= {"isolated", "shared", "user", "uid", "gid"}


def test_main_parses_arguments(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """main builds the config from arguments and exits with run's code."""
    monkeypatch.setattr(
        "sys.argv",
        [
            "nfs-probe",
            "--mount-path",
            str(tmp_path),
            "--mode",
            "shared",
            "--run-id",
            "m",
        ],
    )

    with patch("nfs_probe.cli.run", return_value=0) as run_mock:
        with pytest.raises(SystemExit) as exc_info:
            main()

    assert exc_info.value.code == 0
    config = run_mock.call_args.args[0]
    assert config.mount_path == tmp_path
    assert config.mode == "shared"
    assert config.run_id == "m"
