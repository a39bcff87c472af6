"""Tests for run identifiers."""

import os
from unittest.mock import patch

import pytest

from nfs_probe.run_id import new_run_id, validate_run_id


def test_new_run_id_is_path_safe() -> None:
    """Generated ids lead with the timestamp and validate as path segments."""
    run_id = new_run_id()

    timestamp, pid, suffix = run_id.split("-")
    assert len(timestamp) == 19
    assert pid == str(os.getpid())
    assert len(suffix) == 6
    assert validate_run_id(run_id) == run_id


def test_new_run_ids_are_unique() -> None:
    """Sequential ids differ."""
    assert len({new_run_id() for _ in range(100)}) == 100


def test_new_run_ids_sort_by_time_not_pid() -> None:
    """A later id from a longer pid still sorts after an earlier one."""
    with (
        patch("nfs_probe.run_id.os.getpid", return_value=900),
        patch("nfs_probe.run_id.time.time_ns", return_value=1_700_000_000_000_000_000),
    ):
        older = new_run_id()
    with (
        patch("nfs_probe.run_id.os.getpid", return_value=12000),
        patch("nfs_probe.run_id.time.time_ns", return_value=1_800_000_000_000_000_000),
    ):
        newer = new_run_id()

    assert sorted([newer, older]) == [older, newer]


@pytest.mark.parametrize("run_id", ["", ".", "..", "a/b", "/abs", "nul\0"])
def test_validate_rejects_unsafe(run_id: str) -> None:
    """Unsafe identifiers raise ValueError."""
    with pytest.raises(ValueError):
        validate_run_id(run_id)
