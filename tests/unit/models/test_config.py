"""Tests for CLI configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from nfs_probe.models.config import SuiteConfig


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without NFS_PATH the conventional mount point is used."""
    monkeypatch.delenv("NFS_PATH", raising=False)

    config = SuiteConfig()

    assert config.mount_path == Path("/mnt/nfs")
    assert config.mode == "full"
    assert config.run_id


def test_mount_path_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """NFS_PATH overrides the default mount path."""
    monkeypatch.setenv("NFS_PATH", "/srv/share")

    assert SuiteConfig().mount_path == Path("/srv/share")


def test_generated_run_ids_differ() -> None:
    """Each config gets its own run id."""
    assert SuiteConfig().run_id != SuiteConfig().run_id


@pytest.mark.parametrize("run_id", ["", ".", "..", "a/b", "x\0y"])
def test_rejects_unsafe_run_id(run_id: str) -> None:
    """Run ids must be usable as a single path segment."""
    with pytest.raises(ValidationError):
        SuiteConfig(run_id=run_id)


def test_rejects_unknown_mode() -> None:
    """Only the three suite modes are accepted."""
    with pytest.raises(ValidationError):
        SuiteConfig(mode="parallel")  # type: ignore[arg-type]


def test_is_frozen() -> None:
    """Configs are immutable."""
    config = SuiteConfig(run_id="abc")

    with pytest.raises(ValidationError):
        config.run_id = "other"  # type: ignore[misc]


def test_rejects_unknown_setting() -> None:
    """Misspelled settings are not silently ignored."""
    with pytest.raises(ValidationError):
        SuiteConfig(mount=Path("/mnt/nfs"))  # type: ignore[call-arg]
