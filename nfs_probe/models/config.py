"""Configuration for the nfs-probe command line."""

import os
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator

from nfs_probe.models.base import Model
from nfs_probe.run_id import new_run_id, validate_run_id

DEFAULT_MOUNT_PATH = "/mnt/nfs"


def default_mount_path() -> Path:
    """Mount path from NFS_PATH, falling back to the conventional mount point."""
    return Path(os.environ.get("NFS_PATH") or DEFAULT_MOUNT_PATH)


class SuiteConfig(Model):
    """Validated settings for one command line invocation."""

    mount_path: Path = Field(
        default_factory=default_mount_path,
        description="Root of the filesystem under test",
    )
    mode: Literal["isolated", "shared", "full"] = Field(
        default="full", description="Which suite(s) to run"
    )
    run_id: str = Field(
        default_factory=new_run_id,
        description="Unique token naming per-run directories and markers",
    )

    @field_validator("run_id")
    @classmethod
    def _check_run_id(cls, value: str) -> str:
        return validate_run_id(value)
