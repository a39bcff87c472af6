"""Fixtures for running the suites against a real mount."""

import os
from pathlib import Path

import pytest


@pytest.fixture
def base_path(tmp_path: Path) -> Path:
    """Mount under test: $NFS_PATH when set, otherwise a temporary directory."""
    if nfs_path := os.environ.get("NFS_PATH"):
        path = Path(nfs_path)
        if not path.is_dir() or not os.access(path, os.W_OK):
            pytest.skip(f"NFS_PATH={nfs_path} not accessible")
        return path
    return tmp_path


@pytest.fixture
def run_id(request: pytest.FixtureRequest) -> str:
    """Run id unique to this test and process."""
    return f"it-{os.getpid()}-{request.node.name}".replace("[", "-").replace("]", "")
