"""Information about the process identity and the mount under test."""

import logging
import os
import pwd
import subprocess
from pathlib import Path

from nfs_probe.models.result import Identity

log = logging.getLogger(__name__)


def current_identity() -> Identity:
    """Return the user, uid and gid the suite runs as.

    Containers often run under a uid with no passwd entry, in which case the
    numeric uid stands in for the user name.
    """
    uid = os.getuid()
    try:
        user = pwd.getpwuid(uid).pw_name
    except KeyError:
        user = str(uid)
    return Identity(user=user, uid=uid, gid=os.getgid())


def mount_info(mount_path: Path) -> str:
    """Return the ``mount`` output line describing ``mount_path``, if any."""
    try:
        process = subprocess.run(
            ["mount"],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        log.debug("Cannot run mount: %s", exc)
        return ""

    if process.returncode != 0:
        log.debug(
            "mount exited with %d: %s", process.returncode, process.stderr.strip()
        )
        return ""

    needle = str(mount_path)
    for line in process.stdout.splitlines():
        if needle in line:
            return line
    return ""
