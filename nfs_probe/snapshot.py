"""Point-in-time directory observations bounding a suite run."""

import logging
from datetime import datetime, timezone
from pathlib import Path

from nfs_probe.models.result import Snapshot

log = logging.getLogger(__name__)


def take_snapshot(directory: Path) -> Snapshot:
    """Observe whether ``directory`` exists and what it contains.

    Never raises: a directory that cannot be listed is reported through
    ``Snapshot.error``.
    """
    timestamp = datetime.now(timezone.utc)
    try:
        names = sorted(entry.name for entry in directory.iterdir())
    except FileNotFoundError:
        return Snapshot(timestamp=timestamp, directory_exists=False)
    except OSError as exc:
        log.warning("Cannot list %s: %s", directory, exc)
        return Snapshot(
            timestamp=timestamp,
            directory_exists=directory.exists(),
            error=str(exc),
        )

    return Snapshot(
        timestamp=timestamp,
        directory_exists=True,
        entry_count=len(names),
        entry_names=tuple(names),
    )
