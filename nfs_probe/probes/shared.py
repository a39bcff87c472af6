"""Probes run against the persistent shared root.

Marker files are the only durable artifact of the suite. Each run writes
``marker-<run_id>.txt`` and later runs, possibly on other instances sharing the
mount, read them back as proof of cross-instance visibility. Markers are never
deleted by the suite.
"""

from collections.abc import Sequence
from datetime import datetime, timezone
from functools import partial
from pathlib import Path

from nfs_probe.models.result import ProbeOutcome
from nfs_probe.probes.base import Probe, ensure_unique_names

MARKER_PREFIX = "marker-"
MARKER_SUFFIX = ".txt"


def marker_name(run_id: str) -> str:
    """File name of the marker written by ``run_id``."""
    return f"{MARKER_PREFIX}{run_id}{MARKER_SUFFIX}"


def marker_content(run_id: str, timestamp: datetime) -> str:
    """Marker body: the run id and an RFC 3339 UTC timestamp."""
    stamp = timestamp.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    return f"run_id={run_id}\ntimestamp={stamp}\n"


def is_marker(name: str) -> bool:
    """Whether a directory entry follows the marker naming convention."""
    return name.startswith(MARKER_PREFIX) and name.endswith(MARKER_SUFFIX)


def write_marker(directory: Path, run_id: str) -> ProbeOutcome:
    """Write this run's marker into the shared root."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / marker_name(run_id)
    before = f"{path.name} exists={path.exists()}"

    path.write_text(marker_content(run_id, datetime.now(timezone.utc)))

    return ProbeOutcome(
        before=before,
        after=f"{path.name} size={path.stat().st_size}",
        context="write marker for other runs/instances",
        details=f"wrote marker {path}",
    )


def list_existing(directory: Path) -> ProbeOutcome:
    """List every entry in the shared root."""
    names = sorted(entry.name for entry in directory.iterdir())
    return ProbeOutcome(
        context="os.listdir shared root",
        after=f"{len(names)} entries",
        details=f"{len(names)} entries: {', '.join(names)}",
    )


def read_cross_run(directory: Path, run_id: str) -> ProbeOutcome:
    """Read the newest marker left by another run, if there is one.

    No foreign marker is the expected state on the first run against a fresh
    shared root and is reported as a pass.
    """
    context = "read marker written by another run/instance"
    markers = sorted(
        entry.name for entry in directory.iterdir() if is_marker(entry.name)
    )
    foreign = [name for name in markers if name != marker_name(run_id)]

    if not foreign:
        return ProbeOutcome(
            before=f"markers={len(markers)}",
            context=context,
            details="no previous markers found (first run)",
        )

    latest = foreign[-1]
    content = (directory / latest).read_text().strip()

    return ProbeOutcome(
        before=f"markers={len(markers)} foreign={len(foreign)}",
        after=f"read {latest}",
        context=context,
        details=f"read marker {latest}: {content} (total markers: {len(markers)})",
    )


def shared_probes(run_id: str) -> Sequence[Probe]:
    """Return the ordered shared-root catalogue bound to ``run_id``."""
    return ensure_unique_names(
        (
            Probe(name="write_marker", run=partial(write_marker, run_id=run_id)),
            Probe(name="list_existing", run=list_existing),
            Probe(name="read_cross_run", run=partial(read_cross_run, run_id=run_id)),
        )
    )
