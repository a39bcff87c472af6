"""Probe definition and the failure type probes raise."""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from nfs_probe.models.result import ProbeOutcome


@dataclass(frozen=True, kw_only=True)
class Probe:
    """A named filesystem operation run against a target directory.

    ``run`` returns the observed outcome on success and raises on failure:
    ``ProbeFailure`` for a mismatch (optionally carrying a partial outcome),
    ``OSError`` when the filesystem call itself fails.
    """

    name: str
    run: Callable[[Path], ProbeOutcome]


class ProbeFailure(Exception):
    """Raised when a probe observes behavior that does not match expectation."""

    def __init__(self, message: str, outcome: ProbeOutcome | None = None) -> None:
        super().__init__(message)
        self.outcome = outcome or ProbeOutcome()


def ensure_unique_names(probes: Iterable[Probe]) -> Sequence[Probe]:
    """Return probes as a tuple, rejecting duplicate names.

    Raises:
        ValueError: If two probes share a name

    """
    catalogue = tuple(probes)
    seen: set[str] = set()
    for probe in catalogue:
        if probe.name in seen:
            raise ValueError(f"Duplicate probe name: {probe.name}")
        seen.add(probe.name)
    return catalogue
