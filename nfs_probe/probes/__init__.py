"""Filesystem probe catalogues."""

from nfs_probe.probes.base import Probe, ProbeFailure
from nfs_probe.probes.core import core_probes
from nfs_probe.probes.shared import shared_probes

__all__ = ["Probe", "ProbeFailure", "core_probes", "shared_probes"]
