"""Test factories for generating result data."""

from polyfactory import Use
from polyfactory.factories import DataclassFactory

from nfs_probe.models.result import ProbeOutcome, ProbeResult


class ProbeOutcomeFactory(DataclassFactory[ProbeOutcome]):
    """Factory for ProbeOutcome."""

    __model__ = ProbeOutcome

    before = None
    after = None
    context = None


class ProbeResultFactory(DataclassFactory[ProbeResult]):
    """Factory for passing ProbeResult instances."""

    __model__ = ProbeResult

    passed = True
    error_message = None
    outcome = Use(ProbeOutcomeFactory.build)
