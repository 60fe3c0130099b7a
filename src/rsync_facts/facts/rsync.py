"""
rsync version facts.

Used to switch on newer rsync syntax (``&include`` style filter rules and
friends) only where the installed rsync understands it.
"""

from __future__ import annotations

from rsync_facts.facts.base import BaseFact
from rsync_facts.probe import ProbeResult, protocol_version, release_version


class RsyncVersionFact(BaseFact):
    """Release version of the installed rsync."""

    name = "rsync_version"
    description = "Release version reported by rsync --version"

    def resolve(self, probe: ProbeResult) -> str | None:
        value = release_version(probe)
        if value is None:
            self.logger.debug("Release version token missing from banner")
        return value


class RsyncProtocolVersionFact(BaseFact):
    """Wire-protocol version of the installed rsync."""

    name = "rsync_protocol_version"
    description = "Protocol version reported by rsync --version"

    def resolve(self, probe: ProbeResult) -> str | None:
        value = protocol_version(probe)
        if value is None:
            self.logger.debug("Protocol version token missing from banner")
        return value
