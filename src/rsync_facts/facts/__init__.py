"""
Facts exposed by rsync-facts.

Each fact derives one named value from the rsync version probe.
"""

from __future__ import annotations

from rsync_facts.facts.base import BaseFact
from rsync_facts.facts.rsync import RsyncProtocolVersionFact, RsyncVersionFact

# Registry of all available facts
FACTS: dict[str, type[BaseFact]] = {
    "rsync_version": RsyncVersionFact,
    "rsync_protocol_version": RsyncProtocolVersionFact,
}


def get_all_facts() -> dict[str, type[BaseFact]]:
    """Return all registered facts."""
    return FACTS.copy()


def get_fact(name: str) -> type[BaseFact] | None:
    """Get a specific fact by name."""
    return FACTS.get(name)


def list_facts() -> list[str]:
    """List all available fact names."""
    return list(FACTS.keys())


__all__ = [
    "BaseFact",
    "RsyncVersionFact",
    "RsyncProtocolVersionFact",
    "get_all_facts",
    "get_fact",
    "list_facts",
    "FACTS",
]
