"""
Base fact class that all facts inherit from.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from rsync_facts.probe import ProbeResult


class BaseFact(ABC):
    """
    Abstract base class for all facts.

    Subclasses must implement the `resolve` method to derive their value
    from the probe result of the current evaluation.
    """

    name: str = "base"
    description: str = "Base fact"

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.name}")

    @abstractmethod
    def resolve(self, probe: ProbeResult) -> str | None:
        """
        Resolve the fact value.

        Args:
            probe: Probe result shared by every fact in the evaluation.

        Returns:
            The fact value, or None when the fact is undefined on this host.
        """
        pass
