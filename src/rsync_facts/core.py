"""
Core evaluation module for rsync-facts.

Runs the rsync version probe once per evaluation and resolves every selected
fact from that single result.
"""

from __future__ import annotations

import json
import logging
import socket
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import yaml

from rsync_facts.config import Config
from rsync_facts.facts import BaseFact, get_all_facts
from rsync_facts.probe import VersionProbe

logger = logging.getLogger(__name__)


@dataclass
class FactReport:
    """Facts resolved during one evaluation."""

    hostname: str
    timestamp: str
    tool_version: str
    probe: dict[str, Any] | None = None
    facts: dict[str, str | None] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    def get(self, name: str) -> str | None:
        """Value of a fact, or None if it is undefined or was not evaluated."""
        return self.facts.get(name)

    def resolved(self) -> dict[str, str]:
        """Facts that have a value."""
        return {name: value for name, value in self.facts.items() if value is not None}

    def to_dict(self) -> dict[str, Any]:
        """Convert report to dictionary for serialization."""
        return {
            "meta": {
                "hostname": self.hostname,
                "timestamp": self.timestamp,
                "rsync_facts_version": self.tool_version,
            },
            "probe": self.probe,
            "facts": self.facts,
            "errors": self.errors,
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize report to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def to_yaml(self) -> str:
        """Serialize report to YAML string."""
        return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def to_external(self) -> str:
        """
        Render resolved facts as ``name=value`` lines.

        This is the format Facter reads from executable external facts, so
        undefined facts are left out rather than printed empty.
        """
        return "".join(f"{name}={value}\n" for name, value in self.resolved().items())

    def render(self, output_format: str) -> str:
        """Render the report in one of the machine-readable formats."""
        if output_format == "json":
            return self.to_json() + "\n"
        if output_format == "yaml":
            return self.to_yaml()
        if output_format == "external":
            return self.to_external()
        raise ValueError(f"Unsupported output format: {output_format}")


class FactEngine:
    """
    Evaluates facts against a single rsync probe.

    Each call to `evaluate` is one evaluation cycle: the probe runs at most
    once and its result is handed to every selected fact.
    """

    def __init__(self, config: Config | None = None):
        self.config = config or Config()
        self.facts = get_all_facts()
        self.probe = VersionProbe(
            command=self.config.rsync_command,
            timeout=self.config.probe_timeout,
        )

    def select(self, fact_names: list[str] | None = None) -> dict[str, type[BaseFact]]:
        """Facts to evaluate, honouring explicit names or config filters."""
        if fact_names is not None:
            return {name: cls for name, cls in self.facts.items() if name in fact_names}

        selected = self.facts
        if self.config.enabled_facts:
            selected = {
                name: cls for name, cls in selected.items() if name in self.config.enabled_facts
            }
        return {
            name: cls for name, cls in selected.items() if name not in self.config.disabled_facts
        }

    def evaluate(self, fact_names: list[str] | None = None) -> FactReport:
        """
        Run one evaluation cycle.

        Args:
            fact_names: Optional list of specific facts to resolve.
                        If None, resolves all facts allowed by the config.

        Returns:
            FactReport with every selected fact, None for undefined ones.
        """
        from rsync_facts import __version__

        report = FactReport(
            hostname=socket.gethostname(),
            timestamp=datetime.now(timezone.utc).isoformat(),
            tool_version=__version__,
        )

        facts_to_resolve = self.select(fact_names)
        if not facts_to_resolve:
            logger.info("No facts selected, skipping rsync probe")
            return report

        logger.debug(f"Resolving {len(facts_to_resolve)} facts")

        probe_result = self.probe.probe()
        report.probe = probe_result.to_dict()
        if not probe_result.success:
            error_msg = f"rsync probe failed: {probe_result.failure.value}"
            report.errors.append(error_msg)
            logger.warning(error_msg)

        for name, fact_cls in facts_to_resolve.items():
            start = time.perf_counter()
            try:
                value = fact_cls().resolve(probe_result)
            except Exception as e:
                value = None
                error_msg = f"Fact '{name}' failed: {e}"
                report.errors.append(error_msg)
                logger.error(error_msg)
            duration = (time.perf_counter() - start) * 1000

            report.facts[name] = value
            logger.debug(f"Fact '{name}' = {value!r} ({duration:.2f}ms)")

        return report


def run_facts(
    config: Config | None = None,
    fact_names: list[str] | None = None,
) -> FactReport:
    """
    Convenience function to run one evaluation.

    Args:
        config: Optional configuration. Uses defaults if not provided.
        fact_names: Optional list of specific facts to resolve.

    Returns:
        The fact report.
    """
    return FactEngine(config).evaluate(fact_names)
