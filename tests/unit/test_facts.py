"""
Unit tests for the fact registry and rsync facts.
"""

from __future__ import annotations

import pytest

from rsync_facts.facts import (
    FACTS,
    BaseFact,
    RsyncProtocolVersionFact,
    RsyncVersionFact,
    get_all_facts,
    get_fact,
    list_facts,
)
from rsync_facts.probe import ProbeResult


class TestFactRegistry:
    """Test registry helpers."""

    def test_fact_names_are_fixed(self):
        """Test the two published fact names."""
        assert list_facts() == ["rsync_version", "rsync_protocol_version"]

    def test_registry_matches_class_names(self):
        """Test registry keys match each class's name attribute."""
        for name, cls in FACTS.items():
            assert cls.name == name
            assert cls.description

    def test_get_all_facts_returns_copy(self):
        """Test that callers cannot mutate the registry."""
        facts = get_all_facts()
        facts.pop("rsync_version")

        assert "rsync_version" in FACTS

    def test_get_fact(self):
        """Test lookup by name."""
        assert get_fact("rsync_protocol_version") is RsyncProtocolVersionFact
        assert get_fact("nonexistent") is None


class TestBaseFact:
    """Test abstract method behavior."""

    def test_resolve_must_be_implemented(self):
        """Test that a fact without resolve() cannot be instantiated."""

        class IncompleteFact(BaseFact):
            name = "incomplete"

        with pytest.raises(TypeError, match="abstract"):
            IncompleteFact()

    def test_logger_is_named_after_fact(self):
        """Test per-fact logger naming."""
        assert RsyncVersionFact().logger.name.endswith(".rsync_version")


class TestRsyncFacts:
    """Test the rsync facts themselves."""

    def test_resolve_from_probe(self, successful_probe_result):
        """Test both facts read from the same probe result."""
        assert RsyncVersionFact().resolve(successful_probe_result) == "3.0.6"
        assert RsyncProtocolVersionFact().resolve(successful_probe_result) == "30"

    def test_resolve_from_failed_probe(self, missing_rsync_probe_result):
        """Test both facts are undefined when rsync is missing."""
        assert RsyncVersionFact().resolve(missing_rsync_probe_result) is None
        assert RsyncProtocolVersionFact().resolve(missing_rsync_probe_result) is None

    def test_facts_are_independent(self):
        """Test that each fact resolves on its own."""
        probe = ProbeResult(
            command=["rsync", "--version"],
            tokens=["rsync", "version", "2.6.8"],
        )

        assert RsyncVersionFact().resolve(probe) == "2.6.8"
        assert RsyncProtocolVersionFact().resolve(probe) is None
