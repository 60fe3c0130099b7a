"""
Pytest fixtures and configuration for rsync-facts tests.

Provides reusable rsync version banners, fake subprocess results and
configuration fixtures across the test suite.
"""

from __future__ import annotations

import subprocess

import pytest

from rsync_facts.probe import ProbeFailure, ProbeResult


# Test Data Fixtures - Command Outputs
@pytest.fixture
def sample_rsync_version_output():
    """Sample output from rsync --version (3.0.6)."""
    return """rsync  version 3.0.6  protocol version 30
Copyright (C) 1996-2009 by Andrew Tridgell, Wayne Davison, and others.
Web site: http://rsync.samba.org/
Capabilities:
    64-bit files, 64-bit inums, 64-bit timestamps, 64-bit long ints,
    socketpairs, hardlinks, symlinks, IPv6, batchfiles, inplace,
    append, ACLs, xattrs, iconv, symtimes

rsync comes with ABSOLUTELY NO WARRANTY.  This is free software, and you
are welcome to redistribute it under certain conditions.  See the GNU
General Public Licence for details.
"""


@pytest.fixture
def sample_rsync_dev_version_output():
    """Sample output from a pre-release rsync --version."""
    return """rsync  version 3.1.0dev  protocol version 31.PR14
Copyright (C) 1996-2011 by Andrew Tridgell, Wayne Davison, and others.
Web site: http://rsync.samba.org/
"""


@pytest.fixture
def sample_rsync_modern_version_output():
    """Sample output from rsync 3.2 and later, which prefixes the release."""
    return """rsync  version v3.2.7  protocol version 31
Copyright (C) 1996-2022 by Andrew Tridgell, Wayne Davison, and others.
Web site: https://rsync.samba.org/
Capabilities:
    64-bit files, 64-bit inums, 64-bit timestamps, 64-bit long ints,
    socketpairs, symlinks, symtimes, hardlinks, hardlink-specials,
    hardlink-symlinks, IPv6, atimes, batchfiles, inplace, append, ACLs,
    xattrs, optional secluded-args, iconv, prealloc, stop-at, no crtimes
"""


@pytest.fixture
def make_completed():
    """Factory for subprocess.CompletedProcess objects."""

    def _make(stdout: str = "", stderr: str = "", returncode: int = 0):
        return subprocess.CompletedProcess(
            args=["rsync", "--version"],
            returncode=returncode,
            stdout=stdout,
            stderr=stderr,
        )

    return _make


@pytest.fixture
def successful_probe_result():
    """Probe result for rsync 3.0.6."""
    return ProbeResult(
        command=["rsync", "--version"],
        banner="rsync  version 3.0.6  protocol version 30",
        tokens=["rsync", "version", "3.0.6", "protocol", "version", "30"],
        returncode=0,
    )


@pytest.fixture
def missing_rsync_probe_result():
    """Probe result when rsync is not installed."""
    return ProbeResult(
        command=["rsync", "--version"],
        failure=ProbeFailure.NOT_FOUND,
    )


# Utility Fixtures
@pytest.fixture
def temp_config_file(tmp_path):
    """Create a temporary config file."""
    config_file = tmp_path / "test_config.yaml"
    config_content = """
probe:
  rsync_command: /usr/bin/env rsync
  probe_timeout: 5
facts:
  disabled_facts:
    - rsync_protocol_version
logging:
  log_level: WARNING
"""

    config_file.write_text(config_content)
    return config_file


@pytest.fixture
def clean_env(monkeypatch):
    """Remove RSYNC_FACTS_* variables that would leak into config tests."""
    for var in (
        "RSYNC_FACTS_COMMAND",
        "RSYNC_FACTS_TIMEOUT",
        "RSYNC_FACTS_FORMAT",
        "RSYNC_FACTS_LOG_LEVEL",
        "RSYNC_FACTS_LOG_FILE",
    ):
        monkeypatch.delenv(var, raising=False)
