"""
rsync version probe.

Runs ``rsync --version``, keeps the first line of its output and splits it
on whitespace. Banners look like::

    rsync  version 3.1.0dev  protocol version 31.PR14
    rsync  version 3.0.6  protocol version 30
    rsync  version 2.6.8  protocol version 29

The release version is token 2 and the protocol version is token 5. The
positions are not validated against the surrounding words.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_RSYNC_COMMAND = "rsync"

RELEASE_VERSION_INDEX = 2
PROTOCOL_VERSION_INDEX = 5
EXPECTED_TOKEN_COUNT = 6

# Exit status of /usr/bin/env and most shells when the program is missing
COMMAND_NOT_FOUND_EXIT = 127


class ProbeFailure(str, Enum):
    """Reasons a probe could not produce a complete banner."""

    NOT_FOUND = "utility not found"
    NOT_EXECUTABLE = "utility not executable"
    TIMED_OUT = "timed out"
    EMPTY_OUTPUT = "empty output"
    INVALID_COMMAND = "invalid command"
    MALFORMED_BANNER = "malformed banner"


@dataclass
class ProbeResult:
    """Outcome of a single ``rsync --version`` invocation."""

    command: list[str]
    banner: str = ""
    tokens: list[str] = field(default_factory=list)
    failure: ProbeFailure | None = None
    returncode: int | None = None
    duration_ms: float = 0.0

    @property
    def success(self) -> bool:
        return self.failure is None

    def token(self, index: int) -> str | None:
        """Return the token at ``index``, or None when it does not exist."""
        if 0 <= index < len(self.tokens):
            return self.tokens[index]
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "command": list(self.command),
            "banner": self.banner,
            "tokens": list(self.tokens),
            "status": "ok" if self.success else self.failure.value,
            "returncode": self.returncode,
            "duration_ms": round(self.duration_ms, 2),
        }


def parse_banner(output: str) -> tuple[str, list[str]]:
    """
    Extract the banner line and its tokens from version output.

    Only the first line is considered, so output starting with a blank line
    yields an empty banner.

    Returns:
        Tuple of (banner, tokens).
    """
    banner = output.split("\n", 1)[0].strip()
    return banner, banner.split()


def release_version(result: ProbeResult) -> str | None:
    """Release version of the probed rsync, e.g. ``3.0.6``."""
    return result.token(RELEASE_VERSION_INDEX)


def protocol_version(result: ProbeResult) -> str | None:
    """
    Wire-protocol version of the probed rsync, e.g. ``30``.

    Returned verbatim: pre-release builds append a suffix such as
    ``31.PR14``, so this is not guaranteed to be an integer.
    """
    return result.token(PROTOCOL_VERSION_INDEX)


class VersionProbe:
    """
    Invokes the rsync executable and parses its version banner.

    Args:
        command: rsync executable, optionally with a launcher prefix such as
            ``/usr/bin/env rsync``. Resolved through PATH.
        timeout: Seconds to wait for the process. None waits forever.
    """

    def __init__(self, command: str = DEFAULT_RSYNC_COMMAND, timeout: float | None = None):
        self.command = command
        self.timeout = timeout
        self.logger = logger

    def build_command(self) -> list[str]:
        """
        Command line for the version report.

        Raises:
            ValueError: If the command is empty or has unbalanced quotes.
        """
        parts = shlex.split(self.command)
        if not parts:
            raise ValueError("empty rsync command")
        return [*parts, "--version"]

    def probe(self) -> ProbeResult:
        """
        Run the version command once and parse its first line.

        Never raises for launch or parse problems; those are reported via
        ``ProbeResult.failure``.
        """
        start = time.perf_counter()
        try:
            cmd = self.build_command()
        except ValueError as e:
            self.logger.warning(f"Invalid rsync command {self.command!r}: {e}")
            result = ProbeResult(command=[], failure=ProbeFailure.INVALID_COMMAND)
            return self._finish(result, start)

        result = ProbeResult(command=cmd)

        try:
            completed = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError:
            self.logger.warning(f"Command not found: {cmd[0]}")
            result.failure = ProbeFailure.NOT_FOUND
            return self._finish(result, start)
        except subprocess.TimeoutExpired:
            self.logger.warning(f"Command timed out after {self.timeout}s: {' '.join(cmd)}")
            result.failure = ProbeFailure.TIMED_OUT
            return self._finish(result, start)
        except OSError as e:
            self.logger.warning(f"Command could not be executed: {cmd[0]}: {e}")
            result.failure = ProbeFailure.NOT_EXECUTABLE
            return self._finish(result, start)

        result.returncode = completed.returncode
        stdout = completed.stdout or ""

        if not stdout.strip():
            if completed.returncode == COMMAND_NOT_FOUND_EXIT:
                self.logger.warning(f"Command not found: {' '.join(cmd[:-1])}")
                result.failure = ProbeFailure.NOT_FOUND
            else:
                self.logger.warning(f"No version output from: {' '.join(cmd)}")
                result.failure = ProbeFailure.EMPTY_OUTPUT
            return self._finish(result, start)

        if completed.returncode != 0:
            self.logger.debug(
                f"{' '.join(cmd)} exited with {completed.returncode}, parsing output anyway"
            )

        result.banner, result.tokens = parse_banner(stdout)
        if len(result.tokens) < EXPECTED_TOKEN_COUNT:
            self.logger.warning(f"Unexpected version banner: {result.banner!r}")
            result.failure = ProbeFailure.MALFORMED_BANNER

        return self._finish(result, start)

    def _finish(self, result: ProbeResult, start: float) -> ProbeResult:
        result.duration_ms = (time.perf_counter() - start) * 1000
        self.logger.debug(f"Probe finished in {result.duration_ms:.2f}ms: {result.banner!r}")
        return result
