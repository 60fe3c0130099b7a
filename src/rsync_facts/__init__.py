"""
rsync-facts - rsync version facts for configuration management.

Probes the installed rsync utility and exposes its release and wire-protocol
versions as named facts, so configuration logic can enable syntax that only
newer rsyncs understand.
"""

__version__ = "0.1.0"
__author__ = "Sluggisty"

__all__ = ["__version__"]
