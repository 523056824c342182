"""
Governance Substrate for Autonomous Systems (GSAS)

Composes independent governance primitives into a single fail-closed
admit/deny decision and emits a hash-committed proof of how it was reached.
"""

__version__ = "1.0.0"
