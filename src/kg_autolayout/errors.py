"""Exceptions raised by kg_autolayout.

Layout itself never raises for dirty graph input; only configuration
mistakes do.
"""

from __future__ import annotations


class LayoutOptionsError(ValueError):
    """Raised when layout options are malformed or name an unknown engine."""
