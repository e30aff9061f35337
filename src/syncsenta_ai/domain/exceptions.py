"""Domain exception hierarchy.

Upstream failures never show up here: the completion gateway turns them into
degraded responses.  What remains are startup and caller errors, each mapped
to an HTTP status code at the interface layer.
"""

from __future__ import annotations


class SyncSentaError(Exception):
    """Base exception for the entire application."""


# ── Startup ─────────────────────────────────────────────────────────────────


class ConfigurationError(SyncSentaError):
    """Required configuration is missing or still set to a placeholder."""


# ── Input validation ────────────────────────────────────────────────────────


class InvalidTutoringContextError(SyncSentaError):
    """The student context is out of bounds (grade level, subject)."""


class UnsupportedAnalysisError(SyncSentaError):
    """The requested subject area has no free-text analysis."""
