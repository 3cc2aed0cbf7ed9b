from __future__ import annotations

"""
Domain Exceptions.

Failures that are surfaced to callers. Per-item failures (classification,
content reads) are recovered locally and never raised.
"""


class MalformedPatternError(ValueError):
    """Raised when a glob pattern contains unbalanced braces."""

    def __init__(self, pattern: str, reason: str = "unbalanced braces"):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Malformed pattern '{pattern}': {reason}")
