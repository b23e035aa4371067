from __future__ import annotations


class InvalidArgumentError(ValueError):
    """Raised for programmer errors such as a pair count below 1 or a missing store."""
