"""Order domain exceptions.

Raised by the Service Layer when a caller needs an explicit signal.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.  Lookup misses inside the service itself are
reported as ``None`` rather than raised.
"""

from __future__ import annotations


class OrderNotFound(Exception):
    """No order in the store carries the requested code."""


class InvalidStageDirection(Exception):
    """A stage move other than one step forward or back was requested."""


class OrderCodeUnavailable(Exception):
    """Every generated order code collided with an existing order."""
