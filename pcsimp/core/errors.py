"""Error taxonomy for the point-cloud data model.

Every error derives from :class:`PointcloudError` and from the builtin
exception a Python caller would naturally catch for the same situation.
"""

from __future__ import annotations


class PointcloudError(Exception):
    """Base class of all pcsimp errors."""


class InvalidDimensions(PointcloudError, ValueError):
    """Negative, non-integral, or overflowing buffer dimensions."""


class IndexOutOfRange(PointcloudError, IndexError):
    """Element access outside of a buffer's allocated extent."""


class InvalidDomain(PointcloudError, ValueError):
    """Degenerate grid domain or non-positive spacing."""


class MissingParameter(PointcloudError, KeyError):
    """Typed parameter lookup without default on an absent key."""

    def __str__(self) -> str:
        # KeyError quotes its argument, which reads badly for full messages
        return str(self.args[0]) if self.args else ""


class TypeMismatch(PointcloudError, TypeError):
    """Typed parameter lookup against a value of another type."""
