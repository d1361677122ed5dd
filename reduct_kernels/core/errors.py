"""Exception types raised by the kernels.

Every fallible kernel raises a subclass of ``KernelError`` carrying a
human-readable message. ``KernelError`` derives from ``ValueError`` so callers
that already guard numeric code with ``except ValueError`` keep working.
"""

from __future__ import annotations


class KernelError(ValueError):
    """Base class for all kernel failures."""


class PreconditionError(KernelError):
    """Raised when an argument is empty or outside its allowed range."""


class DimensionMismatchError(PreconditionError):
    """Raised when a dimension argument disagrees with a buffer length."""


class DegenerateInputError(KernelError):
    """Raised when a numerical degeneracy makes the result undefined."""


class DecodeError(KernelError):
    """Raised when an encoded payload is malformed or not valid UTF-8."""
