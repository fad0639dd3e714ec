r"""
basicstats.core.errors
======================
Exception taxonomy raised across the public boundary of :mod:`basicstats`.

Every fallible operation either returns a fully valid value or raises a
subclass of :class:`StatsError`:

- :class:`InputError`: structurally invalid input (empty sample, zero trials,
  non-positive multiplicity, mismatched lengths, unordered iterators).
- :class:`DomainError`: a parameter outside its mathematically valid range.
- :class:`NonFiniteInputError`: NaN or infinity where finite values are required.
- :class:`ComputationError`: a bounded iterative approximation did not converge.

The value-type errors also derive from :class:`ValueError` so callers that
already guard numeric code with ``except ValueError`` keep working.
"""

from __future__ import annotations

__all__ = [
    "StatsError",
    "InputError",
    "DomainError",
    "NonFiniteInputError",
    "ComputationError",
]


class StatsError(Exception):
    r"""
    Base class for every error raised by this library.

    Parameters
    ----------
    message : str
        Human-readable description. May be a literal or a formatted string.

    Examples
    --------
    >>> err = StatsError("arg `alpha` must be in interval (0, 1)")
    >>> err.message
    'arg `alpha` must be in interval (0, 1)'
    """

    def __init__(self, message: str):
        super().__init__(message)
        self._message = str(message)

    @property
    def message(self) -> str:
        """The error message."""
        return self._message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._message!r})"


class InputError(StatsError, ValueError):
    """Structurally invalid input."""


class DomainError(StatsError, ValueError):
    """A parameter lies outside its valid mathematical domain."""


class NonFiniteInputError(StatsError, ValueError):
    """A NaN or infinite value was supplied where finite values are required."""


class ComputationError(StatsError, ArithmeticError):
    """An iterative approximation failed to converge within its iteration budget."""
