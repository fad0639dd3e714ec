r"""
basicstats.core.context
=======================
Per-call configuration and argument validation shared by all test families.

This module defines:

- :class:`NanPolicy`: how non-finite observations are treated.
- :class:`TestContext`: a typed, explicit configuration object for one test call.
- :func:`check_alpha`, :func:`check_finite`: parameter guards.
- :func:`clean_sample`: materialize a sample as a float array honouring a NaN policy.

There is no module-level or mutable configuration: every test call builds
its own :class:`TestContext` from the arguments the caller supplied.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum
from typing import Union

import numpy as np

from .decision import Tail, as_tail
from .errors import DomainError, InputError, NonFiniteInputError

logger = logging.getLogger(__name__)

__all__ = [
    "NanPolicy",
    "TestContext",
    "check_alpha",
    "check_finite",
    "as_nan_policy",
    "clean_sample",
]


class NanPolicy(str, Enum):
    r"""
    Strategies for handling non-finite observations.

    Attributes
    ----------
    raise_ : str
        Reject NaN or infinite observations with
        :class:`~basicstats.core.errors.NonFiniteInputError`.
    omit : str
        Drop non-finite observations before computing anything.
    """

    raise_ = "raise"
    omit = "omit"


def as_nan_policy(policy: Union[NanPolicy, str]) -> NanPolicy:
    """Coerce ``policy`` to a :class:`NanPolicy`, raising :class:`DomainError` if unknown."""
    if isinstance(policy, NanPolicy):
        return policy
    try:
        return NanPolicy(policy)
    except ValueError:
        raise DomainError(f"Unknown nan_policy: {policy!r}") from None


def check_alpha(alpha: float) -> float:
    r"""
    Validate a significance level.

    Returns
    -------
    float
        ``alpha`` as a Python float.

    Raises
    ------
    DomainError
        If ``alpha`` is not strictly inside :math:`(0, 1)`.
    """
    try:
        value = float(alpha)
    except (TypeError, ValueError):
        raise DomainError(f"arg `alpha` must be a real number, got {alpha!r}") from None
    if not (0.0 < value < 1.0):
        raise DomainError("arg `alpha` must be in interval (0, 1)")
    return value


def check_finite(value: float, name: str) -> float:
    r"""
    Validate that a scalar parameter is a finite real number.

    Raises
    ------
    NonFiniteInputError
        If ``value`` is NaN or infinite.
    """
    try:
        out = float(value)
    except (TypeError, ValueError):
        raise DomainError(f"arg `{name}` must be a real number, got {value!r}") from None
    if not math.isfinite(out):
        raise NonFiniteInputError(f"arg `{name}` must be finite, got {out}")
    return out


@dataclass(frozen=True, slots=True)
class TestContext:
    r"""
    Explicit configuration for a single hypothesis-test call.

    Attributes
    ----------
    alpha : float
        Significance level in :math:`(0, 1)`. Required; never defaulted.
    tail : Tail
        Tail configuration. Required; never defaulted.
    nan_policy : {"raise", "omit"}, default "raise"
        Treatment of non-finite observations in raw samples.

    Notes
    -----
    The context is immutable; use :meth:`with_overrides` to derive a copy with
    a few changed fields.

    Examples
    --------
    >>> ctx = TestContext(alpha=0.05, tail="two-sided")
    >>> ctx.critical_alpha
    0.025
    >>> ctx.with_overrides(tail=Tail.upper).critical_alpha
    0.05
    """

    __test__ = False  # keep pytest from collecting this class

    alpha: float
    tail: Tail
    nan_policy: NanPolicy = NanPolicy.raise_

    def __post_init__(self) -> None:
        r"""
        Validate and normalize the fields.

        Raises
        ------
        DomainError
            If ``alpha`` is outside :math:`(0, 1)` or ``tail``/``nan_policy``
            is unknown.
        """
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "alpha", check_alpha(self.alpha))
        object.__setattr__(self, "tail", as_tail(self.tail))
        object.__setattr__(self, "nan_policy", as_nan_policy(self.nan_policy))

    def with_overrides(self, **changes) -> "TestContext":
        r"""
        Return a copy with selected fields replaced.

        Parameters
        ----------
        **changes :
            Field overrides passed to :func:`dataclasses.replace`.
        """
        return replace(self, **changes)

    @property
    def two_sided(self) -> bool:
        """Whether the test rejects on both sides."""
        return self.tail is Tail.two_sided

    @property
    def critical_alpha(self) -> float:
        r"""
        Tail probability used for the critical value: :math:`\alpha/2` for
        two-sided tests, :math:`\alpha` otherwise.
        """
        return self.alpha / 2.0 if self.two_sided else self.alpha


def clean_sample(
    values: Iterable[float],
    nan_policy: Union[NanPolicy, str] = NanPolicy.raise_,
    name: str = "sample",
) -> np.ndarray:
    r"""
    Materialize ``values`` as a one-dimensional float array.

    Parameters
    ----------
    values : iterable of float
        Observations. Generators are consumed.
    nan_policy : {"raise", "omit"}, default "raise"
        Treatment of non-finite observations.
    name : str, default "sample"
        Label used in error messages.

    Returns
    -------
    ndarray
        Finite observations, at least one.

    Raises
    ------
    InputError
        If ``values`` is not one-dimensional numeric data or is empty after
        cleaning.
    NonFiniteInputError
        If a non-finite value is present and ``nan_policy="raise"``.
    """
    policy = as_nan_policy(nan_policy)
    if not isinstance(values, np.ndarray):
        if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
            raise InputError(f"{name} must be an iterable of real numbers")
        values = list(values)
    try:
        arr = np.asarray(values, dtype=float)
    except (TypeError, ValueError):
        raise InputError(f"{name} must contain only real numbers") from None
    if arr.ndim != 1:
        raise InputError(f"{name} must be one-dimensional, got shape {arr.shape}")

    finite = np.isfinite(arr)
    if not finite.all():
        if policy is NanPolicy.raise_:
            raise NonFiniteInputError(f"{name} contains NaN or infinite values")
        logger.debug("Dropping %d non-finite values from %s", int((~finite).sum()), name)
        arr = arr[finite]

    if arr.size == 0:
        raise InputError(f"{name} must contain at least one observation")
    return arr
