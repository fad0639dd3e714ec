r"""
basicstats.core.moments
=======================
Sufficient statistics (count, mean, variance) for finite samples.

This module defines:

- :class:`SampleMoments`: a frozen summary of a sample that never retains the raw data.
- :func:`moments`: reduce a sample (optionally with multiplicities) to :class:`SampleMoments`.
- :func:`combine`: merge two summaries into the summary of the union of their samples.
- :func:`make_blocks`: chunking helper used for block-wise reduction of arrays.

Numerics
--------
Arrays are reduced block by block: each block's mean and sum of squared
deviations :math:`M_2` are computed from the block itself, and blocks are
merged with the parallel update of Chan, Golub and LeVeque,

.. math::
   n = n_a + n_b,\qquad
   \delta = \bar x_b - \bar x_a,\qquad
   \bar x = \bar x_a + \delta\,\frac{n_b}{n},\qquad
   M_2 = M_{2,a} + M_{2,b} + \delta^2\,\frac{n_a n_b}{n}.

Arbitrary iterators (and weighted samples) use the single-pass weighted
Welford update. Neither path uses the cancellation-prone
:math:`\sum x^2 - (\sum x)^2/n` formula.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from itertools import zip_longest
from numbers import Integral, Real
from typing import Optional, Union

import numpy as np

from .context import NanPolicy, as_nan_policy, clean_sample
from .errors import ComputationError, DomainError, InputError, NonFiniteInputError

logger = logging.getLogger(__name__)

__all__ = ["SampleMoments", "moments", "combine", "make_blocks"]

_BLOCK_SIZE = 10_000
_MISSING = object()


def make_blocks(n: int, block_size: int = _BLOCK_SIZE) -> list[tuple[int, int]]:
    r"""
    Partition an integer range :math:`[0, n)` into half-open blocks :math:`(i, j)`.

    Parameters
    ----------
    n : int
        Total number of items.
    block_size : int, default: 10_000
        Target block length.

    Returns
    -------
    list of tuple[int, int]
        List of ``(i, j)`` index pairs covering ``[0, n)``.

    Examples
    --------
    >>> make_blocks(5, block_size=2)
    [(0, 2), (2, 4), (4, 5)]
    """
    if block_size <= 0:
        raise DomainError("block_size must be positive")
    blocks = []
    i = 0
    while i < n:
        j = min(i + block_size, n)
        blocks.append((i, j))
        i = j
    return blocks


@dataclass(frozen=True)
class SampleMoments:
    r"""
    Sufficient statistics of a non-empty sample.

    Attributes
    ----------
    count : int
        Number of observations, at least 1.
    mean : float
        Sample mean :math:`\bar X`.
    variance : float
        Sample variance with Bessel correction,
        :math:`s^2 = \frac{1}{n-1}\sum_i (x_i-\bar X)^2`; ``0.0`` when ``count == 1``.
    min, max : float, optional
        Smallest and largest observation, when known.

    Notes
    -----
    Instances are immutable. :meth:`merge` (also ``a + b``) returns a new
    instance describing the union of both samples.

    Examples
    --------
    >>> m = moments([14., 15., 15., 15., 16., 18., 22., 23., 24., 25., 25.])
    >>> m.count, round(m.mean, 4), round(m.variance, 5)
    (11, 19.2727, 20.41818)
    """

    count: int
    mean: float
    variance: float
    min: Optional[float] = None
    max: Optional[float] = None

    def __post_init__(self) -> None:
        if isinstance(self.count, bool) or not isinstance(self.count, Integral):
            raise InputError(f"count must be an integer, got {self.count!r}")
        if self.count < 1:
            raise InputError("count must be positive")
        object.__setattr__(self, "count", int(self.count))
        if not (math.isfinite(self.mean) and math.isfinite(self.variance)):
            raise NonFiniteInputError("mean and variance must be finite")
        if self.variance < 0:
            raise DomainError("variance must be non-negative")

    @classmethod
    def from_m2(
        cls,
        count: int,
        mean: float,
        m2: float,
        lo: Optional[float] = None,
        hi: Optional[float] = None,
    ) -> "SampleMoments":
        r"""
        Build from the sum of squared deviations :math:`M_2`.

        A slightly negative :math:`M_2` (floating-point residue) is clamped to zero.
        """
        m2 = max(m2, 0.0)
        variance = m2 / (count - 1) if count > 1 else 0.0
        return cls(count, float(mean), float(variance), lo, hi)

    @classmethod
    def from_sums(
        cls,
        count: int,
        total: float,
        total_sq: float,
        lo: Optional[float] = None,
        hi: Optional[float] = None,
    ) -> "SampleMoments":
        r"""
        Build from the sample size, sum, and sum of squares.

        Parameters
        ----------
        count : int
            Sample size.
        total : float
            :math:`\sum_i x_i`.
        total_sq : float
            :math:`\sum_i x_i^2`.
        lo, hi : float, optional
            Smallest and largest observation, when known.

        Notes
        -----
        Prefer :func:`moments` when the raw data is available: recovering
        :math:`M_2 = \sum x^2 - (\sum x)^2/n` from sums loses precision for
        samples with a large mean relative to their spread.

        Raises
        ------
        InputError
            If ``count`` is not positive.
        """
        if count < 1:
            raise InputError("arg `count` must be positive")
        total = _check_real(total, "total")
        total_sq = _check_real(total_sq, "total_sq")
        mean = total / count
        m2 = total_sq - total * mean
        return cls.from_m2(count, mean, m2, lo, hi)

    @property
    def m2(self) -> float:
        r"""Sum of squared deviations from the mean, :math:`(n-1)\,s^2`."""
        return self.variance * (self.count - 1)

    @property
    def sum(self) -> float:
        """Sample sum."""
        return self.mean * self.count

    @property
    def population_variance(self) -> float:
        r"""Population variance :math:`M_2 / n`."""
        return self.m2 / self.count

    @property
    def stdev(self) -> float:
        """Sample standard deviation (``ddof=1``)."""
        return math.sqrt(self.variance)

    @property
    def standard_error(self) -> float:
        r"""Standard error of the mean, :math:`s/\sqrt{n}`."""
        return math.sqrt(self.variance / self.count)

    def merge(self, other: "SampleMoments") -> "SampleMoments":
        """Return the moments of the union of both samples. See :func:`combine`."""
        return combine(self, other)

    def __add__(self, other: object) -> "SampleMoments":
        if not isinstance(other, SampleMoments):
            return NotImplemented
        return combine(self, other)


def _check_real(value: float, name: str) -> float:
    out = float(value)
    if not math.isfinite(out):
        raise NonFiniteInputError(f"arg `{name}` must be finite")
    return out


def _constant(count: int, value: float) -> SampleMoments:
    # mean is the observed value itself, variance exactly zero
    return SampleMoments(count, value, 0.0, value, value)


def _merge_extreme(a: Optional[float], b: Optional[float], pick) -> Optional[float]:
    if a is None:
        return b
    if b is None:
        return a
    return pick(a, b)


def combine(a: SampleMoments, b: SampleMoments) -> SampleMoments:
    r"""
    Merge two moment summaries in constant time.

    Parameters
    ----------
    a, b : SampleMoments
        Summaries of two samples.

    Returns
    -------
    SampleMoments
        Summary of the concatenated sample. Associative and commutative up to
        floating-point rounding (relative differences well below ``1e-9``).

    Raises
    ------
    ComputationError
        If the merged moments overflow double precision.

    Examples
    --------
    >>> ab = combine(moments([1.0, 2.0]), moments([3.0, 4.0]))
    >>> ab.count, ab.mean, round(ab.variance, 12)
    (4, 2.5, 1.666666666667)
    """
    n = a.count + b.count
    if a.min is not None and a.min == a.max == b.min == b.max:
        return _constant(n, a.min)
    delta = b.mean - a.mean
    mean = a.mean + delta * (b.count / n)
    m2 = a.m2 + b.m2 + delta * delta * (a.count / n) * b.count
    if not (math.isfinite(mean) and math.isfinite(m2)):
        raise ComputationError("moments overflow double precision")
    return SampleMoments.from_m2(
        n,
        mean,
        m2,
        _merge_extreme(a.min, b.min, min),
        _merge_extreme(a.max, b.max, max),
    )


def _block_moments(arr: np.ndarray) -> SampleMoments:
    acc: Optional[SampleMoments] = None
    with np.errstate(over="ignore", invalid="ignore"):
        for i, j in make_blocks(arr.size):
            block = arr[i:j]
            lo, hi = float(block.min()), float(block.max())
            if lo == hi:
                part = _constant(j - i, lo)
            else:
                mean = float(np.mean(block))
                dev = block - mean
                m2 = float(np.dot(dev, dev))
                if not (math.isfinite(mean) and math.isfinite(m2)):
                    raise ComputationError("moments overflow double precision")
                part = SampleMoments.from_m2(j - i, mean, m2, lo, hi)
            acc = part if acc is None else combine(acc, part)
    return acc


def _as_count(c: object) -> int:
    if isinstance(c, bool):
        raise InputError(f"counts must be positive integers, got {c!r}")
    if isinstance(c, Integral):
        value = int(c)
    elif isinstance(c, Real) and float(c).is_integer():
        value = int(c)
    else:
        raise InputError(f"counts must be positive integers, got {c!r}")
    if value <= 0:
        raise InputError(f"counts must be positive integers, got {value}")
    return value


def _welford(pairs: Iterable[tuple[object, int]], policy: NanPolicy) -> SampleMoments:
    n = 0
    mean = 0.0
    m2 = 0.0
    lo = math.inf
    hi = -math.inf
    dropped = 0
    for raw, w in pairs:
        try:
            x = float(raw)
        except (TypeError, ValueError):
            raise InputError("sample must contain only real numbers") from None
        if not math.isfinite(x):
            if policy is NanPolicy.raise_:
                raise NonFiniteInputError("sample contains NaN or infinite values")
            dropped += 1
            continue
        n += w
        delta = x - mean
        mean += delta * (w / n)
        m2 += w * delta * (x - mean)
        lo = x if x < lo else lo
        hi = x if x > hi else hi
    if dropped:
        logger.debug("Dropped %d non-finite values from sample", dropped)
    if n == 0:
        raise InputError("sample must contain at least one observation")
    if lo == hi:
        return _constant(n, lo)
    if not (math.isfinite(mean) and math.isfinite(m2)):
        raise ComputationError("moments overflow double precision")
    return SampleMoments.from_m2(n, mean, m2, lo, hi)


def _pair_with_counts(values: Iterable[object], counts: Iterable[object]):
    for x, c in zip_longest(values, counts, fillvalue=_MISSING):
        if x is _MISSING or c is _MISSING:
            raise InputError("values and counts must have the same length")
        yield x, _as_count(c)


def moments(
    values: Union[Iterable[float], np.ndarray],
    counts: Optional[Iterable[int]] = None,
    *,
    nan_policy: Union[NanPolicy, str] = NanPolicy.raise_,
) -> SampleMoments:
    r"""
    Reduce a sample to its :class:`SampleMoments`.

    Parameters
    ----------
    values : iterable of float
        Observations. Lists, tuples, numpy arrays, and one-shot iterators are
        accepted.
    counts : iterable of int, optional
        Positive integer multiplicity of each value, in the same order.
    nan_policy : {"raise", "omit"}, default "raise"
        ``"raise"`` rejects NaN/inf with
        :class:`~basicstats.core.errors.NonFiniteInputError`; ``"omit"`` drops
        them (with their counts).

    Returns
    -------
    SampleMoments

    Raises
    ------
    InputError
        If the sample is empty, a count is not a positive integer, or
        ``values`` and ``counts`` differ in length.
    NonFiniteInputError
        If a non-finite value is present and ``nan_policy="raise"``.

    Examples
    --------
    >>> moments([1.0, 3.0], counts=[2, 1]).mean == moments([1.0, 1.0, 3.0]).mean
    True
    """
    policy = as_nan_policy(nan_policy)
    if isinstance(values, SampleMoments):
        return values
    if counts is not None:
        return _welford(_pair_with_counts(values, counts), policy)
    if isinstance(values, (np.ndarray, Sequence)) and not isinstance(values, (str, bytes)):
        return _block_moments(clean_sample(values, policy))
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        raise InputError("sample must be an iterable of real numbers")
    return _welford(((x, 1) for x in values), policy)
