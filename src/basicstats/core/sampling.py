r"""
basicstats.core.sampling
========================
Reproducible sample generators for tests, examples, and benchmarks.

Two families are provided:

- **Seeded pseudo-random samples** (:func:`normal_sample`, :func:`binomial_sample`)
  drawn from a :class:`numpy.random.Generator` over a :class:`numpy.random.Philox`
  bit generator seeded by :class:`numpy.random.SeedSequence`. The same seed and
  parameters always produce bit-identical arrays.
- **Deterministic stratified samples** (:func:`deterministic_uniform_sample`,
  :func:`deterministic_sample`, :func:`deterministic_normal_sample`) of size
  :math:`2k^2 - 1`, whose points cover the range evenly at every prefix of the
  sequence.
"""

from __future__ import annotations

from collections.abc import Callable
from numbers import Integral
from typing import Union

import numpy as np

from .context import check_finite
from .distributions import normal_ppf
from .errors import DomainError, InputError

__all__ = [
    "make_rng",
    "normal_sample",
    "binomial_sample",
    "deterministic_uniform_sample",
    "deterministic_sample",
    "deterministic_normal_sample",
]

SeedLike = Union[int, np.random.SeedSequence]


def _check_positive_int(value: object, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InputError(f"arg `{name}` must be an integer, got {value!r}")
    if value < 1:
        raise InputError(f"arg `{name}` must be positive, got {value}")
    return int(value)


def make_rng(seed: SeedLike) -> np.random.Generator:
    r"""
    Build a Philox-backed generator from ``seed``.

    Parameters
    ----------
    seed : int or numpy.random.SeedSequence
        Seed material. Required: there is no entropy-seeded default.
    """
    if seed is None:
        raise InputError("arg `seed` is required for reproducible sampling")
    seed_seq = seed if isinstance(seed, np.random.SeedSequence) else np.random.SeedSequence(seed)
    return np.random.Generator(np.random.Philox(seed_seq))


def normal_sample(seed: SeedLike, size: int, mean: float = 0.0, std: float = 1.0) -> np.ndarray:
    r"""
    Draw ``size`` observations from :math:`\mathcal{N}(\text{mean}, \text{std}^2)`.

    Raises
    ------
    InputError
        If ``size`` is not a positive integer.
    DomainError
        If ``std`` is not positive.

    Examples
    --------
    >>> np.array_equal(normal_sample(7, 100), normal_sample(7, 100))
    True
    """
    size = _check_positive_int(size, "size")
    mean = check_finite(mean, "mean")
    std = check_finite(std, "std")
    if std <= 0:
        raise DomainError("arg `std` must be positive")
    return make_rng(seed).normal(mean, std, size)


def binomial_sample(seed: SeedLike, size: int, n: int, p: float) -> np.ndarray:
    r"""
    Draw ``size`` success counts from :math:`\mathrm{Binomial}(n, p)`.

    Raises
    ------
    InputError
        If ``size`` or ``n`` is not a positive integer.
    DomainError
        If ``p`` is outside :math:`[0, 1]`.
    """
    size = _check_positive_int(size, "size")
    n = _check_positive_int(n, "n")
    p = check_finite(p, "p")
    if not (0.0 <= p <= 1.0):
        raise DomainError("arg `p` must be in interval [0, 1]")
    return make_rng(seed).binomial(n, p, size)


def deterministic_uniform_sample(k: int, low: float = 0.0, high: float = 1.0) -> np.ndarray:
    r"""
    Deterministic stratified sample of the uniform distribution on :math:`(low, high)`.

    Parameters
    ----------
    k : int
        Resolution; the sample has :math:`2k^2 - 1` points.
    low, high : float
        Interval end points. ``low > high`` yields points in :math:`(high, low)`.

    Notes
    -----
    The unit interval is split into :math:`k` buckets of :math:`k` grid points
    on each half of the grid :math:`\{1, \dots, 2k^2-1\}/(2k^2)`. The
    :math:`i`-th point alternates between the left half and its mirror image,
    and cycles through the buckets before advancing within a bucket, so every
    prefix of the sequence is spread over the whole interval.

    Examples
    --------
    >>> deterministic_uniform_sample(1)
    array([0.5])
    >>> deterministic_uniform_sample(2).tolist()
    [0.125, 0.875, 0.375, 0.625, 0.25, 0.75, 0.5]
    """
    k = _check_positive_int(k, "k")
    low = check_finite(low, "low")
    high = check_finite(high, "high")
    grid = 2 * k * k
    i = np.arange(grid - 1, dtype=np.int64)
    side = i % 2
    j = i // 2
    left = (j % k) * k + j // k + 1
    idx = np.where(side == 0, left, grid - left)
    return (high - low) * (idx / grid) + low


def deterministic_sample(inv_cdf: Callable[[float], float], k: int) -> np.ndarray:
    r"""
    Deterministic sample of the distribution with inverse CDF ``inv_cdf``.

    ``inv_cdf`` is applied to each point of :func:`deterministic_uniform_sample`
    on :math:`(0, 1)`.
    """
    u = deterministic_uniform_sample(k)
    return np.fromiter((inv_cdf(float(v)) for v in u), dtype=float, count=u.size)


def deterministic_normal_sample(k: int, mean: float = 0.0, std: float = 1.0) -> np.ndarray:
    r"""Deterministic sample of :math:`\mathcal{N}(\text{mean}, \text{std}^2)` of size :math:`2k^2-1`."""
    mean = check_finite(mean, "mean")
    std = check_finite(std, "std")
    if std <= 0:
        raise DomainError("arg `std` must be positive")
    return mean + std * deterministic_sample(normal_ppf, k)
