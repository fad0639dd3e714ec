r"""
basicstats.wilcoxon
===================
Wilcoxon rank-sum test, also known as the Mann-Whitney U test.

This module defines:

- :class:`RankSum`: rank statistics of two samples, with exact and asymptotic p-values.
- :func:`rank_sum_test`: the test itself, choosing the exact or asymptotic branch.

Conventions
-----------
``w`` is the rank sum of the first sample :math:`X` in the pooled ranking
(mid-ranks for ties). The Mann-Whitney statistics are

.. math::
   U_x = W - \frac{n_x(n_x+1)}{2}, \qquad U_y = n_x n_y - U_x,

so :math:`U_x` counts the pairs with :math:`x_i > y_j` (ties count one half).
This is the ``W`` reported by R's ``wilcox.test(x, y)``. Large values of
:math:`U_x` point to :math:`X` being stochastically larger than :math:`Y`
(the ``upper`` tail).

The asymptotic branch uses the tie-corrected null variance

.. math::
   \sigma^2 = \frac{n_x n_y}{12}\left((N + 1) - \frac{\sum_g (t_g^3 - t_g)}{N(N-1)}\right),
   \qquad N = n_x + n_y,

where :math:`t_g` is the size of tie group :math:`g`.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from numbers import Integral
from typing import Optional, Union

import numpy as np
from scipy.stats import rankdata

from .core.context import NanPolicy, TestContext, check_finite, clean_sample
from .core.decision import Tail, TestOutcome, as_tail, decide_p
from .core.distributions import z_to_p
from .core.errors import DomainError, InputError

logger = logging.getLogger(__name__)

__all__ = ["EXACT_THRESHOLD", "RankSum", "rank_sum_test"]

EXACT_THRESHOLD = 50


def _checked_pairs(items: Iterable[tuple[float, int]], name: str) -> Iterator[tuple[float, int]]:
    prev = None
    for value, count in items:
        value = check_finite(value, f"{name} value")
        if isinstance(count, bool) or not isinstance(count, Integral) or count < 1:
            raise InputError(f"{name}: counts must be positive integers, got {count!r}")
        if prev is not None and not prev < value:
            raise InputError(f"{name}: values must be in strictly increasing order")
        prev = value
        yield value, int(count)


def _u_distribution(m: int, n: int) -> list[int]:
    r"""
    Number of arrangements giving each value of :math:`U` under the null.

    Coefficients of the Gaussian binomial
    :math:`\binom{m+n}{m}_q = \prod_{i=1}^{m} \frac{1 - q^{n+i}}{1 - q^i}`,
    computed as a power series truncated at degree :math:`mn`.
    """
    if m > n:
        m, n = n, m
    top = m * n
    c = [0] * (top + 1)
    c[0] = 1
    for i in range(1, m + 1):
        # multiply by 1 - q^(n+i)
        for j in range(top, n + i - 1, -1):
            c[j] -= c[j - n - i]
        # divide by 1 - q^i
        for j in range(i, top + 1):
            c[j] += c[j - i]
    return c


@dataclass(frozen=True)
class RankSum:
    r"""
    Rank statistics of two samples.

    Attributes
    ----------
    n_x, n_y : int
        Sample sizes, both positive.
    w : float
        Rank sum of the first sample in the pooled ranking.
    tie_term : int
        :math:`\sum_g (t_g^3 - t_g)` over the tie groups of the pooled sample.

    Examples
    --------
    >>> rs = RankSum.from_samples([0.73, 0.80, 0.83, 1.04, 1.38, 1.45, 1.46, 1.64, 1.89, 1.91],
    ...                           [0.74, 0.88, 0.90, 1.15, 1.21])
    >>> rs.u_x, rs.u_y
    (35.0, 15.0)
    """

    n_x: int
    n_y: int
    w: float
    tie_term: int = 0

    def __post_init__(self) -> None:
        if self.n_x < 1 or self.n_y < 1:
            raise InputError("both samples must contain at least one observation")

    @classmethod
    def from_samples(
        cls,
        x: Iterable[float],
        y: Iterable[float],
        *,
        nan_policy: Union[NanPolicy, str] = NanPolicy.raise_,
    ) -> "RankSum":
        """Rank the pooled samples, using mid-ranks for ties."""
        ax = clean_sample(x, nan_policy, name="x")
        ay = clean_sample(y, nan_policy, name="y")
        pooled = np.concatenate([ax, ay])
        ranks = rankdata(pooled, method="average")
        _, group_sizes = np.unique(pooled, return_counts=True)
        tie_term = sum(int(t) ** 3 - int(t) for t in group_sizes if t > 1)
        return cls(ax.size, ay.size, float(ranks[: ax.size].sum()), tie_term)

    @classmethod
    def from_sorted_counts(
        cls,
        itc_x: Iterable[tuple[float, int]],
        itc_y: Iterable[tuple[float, int]],
    ) -> "RankSum":
        r"""
        Build from two streams of ``(value, count)`` pairs.

        Each stream must yield finite values in strictly increasing order with
        positive integer counts, e.g. the output of
        :func:`~basicstats.core.iter.iter_with_counts` over sorted data. The
        streams are merged in a single pass; no sample is materialized.

        Raises
        ------
        InputError
            If a stream is out of order, a count is not a positive integer, or a
            stream is empty.
        """
        it_x = _checked_pairs(itc_x, "x")
        it_y = _checked_pairs(itc_y, "y")
        cur_x = next(it_x, None)
        cur_y = next(it_y, None)
        n_x = n_y = 0
        w = 0.0
        tie_term = 0
        prev_rank = 0
        while cur_x is not None or cur_y is not None:
            if cur_y is None or (cur_x is not None and cur_x[0] < cur_y[0]):
                cx, cy = cur_x[1], 0
                cur_x = next(it_x, None)
            elif cur_x is None or cur_y[0] < cur_x[0]:
                cx, cy = 0, cur_y[1]
                cur_y = next(it_y, None)
            else:
                cx, cy = cur_x[1], cur_y[1]
                cur_x = next(it_x, None)
                cur_y = next(it_y, None)
            t = cx + cy
            w += cx * (prev_rank + (t + 1) / 2.0)
            n_x += cx
            n_y += cy
            tie_term += t * t * t - t
            prev_rank += t
        return cls(n_x, n_y, w, tie_term)

    @property
    def has_ties(self) -> bool:
        return self.tie_term > 0

    @property
    def u_x(self) -> float:
        """Mann-Whitney U of the first sample: pairs with ``x > y``."""
        return self.w - self.n_x * (self.n_x + 1) / 2.0

    @property
    def u_y(self) -> float:
        """Mann-Whitney U of the second sample: pairs with ``y > x``."""
        return self.n_x * self.n_y - self.u_x

    @property
    def u(self) -> float:
        return min(self.u_x, self.u_y)

    @property
    def mean_u(self) -> float:
        r"""Null expectation :math:`n_x n_y / 2`."""
        return self.n_x * self.n_y / 2.0

    @property
    def variance_u(self) -> float:
        r"""Tie-corrected null variance of :math:`U`."""
        n = self.n_x + self.n_y
        return self.n_x * self.n_y / 12.0 * ((n + 1) - self.tie_term / (n * (n - 1)))

    def exact_p(self, tail: Union[Tail, str]) -> float:
        r"""
        p-value from the exact permutation distribution of :math:`U_x`.

        Raises
        ------
        DomainError
            If the samples contain ties.
        """
        tail = as_tail(tail)
        if self.has_ties:
            raise DomainError("exact rank-sum distribution requires samples without ties")
        counts = _u_distribution(self.n_x, self.n_y)
        total = math.comb(self.n_x + self.n_y, self.n_x)
        u = int(round(self.u_x))
        lower = sum(counts[: u + 1]) / total
        upper = sum(counts[u:]) / total
        if tail is Tail.lower:
            return lower
        if tail is Tail.upper:
            return upper
        return min(1.0, 2.0 * min(lower, upper))

    def z(self, tail: Union[Tail, str] = Tail.two_sided, *, correction: bool = True) -> float:
        r"""
        Standardized :math:`U_x` under the normal approximation.

        With ``correction`` the statistic is shifted half a unit toward the
        null expectation: by :math:`\mathrm{sign}(U_x - n_x n_y/2)\cdot\tfrac12`
        for two-sided tests, :math:`+\tfrac12` for ``upper`` and
        :math:`-\tfrac12` for ``lower``.

        Raises
        ------
        DomainError
            If the null variance is not positive (all observations tied).
        """
        tail = as_tail(tail)
        var = self.variance_u
        if not var > 0.0:
            raise DomainError("rank-sum variance is not positive: all observations are tied")
        diff = self.u_x - self.mean_u
        shift = 0.0
        if correction:
            if tail is Tail.upper:
                shift = 0.5
            elif tail is Tail.lower:
                shift = -0.5
            else:
                shift = math.copysign(0.5, diff) if diff != 0.0 else 0.0
        return (diff - shift) / math.sqrt(var)

    def asymptotic_p(self, tail: Union[Tail, str], correction: bool = True) -> float:
        """p-value from the normal approximation. See :meth:`z`."""
        tail = as_tail(tail)
        return z_to_p(self.z(tail, correction=correction), tail)


def rank_sum_test(
    x: Iterable[float],
    y: Iterable[float],
    *,
    tail: Union[Tail, str],
    alpha: float,
    exact: Optional[bool] = None,
    correction: bool = True,
    nan_policy: Union[NanPolicy, str] = NanPolicy.raise_,
) -> TestOutcome:
    r"""
    Wilcoxon rank-sum (Mann-Whitney U) test of two independent samples.

    Parameters
    ----------
    x, y : iterable of float
        The two samples, both non-empty.
    tail : {"lower", "upper", "two-sided"}
        ``upper`` tests whether :math:`X` tends to be larger than :math:`Y`.
    alpha : float
        Significance level in :math:`(0, 1)`.
    exact : bool, optional
        Force the exact (``True``) or asymptotic (``False``) branch. By default
        the exact distribution is used when there are no ties and
        :math:`n_x + n_y \le` :data:`EXACT_THRESHOLD`.
    correction : bool, default True
        Apply the continuity correction in the asymptotic branch.
    nan_policy : {"raise", "omit"}, default "raise"

    Returns
    -------
    TestOutcome
        Statistic :math:`U_x`; ``method`` is ``"exact"`` or ``"asymptotic"``.
        A two-sided rejection points to the side of :math:`U_x - n_x n_y / 2`.

    Raises
    ------
    InputError
        If a sample is empty.
    DomainError
        If ``exact=True`` with tied data, or all observations are tied.

    Notes
    -----
    Swapping ``x`` and ``y`` and mirroring ``tail`` gives the same p-value
    with :math:`U_x` and :math:`U_y` exchanged.
    """
    ctx = TestContext(alpha=alpha, tail=tail, nan_policy=nan_policy)
    rs = RankSum.from_samples(x, y, nan_policy=ctx.nan_policy)
    if exact is None:
        exact = not rs.has_ties and rs.n_x + rs.n_y <= EXACT_THRESHOLD
    logger.debug(
        "rank_sum_test: n_x=%d n_y=%d ties=%s -> %s branch",
        rs.n_x,
        rs.n_y,
        rs.has_ties,
        "exact" if exact else "asymptotic",
    )

    if exact:
        p_value = rs.exact_p(ctx.tail)
        method = "exact"
    else:
        p_value = rs.asymptotic_p(ctx.tail, correction=correction)
        method = "asymptotic"
    accepted = decide_p(p_value, ctx.alpha, ctx.tail, rs.u_x - rs.mean_u)
    return TestOutcome(rs.u_x, p_value, accepted, ctx.alpha, ctx.tail, None, None, method)
