r"""
basicstats.binomial
===================
Inference for a binomial proportion.

This module defines:

- :func:`binomial_test`, :func:`binomial_p`: exact binomial test.
- :func:`proportion_z_test`: normal-approximation test of a proportion.
- :func:`clopper_pearson_ci`, :func:`wilson_ci`: two-sided confidence intervals.

Notes
-----
The exact test works in log space. With :math:`X \sim \mathrm{Binomial}(n, p_0)`,

.. math::
   \log P(X = i) = \log\binom{n}{i} + i\log p_0 + (n-i)\,\mathrm{log1p}(-p_0),

the binomial coefficient coming from :func:`scipy.special.gammaln`, and tail
sums are taken with :func:`scipy.special.logsumexp`. The two-sided p-value
sums every outcome no more probable than the observed one, with a relative
tolerance of :math:`10^{-7}` on the comparison.
"""

from __future__ import annotations

import logging
import math
from numbers import Integral
from typing import Union

import numpy as np
from scipy.special import betaincinv, gammaln, logsumexp

from .core.context import TestContext, check_finite
from .core.decision import Ci, Tail, TestOutcome, as_tail, decide, decide_p
from .core.distributions import z_alpha, z_to_p
from .core.errors import DomainError, InputError

logger = logging.getLogger(__name__)

__all__ = [
    "binomial_test",
    "binomial_p",
    "proportion_z_test",
    "clopper_pearson_ci",
    "wilson_ci",
]

_REL_ERR = 1e-7


def _check_counts(k: int, n: int) -> tuple[int, int]:
    for name, value in (("k", k), ("n", n)):
        if isinstance(value, bool) or not isinstance(value, Integral):
            raise InputError(f"arg `{name}` must be an integer, got {value!r}")
    if n < 1:
        raise InputError("arg `n` must be positive")
    if k < 0:
        raise DomainError("arg `k` must be non-negative")
    if k > n:
        raise DomainError("arg `k` must not exceed arg `n`")
    return int(k), int(n)


def _check_p0(p0: float) -> float:
    p0 = check_finite(p0, "p0")
    if not (0.0 <= p0 <= 1.0):
        raise DomainError("arg `p0` must be in interval [0, 1]")
    return p0


def _log_pmf(n: int, p0: float) -> np.ndarray:
    i = np.arange(n + 1, dtype=float)
    log_coef = gammaln(n + 1.0) - gammaln(i + 1.0) - gammaln(n - i + 1.0)
    return log_coef + i * math.log(p0) + (n - i) * math.log1p(-p0)


def _point_mass_p(k: int, n: int, p0: float, tail: Tail) -> float:
    atom = 0 if p0 == 0.0 else n
    logger.debug("binomial_p: p0=%g is a point mass at %d", p0, atom)
    if tail is Tail.lower:
        return 1.0 if k >= atom else 0.0
    if tail is Tail.upper:
        return 1.0 if k <= atom else 0.0
    return 1.0 if k == atom else 0.0


def binomial_p(k: int, n: int, p0: float, tail: Union[Tail, str]) -> float:
    r"""
    Exact binomial p-value.

    Parameters
    ----------
    k : int
        Number of successes, :math:`0 \le k \le n`.
    n : int
        Number of trials, positive.
    p0 : float
        Success probability under the null hypothesis, in :math:`[0, 1]`.
    tail : {"lower", "upper", "two-sided"}
        ``lower`` is :math:`P(X \le k)`, ``upper`` is :math:`P(X \ge k)`.

    Returns
    -------
    float
        p-value in :math:`[0, 1]`.

    Raises
    ------
    InputError
        If ``n == 0``.
    DomainError
        If ``k > n``, ``k < 0``, or ``p0`` is outside :math:`[0, 1]`.

    Examples
    --------
    >>> round(binomial_p(40, 100, 0.5, "lower"), 5)
    0.02844
    """
    tail = as_tail(tail)
    k, n = _check_counts(k, n)
    p0 = _check_p0(p0)
    if p0 in (0.0, 1.0):
        return _point_mass_p(k, n, p0, tail)

    log_pmf = _log_pmf(n, p0)
    if tail is Tail.lower:
        log_p = logsumexp(log_pmf[: k + 1])
    elif tail is Tail.upper:
        log_p = logsumexp(log_pmf[k:])
    else:
        mask = log_pmf <= log_pmf[k] + math.log1p(_REL_ERR)
        log_p = logsumexp(log_pmf[mask])
    return min(1.0, math.exp(float(log_p)))


def clopper_pearson_ci(
    k: int,
    n: int,
    alpha: float,
    tail: Union[Tail, str] = Tail.two_sided,
) -> Ci:
    r"""
    Clopper-Pearson ("exact") interval for a binomial proportion.

    .. math::
       \left[\,B^{-1}\!\left(\tfrac{\alpha}{2};\,k,\,n-k+1\right),\;
              B^{-1}\!\left(1-\tfrac{\alpha}{2};\,k+1,\,n-k\right)\right]

    where :math:`B^{-1}` is the inverse regularized incomplete beta function.
    The lower bound is 0 when ``k == 0`` and the upper bound is 1 when ``k == n``.

    For ``tail="lower"`` the interval is :math:`[0, B^{-1}(1-\alpha;\,k+1,\,n-k)]`,
    for ``tail="upper"`` it is :math:`[B^{-1}(\alpha;\,k,\,n-k+1), 1]`.
    """
    ctx = TestContext(alpha=alpha, tail=tail)
    k, n = _check_counts(k, n)
    q = ctx.critical_alpha
    lo = 0.0 if k == 0 or ctx.tail is Tail.lower else float(betaincinv(k, n - k + 1, q))
    hi = 1.0 if k == n or ctx.tail is Tail.upper else float(betaincinv(k + 1, n - k, 1.0 - q))
    return Ci(lo, hi)


def wilson_ci(
    k: int,
    n: int,
    alpha: float,
    tail: Union[Tail, str] = Tail.two_sided,
) -> Ci:
    r"""
    Wilson score interval (no continuity correction).

    With :math:`z = z_{\alpha/2}` (two-sided) or :math:`z_\alpha` (one-sided)
    and :math:`\hat p = k/n`,

    .. math::
       \frac{2n\hat p + z^2 \pm z\sqrt{z^2 + 4n\hat p(1-\hat p)}}{2(n + z^2)}.

    ``tail="lower"`` replaces the low end with 0 and ``tail="upper"`` the high
    end with 1.
    """
    ctx = TestContext(alpha=alpha, tail=tail)
    k, n = _check_counts(k, n)
    z = z_alpha(ctx.critical_alpha)
    p_hat = k / n
    base = 2.0 * n * p_hat + z * z
    delta = z * math.sqrt(z * z + 4.0 * n * p_hat * (1.0 - p_hat))
    denom = 2.0 * (n + z * z)
    lo = 0.0 if ctx.tail is Tail.lower else max(0.0, (base - delta) / denom)
    hi = 1.0 if ctx.tail is Tail.upper else min(1.0, (base + delta) / denom)
    return Ci(lo, hi)


def binomial_test(
    k: int,
    n: int,
    p0: float,
    *,
    tail: Union[Tail, str],
    alpha: float,
) -> TestOutcome:
    r"""
    Exact binomial test of :math:`H_0: p = p_0`.

    Parameters
    ----------
    k : int
        Number of successes.
    n : int
        Number of trials.
    p0 : float
        Success probability under the null hypothesis, in :math:`[0, 1]`.
    tail : {"lower", "upper", "two-sided"}
        Tail configuration of the alternative.
    alpha : float
        Significance level in :math:`(0, 1)`.

    Returns
    -------
    TestOutcome
        Statistic ``k``, the exact p-value, and the two-sided Clopper-Pearson
        interval for :math:`p`. A two-sided rejection points to the side of
        :math:`k - n p_0`.

    Examples
    --------
    >>> binomial_test(40, 100, 0.5, tail="two-sided", alpha=0.05).rejected
    False
    """
    ctx = TestContext(alpha=alpha, tail=tail)
    p_value = binomial_p(k, n, p0, ctx.tail)
    accepted = decide_p(p_value, ctx.alpha, ctx.tail, k - n * p0)
    ci = clopper_pearson_ci(k, n, ctx.alpha)
    return TestOutcome(float(k), p_value, accepted, ctx.alpha, ctx.tail, None, ci, "exact")


def proportion_z_test(
    k: int,
    n: int,
    p0: float,
    *,
    tail: Union[Tail, str],
    alpha: float,
) -> TestOutcome:
    r"""
    Normal-approximation test of a proportion.

    .. math::
       z = \frac{\hat p - p_0}{\sqrt{p_0 (1 - p_0) / n}}

    Requires :math:`p_0 \in (0, 1)`. The interval is the two-sided Wilson
    score interval.

    Raises
    ------
    DomainError
        If ``p0`` is not strictly inside :math:`(0, 1)`.
    """
    ctx = TestContext(alpha=alpha, tail=tail)
    k, n = _check_counts(k, n)
    p0 = check_finite(p0, "p0")
    if not (0.0 < p0 < 1.0):
        raise DomainError("arg `p0` must be in interval (0, 1)")

    z = (k / n - p0) / math.sqrt(p0 * (1.0 - p0) / n)
    p_value = z_to_p(z, ctx.tail)
    accepted = decide(z, z_alpha(ctx.critical_alpha), ctx.tail)
    ci = wilson_ci(k, n, ctx.alpha)
    return TestOutcome(z, p_value, accepted, ctx.alpha, ctx.tail, None, ci, "z")
