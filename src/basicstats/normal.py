r"""
basicstats.normal
=================
Tests and confidence intervals for means of (approximately) normal samples.

This module defines:

- :func:`z_test`: one-sample test with known population variance.
- :func:`t_test`: Student one-sample test.
- :func:`welch_test`: Welch two-sample test against a hypothesized difference ``d0``.
- :func:`welch_df`, :func:`mean_ci`, :func:`welch_ci`: supporting quantities.

Every sample argument accepts either raw observations or a precomputed
:class:`~basicstats.core.moments.SampleMoments`.

Shared rules
------------
The statistic is :math:`(\text{observed} - \text{hypothesized}) / SE`. The
decision compares it against the critical value of the configured tail and
the reported p-value comes from the matching tail function. The confidence
interval attached to a test outcome is always the two-sided
:math:`(1-\alpha)` interval. The standalone :func:`mean_ci` and :func:`welch_ci`
take a ``tail`` and return the one-sided bound for ``lower`` or ``upper``,
with the other end infinite.

A zero standard error is only meaningful when the observed value equals the
hypothesis: the outcome is then a statistic of ``0.0`` with ``p = 1``.
Any other difference over a zero standard error raises
:class:`~basicstats.core.errors.DomainError`.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from typing import Optional, Union

from .core.context import NanPolicy, TestContext, check_finite
from .core.decision import AcceptedHyp, Ci, Tail, TestOutcome, decide
from .core.distributions import t_alpha, t_to_p, z_alpha, z_to_p
from .core.errors import ComputationError, DomainError, InputError
from .core.moments import SampleMoments, moments

logger = logging.getLogger(__name__)

__all__ = ["z_test", "t_test", "welch_test", "welch_df", "mean_ci", "welch_ci"]

SampleLike = Union[Iterable[float], SampleMoments]


def _as_moments(sample: SampleLike, nan_policy: Union[NanPolicy, str]) -> SampleMoments:
    if isinstance(sample, SampleMoments):
        return sample
    return moments(sample, nan_policy=nan_policy)


def _require_two(m: SampleMoments, name: str) -> None:
    if m.count < 2:
        raise InputError(f"{name} must contain at least two observations, got {m.count}")


def _standardize(diff: float, se: float) -> Optional[float]:
    """Return ``diff / se``, or ``None`` for the degenerate zero-over-zero case."""
    if not math.isfinite(diff):
        raise ComputationError("mean difference overflows double precision")
    if se == 0.0:
        if diff == 0.0:
            return None
        raise DomainError("zero standard error with a non-zero difference from the hypothesis")
    stat = diff / se
    if not math.isfinite(stat):
        raise ComputationError("test statistic overflows double precision")
    return stat


def _interval(center: float, half_width: float, tail: Tail = Tail.two_sided) -> Ci:
    lo, hi = center - half_width, center + half_width
    if not (math.isfinite(lo) and math.isfinite(hi)):
        raise ComputationError("confidence interval overflows double precision")
    if tail is Tail.lower:
        return Ci(-math.inf, hi)
    if tail is Tail.upper:
        return Ci(lo, math.inf)
    return Ci(lo, hi)


def _outcome(
    diff: float,
    se: float,
    ctx: TestContext,
    df: Optional[float],
    ci: Ci,
    method: str,
) -> TestOutcome:
    stat = _standardize(diff, se)
    if stat is None:
        logger.warning("%s test: zero standard error, observed value equals the hypothesis", method)
        return TestOutcome(0.0, 1.0, AcceptedHyp.no_difference, ctx.alpha, ctx.tail, df, ci, method)

    if df is None:
        critical = z_alpha(ctx.critical_alpha)
        p_value = z_to_p(stat, ctx.tail)
    else:
        critical = t_alpha(df, ctx.critical_alpha)
        p_value = t_to_p(stat, df, ctx.tail)
    accepted = decide(stat, critical, ctx.tail)
    return TestOutcome(stat, p_value, accepted, ctx.alpha, ctx.tail, df, ci, method)


def z_test(
    sample: SampleLike,
    mu0: float,
    variance: float,
    *,
    tail: Union[Tail, str],
    alpha: float,
    nan_policy: Union[NanPolicy, str] = NanPolicy.raise_,
) -> TestOutcome:
    r"""
    One-sample z-test for the mean with known population variance.

    Parameters
    ----------
    sample : iterable of float or SampleMoments
        Observations.
    mu0 : float
        Hypothesized mean.
    variance : float
        Known population variance :math:`\sigma^2 > 0`.
    tail : {"lower", "upper", "two-sided"}
        Tail configuration of the alternative.
    alpha : float
        Significance level in :math:`(0, 1)`.
    nan_policy : {"raise", "omit"}, default "raise"

    Returns
    -------
    TestOutcome
        Statistic :math:`z = (\bar X - \mu_0)/\sqrt{\sigma^2/n}` and the
        interval :math:`\bar X \pm z_{\alpha/2}\,\sigma/\sqrt{n}`.

    Raises
    ------
    DomainError
        If ``variance <= 0`` or ``alpha`` is outside :math:`(0, 1)`.
    """
    ctx = TestContext(alpha=alpha, tail=tail, nan_policy=nan_policy)
    mu0 = check_finite(mu0, "mu0")
    variance = check_finite(variance, "variance")
    if variance <= 0:
        raise DomainError("arg `variance` must be positive")
    m = _as_moments(sample, ctx.nan_policy)

    se = math.sqrt(variance / m.count)
    ci = _interval(m.mean, z_alpha(ctx.alpha / 2.0) * se)
    return _outcome(m.mean - mu0, se, ctx, None, ci, "z")


def mean_ci(
    sample: SampleLike,
    alpha: float,
    tail: Union[Tail, str] = Tail.two_sided,
    *,
    nan_policy: Union[NanPolicy, str] = NanPolicy.raise_,
) -> Ci:
    r"""
    Student-t confidence interval for the mean.

    .. math::
       \bar X \pm t_{n-1,\,\alpha/2}\, \frac{s}{\sqrt{n}}

    Parameters
    ----------
    sample : iterable of float or SampleMoments
        Observations, at least two.
    alpha : float
        Confidence level is :math:`1-\alpha`.
    tail : {"lower", "upper", "two-sided"}, default "two-sided"
        Alternative the interval accompanies. ``lower`` gives
        :math:`(-\infty, \bar X + t_{n-1,\alpha}\,s/\sqrt{n})` and ``upper``
        the mirror image.

    Raises
    ------
    InputError
        If the sample has fewer than two observations.
    """
    ctx = TestContext(alpha=alpha, tail=tail, nan_policy=nan_policy)
    m = _as_moments(sample, ctx.nan_policy)
    _require_two(m, "sample")
    half_width = t_alpha(m.count - 1, ctx.critical_alpha) * m.standard_error
    return _interval(m.mean, half_width, ctx.tail)


def t_test(
    sample: SampleLike,
    mu0: float,
    *,
    tail: Union[Tail, str],
    alpha: float,
    nan_policy: Union[NanPolicy, str] = NanPolicy.raise_,
) -> TestOutcome:
    r"""
    Student one-sample t-test for the mean.

    Parameters
    ----------
    sample : iterable of float or SampleMoments
        Observations, at least two.
    mu0 : float
        Hypothesized mean.
    tail : {"lower", "upper", "two-sided"}
        Tail configuration of the alternative.
    alpha : float
        Significance level in :math:`(0, 1)`.
    nan_policy : {"raise", "omit"}, default "raise"

    Returns
    -------
    TestOutcome
        Statistic :math:`t = (\bar X - \mu_0)/(s/\sqrt{n})` with
        :math:`n-1` degrees of freedom.

    Raises
    ------
    InputError
        If the sample has fewer than two observations.

    Examples
    --------
    >>> t_test([5.0, 5.0, 5.0, 5.0], 5.0, tail="two-sided", alpha=0.05).accepted
    <AcceptedHyp.no_difference: 'no-difference'>
    """
    ctx = TestContext(alpha=alpha, tail=tail, nan_policy=nan_policy)
    mu0 = check_finite(mu0, "mu0")
    m = _as_moments(sample, ctx.nan_policy)
    _require_two(m, "sample")

    df = float(m.count - 1)
    se = m.standard_error
    ci = _interval(m.mean, t_alpha(df, ctx.alpha / 2.0) * se)
    return _outcome(m.mean - mu0, se, ctx, df, ci, "student")


def _welch_parts(mx: SampleMoments, my: SampleMoments) -> tuple[float, float]:
    """Return the standard error of the mean difference and the Welch-Satterthwaite df."""
    _require_two(mx, "x")
    _require_two(my, "y")
    sx = mx.variance / mx.count
    sy = my.variance / my.count
    total = sx + sy
    if total == 0.0:
        return 0.0, float(mx.count + my.count - 2)
    # shares of the total variance keep the ratio free of underflow
    a = sx / total
    b = sy / total
    df = 1.0 / (a * a / (mx.count - 1) + b * b / (my.count - 1))
    return math.sqrt(total), df


def welch_df(
    x: SampleLike,
    y: SampleLike,
    *,
    nan_policy: Union[NanPolicy, str] = NanPolicy.raise_,
) -> float:
    r"""
    Welch-Satterthwaite degrees of freedom.

    .. math::
       \nu = \frac{\left(s_x^2/n_x + s_y^2/n_y\right)^2}
                  {\frac{(s_x^2/n_x)^2}{n_x-1} + \frac{(s_y^2/n_y)^2}{n_y-1}}

    Falls back to :math:`n_x + n_y - 2` when both sample variances are zero.
    """
    return _welch_parts(_as_moments(x, nan_policy), _as_moments(y, nan_policy))[1]


def welch_ci(
    x: SampleLike,
    y: SampleLike,
    alpha: float,
    tail: Union[Tail, str] = Tail.two_sided,
    *,
    nan_policy: Union[NanPolicy, str] = NanPolicy.raise_,
) -> Ci:
    r"""
    :math:`(1-\alpha)` confidence interval for :math:`\mu_x - \mu_y`.

    Two-sided by default; ``tail="lower"`` or ``"upper"`` gives the one-sided
    bound with an infinite other end, as in :func:`mean_ci`.
    """
    ctx = TestContext(alpha=alpha, tail=tail, nan_policy=nan_policy)
    mx = _as_moments(x, ctx.nan_policy)
    my = _as_moments(y, ctx.nan_policy)
    se, df = _welch_parts(mx, my)
    return _interval(mx.mean - my.mean, t_alpha(df, ctx.critical_alpha) * se, ctx.tail)


def welch_test(
    x: SampleLike,
    y: SampleLike,
    d0: float = 0.0,
    *,
    tail: Union[Tail, str],
    alpha: float,
    nan_policy: Union[NanPolicy, str] = NanPolicy.raise_,
) -> TestOutcome:
    r"""
    Welch two-sample t-test for :math:`\mu_x - \mu_y = d_0`.

    Parameters
    ----------
    x, y : iterable of float or SampleMoments
        The two samples, each with at least two observations.
    d0 : float, default 0.0
        Hypothesized difference of means.
    tail : {"lower", "upper", "two-sided"}
        Tail configuration of the alternative.
    alpha : float
        Significance level in :math:`(0, 1)`.
    nan_policy : {"raise", "omit"}, default "raise"

    Returns
    -------
    TestOutcome
        Statistic :math:`t = ((\bar X - \bar Y) - d_0)/\sqrt{s_x^2/n_x + s_y^2/n_y}`,
        Welch-Satterthwaite ``df``, and the interval for :math:`\mu_x - \mu_y`.

    Examples
    --------
    >>> welch_test([1., 2., 3.], [4., 5., 6.], -3.0, tail="two-sided", alpha=0.05).statistic
    0.0
    """
    ctx = TestContext(alpha=alpha, tail=tail, nan_policy=nan_policy)
    d0 = check_finite(d0, "d0")
    mx = _as_moments(x, ctx.nan_policy)
    my = _as_moments(y, ctx.nan_policy)
    se, df = _welch_parts(mx, my)

    diff = mx.mean - my.mean
    ci = _interval(diff, t_alpha(df, ctx.alpha / 2.0) * se)
    return _outcome(diff - d0, se, ctx, df, ci, "welch")
