r"""
basicstats.core.decision
========================
Hypothesis-decision model shared by every test family.

This module defines:

- :class:`Tail`: which side(s) of the null distribution form the rejection region.
- :class:`AcceptedHyp`: the tri-state outcome of a test.
- :class:`TestOutcome`: the immutable record returned by every test.
- :class:`Ci`, :class:`PositionWrtCi`: confidence intervals and where a value falls.
- :func:`decide`: resolve a statistic against a critical value.
- :func:`decide_p`: resolve an exact p-value against ``alpha``.

Boundary policy
---------------
A statistic that lands exactly on a critical value, or a p-value exactly
equal to ``alpha``, does **not** reject the null hypothesis.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .errors import DomainError

__all__ = [
    "Tail",
    "AcceptedHyp",
    "PositionWrtCi",
    "Ci",
    "TestOutcome",
    "decide",
    "decide_p",
    "as_tail",
]


class Tail(str, Enum):
    r"""
    Tail configuration of a hypothesis test.

    Attributes
    ----------
    lower : str
        Alternative "less than": reject for small statistics.
    upper : str
        Alternative "greater than": reject for large statistics.
    two_sided : str
        Alternative "not equal": reject for extreme statistics on either side.
    """

    lower = "lower"
    upper = "upper"
    two_sided = "two-sided"

    def mirrored(self) -> "Tail":
        """Return the tail obtained by swapping the roles of the two sides."""
        if self is Tail.lower:
            return Tail.upper
        if self is Tail.upper:
            return Tail.lower
        return self


class AcceptedHyp(str, Enum):
    r"""
    Hypothesis supported by a test at the requested significance level.

    Attributes
    ----------
    lower : str
        The statistic is significantly below the null value.
    no_difference : str
        The null hypothesis is not rejected.
    upper : str
        The statistic is significantly above the null value.
    """

    lower = "lower"
    no_difference = "no-difference"
    upper = "upper"

    def mirrored(self) -> "AcceptedHyp":
        """Return the outcome with the direction reversed."""
        if self is AcceptedHyp.lower:
            return AcceptedHyp.upper
        if self is AcceptedHyp.upper:
            return AcceptedHyp.lower
        return self


def as_tail(tail: Union[Tail, str]) -> Tail:
    r"""
    Coerce ``tail`` to a :class:`Tail`.

    Raises
    ------
    basicstats.core.errors.DomainError
        If ``tail`` names no known tail configuration.
    """
    if isinstance(tail, Tail):
        return tail
    try:
        return Tail(tail)
    except ValueError:
        raise DomainError(
            f"arg `tail` must be one of {[t.value for t in Tail]}, got {tail!r}"
        ) from None


class PositionWrtCi(str, Enum):
    r"""
    Position of a value relative to a confidence interval.

    Attributes
    ----------
    below : str
        At or below the low end.
    in_ : str
        Strictly between the two ends.
    above : str
        At or above the high end.
    """

    below = "below"
    in_ = "in"
    above = "above"


class Ci(tuple):
    r"""
    Confidence interval ``(low, high)``.

    A plain two-element tuple with named ends. One-sided intervals carry an
    infinite end (or 0 / 1 for a proportion).

    Examples
    --------
    >>> ci = Ci(1.0, 3.0)
    >>> ci.position_of(2.0)
    <PositionWrtCi.in_: 'in'>
    >>> ci.position_of(1.0)
    <PositionWrtCi.below: 'below'>
    """

    __slots__ = ()

    def __new__(cls, low: float, high: float) -> "Ci":
        low, high = float(low), float(high)
        if not low <= high:
            raise DomainError(f"interval ends must satisfy low <= high, got ({low}, {high})")
        return super().__new__(cls, (low, high))

    @property
    def low(self) -> float:
        return self[0]

    @property
    def high(self) -> float:
        return self[1]

    def position_of(self, value: float) -> PositionWrtCi:
        """Locate ``value``; a value equal to ``low`` counts as below."""
        if value <= self[0]:
            return PositionWrtCi.below
        if value < self[1]:
            return PositionWrtCi.in_
        return PositionWrtCi.above

    def __getnewargs__(self) -> tuple[float, float]:
        return self[0], self[1]

    def __repr__(self) -> str:
        return f"Ci({self[0]!r}, {self[1]!r})"


@dataclass(frozen=True)
class TestOutcome:
    r"""
    Result of a hypothesis test.

    Attributes
    ----------
    statistic : float
        Test statistic (z, t, number of successes, or Mann-Whitney U).
    p_value : float
        p-value in :math:`[0, 1]` for the configured tail.
    accepted : AcceptedHyp
        Hypothesis supported at level ``alpha``.
    alpha : float
        Significance level used for the decision.
    tail : Tail
        Tail configuration used for the decision.
    df : float, optional
        Degrees of freedom, for t-based tests.
    confidence_interval : Ci, optional
        Two-sided :math:`(1-\alpha)` interval for the tested parameter.
    method : str
        Short label of the procedure (``"z"``, ``"student"``, ``"welch"``,
        ``"exact"``, ``"asymptotic"``).
    """

    __test__ = False  # keep pytest from collecting this class

    statistic: float
    p_value: float
    accepted: AcceptedHyp
    alpha: float
    tail: Tail
    df: Optional[float] = None
    confidence_interval: Optional[Ci] = None
    method: str = ""

    @property
    def rejected(self) -> bool:
        """Whether the null hypothesis was rejected."""
        return self.accepted is not AcceptedHyp.no_difference


def decide(statistic: float, critical: float, tail: Union[Tail, str]) -> AcceptedHyp:
    r"""
    Resolve a standardized statistic against its critical value.

    Parameters
    ----------
    statistic : float
        Standardized test statistic.
    critical : float
        Positive upper-tail critical value :math:`c` for the configured tail,
        e.g. :math:`z_{\alpha}` for one-sided and :math:`z_{\alpha/2}` for
        two-sided tests.
    tail : Tail or str
        Tail configuration. A string is coerced with :func:`as_tail`.

    Returns
    -------
    AcceptedHyp
        ``upper`` if ``statistic > c`` (upper or two-sided tests), ``lower`` if
        ``statistic < -c`` (lower or two-sided tests), otherwise
        ``no_difference``.

    Raises
    ------
    DomainError
        Only when ``tail`` is a string naming no known tail; a :class:`Tail`
        argument never raises.

    Examples
    --------
    >>> decide(2.0, 1.96, Tail.two_sided)
    <AcceptedHyp.upper: 'upper'>
    >>> decide(1.96, 1.96, Tail.two_sided)
    <AcceptedHyp.no_difference: 'no-difference'>
    """
    tail = as_tail(tail)
    if tail is not Tail.lower and statistic > critical:
        return AcceptedHyp.upper
    if tail is not Tail.upper and statistic < -critical:
        return AcceptedHyp.lower
    return AcceptedHyp.no_difference


def decide_p(p_value: float, alpha: float, tail: Union[Tail, str], direction: float) -> AcceptedHyp:
    r"""
    Resolve an exact p-value against ``alpha``.

    Parameters
    ----------
    p_value : float
        p-value for the configured tail.
    alpha : float
        Significance level.
    tail : Tail or str
        Tail configuration. A string is coerced with :func:`as_tail`, which
        raises :class:`DomainError` for an unknown name.
    direction : float
        Observed minus expected value under the null; its sign picks the side
        of a two-sided rejection.

    Returns
    -------
    AcceptedHyp
    """
    tail = as_tail(tail)
    if not p_value < alpha:
        return AcceptedHyp.no_difference
    if tail is Tail.lower:
        return AcceptedHyp.lower
    if tail is Tail.upper:
        return AcceptedHyp.upper
    if direction > 0:
        return AcceptedHyp.upper
    if direction < 0:
        return AcceptedHyp.lower
    return AcceptedHyp.no_difference
