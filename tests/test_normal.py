import math

import pytest

from basicstats.core.decision import AcceptedHyp, Ci, PositionWrtCi, Tail
from basicstats.core.errors import DomainError, InputError, NonFiniteInputError
from basicstats.core.moments import moments
from basicstats.normal import mean_ci, t_test, welch_ci, welch_df, welch_test, z_test

ALPHA = 0.05
EPSILON = 0.00005


class TestWelch:
    """Test the Welch two-sample test against R's t.test"""

    @pytest.mark.parametrize(
        "tail,p,accepted",
        [
            (Tail.lower, 0.07067, AcceptedHyp.no_difference),
            (Tail.two_sided, 0.1413, AcceptedHyp.no_difference),
            (Tail.upper, 0.9293, AcceptedHyp.no_difference),
        ],
    )
    def test_similar_means(self, welch_data_a, tail, p, accepted):
        """Test samples whose means do not differ significantly"""
        x, y = welch_data_a
        out = welch_test(x, y, 0.0, tail=tail, alpha=ALPHA)
        assert out.statistic == pytest.approx(-1.5379, abs=1e-4)
        assert out.df == pytest.approx(18.137, abs=1e-3)
        assert out.p_value == pytest.approx(p, abs=EPSILON)
        assert out.accepted is accepted
        assert out.method == "welch"

    def test_similar_means_ci(self, welch_data_a):
        """Test the two-sided interval for the mean difference"""
        lo, hi = welch_ci(*welch_data_a, ALPHA)
        assert lo == pytest.approx(-10.453875, abs=1e-5)
        assert hi == pytest.approx(1.614714, abs=1e-5)
        out = welch_test(*welch_data_a, tail="upper", alpha=ALPHA)
        assert out.confidence_interval == pytest.approx((lo, hi))

    @pytest.mark.parametrize(
        "tail,p,accepted",
        [
            (Tail.lower, 0.9989, AcceptedHyp.no_difference),
            (Tail.two_sided, 0.00213, AcceptedHyp.upper),
            (Tail.upper, 0.001065, AcceptedHyp.upper),
        ],
    )
    def test_different_means(self, welch_data_b, tail, p, accepted):
        """Test samples whose means differ significantly"""
        x, y = welch_data_b
        out = welch_test(x, y, 0.0, tail=tail, alpha=ALPHA)
        assert out.statistic == pytest.approx(4.7857, abs=1e-4)
        assert out.df == pytest.approx(6.8409, abs=1e-4)
        assert out.p_value == pytest.approx(p, abs=EPSILON)
        assert out.accepted is accepted
        assert out.confidence_interval == pytest.approx((7.57018, 22.49649), abs=1e-5)

    def test_swapped_samples(self, welch_data_b):
        """Test swapping samples mirrors the statistic and the decision"""
        x, y = welch_data_b
        out = welch_test(y, x, 0.0, tail=Tail.lower, alpha=ALPHA)
        assert out.statistic == pytest.approx(-4.7857, abs=1e-4)
        assert out.accepted is AcceptedHyp.lower

    def test_hypothesized_difference(self):
        """Test d0 equal to the observed difference gives no difference"""
        out = welch_test([1.0, 2.0, 3.0], [4.0, 5.0, 6.0], -3.0, tail="two-sided", alpha=ALPHA)
        assert out.statistic == 0.0
        assert out.p_value == pytest.approx(1.0)
        assert out.accepted is AcceptedHyp.no_difference

    def test_d0_shifts_statistic(self, welch_data_b):
        """Test d0 shifts the mean difference"""
        x, y = welch_data_b
        shifted = [v + 15.0 for v in y]
        out = welch_test(x, shifted, 0.0, tail="two-sided", alpha=ALPHA)
        ref = welch_test(x, y, 15.0, tail="two-sided", alpha=ALPHA)
        assert out.statistic == pytest.approx(ref.statistic)
        assert out.p_value == pytest.approx(ref.p_value)

    def test_accepts_moments(self, welch_data_a):
        """Test SampleMoments can stand in for raw samples"""
        x, y = welch_data_a
        raw = welch_test(x, y, tail="two-sided", alpha=ALPHA)
        summarized = welch_test(moments(x), moments(y), tail="two-sided", alpha=ALPHA)
        assert summarized.p_value == pytest.approx(raw.p_value)

    def test_welch_df_zero_variances(self):
        """Test df falls back to nx + ny - 2 when both variances are zero"""
        assert welch_df([2.0, 2.0, 2.0], [5.0, 5.0]) == 3.0

    def test_welch_df_one_zero_variance(self):
        """Test df reduces to n - 1 of the varying sample"""
        assert welch_df([2.0, 2.0, 2.0], [1.0, 3.0, 5.0, 7.0]) == pytest.approx(3.0)

    def test_zero_variance_with_difference(self):
        """Test a non-zero difference over zero standard error raises"""
        with pytest.raises(DomainError, match="zero standard error"):
            welch_test([2.0, 2.0], [5.0, 5.0], 0.0, tail="two-sided", alpha=ALPHA)

    def test_constant_non_dyadic_samples(self):
        """Test constant samples whose difference equals d0 give statistic 0"""
        out = welch_test([0.3] * 5, [0.1] * 4, 0.3 - 0.1, tail="two-sided", alpha=ALPHA)
        assert out.statistic == 0.0
        assert out.p_value == 1.0
        assert out.accepted is AcceptedHyp.no_difference
        assert out.df == 7.0

    @pytest.mark.parametrize("tail", [Tail.lower, Tail.upper])
    def test_one_sided_ci(self, welch_data_b, tail):
        """Test a one-sided interval reuses the two-sided bound at 2 alpha"""
        two_sided = welch_ci(*welch_data_b, 2 * ALPHA)
        ci = welch_ci(*welch_data_b, ALPHA, tail)
        if tail is Tail.lower:
            assert ci.low == -math.inf
            assert ci.high == pytest.approx(two_sided.high, rel=1e-12)
        else:
            assert ci.low == pytest.approx(two_sided.low, rel=1e-12)
            assert ci.high == math.inf

    def test_too_few_observations(self):
        """Test each sample needs two observations"""
        with pytest.raises(InputError):
            welch_test([1.0], [1.0, 2.0], tail="two-sided", alpha=ALPHA)


class TestStudent:
    """Test the Student one-sample test against R's t.test"""

    @pytest.mark.parametrize(
        "mu0,tail,p,accepted",
        [
            (23.0, Tail.lower, 0.0007288, AcceptedHyp.lower),
            (23.0, Tail.two_sided, 0.001458, AcceptedHyp.lower),
            (23.0, Tail.upper, 0.9993, AcceptedHyp.no_difference),
            (21.0, Tail.lower, 0.8061, AcceptedHyp.no_difference),
            (21.0, Tail.two_sided, 0.3879, AcceptedHyp.no_difference),
            (21.0, Tail.upper, 0.1939, AcceptedHyp.no_difference),
            (20.0, Tail.lower, 0.9977, AcceptedHyp.no_difference),
            (20.0, Tail.two_sided, 0.004553, AcceptedHyp.upper),
            (20.0, Tail.upper, 0.002276, AcceptedHyp.upper),
        ],
    )
    def test_against_r(self, student_data, mu0, tail, p, accepted):
        """Test p-values and decisions"""
        out = t_test(student_data, mu0, tail=tail, alpha=ALPHA)
        assert out.df == 30.0
        assert out.p_value == pytest.approx(p, abs=EPSILON)
        assert out.accepted is accepted
        assert out.confidence_interval == pytest.approx((20.46771, 22.33229), abs=1e-5)

    def test_statistic(self, student_data):
        """Test the t statistic"""
        assert t_test(student_data, 23.0, tail="lower", alpha=ALPHA).statistic == pytest.approx(
            -3.505, abs=1e-3
        )
        assert t_test(student_data, 20.0, tail="upper", alpha=ALPHA).statistic == pytest.approx(
            3.0668, abs=1e-4
        )

    def test_mean_ci(self, student_data):
        """Test the standalone interval"""
        assert mean_ci(student_data, ALPHA) == pytest.approx((20.46771, 22.33229), abs=1e-5)

    def test_mean_ci_one_sided(self, student_data):
        """Test one-sided intervals have one infinite end"""
        lower = mean_ci(student_data, ALPHA, "lower")
        upper = mean_ci(student_data, ALPHA, "upper")
        two_sided = mean_ci(student_data, 2 * ALPHA)
        assert lower == pytest.approx((-math.inf, two_sided.high))
        assert upper == pytest.approx((two_sided.low, math.inf))
        assert lower.high < mean_ci(student_data, ALPHA).high

    def test_interval_position(self, student_data):
        """Test locating hypothesized means against the interval"""
        out = t_test(student_data, 21.0, tail="two-sided", alpha=ALPHA)
        assert isinstance(out.confidence_interval, Ci)
        assert out.confidence_interval.position_of(20.0) is PositionWrtCi.below
        assert out.confidence_interval.position_of(21.0) is PositionWrtCi.in_
        assert out.confidence_interval.position_of(23.0) is PositionWrtCi.above

    def test_constant_sample_at_hypothesis(self):
        """Test zero spread exactly at mu0 gives statistic 0"""
        out = t_test([5.0, 5.0, 5.0, 5.0], 5.0, tail="two-sided", alpha=ALPHA)
        assert out.statistic == 0.0
        assert out.p_value == 1.0
        assert out.accepted is AcceptedHyp.no_difference
        assert out.confidence_interval == (5.0, 5.0)

    @pytest.mark.parametrize("values", [[0.1] * 3, [1.1] * 7, [0.3] * 20])
    def test_constant_non_dyadic_sample(self, values):
        """Test a repeated value with no exact binary form at mu0 gives statistic 0"""
        out = t_test(values, values[0], tail="two-sided", alpha=ALPHA)
        assert out.statistic == 0.0
        assert out.p_value == 1.0
        assert out.accepted is AcceptedHyp.no_difference

    def test_constant_sample_off_hypothesis(self):
        """Test zero spread away from mu0 raises DomainError"""
        with pytest.raises(DomainError):
            t_test([5.0, 5.0, 5.0], 4.0, tail="two-sided", alpha=ALPHA)

    def test_single_observation(self):
        """Test one observation raises InputError"""
        with pytest.raises(InputError, match="two observations"):
            t_test([5.0], 5.0, tail="two-sided", alpha=ALPHA)

    def test_non_finite(self):
        """Test NaN handling follows nan_policy"""
        with pytest.raises(NonFiniteInputError):
            t_test([1.0, 2.0, math.nan], 1.5, tail="two-sided", alpha=ALPHA)
        out = t_test([1.0, 2.0, math.nan], 1.5, tail="two-sided", alpha=ALPHA, nan_policy="omit")
        assert out.statistic == 0.0

    def test_bad_alpha(self, student_data):
        """Test alpha outside (0, 1) raises DomainError"""
        with pytest.raises(DomainError):
            t_test(student_data, 21.0, tail="two-sided", alpha=0.0)


class TestZ:
    """Test the z-test with known variance"""

    def test_statistic_and_p(self):
        """Test against the closed form"""
        out = z_test([1.0, 2.0, 3.0, 4.0], 2.0, 1.0, tail="two-sided", alpha=ALPHA)
        assert out.statistic == pytest.approx(1.0)
        assert out.p_value == pytest.approx(0.3173105078629141, rel=1e-9)
        assert out.accepted is AcceptedHyp.no_difference
        assert out.df is None
        assert out.confidence_interval == pytest.approx((2.5 - 0.9799819922700270, 2.5 + 0.9799819922700270))

    def test_rejects(self):
        """Test a large shift is rejected on the right side"""
        out = z_test([10.0, 11.0, 12.0], 0.0, 4.0, tail="upper", alpha=ALPHA)
        assert out.accepted is AcceptedHyp.upper
        out = z_test([10.0, 11.0, 12.0], 0.0, 4.0, tail="lower", alpha=ALPHA)
        assert out.accepted is AcceptedHyp.no_difference

    @pytest.mark.parametrize("variance", [0.0, -1.0])
    def test_bad_variance(self, variance):
        """Test non-positive variance raises DomainError"""
        with pytest.raises(DomainError, match="variance"):
            z_test([1.0, 2.0], 1.0, variance, tail="upper", alpha=ALPHA)

    def test_empty(self):
        """Test empty sample raises InputError"""
        with pytest.raises(InputError):
            z_test([], 0.0, 1.0, tail="upper", alpha=ALPHA)
