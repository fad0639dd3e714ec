import numpy as np
import pytest
from scipy import stats

from basicstats.core.errors import DomainError, InputError
from basicstats.core.sampling import (
    binomial_sample,
    deterministic_normal_sample,
    deterministic_sample,
    deterministic_uniform_sample,
    make_rng,
    normal_sample,
)


class TestSeededSamples:
    """Test Philox-seeded generators"""

    def test_normal_reproducible(self):
        """Test the same seed gives bit-identical arrays"""
        a = normal_sample(123, 500, mean=2.0, std=3.0)
        b = normal_sample(123, 500, mean=2.0, std=3.0)
        assert np.array_equal(a, b)
        assert a.shape == (500,)

    def test_normal_seed_changes_output(self):
        """Test different seeds give different arrays"""
        assert not np.array_equal(normal_sample(1, 50), normal_sample(2, 50))

    def test_normal_moments(self):
        """Test the sample roughly matches its parameters"""
        data = normal_sample(7, 20_000, mean=5.0, std=2.0)
        assert data.mean() == pytest.approx(5.0, abs=0.1)
        assert data.std(ddof=1) == pytest.approx(2.0, abs=0.1)

    def test_binomial(self):
        """Test binomial draws are reproducible and bounded"""
        a = binomial_sample(9, 200, 10, 0.3)
        assert np.array_equal(a, binomial_sample(9, 200, 10, 0.3))
        assert a.min() >= 0
        assert a.max() <= 10

    def test_make_rng_accepts_seed_sequence(self):
        """Test SeedSequence seeds match integer seeds"""
        a = make_rng(np.random.SeedSequence(5)).random(3)
        b = make_rng(5).random(3)
        assert np.array_equal(a, b)

    def test_validation(self):
        """Test invalid arguments"""
        with pytest.raises(InputError):
            normal_sample(1, 0)
        with pytest.raises(DomainError):
            normal_sample(1, 10, std=0.0)
        with pytest.raises(DomainError):
            binomial_sample(1, 10, 5, 1.5)
        with pytest.raises(InputError):
            binomial_sample(1, 10, 0, 0.5)
        with pytest.raises(InputError):
            make_rng(None)


class TestDeterministicSamples:
    """Test stratified deterministic samples"""

    def test_sequence(self):
        """Test the first points alternate between mirrored halves"""
        assert deterministic_uniform_sample(2).tolist() == [0.125, 0.875, 0.375, 0.625, 0.25, 0.75, 0.5]

    def test_size_and_range(self):
        """Test 2k^2 - 1 distinct points strictly inside the interval"""
        u = deterministic_uniform_sample(10, 1.0, 4.0)
        assert u.size == 199
        assert np.unique(u).size == 199
        assert u.min() > 1.0
        assert u.max() < 4.0

    def test_uniform_ks(self):
        """Test the sample is close to uniform"""
        u = deterministic_uniform_sample(10)
        assert stats.kstest(u, "uniform").pvalue > 0.995

    def test_even_prefix_coverage(self):
        """Test the first 2k points touch every bucket on both halves"""
        k = 6
        u = deterministic_uniform_sample(k)[: 2 * k]
        buckets = np.floor(u * 2 * k).astype(int)
        assert sorted(buckets.tolist()) == list(range(2 * k))

    def test_normal_ks(self):
        """Test the normal sample is close to normal"""
        data = deterministic_normal_sample(10)
        assert stats.kstest(data, "norm").pvalue > 0.995

    def test_generic_inverse_cdf(self):
        """Test an arbitrary inverse CDF is applied pointwise"""
        data = deterministic_sample(lambda v: stats.expon.ppf(v), 3)
        assert data.size == 17
        assert np.allclose(data, stats.expon.ppf(deterministic_uniform_sample(3)))

    def test_normal_parameters(self):
        """Test location and scale"""
        base = deterministic_normal_sample(4)
        shifted = deterministic_normal_sample(4, mean=10.0, std=2.0)
        assert np.allclose(shifted, 10.0 + 2.0 * base)

    def test_bad_k(self):
        """Test non-positive k raises InputError"""
        with pytest.raises(InputError):
            deterministic_uniform_sample(0)
