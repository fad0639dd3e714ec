import numpy as np
import pytest


@pytest.fixture(autouse=True)
def _stable_seed():
    # Keep global state stable for any code that still touches np.random.*
    np.random.seed(42)


@pytest.fixture
def sample_data():
    """Fixture providing seeded normal data for testing"""
    rng = np.random.default_rng(42)
    return rng.normal(5.0, 2.0, 1000)


@pytest.fixture
def welch_data_a():
    """Two samples with similar means and different spreads"""
    x = [14.0, 15.0, 15.0, 15.0, 16.0, 18.0, 22.0, 23.0, 24.0, 25.0, 25.0]
    y = [10.0, 12.0, 14.0, 15.0, 18.0, 22.0, 24.0, 27.0, 31.0, 33.0, 34.0, 34.0, 34.0]
    return x, y


@pytest.fixture
def welch_data_b():
    """Two samples with clearly different means"""
    x = [24.0, 28.0, 32.0, 29.0, 35.0, 36.0, 30.0, 32.0, 25.0, 31.0]
    y = [5.0, 10.0, 25.0, 15.0, 16.0, 20.0]
    return x, y


@pytest.fixture
def student_data():
    """31 observations with mean near 21.4"""
    return [
        20.70, 27.46, 22.15, 19.85, 21.29, 24.75, 20.75, 22.91, 25.34, 20.33, 21.54,
        21.08, 22.14, 19.56, 21.10, 18.04, 24.12, 19.95, 19.72, 18.28, 16.26, 17.46,
        20.53, 22.12, 25.06, 22.44, 19.08, 19.88, 21.39, 22.33, 25.79,
    ]


@pytest.fixture
def book_data():
    """Hollander, Wolfe & Chicken, Example 4.1"""
    x = [0.73, 0.80, 0.83, 1.04, 1.38, 1.45, 1.46, 1.64, 1.89, 1.91]
    y = [0.74, 0.88, 0.90, 1.15, 1.21]
    return x, y


@pytest.fixture
def contrived_data():
    """Two larger samples with many ties between them"""
    x = [
        85., 90., 78., 92., 88., 76., 95., 89., 91., 82., 115., 120., 108., 122., 118., 106.,
        125., 119., 121., 112., 145., 150., 138., 152., 148., 136., 155., 149., 151., 142.,
        175., 180., 168., 182., 178., 166., 185., 179., 181., 172., 205., 210., 198., 212.,
        208., 196., 215., 209., 211., 202.,
    ]
    y = [
        70., 85., 80., 90., 75., 88., 92., 79., 86., 81., 92., 100., 115., 110., 120., 105.,
        118., 122., 109., 116., 111., 122., 130., 145., 140., 150., 135., 148., 152., 139.,
        146., 141., 152., 160., 175., 170., 180., 165., 178., 182., 169., 176., 171., 182.,
        190., 205., 200., 210., 195., 208., 212., 199., 206., 201., 212.,
    ]
    return x, y
