"""
basicstats package public API.

Core services
    :func:`moments`, :class:`SampleMoments`, :func:`combine`: sufficient statistics
    :func:`z_alpha`, :func:`t_alpha`, :func:`z_to_p`, :func:`t_to_p`: critical values and p-values
    :class:`Tail`, :class:`AcceptedHyp`, :class:`TestOutcome`: hypothesis-decision model
    :class:`StatsError` and subclasses: error taxonomy

Test families (imported lazily on first access)
    :mod:`basicstats.normal`: z-test, Student t-test, Welch test
    :mod:`basicstats.binomial`: exact binomial test, proportion z-test, proportion CIs
    :mod:`basicstats.wilcoxon`: Wilcoxon rank-sum / Mann-Whitney test
"""

import logging

from .core import (
    MAX_ITERATIONS,
    AcceptedHyp,
    Ci,
    ComputationError,
    DomainError,
    InputError,
    NanPolicy,
    NonFiniteInputError,
    PositionWrtCi,
    SampleMoments,
    StatsError,
    Tail,
    TestContext,
    TestOutcome,
    binomial_sample,
    combine,
    decide,
    decide_p,
    deterministic_normal_sample,
    deterministic_sample,
    deterministic_uniform_sample,
    iter_with_counts,
    moments,
    normal_ppf,
    normal_sample,
    normal_sf,
    t_alpha,
    t_sf,
    t_to_p,
    z_alpha,
    z_to_p,
)

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

# Test-family names resolved lazily by __getattr__
_LAZY_NAMES = {
    "z_test": "normal",
    "t_test": "normal",
    "welch_test": "normal",
    "welch_df": "normal",
    "mean_ci": "normal",
    "welch_ci": "normal",
    "binomial_test": "binomial",
    "binomial_p": "binomial",
    "clopper_pearson_ci": "binomial",
    "wilson_ci": "binomial",
    "proportion_z_test": "binomial",
    "RankSum": "wilcoxon",
    "rank_sum_test": "wilcoxon",
    "EXACT_THRESHOLD": "wilcoxon",
}


def __getattr__(name: str):
    """Lazy import of the test families."""
    module_name = _LAZY_NAMES.get(name)
    if module_name is not None:
        import importlib  # pylint: disable=import-outside-toplevel

        module = importlib.import_module(f".{module_name}", __name__)
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


# pylint: disable=undefined-all-variable
__all__ = [
    # Errors
    "StatsError",
    "InputError",
    "DomainError",
    "NonFiniteInputError",
    "ComputationError",
    # Configuration and decisions
    "NanPolicy",
    "TestContext",
    "Tail",
    "AcceptedHyp",
    "Ci",
    "PositionWrtCi",
    "TestOutcome",
    "decide",
    "decide_p",
    # Moments
    "SampleMoments",
    "moments",
    "combine",
    "iter_with_counts",
    # Distributions
    "MAX_ITERATIONS",
    "z_alpha",
    "t_alpha",
    "normal_ppf",
    "normal_sf",
    "t_sf",
    "z_to_p",
    "t_to_p",
    # Sampling
    "normal_sample",
    "binomial_sample",
    "deterministic_uniform_sample",
    "deterministic_sample",
    "deterministic_normal_sample",
    # Test families (lazily imported via __getattr__)
    *_LAZY_NAMES,
]
# pylint: enable=undefined-all-variable

__version__ = "0.1.0"
