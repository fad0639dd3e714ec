"""Shared services used by every test family."""

from .context import NanPolicy, TestContext, check_alpha, check_finite, clean_sample
from .decision import AcceptedHyp, Ci, PositionWrtCi, Tail, TestOutcome, decide, decide_p
from .distributions import (
    MAX_ITERATIONS,
    normal_ppf,
    normal_sf,
    t_alpha,
    t_sf,
    t_to_p,
    z_alpha,
    z_to_p,
)
from .errors import (
    ComputationError,
    DomainError,
    InputError,
    NonFiniteInputError,
    StatsError,
)
from .iter import iter_with_counts
from .moments import SampleMoments, combine, make_blocks, moments
from .sampling import (
    binomial_sample,
    deterministic_normal_sample,
    deterministic_sample,
    deterministic_uniform_sample,
    normal_sample,
)

__all__ = [
    "StatsError",
    "InputError",
    "DomainError",
    "NonFiniteInputError",
    "ComputationError",
    "NanPolicy",
    "TestContext",
    "check_alpha",
    "check_finite",
    "clean_sample",
    "Tail",
    "AcceptedHyp",
    "Ci",
    "PositionWrtCi",
    "TestOutcome",
    "decide",
    "decide_p",
    "MAX_ITERATIONS",
    "z_alpha",
    "t_alpha",
    "normal_ppf",
    "normal_sf",
    "t_sf",
    "z_to_p",
    "t_to_p",
    "SampleMoments",
    "moments",
    "combine",
    "make_blocks",
    "iter_with_counts",
    "normal_sample",
    "binomial_sample",
    "deterministic_uniform_sample",
    "deterministic_sample",
    "deterministic_normal_sample",
]
