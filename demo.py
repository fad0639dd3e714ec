from __future__ import annotations

from basicstats import (
    deterministic_normal_sample,
    iter_with_counts,
    moments,
    normal_sample,
    t_alpha,
    z_alpha,
)
from basicstats.binomial import binomial_test, clopper_pearson_ci, wilson_ci
from basicstats.normal import t_test, welch_test
from basicstats.wilcoxon import RankSum, rank_sum_test

ALPHA = 0.05


def show(title: str, outcome):
    print(f"\n{title}")
    print("-" * len(title))
    print(f"  method      : {outcome.method}")
    print(f"  statistic   : {outcome.statistic:.6f}")
    if outcome.df is not None:
        print(f"  df          : {outcome.df:.4f}")
    print(f"  p-value     : {outcome.p_value:.6g}")
    print(f"  accepted    : {outcome.accepted.value}")
    if outcome.confidence_interval is not None:
        lo, hi = outcome.confidence_interval
        print(f"  {100 * (1 - outcome.alpha):.0f}% CI      : [{lo:.6f}, {hi:.6f}]")


def demo_moments():
    print("\nMoments")
    print("-------")
    data = normal_sample(2024, 100_000, mean=10.0, std=2.5)
    m = moments(data)
    print(f"  n={m.count} mean={m.mean:.5f} stdev={m.stdev:.5f} min={m.min:.3f} max={m.max:.3f}")

    halves = moments(data[:50_000]) + moments(data[50_000:])
    print(f"  merged halves: mean={halves.mean:.5f} stdev={halves.stdev:.5f}")

    print(f"  z_alpha(0.05)={z_alpha(ALPHA):.6f} t_alpha(30, 0.05)={t_alpha(30, ALPHA):.6f}")


def demo_normal():
    x = [14.0, 15.0, 15.0, 15.0, 16.0, 18.0, 22.0, 23.0, 24.0, 25.0, 25.0]
    y = [10.0, 12.0, 14.0, 15.0, 18.0, 22.0, 24.0, 27.0, 31.0, 33.0, 34.0, 34.0, 34.0]
    show("Welch two-sample test", welch_test(x, y, 0.0, tail="two-sided", alpha=ALPHA))

    sample = deterministic_normal_sample(5, mean=21.4, std=2.5)
    show("Student one-sample test", t_test(sample, 23.0, tail="lower", alpha=ALPHA))


def demo_binomial():
    show("Exact binomial test", binomial_test(40, 100, 0.5, tail="two-sided", alpha=ALPHA))
    print(f"  Clopper-Pearson: {clopper_pearson_ci(40, 100, ALPHA)}")
    print(f"  Wilson         : {wilson_ci(40, 100, ALPHA)}")
    upper = clopper_pearson_ci(40, 100, ALPHA, tail="upper")
    print(f"  one-sided      : {upper}, 0.5 is {upper.position_of(0.5).value}")


def demo_wilcoxon():
    x = [0.73, 0.80, 0.83, 1.04, 1.38, 1.45, 1.46, 1.64, 1.89, 1.91]
    y = [0.74, 0.88, 0.90, 1.15, 1.21]
    show("Wilcoxon rank-sum test", rank_sum_test(x, y, tail="upper", alpha=ALPHA))

    rs = RankSum.from_sorted_counts(iter_with_counts(sorted(x)), iter_with_counts(sorted(y)))
    print(f"  streamed: W={rs.w} U_x={rs.u_x} U_y={rs.u_y}")
    print(f"  asymptotic two-sided p={rs.asymptotic_p('two-sided'):.6f}")


if __name__ == "__main__":
    demo_moments()
    demo_normal()
    demo_binomial()
    demo_wilcoxon()
