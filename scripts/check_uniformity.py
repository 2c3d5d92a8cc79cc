#!/usr/bin/env python3
"""Check that the derangement engine draws every single cycle equally often.

Usage:
    python scripts/check_uniformity.py --size 5 --samples 120000
"""

from __future__ import annotations

import argparse
import math
import random
import statistics
from collections import Counter

from secretsanta.core.derangement import single_cycle

SEEDS = (101, 202, 303)


def _cycle_key(assignment: dict[int, int]) -> tuple[int, ...]:
    order = [0]
    while len(order) < len(assignment):
        order.append(assignment[order[-1]])
    return tuple(order)


def chi_square(counts: Counter[tuple[int, ...]], outcomes: int, samples: int) -> float:
    expected = samples / outcomes
    observed = list(counts.values()) + [0] * (outcomes - len(counts))
    return sum((value - expected) ** 2 / expected for value in observed)


def evaluate(size: int, samples: int, seed: int) -> tuple[Counter[tuple[int, ...]], float]:
    rng = random.Random(seed)
    ids = list(range(size))
    counts: Counter[tuple[int, ...]] = Counter(_cycle_key(single_cycle(ids, rng)) for _ in range(samples))
    return counts, chi_square(counts, math.factorial(size - 1), samples)


def main() -> None:
    parser = argparse.ArgumentParser(description="Sample single-cycle assignments and report uniformity.")
    parser.add_argument("--size", type=int, default=4, help="Participants per room (2-7)")
    parser.add_argument("--samples", type=int, default=60000, help="Draws per seed")
    parser.add_argument("--verbose", action="store_true", help="Print per-cycle frequencies")
    args = parser.parse_args()

    if not 2 <= args.size <= 7:
        parser.error("--size must be between 2 and 7")

    outcomes = math.factorial(args.size - 1)
    stats: list[float] = []
    for seed in SEEDS:
        counts, stat = evaluate(args.size, args.samples, seed)
        stats.append(stat)
        print(f"seed {seed}: {len(counts)}/{outcomes} cycles seen, chi-square {stat:.2f} (df={outcomes - 1})")
        if args.verbose:
            for cycle, count in sorted(counts.items()):
                print(f"  {cycle}: {count / args.samples:.4f}")
    print(f"mean chi-square {statistics.fmean(stats):.2f}")


if __name__ == "__main__":
    main()
