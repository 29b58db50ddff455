"""
Example: Partition Selection Quickstart.

Goal:
    Build both partition selection strategies for the same budget, print
    their keep probabilities per user count, and compare them with the
    empirical keep rate over repeated draws.

Usage:
    python examples/partition_selection_quickstart.py --epsilon 0.5 --delta 0.02 -k 1
"""
import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

src_root = Path(__file__).resolve().parents[1] / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from dpselect import (
    LaplacePartitionSelection,
    PreaggPartitionSelection,
    create_partition_selection_strategy,
)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Partition selection quickstart")
    parser.add_argument("--epsilon", type=float, default=0.5)
    parser.add_argument("--delta", type=float, default=0.02)
    parser.add_argument("-k", "--max-partitions", type=int, default=1)
    parser.add_argument("--max-users", type=int, default=15)
    parser.add_argument("--trials", type=int, default=20_000)
    parser.add_argument("--seed", type=int, default=0, help="Random seed for reproducibility (default: 0)")
    parser.add_argument("--outdir", type=str, default=None, help="Optional directory for a JSON report")
    return parser.parse_args(argv)


def empirical_keep_rate(strategy, num_users: int, trials: int) -> float:
    return sum(strategy.should_keep(num_users) for _ in range(trials)) / trials


def main(argv=None):
    args = parse_args(argv)

    preagg = create_partition_selection_strategy(
        "preagg", args.epsilon, args.delta, args.max_partitions, rng=args.seed
    )
    laplace = create_partition_selection_strategy(
        "laplace", args.epsilon, args.delta, args.max_partitions, rng=args.seed
    )
    assert isinstance(preagg, PreaggPartitionSelection)
    assert isinstance(laplace, LaplacePartitionSelection)

    rows = []
    for n in range(args.max_users + 1):
        rows.append(
            {
                "users": n,
                "preagg_probability": preagg.probability_of_keep(n),
                "preagg_empirical": empirical_keep_rate(preagg, n, args.trials),
                "laplace_empirical": empirical_keep_rate(laplace, n, args.trials),
            }
        )

    result = {
        "name": "partition_selection_quickstart",
        "config": {
            "epsilon": args.epsilon,
            "delta": args.delta,
            "max_partitions_contributed": args.max_partitions,
            "trials": args.trials,
        },
        "outputs": {
            "first_crossover": preagg.first_crossover,
            "second_crossover": preagg.second_crossover,
            "laplace_threshold": laplace.threshold,
            "rows": rows,
        },
    }

    print(f"preagg crossovers: {preagg.first_crossover}, {preagg.second_crossover}")
    print(f"laplace threshold: {laplace.threshold:.4f}")
    print(f"{'users':>5} {'p(n)':>8} {'preagg':>8} {'laplace':>8}")
    for row in rows:
        print(
            f"{row['users']:>5} {row['preagg_probability']:>8.4f} "
            f"{row['preagg_empirical']:>8.4f} {row['laplace_empirical']:>8.4f}"
        )

    if args.outdir:
        out_dir = Path(args.outdir)
        out_dir.mkdir(parents=True, exist_ok=True)
        out_path = out_dir / "partition_selection_quickstart.json"
        out_path.write_text(json.dumps(result, indent=2))
        print(f"wrote {out_path}")

    return result


if __name__ == "__main__":
    main()
