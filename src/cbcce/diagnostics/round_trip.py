from __future__ import annotations

import argparse
import random
from typing import List, Optional

import cbcce
from cbcce.core.types import ParameterSet


def parse_names(s: str) -> List[str]:
    # "milesian,day-milliseconds" -> ["milesian", "day-milliseconds"]
    return [x.strip() for x in s.split(",") if x.strip()]


def roundtrip_test(
    name: str,
    N: int,
    low: int,
    high: int,
    seed: int,
    *,
    max_failures: int,
) -> int:
    random.seed(seed)
    params: ParameterSet = cbcce.get_parameter_set(name)
    failures = 0

    for _ in range(N):
        q0 = random.randint(low, high)

        rec = cbcce.decompose(q0, params)
        q1 = cbcce.compose(rec, params)
        rec1 = cbcce.decompose(q1, params)

        if q1 != q0 or rec1 != rec:
            failures += 1
            print("\nFAIL")
            print("params:", name)
            print("q0:", q0)
            print("record:", rec)
            print("q1:", q1)
            print("record(q1):", rec1)
            if failures >= max_failures:
                return failures

    return failures


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Random round-trip tests: quantity -> record -> quantity.")
    p.add_argument("--params", type=str, default=",".join(cbcce.list_parameter_sets()),
                   help="Comma-separated parameter set names.")
    p.add_argument("--N", type=int, default=2000, help="Trials per parameter set.")
    p.add_argument("--low", type=int, default=-62135596800000, help="Lowest quantity (default 0001-01-01 in ms).")
    p.add_argument("--high", type=int, default=253402300799999, help="Highest quantity (default 9999-12-31 in ms).")
    p.add_argument("--seed", type=int, default=123, help="RNG seed.")
    p.add_argument("--max-failures", type=int, default=5, help="Stop after this many failures per set.")
    args = p.parse_args(argv)

    total = 0
    for name in parse_names(args.params):
        try:
            fails = roundtrip_test(name, args.N, args.low, args.high, args.seed, max_failures=args.max_failures)
        except KeyError as e:
            raise SystemExit(e.args[0]) from e
        status = "ok" if fails == 0 else f"{fails} failure(s)"
        print(f"{name:<18} N={args.N:<6} {status}")
        total += fails

    return 1 if total else 0


if __name__ == "__main__":
    raise SystemExit(main())
