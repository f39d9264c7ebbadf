#!/usr/bin/env python3
from __future__ import annotations

import argparse
from typing import List, Optional, Tuple

from cbcce.calendars import milesian
from cbcce.core.engine import compose
from cbcce.core.errors import InvalidArgumentError
from cbcce.core.time import DAY_UNIT
from cbcce.tables import MILESIAN_TIME


def _need_numpy():
    try:
        import numpy as np
        return np
    except ImportError as e:
        raise RuntimeError('Need numpy. Install: pip install "cbcce[diagnostics]"') from e


def _need_matplotlib():
    try:
        import matplotlib.pyplot as plt
        return plt
    except ImportError as e:
        raise RuntimeError('Need matplotlib. Install: pip install "cbcce[diagnostics]"') from e


def year_start_ms(Y: int) -> int:
    return compose({"year": Y, "month": 0, "date": 1, "hours": 0, "minutes": 0,
                    "seconds": 0, "milliseconds": 0}, MILESIAN_TIME)


def year_length_days(Y: int) -> int:
    return (year_start_ms(Y + 1) - year_start_ms(Y)) // DAY_UNIT


def build_rows(start_year: int, end_year: int) -> List[Tuple[int, int, bool, bool]]:
    """(year, engine length in days, rule says long, agreement) per year."""
    rows = []
    for Y in range(start_year, end_year + 1):
        n = year_length_days(Y)
        rule = milesian.is_long_year(Y)
        rows.append((Y, n, rule, (n == 366) == rule))
    return rows


def plot_barcode(rows, out: str, title: str) -> None:
    np = _need_numpy()
    plt = _need_matplotlib()

    years = np.array([r[0] for r in rows], dtype=int)
    longs = np.array([r[1] == 366 for r in rows], dtype=bool)
    x = years % 100
    y = years // 100

    fig, ax = plt.subplots(figsize=(14, 0.6 * (y.max() - y.min() + 1) + 1.5))
    ax.scatter(x[~longs], y[~longs], s=10, marker="s", c="0.85", linewidths=0.0, label="365 days")
    ax.scatter(x[longs], y[longs], s=22, marker="s", c="0.15", linewidths=0.0, label="366 days")
    ax.set_xlabel("year mod 100")
    ax.set_ylabel("century")
    ax.set_xlim(-1, 100)
    ax.invert_yaxis()
    ax.tick_params(axis="both", which="both", length=0)
    ax.set_title(title)
    ax.legend(loc="center left", bbox_to_anchor=(1.01, 0.5), frameon=False)
    fig.tight_layout()
    fig.savefig(out, dpi=200)
    print(f"Saved: {out}")


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Milesian year lengths as computed by the cycle engine.")
    p.add_argument("--start-year", type=int, default=1995)
    p.add_argument("--end-year", type=int, default=2010)
    p.add_argument("--only-long", action="store_true", help="print long years only")
    p.add_argument("--plot", default=None, help="save a long-year barcode to this PNG file")
    p.add_argument("--title", default="Milesian long years")
    args = p.parse_args(argv)

    if args.end_year < args.start_year:
        raise SystemExit("--end-year must be >= --start-year")
    try:
        rows = build_rows(args.start_year, args.end_year)
    except InvalidArgumentError as e:
        raise SystemExit(str(e)) from e

    print(f"{'year':>6}  {'days':>4}  long  ok")
    mismatches = 0
    for Y, n, rule, ok in rows:
        if not ok:
            mismatches += 1
        if args.only_long and n != 366:
            continue
        print(f"{Y:>6}  {n:>4}  {'L' if n == 366 else '.':>4}  {'' if ok else 'MISMATCH'}")
    print(f"\n{len(rows)} years, {sum(1 for r in rows if r[1] == 366)} long, {mismatches} mismatches")

    if args.plot:
        plot_barcode(rows, args.plot, args.title)
    return 1 if mismatches else 0


if __name__ == "__main__":
    raise SystemExit(main())
