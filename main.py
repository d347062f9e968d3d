"""
3D Shoal Simulation (headless)
==============================

Runs the flocking core without a window and prints flock statistics.

Usage:
    python main.py                       # 40 boids, 1000 ticks
    python main.py --count 200 -t 5000   # Bigger flock, longer run
    python main.py --seed 7 --every 50   # Reproducible run, denser output
"""

import argparse
import time

from config import shoal as config
from shoal import Flock, FlockParams
from shoal.metrics import summarize


def format_summary(summary: dict) -> str:
    cx, cy, cz = summary["centroid"]
    return (
        f"[Shoal] tick {summary['tick']:>6}  "
        f"polarization {summary['polarization']:.3f}  "
        f"nearest {summary['mean_nearest']:.3f} (min {summary['min_nearest']:.3f})  "
        f"clearance {summary['min_clearance']:.3f}  "
        f"avoiding {summary['avoiding']}/{summary['avoiding'] + summary['flocking']}  "
        f"centroid ({cx:.2f}, {cy:.2f}, {cz:.2f})"
    )


def run(flock: Flock, ticks: int, report_every: int) -> dict:
    """Tick the flock, printing a summary every `report_every` ticks."""
    summary = summarize(flock)
    print(format_summary(summary))

    start = time.perf_counter()
    for _ in range(ticks):
        flock.tick()
        if report_every and flock.tick_count % report_every == 0:
            summary = summarize(flock)
            print(format_summary(summary))
    elapsed = time.perf_counter() - start

    rate = ticks / elapsed if elapsed > 0 else float("inf")
    print(f"[Shoal] {ticks} ticks in {elapsed:.2f}s ({rate:.0f} ticks/s)")
    return summarize(flock)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Headless 3D shoal simulation")
    parser.add_argument("--count", "-n", type=int, default=config.BOIDS["count"], help="Number of boids")
    parser.add_argument("--ticks", "-t", type=int, default=1000, help="Number of ticks to run")
    parser.add_argument("--neighbors", "-k", type=int, default=config.BOIDS["neighborhood_size"],
                        help="Neighbors considered by each boid")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for the initial flock")
    parser.add_argument("--every", type=int, default=100, help="Print statistics every N ticks (0 = end only)")
    parser.add_argument("--no-warmup", action="store_true", help="Skip JIT warmup before timing")
    args = parser.parse_args(argv)

    try:
        params = FlockParams.from_config(count=args.count, neighborhood_size=args.neighbors)
    except ValueError as e:
        parser.error(str(e))

    flock = Flock(params, seed=args.seed)
    if not args.no_warmup:
        flock.warmup()
    flock.initialize()
    print(f"[Shoal] Initialized {flock.num_boids:,} boids (k={params.neighborhood_size})")

    return run(flock, args.ticks, args.every)


if __name__ == "__main__":
    main()
