"""Capacity sweep of a three-tier design.

Runs the same topology at increasing request rates under each traffic
pattern and shows where latency, errors and the performance score break.

## Architecture

```
  ┌──────┐    ┌─────────┐    ┌──────────┐    ┌──────────┐
  │  LB  │───>│ Gateway │───>│  Orders  │───>│ Orders DB│
  └──────┘    └─────────┘    └────┬─────┘    └──────────┘
                                  │
                                  v
                             ┌──────────┐
                             │  Redis   │
                             └──────────┘
```

## Key Metrics

- Average and p99 latency per request rate
- Error rate, including the +2% / +3% steps above 200 and 500 req/s
- Performance score and the recommendations that appear under load
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from scalesim import (
    Component,
    Connection,
    RunConfig,
    SimulationEngine,
    SimulationResult,
    Topology,
    TrafficPattern,
)


def build_topology(with_cache: bool = True) -> Topology:
    components = [
        Component("lb", "load_balancer", "Load Balancer"),
        Component("gw", "api_gateway", "API Gateway"),
        Component("orders", "microservice", "Orders"),
        Component("db", "database", "Orders DB"),
    ]
    connections = [
        Connection("c1", "lb", "gw"),
        Connection("c2", "gw", "orders"),
        Connection("c3", "orders", "db"),
    ]
    if with_cache:
        components.append(Component("cache", "cache", "Redis"))
        connections.append(Connection("c4", "orders", "cache"))
    return Topology(components=components, connections=connections)


@dataclass
class SweepConfig:
    rates: list[float] = field(default_factory=lambda: [10, 50, 100, 200, 300, 500, 750, 1000])
    patterns: list[TrafficPattern] = field(default_factory=lambda: list(TrafficPattern))
    duration_s: float = 60.0
    users: int = 100
    seed: int | None = 42
    with_cache: bool = True


def run_sweep(config: SweepConfig) -> tuple[pd.DataFrame, list[SimulationResult]]:
    engine = SimulationEngine()
    topology = build_topology(config.with_cache)
    jobs = [
        (
            RunConfig(
                system_id="three-tier",
                duration=config.duration_s,
                users=config.users,
                requests_per_second=rate,
                traffic_pattern=pattern,
                seed=config.seed,
            ),
            topology,
        )
        for pattern in config.patterns
        for rate in config.rates
    ]
    results = engine.run_batch(jobs)

    rows = []
    for (run_config, _), result in zip(jobs, results):
        m = result.metrics
        rows.append({
            "pattern": run_config.traffic_pattern.value,
            "rps": run_config.requests_per_second,
            "avg_latency_ms": m.average_latency_ms,
            "p99_latency_ms": m.p99_latency_ms,
            "error_rate": m.error_rate,
            "peak_rps": m.peak_throughput_rps,
            "score": result.performance_score,
            "hourly_cost": result.resource_utilization.cost.hourly_rate,
            "advice": ", ".join(r.category.value for r in result.recommendations),
        })
    return pd.DataFrame(rows), results


def visualize_results(df: pd.DataFrame, output_dir: Path) -> None:
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    output_dir.mkdir(parents=True, exist_ok=True)

    fig, (ax_lat, ax_err, ax_score) = plt.subplots(nrows=3, ncols=1, sharex=True, figsize=(10, 10))
    for pattern, group in df.groupby("pattern"):
        ax_lat.plot(group["rps"], group["p99_latency_ms"], marker="o", label=pattern)
        ax_err.plot(group["rps"], group["error_rate"] * 100, marker="o", label=pattern)
        ax_score.plot(group["rps"], group["score"], marker="o", label=pattern)

    ax_lat.set_ylabel("p99 latency (ms)")
    ax_lat.set_title("Capacity sweep by traffic pattern")
    ax_lat.legend()
    ax_lat.grid(True, alpha=0.3)

    ax_err.set_ylabel("error rate (%)")
    ax_err.grid(True, alpha=0.3)

    ax_score.set_ylabel("score")
    ax_score.set_xlabel("base request rate (req/s)")
    ax_score.set_ylim(0, 105)
    ax_score.grid(True, alpha=0.3)

    fig.tight_layout()
    fig.savefig(output_dir / "capacity_sweep.png", dpi=150)
    plt.close(fig)

    df.to_csv(output_dir / "capacity_sweep.csv", index=False)
    print(f"\nSaved plots/data to: {output_dir.absolute()}")


def print_summary(df: pd.DataFrame, results: list[SimulationResult]) -> None:
    print("\n" + "=" * 72)
    print("CAPACITY SWEEP RESULTS")
    print("=" * 72)

    with pd.option_context("display.width", 120, "display.max_columns", None):
        print(df.drop(columns=["advice"]).round(3).to_string(index=False))

    constant = df[df["pattern"] == TrafficPattern.CONSTANT.value]
    failing = constant[constant["score"] < 60]
    if not failing.empty:
        print(f"\nConstant traffic drops below a score of 60 at {failing['rps'].min():g} req/s")

    worst = min(results, key=lambda r: r.performance_score)
    print("\nWorst run:")
    print(worst)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Capacity sweep of a three-tier design")
    parser.add_argument("--duration", type=float, default=60.0, help="Simulated duration per run (s)")
    parser.add_argument("--users", type=int, default=100, help="Concurrent users")
    parser.add_argument(
        "--rates", type=float, nargs="+", default=None, help="Request rates to sweep (req/s)"
    )
    parser.add_argument("--no-cache", action="store_true", help="Drop the Redis cache from the design")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (use -1 for random)")
    parser.add_argument("--output", type=str, default="output/capacity_sweep", help="Output directory")
    parser.add_argument("--no-viz", action="store_true", help="Skip visualization generation")
    args = parser.parse_args()

    config = SweepConfig(
        duration_s=args.duration,
        users=args.users,
        seed=None if args.seed == -1 else args.seed,
        with_cache=not args.no_cache,
    )
    if args.rates:
        config.rates = args.rates

    print("Running capacity sweep...")
    print(f"  Rates: {', '.join(f'{r:g}' for r in config.rates)} req/s")
    print(f"  Patterns: {', '.join(p.value for p in config.patterns)}")
    print(f"  Duration: {config.duration_s}s, users: {config.users}")
    print(f"  Cache: {'yes' if config.with_cache else 'no'}")

    df, results = run_sweep(config)
    print_summary(df, results)

    if not args.no_viz:
        visualize_results(df, Path(args.output))
