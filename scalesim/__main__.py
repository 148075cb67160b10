"""Command-line entry point: ``python -m scalesim topology.json [options]``.

Reads a ``{"components": [...], "connections": [...]}`` design, runs one
simulation and prints the report (or the camelCase JSON result).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from scalesim.config import RATE_CARDS, EngineParameters, RunConfig
from scalesim.core.simulation import SimulationEngine
from scalesim.errors import SimulationError
from scalesim.faults.scenarios import FailureType, scenario_from_dict
from scalesim.load.traffic import TrafficPattern
from scalesim.logging_config import configure_from_env, enable_console_logging
from scalesim.topology.model import Topology

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scalesim",
        description="Forecast latency, errors, bottlenecks and cost of a system design",
    )
    parser.add_argument("topology", type=Path, help="Topology JSON file")
    parser.add_argument("--system-id", default="", help="Id of the design being simulated")
    parser.add_argument("--duration", type=float, default=60.0, help="Simulated duration (s)")
    parser.add_argument("--users", type=int, default=100, help="Concurrent users")
    parser.add_argument("--rps", type=float, default=10.0, help="Base requests per second")
    parser.add_argument(
        "--pattern",
        choices=[p.value for p in TrafficPattern],
        default=TrafficPattern.CONSTANT.value,
        help="Traffic pattern",
    )
    parser.add_argument(
        "--failure",
        action="append",
        default=[],
        choices=[f.value for f in FailureType],
        help="Inject a failure scenario (repeatable)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Jitter seed (default: time-based)")
    parser.add_argument(
        "--provider", choices=sorted(RATE_CARDS), default=None, help="Cost rate card"
    )
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--plot-dir", type=Path, default=None, help="Write charts to this directory")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Log to stderr at this level (default: SCALESIM_LOGGING)",
    )
    return parser


def _load_topology(path: Path) -> Topology:
    with open(path) as f:
        return Topology.from_dict(json.load(f))


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.log_level:
        enable_console_logging(level=args.log_level)
    else:
        configure_from_env()

    try:
        params = EngineParameters.from_env()
        if args.provider:
            params = replace(params, cloud_provider=args.provider)
        topology = _load_topology(args.topology)
        config = RunConfig(
            system_id=args.system_id,
            duration=args.duration,
            users=args.users,
            requests_per_second=args.rps,
            traffic_pattern=args.pattern,
            failure_scenarios=tuple(scenario_from_dict(f) for f in args.failure),
            seed=args.seed,
        )
        engine = SimulationEngine(params=params)
        result = engine.run(config, topology)
    except (OSError, json.JSONDecodeError) as exc:
        print(f"scalesim: cannot read topology {args.topology}: {exc}", file=sys.stderr)
        return 1
    except SimulationError as exc:
        print(f"scalesim: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(result)

    if args.plot_dir is not None and result.step_count:
        from scalesim.visual import plot_components, plot_series

        plot_series(engine.get_series(result.simulation_id), args.plot_dir / "series.png", result=result)
        plot_components(result, args.plot_dir / "components.png")
        logger.info("Charts written to %s", args.plot_dir)

    return 0


if __name__ == "__main__":
    sys.exit(main())
