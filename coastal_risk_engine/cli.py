"""
Command-line interface for the Coastal Risk Engine.

Usage:
    python -m coastal_risk_engine.cli [--log-level LEVEL] [command] [options]

Commands:
    run         Run a configured experiment and print discounted costs.
    zones       Print the zone partition for a set of levers.
    info        Print the default city parameters.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np

from .analysis.metrics import summary_statistics
from .analysis.objectives import calculate_npv
from .config import RunConfig, load_run_config
from .core.parameters import CityParameters
from .core.state import DefenseVector, is_feasible
from .core.zones import partition_city
from .simulation.forcing import DistributionalForcing, EADScenario, StochasticForcing
from .simulation.policies import StaticPolicy
from .simulation.runner import SimulationRunner


def _build_subparsers(parser: argparse.ArgumentParser) -> None:
    """Register all sub-commands on the root parser."""
    sub = parser.add_subparsers(dest="command", required=True)

    # ------------------------------------------------------------------ run --
    run_p = sub.add_parser("run", help="Run a configured experiment")
    run_p.add_argument("config", help="Path to run config YAML")
    run_p.add_argument(
        "--seed", type=int, default=None, metavar="SEED",
        help="Override the config seed"
    )
    run_p.add_argument(
        "--trace", action="store_true",
        help="Include per-epoch records (EAD mode only)"
    )
    run_p.add_argument(
        "--output", type=str, default=None,
        help="Save results JSON to this path"
    )

    # ---------------------------------------------------------------- zones --
    zones_p = sub.add_parser("zones", help="Print the zone partition")
    for lever in ("W", "R", "P", "D", "B"):
        zones_p.add_argument(f"--{lever}", type=float, default=0.0)

    # ----------------------------------------------------------------- info --
    sub.add_parser("info", help="Print default city parameters")


def _run_experiment(cfg: RunConfig, seed: int, trace_records: bool) -> Dict[str, Any]:
    runner = SimulationRunner(cfg.params, integrator=cfg.integrator)
    policy = StaticPolicy(cfg.levers)
    rng = np.random.default_rng(seed)

    if cfg.mode == "stochastic":
        forcing = StochasticForcing.sample(cfg.surge, cfg.n_scenarios, cfg.n_years, rng)
        outcomes = runner.run_ensemble(policy, forcing, cfg.discount_rate, rng)
        return {"mode": "stochastic", "summary": summary_statistics(outcomes)}

    scenario = EADScenario(
        DistributionalForcing.stationary(cfg.surge, cfg.n_years), cfg.discount_rate
    )
    trace = runner.run_trace(policy, scenario, rng)
    investment, damage = calculate_npv(trace, cfg.discount_rate)
    result: Dict[str, Any] = {
        "mode": "ead",
        "investment": investment,
        "damage": damage,
        "total_cost": investment + damage,
    }
    if trace_records:
        result["trace"] = [r.to_dict() for r in trace]
    return result


def cmd_run(args: argparse.Namespace) -> int:
    """Run a configured experiment."""
    cfg = load_run_config(args.config)
    seed = args.seed if args.seed is not None else cfg.seed
    result = _run_experiment(cfg, seed, args.trace)

    text = json.dumps(result, indent=2, default=float)
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            f.write(text)
        print(f"Results saved to {output_path}")
    else:
        print(text)
    return 0


def cmd_zones(args: argparse.Namespace) -> int:
    """Print the five zones for the given levers."""
    params = CityParameters()
    try:
        defenses = DefenseVector(W=args.W, R=args.R, P=args.P, D=args.D, B=args.B)
    except ValueError as exc:
        print(f"Invalid levers: {exc}", file=sys.stderr)
        return 1
    if not is_feasible(defenses, params):
        print(f"Infeasible levers: {defenses.to_dict()}", file=sys.stderr)
        return 1
    for zone in partition_city(params, defenses):
        print(
            f"{zone.zone_type.name:<14s} [{zone.z_low:7.3f}, {zone.z_high:7.3f})  "
            f"value={zone.value:.4e}"
        )
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Print default city parameters."""
    print(json.dumps(CityParameters().to_dict(), indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="coastal-risk",
        description="Coastal Risk Engine — flood-defense cost/damage simulation",
    )
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    _build_subparsers(parser)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    handlers = {"run": cmd_run, "zones": cmd_zones, "info": cmd_info}
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
