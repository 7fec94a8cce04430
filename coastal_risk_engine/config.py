"""
config.py — Run configuration loader.

Loads YAML run configs and converts them to the objects the engine
consumes.  A config file has up to four sections, all optional:

    city:            # CityParameters fields (defaults for anything omitted)
      total_value: 1.5e+12    # PyYAML needs the exponent sign
      city_max_height: 17.0
    levers:          # DefenseVector built in epoch 1
      D: 5.0
      B: 0.0
    surge:           # scipy.stats distribution for the yearly surge
      distribution: gumbel_r
      params: {loc: 1.0, scale: 0.5}
    simulation:
      mode: ead            # ead | stochastic
      n_years: 50
      discount_rate: 0.04
      n_scenarios: 1000    # stochastic mode only
      integrator: quad     # quad | mc
      n_samples: 1000      # mc only
      seed: 42

Public API:
    load_yaml(path)                     -> raw config dict
    load_city_config(path)              -> CityParameters
    build_run_config(raw)               -> RunConfig
    load_run_config(path)               -> RunConfig
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from scipy import stats

from .core.parameters import CityParameters
from .core.state import DefenseVector
from .systems.expectation import (
    Integrator,
    MonteCarloIntegrator,
    PointMass,
    QuadratureIntegrator,
    SurgeDistribution,
)

logger = logging.getLogger("coastal_risk_engine.config")

_KNOWN_SECTIONS = {"city", "levers", "surge", "simulation"}


# ─────────────────────────────────────────────────────────────────────────── #
# YAML loading                                                                 #
# ─────────────────────────────────────────────────────────────────────────── #

def load_yaml(config_path: str) -> Dict[str, Any]:
    """Load a YAML file and check that it is a mapping of known sections."""
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path.resolve()}")

    with open(path, "r") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError(f"Config root must be a mapping, got {type(config).__name__}")

    unknown = set(config) - _KNOWN_SECTIONS
    if unknown:
        raise ValueError(f"Unknown config sections: {sorted(unknown)}")

    logger.info(f"Loaded config: {path}")
    return config


def load_city_config(config_path: str) -> CityParameters:
    """CityParameters from the ``city`` section of a YAML file."""
    return CityParameters.from_dict(load_yaml(config_path).get("city") or {})


# ─────────────────────────────────────────────────────────────────────────── #
# Section builders                                                             #
# ─────────────────────────────────────────────────────────────────────────── #

def build_distribution(section: Optional[Dict[str, Any]]) -> SurgeDistribution:
    """Freeze a scipy.stats distribution from ``{distribution, params}``.

    ``distribution: point`` with ``params: {value: h}`` gives a PointMass.
    """
    if not section:
        raise ValueError("surge section is required")
    name = section.get("distribution")
    kwargs = dict(section.get("params") or {})
    if name == "point":
        return PointMass(float(kwargs["value"]))
    family = getattr(stats, str(name), None)
    if family is None or not hasattr(family, "freeze"):
        raise ValueError(f"Unknown scipy.stats distribution: {name!r}")
    return family(**kwargs)


def build_integrator(sim: Dict[str, Any]) -> Integrator:
    """QuadratureIntegrator or MonteCarloIntegrator from the simulation section."""
    kind = sim.get("integrator", "quad")
    if kind == "quad":
        return QuadratureIntegrator(rtol=float(sim.get("rtol", 1e-6)))
    if kind == "mc":
        return MonteCarloIntegrator(n_samples=int(sim.get("n_samples", 1000)))
    raise ValueError(f"integrator must be 'quad' or 'mc', got {kind!r}")


@dataclass(frozen=True)
class RunConfig:
    """Everything needed to run one configured experiment."""

    params: CityParameters
    levers: DefenseVector
    surge: SurgeDistribution
    integrator: Integrator = field(default_factory=QuadratureIntegrator)
    mode: str = "ead"
    n_years: int = 50
    discount_rate: float = 0.04
    n_scenarios: int = 1
    seed: int = 0

    def __post_init__(self) -> None:
        if self.mode not in ("ead", "stochastic"):
            raise ValueError(f"mode must be 'ead' or 'stochastic', got {self.mode!r}")
        if self.n_years < 1:
            raise ValueError(f"n_years must be >= 1, got {self.n_years}")
        if self.n_scenarios < 1:
            raise ValueError(f"n_scenarios must be >= 1, got {self.n_scenarios}")


def build_run_config(raw: Dict[str, Any]) -> RunConfig:
    """Convert a raw config dict into a RunConfig."""
    params = CityParameters.from_dict(raw.get("city") or {})
    levers = DefenseVector.from_dict(raw.get("levers") or {})
    surge = build_distribution(raw.get("surge"))
    sim = raw.get("simulation") or {}
    return RunConfig(
        params=params,
        levers=levers,
        surge=surge,
        integrator=build_integrator(sim),
        mode=str(sim.get("mode", "ead")),
        n_years=int(sim.get("n_years", params.n_years)),
        discount_rate=float(sim.get("discount_rate", params.discount_rate)),
        n_scenarios=int(sim.get("n_scenarios", 1)),
        seed=int(sim.get("seed", 0)),
    )


def load_run_config(config_path: str) -> RunConfig:
    """load_yaml() followed by build_run_config()."""
    return build_run_config(load_yaml(config_path))
