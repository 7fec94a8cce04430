"""
City parameters for the Coastal Risk Engine.

All parameters are immutable, named constants describing one city wedge and
its damage/cost calibration.  Validation happens once at construction so the
physics functions can assume:

  - 0 <= failure_onset_fraction < 1   (ramp denominator D*(1-t) is non-zero)
  - runup_factor >= 1                 (run-up amplifies, never attenuates)
  - threshold_exponent >= 1           (catastrophic penalty is convex)
  - seawall_height < city_max_height
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class CityParameters:
    """Immutable, fully validated city configuration.

    Defaults reproduce the reference calibration (total value 1.5e12 $,
    maximum elevation 17 m).
    """

    # ------------------------------------------------------------------ #
    # Wedge geometry                                                      #
    # ------------------------------------------------------------------ #
    total_value: float = 1.5e12
    """Initial city value V_city ($, > 0)."""

    building_height: float = 30.0
    """Representative building height H_bldg (m, > 0)."""

    city_max_height: float = 17.0
    """Maximum elevation of the wedge H_city (m, > 0)."""

    city_depth: float = 2000.0
    """Horizontal distance from the seawall to the highest point (m, > 0)."""

    city_length: float = 43000.0
    """Length of the coastline (m, > 0)."""

    seawall_height: float = 1.75
    """Existing sea barrier height (m, >= 0, below city_max_height)."""

    # ------------------------------------------------------------------ #
    # Barrier (dike) construction                                         #
    # ------------------------------------------------------------------ #
    dike_startup_height: float = 2.0
    """Equivalent height representing fixed construction costs (m, >= 0)."""

    dike_top_width: float = 3.0
    """Crest width (m, >= 0)."""

    dike_side_slope: float = 0.5
    """Side slope of the barrier (m/m, > 0)."""

    dike_cost_per_m3: float = 10.0
    """Material cost per cubic metre ($, >= 0)."""

    # ------------------------------------------------------------------ #
    # Zone value ratios                                                   #
    # ------------------------------------------------------------------ #
    protected_value_ratio: float = 1.1
    """Value density ratio behind an intact barrier (> 0)."""

    unprotected_value_ratio: float = 0.95
    """Value density ratio in unprotected bands (> 0)."""

    # ------------------------------------------------------------------ #
    # Withdrawal                                                          #
    # ------------------------------------------------------------------ #
    withdrawal_cost_factor: float = 1.0
    """f_w: withdrawal cost adjustment (> 0)."""

    withdrawal_loss_fraction: float = 0.01
    """f_l: fraction of withdrawn value that leaves the city [0, 1]."""

    # ------------------------------------------------------------------ #
    # Flood-proofing (resistance)                                         #
    # ------------------------------------------------------------------ #
    resistance_adjustment: float = 1.25
    """f_adj: overall resistance cost adjustment (> 0)."""

    resistance_linear_factor: float = 0.35
    """f_lin: linear resistance cost factor (>= 0)."""

    resistance_exp_factor: float = 0.115
    """f_exp: exponential resistance cost factor (>= 0)."""

    resistance_exp_threshold: float = 0.4
    """t_exp: coverage fraction where exponential costs start [0, 1]."""

    basement_depth: float = 3.0
    """Representative basement depth (m, >= 0)."""

    # ------------------------------------------------------------------ #
    # Damage and barrier failure                                          #
    # ------------------------------------------------------------------ #
    damage_fraction: float = 0.39
    """Fraction of inundated building value lost [0, 1]."""

    intact_damage_factor: float = 0.03
    """Zone-3 damage multiplier when the barrier holds [0, 1]."""

    failed_damage_factor: float = 1.5
    """Zone-3 damage multiplier when the barrier is breached (> 0)."""

    failure_onset_fraction: float = 0.95
    """Surge/crest ratio where the failure ramp starts [0, 1)."""

    min_failure_probability: float = 0.05
    """Floor failure probability p_min [0, 1]."""

    runup_factor: float = 1.1
    """Wave run-up amplification of raw surge (>= 1)."""

    # ------------------------------------------------------------------ #
    # Catastrophic threshold                                              #
    # ------------------------------------------------------------------ #
    damage_threshold: float = 4.0e9
    """Summed damage above which the cascade penalty applies ($, >= 0)."""

    threshold_fraction: float = 1.0
    """Multiplier on the excess damage (> 0)."""

    threshold_exponent: float = 1.01
    """Exponent of the cascade penalty (>= 1)."""

    # ------------------------------------------------------------------ #
    # Economics / horizon                                                 #
    # ------------------------------------------------------------------ #
    discount_rate: float = 0.04
    """Default annual discount rate [0, 1)."""

    n_years: int = 50
    """Default simulation horizon in years (> 0)."""

    def __post_init__(self) -> None:
        """Validate every parameter against its physical constraint."""
        strictly_positive = {
            "total_value": self.total_value,
            "building_height": self.building_height,
            "city_max_height": self.city_max_height,
            "city_depth": self.city_depth,
            "city_length": self.city_length,
            "dike_side_slope": self.dike_side_slope,
            "protected_value_ratio": self.protected_value_ratio,
            "unprotected_value_ratio": self.unprotected_value_ratio,
            "withdrawal_cost_factor": self.withdrawal_cost_factor,
            "resistance_adjustment": self.resistance_adjustment,
            "failed_damage_factor": self.failed_damage_factor,
            "threshold_fraction": self.threshold_fraction,
        }
        for name, value in strictly_positive.items():
            if value <= 0.0:
                raise ValueError(f"{name} must be > 0, got {value}")

        non_negative = {
            "seawall_height": self.seawall_height,
            "dike_startup_height": self.dike_startup_height,
            "dike_top_width": self.dike_top_width,
            "dike_cost_per_m3": self.dike_cost_per_m3,
            "resistance_linear_factor": self.resistance_linear_factor,
            "resistance_exp_factor": self.resistance_exp_factor,
            "basement_depth": self.basement_depth,
            "damage_threshold": self.damage_threshold,
        }
        for name, value in non_negative.items():
            if value < 0.0:
                raise ValueError(f"{name} must be >= 0, got {value}")

        unit_fractions = {
            "withdrawal_loss_fraction": self.withdrawal_loss_fraction,
            "resistance_exp_threshold": self.resistance_exp_threshold,
            "damage_fraction": self.damage_fraction,
            "intact_damage_factor": self.intact_damage_factor,
            "min_failure_probability": self.min_failure_probability,
        }
        for name, value in unit_fractions.items():
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")

        if not 0.0 <= self.failure_onset_fraction < 1.0:
            raise ValueError(
                "failure_onset_fraction must be in [0, 1), "
                f"got {self.failure_onset_fraction}"
            )

        if self.runup_factor < 1.0:
            raise ValueError(
                f"runup_factor must be >= 1, got {self.runup_factor}"
            )

        if self.threshold_exponent < 1.0:
            raise ValueError(
                f"threshold_exponent must be >= 1, got {self.threshold_exponent}"
            )

        if self.seawall_height >= self.city_max_height:
            raise ValueError(
                f"seawall_height ({self.seawall_height}) must be below "
                f"city_max_height ({self.city_max_height})"
            )

        if not 0.0 <= self.discount_rate < 1.0:
            raise ValueError(
                f"discount_rate must be in [0, 1), got {self.discount_rate}"
            )

        if self.n_years <= 0:
            raise ValueError(f"n_years must be > 0, got {self.n_years}")

    @property
    def slope(self) -> float:
        """Terrain slope of the wedge (rise over run)."""
        return self.city_max_height / self.city_depth

    def to_dict(self) -> Dict[str, Any]:
        """Serialize parameters to a plain dictionary."""
        return {
            name: getattr(self, name)
            for name in self.__dataclass_fields__  # type: ignore[attr-defined]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CityParameters":
        """Deserialize parameters from a plain dictionary.

        Unknown keys are rejected so that typos in configuration files fail
        loudly instead of silently falling back to defaults.
        """
        unknown = set(data) - set(cls.__dataclass_fields__)  # type: ignore[attr-defined]
        if unknown:
            raise ValueError(f"Unknown city parameters: {sorted(unknown)}")
        return cls(**data)
