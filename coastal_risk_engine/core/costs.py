"""
Investment cost functions.

Total investment for a defense vector is the sum of three independent terms:

  Withdrawal   C_W = V * W * f_w / (H - W)
  Resistance   C_R = V_w * f_cR * R * (R/2 + b) / (H_bldg * (H - W))        R <  B
               C_R = V_w * f_cR * B * (R - B/2 + b) / (H_bldg * (H - W))    R >= B
  Barrier      C_D = volume(D) * c_d                      (0 when D == 0)

with the remaining value V_w = V * (1 - f_l * W / H) and the unitless
resistance fraction

  f_cR = f_adj * (f_lin * P + f_exp * max(0, P - t_exp) / (1 - P)).

Both resistance branches agree at R = B, and every term is non-decreasing
in its own lever, so marginal costs between merged vectors are never
negative up to rounding.
"""

from __future__ import annotations

from .geometry import city_dike_volume
from .parameters import CityParameters
from .state import DefenseVector


def withdrawal_cost(total_value: float, city_height: float, f_w: float, W: float) -> float:
    """Cost of relocating everything below elevation W."""
    assert W < city_height, "W must be strictly below the city height"
    return total_value * W * f_w / (city_height - W)


def value_after_withdrawal(
    total_value: float, city_height: float, f_l: float, W: float
) -> float:
    """City value that stays after withdrawal to elevation W."""
    loss_fraction = f_l * W / city_height
    return total_value * (1.0 - loss_fraction)


def resistance_cost_fraction(
    f_adj: float, f_lin: float, f_exp: float, t_exp: float, P: float
) -> float:
    """Unitless flood-proofing cost fraction for coverage P (P < 1)."""
    assert P < 1.0, "P must be strictly below 1"
    linear_term = f_lin * P
    exponential_term = f_exp * max(0.0, P - t_exp) / (1.0 - P)
    return f_adj * (linear_term + exponential_term)


def resistance_cost(
    remaining_value: float,
    cost_fraction: float,
    building_height: float,
    city_height: float,
    W: float,
    R: float,
    B: float,
    basement_depth: float,
) -> float:
    """Flood-proofing cost; the branch switches at R == B."""
    assert W < city_height, "W must be strictly below the city height"
    denominator = building_height * (city_height - W)
    if R < B:
        numerator = remaining_value * cost_fraction * R * (R / 2.0 + basement_depth)
    else:
        numerator = remaining_value * cost_fraction * B * (R - B / 2.0 + basement_depth)
    return numerator / denominator


def dike_cost(volume: float, cost_per_m3: float) -> float:
    """Barrier construction cost."""
    return volume * cost_per_m3


def investment_cost(params: CityParameters, defenses: DefenseVector) -> float:
    """Total (non-marginal) investment cost of a feasible defense vector.

    Args:
        params:   City configuration.
        defenses: Vector satisfying is_feasible().

    Returns:
        C_W + C_R + C_D in dollars.
    """
    H = params.city_max_height
    c_w = withdrawal_cost(params.total_value, H, params.withdrawal_cost_factor, defenses.W)

    v_w = value_after_withdrawal(
        params.total_value, H, params.withdrawal_loss_fraction, defenses.W
    )
    f_cr = resistance_cost_fraction(
        params.resistance_adjustment,
        params.resistance_linear_factor,
        params.resistance_exp_factor,
        params.resistance_exp_threshold,
        defenses.P,
    )
    c_r = resistance_cost(
        v_w, f_cr, params.building_height, H,
        defenses.W, defenses.R, defenses.B, params.basement_depth,
    )

    if defenses.D == 0.0:
        c_d = 0.0
    else:
        c_d = dike_cost(city_dike_volume(params, defenses.D), params.dike_cost_per_m3)

    return c_w + c_r + c_d


def marginal_investment_cost(
    params: CityParameters, old: DefenseVector, new: DefenseVector
) -> float:
    """Cost of moving from ``old`` to ``new``; only increases are charged."""
    return max(0.0, investment_cost(params, new) - investment_cost(params, old))
