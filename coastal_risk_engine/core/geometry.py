"""
Barrier geometry.

Material volume of a barrier of crest height D built at the shoreline of the
wedge.  The cross-section is a trapezoid whose effective height includes the
startup height (fixed costs expressed as equivalent metres of barrier):

    h      = D + D_startup
    w_side = h / s^2                                   (side-slope widening)
    V_main = L_city * h * (w_top + w_side)             (coastline prism)
    V_wing = (h^2 / S) * (w_top + (2/3) * w_side)      (two tapered wings)

where S = H_city / D_city is the terrain slope.  The wings run inland until
the ground reaches the barrier height, closing the protected area.
"""

from __future__ import annotations

from .parameters import CityParameters


def dike_volume(
    city_height: float,
    city_depth: float,
    startup_height: float,
    side_slope: float,
    top_width: float,
    city_length: float,
    D: float,
) -> float:
    """Barrier material volume (m^3) for crest height D."""
    h = D + startup_height
    terrain_slope = city_height / city_depth
    slope_width = h / (side_slope * side_slope)

    v_main = city_length * h * (top_width + slope_width)
    v_wings = (h * h / terrain_slope) * (top_width + (2.0 / 3.0) * slope_width)
    return v_main + v_wings


def city_dike_volume(params: CityParameters, D: float) -> float:
    """dike_volume() with geometry taken from a CityParameters pack."""
    return dike_volume(
        params.city_max_height,
        params.city_depth,
        params.dike_startup_height,
        params.dike_side_slope,
        params.dike_top_width,
        params.city_length,
        D,
    )
