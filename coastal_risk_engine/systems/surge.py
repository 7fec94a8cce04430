"""
Effective surge transform.

The existing seawall fully stops surges at or below its height.  Above it,
wave run-up amplifies the raw surge and the seawall height is subtracted:

    h_eff = 0                          if h_raw <= H_seawall
    h_eff = h_raw * f_runup - H_seawall   otherwise

h_eff is an absolute elevation on the wedge.
"""

from __future__ import annotations

from ..core.parameters import CityParameters


def effective_surge(raw_surge: float, seawall_height: float, runup_factor: float) -> float:
    """Clamp-then-affine transform from raw surge to wedge elevation."""
    if raw_surge <= seawall_height:
        return 0.0
    return raw_surge * runup_factor - seawall_height


def city_effective_surge(raw_surge: float, params: CityParameters) -> float:
    """effective_surge() with seawall and run-up taken from params."""
    return effective_surge(raw_surge, params.seawall_height, params.runup_factor)


def raw_surge_for_elevation(elevation: float, params: CityParameters) -> float:
    """Inverse of the affine branch: raw surge that reaches ``elevation``.

    Used to place integration breakpoints at zone edges.
    """
    return (elevation + params.seawall_height) / params.runup_factor
