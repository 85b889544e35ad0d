"""Marginal prices on the EulerSwap curve and the reserves that produce them."""

from __future__ import annotations

from collections.abc import Callable

from piecewise.curve import (
    U112_MAX,
    EulerSwapParams,
    NoSolutionError,
    df_dx,
    df_dx_ray,
)
from piecewise.fixed import (
    ONE_E15,
    ONE_E18,
    ONE_E27,
    ONE_E36,
    ONE_E54,
    ceil_div,
    delta_ratio,
    mul_div_ceil,
)
from piecewise.quote import find_reserve1_for_reserve0

_Derivative = Callable[[int, int, int, int, int], int]


def _marginal_price(
    p: EulerSwapParams,
    reserve0: int,
    reserve1: int,
    unit: int,
    reciprocal_unit: int,
    derivative: _Derivative,
) -> int:
    x0 = p.equilibrium_reserve0
    y0 = p.equilibrium_reserve1

    if reserve0 <= x0:
        # On or left of the apex the slope gives the price of token0 directly.
        if reserve0 == x0:
            return mul_div_ceil(p.price_x, unit, p.price_y)
        return derivative(reserve0, p.price_x, p.price_y, x0, p.concentration_x)

    # On the right branch take the slope in token1 space and invert it.
    if reserve1 == y0:
        return mul_div_ceil(p.price_y, unit, p.price_x)
    price = derivative(reserve1, p.price_y, p.price_x, y0, p.concentration_y)
    return ceil_div(reciprocal_unit, price)


def get_current_price(p: EulerSwapParams, reserve0: int, reserve1: int) -> int:
    """Return the marginal price at the given reserves, with 18 decimals."""
    return _marginal_price(p, reserve0, reserve1, ONE_E18, ONE_E36, df_dx)


def get_current_price_ray(p: EulerSwapParams, reserve0: int, reserve1: int) -> int:
    """Return the marginal price at the given reserves, with 27 decimals."""
    return _marginal_price(p, reserve0, reserve1, ONE_E27, ONE_E54, df_dx_ray)


def _search_reserves(
    p: EulerSwapParams,
    target: int,
    unit: int,
    tolerance: int,
    price_of: Callable[[EulerSwapParams, int, int], int],
) -> tuple[int, int]:
    x0 = p.equilibrium_reserve0
    apex_price = mul_div_ceil(p.price_x, unit, p.price_y)
    if target == apex_price:
        return x0, p.equilibrium_reserve1

    left_branch = target > apex_price
    if left_branch:
        lo, hi = (0, 0) if x0 == 0 else (1, x0 - 1)
    else:
        lo, hi = x0 + 1, U112_MAX

    while lo <= hi:
        reserve0 = (lo + hi) >> 1
        reserve1 = find_reserve1_for_reserve0(p, reserve0)
        price = price_of(p, reserve0, reserve1)

        # The exact price may be unreachable on the lattice; close enough will do.
        if delta_ratio(target, price, tolerance) == 0:
            return reserve0, reserve1
        # Price falls as reserve0 grows on both branches.
        if price > target:
            lo = reserve0 + 1
        else:
            hi = reserve0 - 1

    raise NoSolutionError(f"no reserves give the price {target}")


def get_current_reserves(p: EulerSwapParams, current_price: int) -> tuple[int, int]:
    """Return the reserves whose marginal price matches current_price (18 decimals)."""
    return _search_reserves(p, current_price, ONE_E18, ONE_E15, get_current_price)


def get_current_reserves_ray(p: EulerSwapParams, current_price_ray: int) -> tuple[int, int]:
    """Return the reserves whose marginal price matches current_price_ray (27 decimals)."""
    return _search_reserves(p, current_price_ray, ONE_E27, ONE_E18, get_current_price_ray)