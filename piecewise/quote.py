"""Swap quotes computed on the EulerSwap curve."""

from __future__ import annotations

from piecewise.curve import (
    U112_MAX,
    EulerSwapParams,
    SwapLimitExceededError,
    f,
    f_inverse,
)
from piecewise.fixed import ONE_E18, mul_div_floor


def _saturating_sub(a: int, b: int) -> int:
    return a - b if a > b else 0


def find_reserve1_for_reserve0(p: EulerSwapParams, reserve0: int) -> int:
    """Return the reserve1 on the curve for the given reserve0."""
    x0 = p.equilibrium_reserve0
    y0 = p.equilibrium_reserve1
    if reserve0 <= x0:
        return f(reserve0, p.price_x, p.price_y, x0, y0, p.concentration_x)
    return f_inverse(reserve0, p.price_y, p.price_x, y0, x0, p.concentration_y)


def find_reserve0_for_reserve1(p: EulerSwapParams, reserve1: int) -> int:
    """Return the reserve0 on the curve for the given reserve1."""
    x0 = p.equilibrium_reserve0
    y0 = p.equilibrium_reserve1
    if reserve1 <= y0:
        return f(reserve1, p.price_y, p.price_x, y0, x0, p.concentration_y)
    return f_inverse(reserve1, p.price_x, p.price_y, x0, y0, p.concentration_x)


def find_curve_point(
    p: EulerSwapParams,
    reserve0: int,
    reserve1: int,
    amount: int,
    exact_in: bool,
    token0_is_input: bool,
) -> int:
    """Return the other side of a swap on the curve, without fees."""
    if exact_in:
        if token0_is_input:
            return _saturating_sub(reserve1, find_reserve1_for_reserve0(p, reserve0 + amount))
        return _saturating_sub(reserve0, find_reserve0_for_reserve1(p, reserve1 + amount))

    if token0_is_input:
        if reserve1 < amount:
            raise SwapLimitExceededError("output exceeds reserve1")
        return _saturating_sub(find_reserve0_for_reserve1(p, reserve1 - amount), reserve0)
    if reserve0 < amount:
        raise SwapLimitExceededError("output exceeds reserve0")
    return _saturating_sub(find_reserve1_for_reserve0(p, reserve0 - amount), reserve1)


def compute_quote(
    p: EulerSwapParams,
    reserve0: int,
    reserve1: int,
    amount: int,
    exact_in: bool,
    token0_is_input: bool,
) -> int:
    """Return the quote for a swap, with the pool fee included."""
    if amount == 0:
        return 0
    if amount > U112_MAX:
        raise SwapLimitExceededError("amount exceeds 112 bits")

    fee = p.fee
    amount_for_curve = amount if exact_in else _saturating_sub(amount, amount * fee // ONE_E18)
    quote = find_curve_point(p, reserve0, reserve1, amount_for_curve, exact_in, token0_is_input)
    if not exact_in:
        quote = mul_div_floor(quote, ONE_E18, ONE_E18 - fee)
    return quote