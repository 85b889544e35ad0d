"""The EulerSwap curve, its inverse and its derivatives in fixed-point integers."""

from __future__ import annotations

from dataclasses import dataclass

from piecewise.fixed import (
    ONE_E9,
    ONE_E18,
    ONE_E36,
    U248_MAX,
    MathOverflowError,
    ceil_div,
    mul_div_ceil,
    sqrt_ceil,
)

U112_MAX = (1 << 112) - 1
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class CurveError(Exception):
    """Base class for failures of curve computations."""


class PriceBelowApexError(CurveError):
    """Raised when a price lies below the apex of the curve."""


class NoSolutionError(CurveError):
    """Raised when no point on the curve satisfies the request."""


class SwapLimitExceededError(CurveError):
    """Raised when a swap asks for more than the pool can provide."""


@dataclass(frozen=True)
class EulerSwapParams:
    """Parameters of an EulerSwap pool."""

    equilibrium_reserve0: int
    equilibrium_reserve1: int
    price_x: int
    price_y: int
    concentration_x: int
    concentration_y: int
    fee: int = 0
    protocol_fee: int = 0
    vault0: str = ZERO_ADDRESS
    vault1: str = ZERO_ADDRESS
    euler_account: str = ZERO_ADDRESS
    protocol_fee_recipient: str = ZERO_ADDRESS

    def __post_init__(self) -> None:
        for name in ("equilibrium_reserve0", "equilibrium_reserve1"):
            value = getattr(self, name)
            if not 0 <= value <= U112_MAX:
                raise ValueError(f"{name} must fit in 112 bits")


def _div_trunc(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b > 0) else -quotient


def f(x: int, px: int, py: int, x0: int, y0: int, c: int) -> int:
    """Return the output y on the curve for the input x."""
    v = mul_div_ceil(px * (x0 - x), c * x + (ONE_E18 - c) * x0, x * ONE_E18)
    if v > U248_MAX:
        raise MathOverflowError("curve value exceeds 248 bits")
    return y0 + ceil_div(v, py)


def f_inverse(y: int, px: int, py: int, x0: int, y0: int, c: int) -> int:
    """Return the input x on the curve for the output y."""
    term1 = mul_div_ceil(py * ONE_E18, y - y0, px)
    term2 = (2 * c - ONE_E18) * x0
    b = _div_trunc(term1 - term2, ONE_E18)
    c_quad = mul_div_ceil(ONE_E18 - c, x0 * x0, ONE_E18)
    four_ac = mul_div_ceil(4 * c, c_quad, ONE_E18)

    abs_b = abs(b)
    if abs_b < ONE_E36:
        root = sqrt_ceil(abs_b * abs_b + four_ac)
    else:
        # Scale down so that squaring b stays within range.
        scale = compute_scale(abs_b)
        squared_b = mul_div_ceil(abs_b // scale, abs_b, scale)
        root = sqrt_ceil(squared_b + four_ac // (scale * scale)) * scale

    if b <= 0:
        x = mul_div_ceil(abs_b + root, ONE_E18, 2 * c) + 1
    else:
        x = ceil_div(2 * c_quad, abs_b + root) + 1
    return x0 if x >= x0 else x


def _slope_term(x: int, x0: int, cx: int) -> int:
    r0 = mul_div_ceil(x0, x0, x)
    r = mul_div_ceil(r0, ONE_E18, x)
    return cx + mul_div_ceil(ONE_E18 - cx, r, ONE_E18)


def df_dx(x: int, px: int, py: int, x0: int, cx: int) -> int:
    """Return -df/dx at x, the marginal price with 18 decimals."""
    return mul_div_ceil(px, _slope_term(x, x0, cx), py)


def df_dx_ray(x: int, px: int, py: int, x0: int, cx: int) -> int:
    """Return -df/dx at x, the marginal price with 27 decimals."""
    return mul_div_ceil(px * ONE_E9, _slope_term(x, x0, cx), py)


def compute_scale(x: int) -> int:
    """Return a power of two that brings x down to at most 128 bits."""
    bits = x.bit_length()
    return 1 << (bits - 128) if bits > 128 else 1


def verify(p: EulerSwapParams, new_reserve0: int, new_reserve1: int) -> bool:
    """Return True if the reserves lie on or above the swapping curve."""
    if new_reserve0 > U112_MAX or new_reserve1 > U112_MAX:
        return False

    x0 = p.equilibrium_reserve0
    y0 = p.equilibrium_reserve1

    if new_reserve0 >= x0:
        if new_reserve1 >= y0:
            return True
        return new_reserve0 >= f(new_reserve1, p.price_y, p.price_x, y0, x0, p.concentration_y)
    if new_reserve1 < y0:
        return False
    return new_reserve1 >= f(new_reserve0, p.price_x, p.price_y, x0, y0, p.concentration_x)