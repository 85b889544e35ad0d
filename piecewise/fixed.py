"""Fixed-point integer helpers operating on unsigned 256-bit values."""

from __future__ import annotations

import math

U256_MAX = (1 << 256) - 1
U248_MAX = (1 << 248) - 1

ONE_E6 = 10**6
ONE_E9 = 10**9
ONE_E15 = 10**15
ONE_E18 = 10**18
ONE_E27 = 10**27
ONE_E36 = 10**36
ONE_E54 = 10**54


class MathError(ArithmeticError):
    """Base class for fixed-point arithmetic failures."""


class DivisionByZeroError(MathError):
    """Raised when a divisor is zero."""


class MathOverflowError(MathError):
    """Raised when a result does not fit in 256 bits."""


def _check_fits(value: int) -> int:
    if value > U256_MAX:
        raise MathOverflowError("result exceeds 256 bits")
    return value


def ceil_div(a: int, b: int) -> int:
    """Return a / b rounded towards infinity."""
    if b == 0:
        raise DivisionByZeroError("division by zero")
    if a == 0:
        return 0
    return _check_fits((a + b - 1) // b)


def mul_div_floor(x: int, y: int, denominator: int) -> int:
    """Return x * y / denominator with full precision, rounded towards zero."""
    if denominator == 0:
        raise DivisionByZeroError("division by zero")
    return _check_fits((x * y) // denominator)


def mul_div_ceil(x: int, y: int, denominator: int) -> int:
    """Return x * y / denominator with full precision, rounded towards infinity."""
    if denominator == 0:
        raise DivisionByZeroError("division by zero")
    quotient, remainder = divmod(x * y, denominator)
    if remainder:
        quotient += 1
    return _check_fits(quotient)


def sqrt_floor(a: int) -> int:
    """Return the integer square root of a, rounded towards zero."""
    if a <= 1:
        return a
    return math.isqrt(a)


def sqrt_ceil(a: int) -> int:
    """Return the integer square root of a, rounded towards infinity."""
    result = sqrt_floor(a)
    return result + 1 if result * result < a else result


def delta_ratio(left: int, right: int, precision: int) -> int:
    """Return |left - right| / right scaled by precision, rounded towards zero."""
    return mul_div_floor(abs(left - right), precision, right)