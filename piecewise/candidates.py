"""Per-pool routing state that changes while input is assigned to pools."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from piecewise.curve import CurveError
from piecewise.fixed import MathError, MathOverflowError
from piecewise.models import ComputationFailedError, NoViablePoolError, PoolSnapshot
from piecewise.pricing import get_current_price, get_current_reserves
from piecewise.quote import find_reserve0_for_reserve1, find_reserve1_for_reserve0


@contextmanager
def _computation() -> Iterator[None]:
    """Turn curve and arithmetic failures into routing failures."""
    try:
        yield
    except (CurveError, MathError) as exc:
        raise ComputationFailedError(exc) from exc


@dataclass
class RoutePool:
    """A pool taking part in a route, with reserves simulated as input is assigned.

    ``price`` is the pool's marginal price. When token0 is the input a higher
    price is better; when token0 is the output a lower price is better.
    """

    snapshot: PoolSnapshot
    reserve0: int
    reserve1: int
    price: int
    token0_is_input: bool
    allocated_in: int = 0

    @classmethod
    def from_snapshot(cls, snapshot: PoolSnapshot, token_in: str, token_out: str) -> RoutePool:
        """Build the routing state for a pool trading token_in for token_out.

        Raises NoViablePoolError if the pool does not trade that pair.
        """
        token_in = token_in.lower()
        token_out = token_out.lower()
        if snapshot.token0 == token_in and snapshot.token1 == token_out:
            token0_is_input = True
        elif snapshot.token1 == token_in and snapshot.token0 == token_out:
            token0_is_input = False
        else:
            raise NoViablePoolError(
                f"pool {snapshot.pool_address} does not trade {token_in} for {token_out}"
            )

        with _computation():
            price = get_current_price(snapshot.params, snapshot.reserve0, snapshot.reserve1)

        return cls(
            snapshot=snapshot,
            reserve0=snapshot.reserve0,
            reserve1=snapshot.reserve1,
            price=price,
            token0_is_input=token0_is_input,
        )

    @property
    def output_reserve(self) -> int:
        """The reserve of the token this pool pays out."""
        return self.reserve1 if self.token0_is_input else self.reserve0

    def apply_input(self, amount: int) -> None:
        """Assign more input to the pool, moving its reserves and price along the curve."""
        params = self.snapshot.params
        with _computation():
            if self.token0_is_input:
                reserve0 = self.reserve0 + amount
                reserve1 = find_reserve1_for_reserve0(params, reserve0)
            else:
                reserve1 = self.reserve1 + amount
                reserve0 = find_reserve0_for_reserve1(params, reserve1)
            price = get_current_price(params, reserve0, reserve1)

        self.allocated_in += amount
        self.reserve0 = reserve0
        self.reserve1 = reserve1
        self.price = price


def compute_delta_to_target_price(pool: RoutePool, target_price: int) -> int:
    """Return the input needed to move the pool's marginal price to target_price.

    Returns 0 when the pool is already at or past the target.
    """
    if pool.token0_is_input:
        if target_price >= pool.price:
            return 0
    elif target_price <= pool.price:
        return 0

    with _computation():
        reserve0, reserve1 = get_current_reserves(pool.snapshot.params, target_price)
        delta = reserve0 - pool.reserve0 if pool.token0_is_input else reserve1 - pool.reserve1
        if delta < 0:
            raise MathOverflowError("target reserves lie behind the current reserves")
    return delta