"""Greedy routing of an exact-input swap across several EulerSwap pools."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from piecewise.candidates import RoutePool, compute_delta_to_target_price
from piecewise.curve import CurveError
from piecewise.fixed import MathError
from piecewise.models import (
    AmountTooSmallError,
    ComputationFailedError,
    ExactInSwapRequest,
    ExactInSwapResult,
    NoViablePoolError,
    PoolSnapshot,
    RouteError,
    SwapAllocation,
)
from piecewise.quote import compute_quote


@contextmanager
def _computation() -> Iterator[None]:
    """Turn curve and arithmetic failures into routing failures."""
    try:
        yield
    except (CurveError, MathError) as exc:
        raise ComputationFailedError(exc) from exc


def _collect_candidates(
    pools: Iterable[PoolSnapshot], request: ExactInSwapRequest
) -> list[RoutePool]:
    candidates = []
    for snapshot in pools:
        try:
            pool = RoutePool.from_snapshot(snapshot, request.token_in, request.token_out)
        except RouteError:
            continue
        if pool.output_reserve != 0:
            candidates.append(pool)
    return candidates


def _price_rank(pool: RoutePool) -> int:
    # Selling token0: a higher price is better. Selling token1: a lower price is better.
    return -pool.price if pool.token0_is_input else pool.price


def _reserve_rank(pool: RoutePool) -> int:
    return -pool.reserve1 if pool.token0_is_input else pool.reserve1


def _equalize(candidates: list[RoutePool], remaining: int) -> int:
    """Move the best pools down to the price of the next one; return input left over."""
    dead: set[int] = set()
    liquid: set[int] = set()
    equalized = 1

    while equalized < len(candidates) and remaining > 0:
        for i, pool in enumerate(candidates[:equalized]):
            if i in dead or equalized in dead:
                continue

            target_price = candidates[equalized].price
            try:
                delta = compute_delta_to_target_price(pool, target_price)
            except RouteError:
                if i in liquid:
                    dead.add(equalized)
                else:
                    dead.add(i)
                continue
            liquid.add(i)
            liquid.add(equalized)

            if delta == 0:
                continue

            step = min(delta, remaining)
            pool.apply_input(step)
            remaining -= step
        equalized += 1

    return remaining


def _fill_chunks(candidates: list[RoutePool], remaining: int) -> None:
    """Hand out the remaining input in 1% chunks to whichever pool pays most."""
    candidates.sort(key=_reserve_rank)

    min_chunk = remaining // 100 or remaining

    while remaining > 0:
        chunk = min(min_chunk, remaining)

        best_out = 0
        best_index = 0
        for index, pool in enumerate(candidates):
            with _computation():
                out = compute_quote(
                    pool.snapshot.params,
                    pool.reserve0 + chunk,
                    pool.reserve1,
                    chunk,
                    True,
                    pool.token0_is_input,
                )
            if out > best_out:
                best_out = out
                best_index = index

        candidates[best_index].apply_input(chunk)
        remaining -= chunk


def find_best_route_exact_in(
    pools: Iterable[PoolSnapshot], request: ExactInSwapRequest
) -> ExactInSwapResult:
    """Split request.amount_in across pools to maximise the total output.

    Pools are first brought to a common marginal price, best first; any input
    left after that is distributed in 1% chunks to the pool quoting the most.
    """
    if request.amount_in == 0:
        raise AmountTooSmallError("amount_in must be positive")

    candidates = _collect_candidates(pools, request)
    if not candidates:
        raise NoViablePoolError(
            f"no pool trades {request.token_in} for {request.token_out}"
        )

    candidates.sort(key=_price_rank)

    remaining = _equalize(candidates, request.amount_in)
    if remaining > 0:
        _fill_chunks(candidates, remaining)

    allocations = []
    total_out = 0
    for pool in candidates:
        if pool.allocated_in == 0:
            continue
        snapshot = pool.snapshot
        with _computation():
            total_out += compute_quote(
                snapshot.params,
                snapshot.reserve0,
                snapshot.reserve1,
                pool.allocated_in,
                True,
                pool.token0_is_input,
            )
        allocations.append(SwapAllocation(pool=snapshot.pool_address, amount_in=pool.allocated_in))

    return ExactInSwapResult(total_out=total_out, allocations=allocations)