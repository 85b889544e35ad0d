"""Pool snapshots, swap requests and results, and routing errors."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from piecewise.curve import EulerSwapParams
from piecewise.fixed import U256_MAX

_ADDRESS = re.compile(r"0x[0-9a-fA-F]{40}")


def _address(value: object, name: str) -> str:
    if not isinstance(value, str) or not _ADDRESS.fullmatch(value):
        raise ValueError(f"{name} must be a 20-byte hex address")
    return value.lower()


def _u256(value: object, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= U256_MAX:
        raise ValueError(f"{name} must be an unsigned 256-bit integer")
    return value


class RouteError(Exception):
    """Base class for routing failures."""


class NoViablePoolError(RouteError):
    """Raised when no supplied pool trades the requested pair."""


class AmountTooSmallError(RouteError):
    """Raised when the requested input amount is zero."""


class ComputationFailedError(RouteError):
    """Raised when curve math fails while routing."""

    def __init__(self, cause: Exception) -> None:
        super().__init__(f"computation failed: {cause!r}")
        self.cause = cause


@dataclass(frozen=True)
class PoolSnapshot:
    """State of one pool at the moment routing starts."""

    pool_address: str
    token0: str
    token1: str
    reserve0: int
    reserve1: int
    params: EulerSwapParams

    def __post_init__(self) -> None:
        for name in ("pool_address", "token0", "token1"):
            object.__setattr__(self, name, _address(getattr(self, name), name))
        _u256(self.reserve0, "reserve0")
        _u256(self.reserve1, "reserve1")


@dataclass(frozen=True)
class ExactInSwapRequest:
    """A request to sell an exact amount of token_in for token_out."""

    token_in: str
    token_out: str
    amount_in: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "token_in", _address(self.token_in, "token_in"))
        object.__setattr__(self, "token_out", _address(self.token_out, "token_out"))
        _u256(self.amount_in, "amount_in")


@dataclass(frozen=True)
class SwapAllocation:
    """The input amount routed through one pool."""

    pool: str
    amount_in: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "pool", _address(self.pool, "pool"))
        _u256(self.amount_in, "amount_in")


@dataclass(frozen=True)
class ExactInSwapResult:
    """The total output of a route and its per-pool allocations."""

    total_out: int
    allocations: tuple[SwapAllocation, ...]

    def __init__(self, total_out: int, allocations: Iterable[SwapAllocation]) -> None:
        object.__setattr__(self, "total_out", _u256(total_out, "total_out"))
        object.__setattr__(self, "allocations", tuple(allocations))