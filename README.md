# piecewise

Exact integer math for EulerSwap curves and a router that splits an
exact-input trade across several EulerSwap pools.

All amounts, prices and concentrations are plain Python `int`s in the
fixed-point scales the on-chain contracts use (1e18 for prices and
concentrations unless stated; the `_ray` variants use 1e27). No rounding is
done with floats.

## Install

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `piecewise.fixed`: full-precision helpers `ceil_div`, `mul_div_floor`,
  `mul_div_ceil`, `sqrt_floor`, `sqrt_ceil` and `delta_ratio`, plus the
  constants `ONE_E6` … `ONE_E54`, `U256_MAX` and `U248_MAX`. Results that do
  not fit in 256 bits raise `MathOverflowError`, a zero divisor raises
  `DivisionByZeroError`; both subclass `MathError`.
- `piecewise.codec`: lenient decoding of integer fields from JSON-like
  values: `parse_u64` and `parse_optional_u128` accept numbers or decimal
  strings (and `None` for the optional one) and raise `ValueError`
  otherwise; `serialize_usize` encodes a size as a float.
- `piecewise.curve`: the frozen `EulerSwapParams` dataclass (equilibrium
  reserves must fit in 112 bits; fee and addresses have zero defaults) and
  the curve functions `f`, `f_inverse`, `df_dx`, `df_dx_ray`,
  `compute_scale` and `verify`. Failures raise subclasses of `CurveError`:
  `PriceBelowApexError`, `NoSolutionError`, `SwapLimitExceededError`.
- `piecewise.quote`: `find_reserve1_for_reserve0`,
  `find_reserve0_for_reserve1`, `find_curve_point` (no fee) and
  `compute_quote` (fee included; a zero amount quotes 0, an amount above
  112 bits raises `SwapLimitExceededError`).
- `piecewise.pricing`: marginal prices `get_current_price` and
  `get_current_price_ray`, and the reverse lookup from a price to the
  reserves on the curve, `get_current_reserves` and
  `get_current_reserves_ray`, which raise `NoSolutionError` when no lattice
  point comes close enough.
- `piecewise.models`: the frozen dataclasses `PoolSnapshot`,
  `ExactInSwapRequest`, `SwapAllocation` and `ExactInSwapResult`, and the
  errors `RouteError`, `NoViablePoolError`, `AmountTooSmallError` and
  `ComputationFailedError` (which keeps the underlying error as `cause`).
  Addresses must be `0x` followed by 40 hex digits and are stored in lower
  case; amounts must be unsigned 256-bit integers.
- `piecewise.candidates`: `RoutePool`, the mutable per-pool state used
  while routing (`from_snapshot`, `apply_input`, `output_reserve`), and
  `compute_delta_to_target_price`.
- `piecewise.router`: `find_best_route_exact_in`.

## Quoting a swap

```python
from piecewise.curve import EulerSwapParams
from piecewise.quote import compute_quote

params = EulerSwapParams(
    equilibrium_reserve0=100 * 10**18,
    equilibrium_reserve1=100 * 10**18,
    price_x=10**18,
    price_y=10**18,
    concentration_x=9 * 10**17,
    concentration_y=9 * 10**17,
    fee=10**15,
)

out = compute_quote(params, 100 * 10**18, 100 * 10**18, 10**18,
                    exact_in=True, token0_is_input=True)
```

## Routing across pools

```python
from piecewise.curve import EulerSwapParams
from piecewise.models import ExactInSwapRequest, PoolSnapshot
from piecewise.router import find_best_route_exact_in

token_a = "0x" + "11" * 20
token_b = "0x" + "22" * 20

pool = PoolSnapshot(
    pool_address="0x" + "33" * 20,
    token0=token_a,
    token1=token_b,
    reserve0=2_000_000_000,
    reserve1=2_000_000_000,
    params=EulerSwapParams(
        equilibrium_reserve0=2_000_000_000,
        equilibrium_reserve1=2_000_000_000,
        price_x=10**18,
        price_y=10**18,
        concentration_x=97 * 10**16,
        concentration_y=97 * 10**16,
        fee=10**16,
    ),
)

result = find_best_route_exact_in(
    [pool], ExactInSwapRequest(token_in=token_a, token_out=token_b, amount_in=1_000_000)
)
for allocation in result.allocations:
    print(allocation.pool, allocation.amount_in)
print("total out:", result.total_out)
```

The router skips pools that do not trade the requested pair or have no
reserve on the output side, sorts the rest by marginal price, brings the
best pools down to the price of the next one, then hands out any remaining
input in 1% chunks, each to the pool quoting the most for it. It raises
`AmountTooSmallError` for a zero input, `NoViablePoolError` when no pool is
left, and `ComputationFailedError` when the curve math fails.

## What it does not do

`piecewise` is a library only. It has no command-line program, does not
fetch pool state from a chain and does not build or send transactions:
pool snapshots must be supplied by the caller, and only exact-input routing
is provided.