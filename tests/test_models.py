import pytest

from piecewise.curve import EulerSwapParams, NoSolutionError
from piecewise.fixed import U256_MAX, DivisionByZeroError
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

USDC = "0x078d782b760474a361dda0af3839290b0ef57ad6"
USDT = "0x9151434b16b9763660705744891fa906f660ecc5"
POOL = "0x97711bc4e7ebc1b1d691d54f3769a23544d9a8a8"


@pytest.fixture
def params():
    return EulerSwapParams(
        equilibrium_reserve0=7882338570209,
        equilibrium_reserve1=2893638536189,
        price_x=1000000,
        price_y=1000472,
        concentration_x=999000000000000100,
        concentration_y=999000000000000100,
        fee=50000000000000,
    )


def test_computation_failed_keeps_cause():
    cause = NoSolutionError("none")
    error = ComputationFailedError(cause)
    assert error.cause is cause
    with pytest.raises(RouteError):
        raise error


@pytest.mark.parametrize("error_type", [NoViablePoolError, AmountTooSmallError])
def test_route_errors_share_base(error_type):
    error = error_type()
    assert isinstance(error, RouteError)
    with pytest.raises(RouteError) as info:
        raise error
    assert info.value is error
    assert info.type is error_type


def test_computation_failed_wraps_math_error():
    error = ComputationFailedError(DivisionByZeroError("division by zero"))
    assert isinstance(error.cause, DivisionByZeroError)
    assert "DivisionByZeroError" in str(error)


def test_snapshot_normalises_addresses(params):
    snapshot = PoolSnapshot(POOL.upper().replace("0X", "0x"), USDC.upper().replace("0X", "0x"), USDT, 1, 2, params)
    assert snapshot.token0 == USDC
    assert snapshot.pool_address == POOL
    assert snapshot == PoolSnapshot(POOL, USDC, USDT, 1, 2, params)


@pytest.mark.parametrize("reserve", [-1, U256_MAX + 1])
def test_snapshot_rejects_out_of_range_reserve(params, reserve):
    with pytest.raises(ValueError):
        PoolSnapshot(POOL, USDC, USDT, reserve, 0, params)


def test_snapshot_accepts_u256_max(params):
    snapshot = PoolSnapshot(POOL, USDC, USDT, U256_MAX, 0, params)
    assert snapshot.reserve0 == U256_MAX


def test_snapshot_rejects_bad_address(params):
    with pytest.raises(ValueError):
        PoolSnapshot("0x1234", USDC, USDT, 0, 0, params)


def test_request_rejects_negative_amount():
    with pytest.raises(ValueError):
        ExactInSwapRequest(USDT, USDC, -1)


def test_request_rejects_non_integer_amount():
    with pytest.raises(ValueError):
        ExactInSwapRequest(USDT, USDC, 1.5)


def test_request_keeps_fields():
    request = ExactInSwapRequest(USDT, USDC, 10_000_000)
    assert (request.token_in, request.token_out, request.amount_in) == (USDT, USDC, 10_000_000)


def test_result_freezes_allocations():
    allocations = [SwapAllocation(POOL, 5), SwapAllocation(POOL, 7)]
    result = ExactInSwapResult(12, allocations)
    allocations.append(SwapAllocation(POOL, 1))
    assert result.allocations == (SwapAllocation(POOL, 5), SwapAllocation(POOL, 7))
    assert result.total_out == 12


def test_result_rejects_negative_total():
    with pytest.raises(ValueError):
        ExactInSwapResult(-5, [])


def test_allocation_rejects_bad_pool():
    with pytest.raises(ValueError):
        SwapAllocation("not an address", 1)