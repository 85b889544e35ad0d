import pytest

from piecewise.curve import EulerSwapParams, NoSolutionError, df_dx, df_dx_ray
from piecewise.fixed import ONE_E18, ONE_E27, ONE_E36, ONE_E54, ceil_div, mul_div_ceil
from piecewise.pricing import (
    get_current_price,
    get_current_price_ray,
    get_current_reserves,
    get_current_reserves_ray,
)

EQ = 100 * ONE_E18


@pytest.fixture
def skewed_params():
    return EulerSwapParams(
        equilibrium_reserve0=EQ,
        equilibrium_reserve1=EQ,
        price_x=2 * ONE_E18,
        price_y=ONE_E18,
        concentration_x=ONE_E18 // 10,
        concentration_y=ONE_E18 // 5,
    )


@pytest.fixture
def stable_params():
    return EulerSwapParams(
        equilibrium_reserve0=7882338570209,
        equilibrium_reserve1=2893638536189,
        price_x=1000000,
        price_y=1000472,
        concentration_x=999000000000000100,
        concentration_y=999000000000000100,
        fee=50000000000000,
    )


def test_get_current_price_left_of_apex(skewed_params):
    reserve0 = EQ - 10 * ONE_E18
    expected = df_dx(reserve0, 2 * ONE_E18, ONE_E18, EQ, ONE_E18 // 10)
    assert get_current_price(skewed_params, reserve0, 0) == expected


def test_get_current_price_at_apex(skewed_params):
    expected = mul_div_ceil(2 * ONE_E18, ONE_E18, ONE_E18)
    assert get_current_price(skewed_params, EQ, EQ) == expected


def test_get_current_price_right_of_apex(skewed_params):
    reserve1 = EQ - 10 * ONE_E18
    slope = df_dx(reserve1, ONE_E18, 2 * ONE_E18, EQ, ONE_E18 // 5)
    assert get_current_price(skewed_params, EQ + 1, reserve1) == ceil_div(ONE_E36, slope)


def test_get_current_price_right_branch_at_equilibrium_reserve1(skewed_params):
    expected = mul_div_ceil(ONE_E18, ONE_E18, 2 * ONE_E18)
    assert get_current_price(skewed_params, EQ + 1, EQ) == expected


def test_get_current_price_ray_left_of_apex(skewed_params):
    reserve0 = EQ - 10 * ONE_E18
    expected = df_dx_ray(reserve0, 2 * ONE_E18, ONE_E18, EQ, ONE_E18 // 10)
    assert get_current_price_ray(skewed_params, reserve0, 0) == expected


def test_get_current_price_ray_at_apex(skewed_params):
    expected = mul_div_ceil(2 * ONE_E18, ONE_E27, ONE_E18)
    assert get_current_price_ray(skewed_params, EQ, EQ) == expected


def test_get_current_price_ray_right_of_apex(skewed_params):
    reserve1 = EQ - 10 * ONE_E18
    slope = df_dx_ray(reserve1, ONE_E18, 2 * ONE_E18, EQ, ONE_E18 // 5)
    assert get_current_price_ray(skewed_params, EQ + 1, reserve1) == ceil_div(ONE_E54, slope)


def test_get_current_price_ray_right_branch_at_equilibrium_reserve1(skewed_params):
    expected = mul_div_ceil(ONE_E18, ONE_E27, 2 * ONE_E18)
    assert get_current_price_ray(skewed_params, EQ + 1, EQ) == expected


@pytest.mark.parametrize(
    "reserve0, reserve1",
    [
        (7222790500820, 3552935643880),
        (3552935643880, 7226272020790),
    ],
)
def test_price_round_trip(stable_params, reserve0, reserve1):
    price = get_current_price(stable_params, reserve0, reserve1)
    assert price > 0
    assert get_current_reserves(stable_params, price) == (reserve0, reserve1)


@pytest.mark.parametrize(
    "reserve0, reserve1",
    [
        (7222790500820, 3552935643880),
        (3552935643880, 7226272020790),
    ],
)
def test_price_ray_round_trip(stable_params, reserve0, reserve1):
    price = get_current_price_ray(stable_params, reserve0, reserve1)
    assert price > 0
    assert get_current_reserves_ray(stable_params, price) == (reserve0, reserve1)


def test_get_current_reserves_known_price(stable_params):
    reserves = get_current_reserves(stable_params, 999714422196255613)
    assert reserves == (7237025880666, 3538704296075)


def test_get_current_reserves_apex_returns_equilibrium(stable_params):
    apex = mul_div_ceil(1000000, ONE_E18, 1000472)
    assert get_current_reserves(stable_params, apex) == (7882338570209, 2893638536189)


def test_get_current_reserves_no_solution_empty_side():
    params = EulerSwapParams(
        equilibrium_reserve0=0,
        equilibrium_reserve1=8924,
        price_x=1000136039999999872,
        price_y=999934470000000000,
        concentration_x=690000000000000000,
        concentration_y=900000000000000000,
        fee=1000000000000000,
    )
    with pytest.raises(NoSolutionError):
        get_current_reserves(params, 999719101195561546)


def test_get_current_reserves_no_solution_price_too_far(stable_params):
    with pytest.raises(NoSolutionError):
        get_current_reserves(stable_params, 88684177661935620)