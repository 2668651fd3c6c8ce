# nosec B101


from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest

from domain.exceptions.rates import InvalidRateError
from domain.models.rates import (
    AVERAGE_LABEL,
    BCV_LABEL,
    DEFAULT_RATES,
    PARALLEL_LABEL,
    Rate,
    get_default_rates,
    is_default_rates,
)


def test_rate_converts_float_without_binary_noise():
    rate = Rate(BCV_LABEL, 36.52)
    assert rate.value == Decimal('36.52')
    assert isinstance(rate.value, Decimal)


def test_rate_is_immutable():
    rate = Rate(BCV_LABEL, Decimal('36.52'))
    with pytest.raises(FrozenInstanceError):
        rate.value = Decimal('1')


@pytest.mark.parametrize('name', ['', '   ', None, 42])
def test_rate_rejects_bad_names(name):
    with pytest.raises(InvalidRateError):
        Rate(name, Decimal('1.5'))


@pytest.mark.parametrize('value', [0, -3.2, 'abc', None, True, 'NaN', 'Infinity', [1]])
def test_rate_rejects_bad_values(value):
    with pytest.raises(InvalidRateError):
        Rate(BCV_LABEL, value)


def test_parse_returns_none_instead_of_raising():
    assert Rate.parse(BCV_LABEL, 'x') is None
    assert Rate.parse(BCV_LABEL, '36.5') == Rate(BCV_LABEL, Decimal('36.5'))


def test_default_rates_content():
    assert get_default_rates() == [
        Rate(BCV_LABEL, Decimal('35.88')),
        Rate(PARALLEL_LABEL, Decimal('37.5')),
        Rate(AVERAGE_LABEL, Decimal('36.69')),
    ]


def test_get_default_rates_returns_a_copy():
    rates = get_default_rates()
    rates.clear()
    assert len(DEFAULT_RATES) == 3


def test_is_default_rates_ignores_order():
    assert is_default_rates(list(reversed(DEFAULT_RATES))) is True


def test_is_default_rates_compares_values_numerically():
    rates = [
        Rate(BCV_LABEL, Decimal('35.880')),
        Rate(PARALLEL_LABEL, 37.5),
        Rate(AVERAGE_LABEL, '36.69'),
    ]
    assert is_default_rates(rates) is True


def test_is_default_rates_false_for_real_data():
    assert is_default_rates([Rate(BCV_LABEL, 35.88), Rate(PARALLEL_LABEL, 37.5)]) is False
    assert is_default_rates([Rate(BCV_LABEL, 35.89), Rate(PARALLEL_LABEL, 37.5), Rate(AVERAGE_LABEL, 36.69)]) is False
    assert is_default_rates([]) is False
