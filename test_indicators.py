import pytest

from timeblock.exceptions import IndicatorNotFoundError
from timeblock.services.indicator_service import IndicatorService


def test_default_indicators():
    service = IndicatorService()
    assert [service.display(i) for i in service.indicators] == ['5/7', '4/7', '20/40', '15/20']
    assert service.get('2').label == 'Workout'


def test_services_do_not_share_state():
    first = IndicatorService()
    first.set_numerator('1', 7)
    assert IndicatorService().get('1').numerator == 5


def test_add_rename_and_remove():
    service = IndicatorService(indicators=[])
    indicator = service.add()
    assert (indicator.label, indicator.numerator, indicator.denominator) == ('New Indicator', 0, 7)
    assert service.rename(indicator.id, 'Reading').label == 'Reading'
    service.remove(indicator.id)
    assert service.indicators == []
    with pytest.raises(IndicatorNotFoundError):
        service.get(indicator.id)


@pytest.mark.parametrize('value,expected', [('3', 3), ('', 0), ('abc', 0), (None, 0)])
def test_numerator_falls_back_to_zero(value, expected):
    service = IndicatorService()
    assert service.set_numerator('1', value).numerator == expected


@pytest.mark.parametrize('value,expected', [('10', 10), ('', 1), ('0', 1), ('x', 1)])
def test_denominator_falls_back_to_one(value, expected):
    service = IndicatorService()
    assert service.set_denominator('1', value).denominator == expected
