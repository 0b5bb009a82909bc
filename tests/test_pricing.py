from datetime import timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest
from django.utils import timezone

from inventory.models import MenuItem
from orders.pricing import (
    effective_price, format_currency, has_discount, line_total, normalize_add_ons,
    requires_customization, to_money,
)


def make_item(base='100.00', discount=None, on_discount=False, promo=None, name='Item'):
    return SimpleNamespace(
        name=name,
        base_price=Decimal(base),
        discount_price=Decimal(discount) if discount is not None else None,
        is_on_discount=on_discount,
        promo_price=Decimal(promo) if promo is not None else None,
    )


class AddOnStub:
    def __init__(self, id, price, name=None):
        self.id = id
        self.name = name or f"addon-{id}"
        self.price = Decimal(price)


def add_on(id, price, name=None):
    return AddOnStub(id, price, name)


class TestEffectivePrice:
    def test_base_price_without_discount(self):
        assert effective_price(make_item('99.5')) == Decimal('99.50')

    def test_flagged_discount_applies(self):
        assert effective_price(make_item('100', discount='80', on_discount=True)) == Decimal('80.00')

    def test_discount_price_ignored_when_not_flagged(self):
        assert effective_price(make_item('100', discount='80', on_discount=False)) == Decimal('100.00')

    def test_lowest_of_discount_and_promo(self):
        item = make_item('100', discount='80', on_discount=True, promo='75')
        assert effective_price(item) == Decimal('75.00')

    def test_never_above_base(self):
        assert effective_price(make_item('100', promo='120')) == Decimal('100.00')

    def test_implicit_discount_is_reported(self):
        item = make_item('100', promo='90')
        assert has_discount(item)
        assert not has_discount(make_item('100'))


class TestLineTotal:
    def test_variation_price_replaces_base(self):
        item = make_item('100', discount='50', on_discount=True)
        variation = SimpleNamespace(id=2, name='Large', price=Decimal('150'))
        assert line_total(item, variation) == Decimal('150.00')

    def test_effective_price_without_variation(self):
        item = make_item('100', discount='50', on_discount=True)
        assert line_total(item) == Decimal('50.00')

    def test_add_ons_multiplied_by_count(self):
        shot, syrup = add_on(1, '25'), add_on(2, '10.50')
        assert line_total(make_item('100'), add_ons={shot: 2, syrup: 1}) == Decimal('160.50')

    def test_flat_list_counts_repeats(self):
        shot = add_on(1, '25')
        assert line_total(make_item('100'), add_ons=[shot, shot, shot]) == Decimal('175.00')

    def test_free_add_on(self):
        assert line_total(make_item('100'), add_ons=[add_on(1, '0')]) == Decimal('100.00')

    def test_negative_count_rejected(self):
        with pytest.raises(ValueError):
            line_total(make_item('100'), add_ons={add_on(1, '5'): -1})

    def test_zero_count_dropped(self):
        assert normalize_add_ons({add_on(1, '5'): 0}) == []

    def test_result_is_two_place_decimal(self):
        total = line_total(make_item('33.333'))
        assert total == Decimal('33.33')
        assert total.as_tuple().exponent == -2


def test_requires_customization():
    assert requires_customization([object()], [])
    assert requires_customization([], [object()])
    assert not requires_customization([], [])


def test_format_currency():
    assert format_currency(Decimal('1234.5')) == '₱1,234.50'
    assert format_currency(0) == '₱0.00'
    assert format_currency('7', symbol='$') == '$7.00'


def test_to_money_rounds_half_up():
    assert to_money('2.345') == Decimal('2.35')
    assert to_money(None) == Decimal('0.00')


@pytest.mark.django_db
class TestMenuItemDiscountWindow:
    def test_window_bounds(self):
        now = timezone.now()
        item = MenuItem.objects.create(
            name='Mocha', base_price=Decimal('140'), discount_price=Decimal('110'), discount_active=True,
            discount_start_date=now - timedelta(days=1), discount_end_date=now + timedelta(days=1),
        )
        assert item.effective_price == Decimal('110.00')
        assert effective_price(item, at=now + timedelta(days=2)) == Decimal('140.00')
        assert effective_price(item, at=now - timedelta(days=2)) == Decimal('140.00')

    def test_flag_off(self):
        item = MenuItem.objects.create(name='Mocha', base_price=Decimal('140'), discount_price=Decimal('110'))
        assert item.effective_price == Decimal('140.00')
        assert not has_discount(item)
