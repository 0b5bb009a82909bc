from decimal import Decimal
from types import SimpleNamespace

import pytest

from orders.cart import Cart, line_key


def item(id='m1', name='Latte', base='100'):
    return SimpleNamespace(id=id, name=name, base_price=Decimal(base), discount_price=None,
                           is_on_discount=False, promo_price=None)


class Option:
    def __init__(self, id, name, price):
        self.id = id
        self.name = name
        self.price = Decimal(price)


LARGE = Option(7, "Large", "130")
SHOT = Option(1, "Extra Shot", "20")
SYRUP = Option(2, "Caramel", "15")


class FakeSession(dict):
    modified = False


def test_line_key_sorts_add_ons():
    assert line_key('m1', None, {2: 1, 1: 3}) == line_key('m1', None, {1: 3, 2: 1})
    assert line_key('m1', None, {}) == 'm1:default:'


def test_identical_customisation_merges():
    cart = Cart()
    cart.add(item(), 1, LARGE, {SHOT: 1})
    cart.add(item(), 2, LARGE, {SHOT: 1})
    assert len(cart.lines) == 1
    assert cart.lines[0].quantity == 3
    assert cart.total_items() == 3


def test_different_customisation_is_a_new_line():
    cart = Cart()
    cart.add(item(), 1, LARGE, {SHOT: 1})
    cart.add(item(), 1, LARGE, {SHOT: 2})
    cart.add(item(), 1)
    assert len(cart.lines) == 3


def test_totals():
    cart = Cart()
    cart.add(item(), 2, LARGE, {SHOT: 1, SYRUP: 2})   # 130 + 20 + 30 = 180
    cart.add(item('m2', 'Cookie', '45'), 3)
    assert cart.lines[0].unit_total == Decimal('180.00')
    assert cart.total_price() == Decimal('495.00')


def test_update_quantity_to_zero_removes_line():
    cart = Cart()
    line = cart.add(item(), 2)
    cart.update_quantity(line.line_id, 0)
    assert cart.is_empty


def test_update_unknown_line():
    with pytest.raises(KeyError):
        Cart().update_quantity('nope', 1)


def test_add_requires_positive_quantity():
    with pytest.raises(ValueError):
        Cart().add(item(), 0)


def test_remove_and_clear():
    cart = Cart()
    first = cart.add(item(), 1)
    cart.add(item('m2', 'Cookie', '45'), 1)
    cart.remove(first.line_id)
    assert [line.name for line in cart.lines] == ['Cookie']
    cart.clear()
    assert cart.total_price() == Decimal('0.00')


def test_session_round_trip_keeps_lines():
    session = FakeSession()
    cart = Cart()
    cart.add(item(), 2, LARGE, [SHOT, SHOT])
    cart.save(session)

    restored = Cart.load(session)
    assert session.modified
    assert restored.total_price() == cart.total_price()
    assert restored.lines[0].add_ons == [{'id': 1, 'name': 'Extra Shot', 'price': '20.00', 'quantity': 2}]


def test_representation():
    cart = Cart()
    cart.add(item(), 2)
    data = cart.to_representation()
    assert data['total_items'] == 2
    assert data['total_price'] == '200.00'
    assert data['lines'][0]['subtotal'] == '200.00'
