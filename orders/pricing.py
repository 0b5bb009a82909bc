"""
Line pricing for menu items.

A line is priced from one base plus its add-ons:

* the selected variation's price when a variation is chosen (variation prices
  are the full price at that size, not an increment over the base price),
* otherwise the item's effective price (discounted or regular),

plus ``add_on.price * count`` for every selected add-on.
"""
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings

CENT = Decimal('0.01')


def to_money(value):
    """Coerce ``value`` to a two-place Decimal."""
    if value is None:
        return Decimal('0.00')
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _explicit_discount(item, at=None):
    is_on_discount = getattr(item, 'is_on_discount', None)
    if callable(is_on_discount):
        active = is_on_discount(at)
    else:
        active = bool(is_on_discount)
    if active and item.discount_price is not None:
        return to_money(item.discount_price)
    return None


def effective_price(item, at=None):
    """
    Price charged for ``item`` before add-ons.

    The lowest of the base price, an active explicit discount and any
    promotional price. Never above the base price.
    """
    base = to_money(item.base_price)
    candidates = [base]
    discount = _explicit_discount(item, at)
    if discount is not None:
        candidates.append(discount)
    promo = getattr(item, 'promo_price', None)
    if promo is not None:
        candidates.append(to_money(promo))
    return min(candidates)


def has_discount(item, at=None):
    """True for an explicit discount and for an implicit one (effective < base)."""
    if _explicit_discount(item, at) is not None:
        return True
    return effective_price(item, at) < to_money(item.base_price)


def normalize_add_ons(add_ons):
    """
    Collapse add-on selections to ``[(add_on, count), ...]``.

    Accepts a mapping ``{add_on: count}``, a list of ``(add_on, count)`` pairs,
    or a flat list in which an add-on repeated N times counts N. Order of first
    appearance is kept.
    """
    if not add_ons:
        return []
    if hasattr(add_ons, 'items'):
        pairs = list(add_ons.items())
    else:
        pairs = []
        for entry in add_ons:
            if isinstance(entry, tuple):
                pairs.append(entry)
            else:
                pairs.append((entry, 1))

    counts = {}
    order = []
    for add_on, count in pairs:
        count = int(count)
        if count < 0:
            raise ValueError(f"Add-on count must be positive, got {count} for {add_on.name}")
        if count == 0:
            continue
        if add_on.id not in counts:
            counts[add_on.id] = [add_on, 0]
            order.append(add_on.id)
        counts[add_on.id][1] += count
    return [tuple(counts[key]) for key in order]


def add_ons_total(add_ons):
    return sum((to_money(add_on.price) * count for add_on, count in normalize_add_ons(add_ons)),
               Decimal('0.00'))


def line_total(item, variation=None, add_ons=None, at=None):
    """Unit price of one line: base (variation or effective price) plus add-ons."""
    if variation is not None:
        base = to_money(variation.price)
    else:
        base = effective_price(item, at)
    total = base + add_ons_total(add_ons)
    if total < 0:
        raise ValueError(f"Line total for {item.name} cannot be negative")
    return to_money(total)


def requires_customization(variations, add_ons):
    """An item with variations or add-ons must go through customisation first."""
    return bool(variations) or bool(add_ons)


def format_currency(amount, symbol=None):
    symbol = settings.CURRENCY_SYMBOL if symbol is None else symbol
    return f"{symbol}{to_money(amount):,.2f}"
