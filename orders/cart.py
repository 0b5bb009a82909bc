"""
Session-scoped shopping cart.

Lines are keyed by the product and its customisation: the same item with the
same variation and add-on counts collapses into one line, anything else is a
separate line.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional

from .pricing import line_total, normalize_add_ons, to_money

SESSION_KEY = 'cart'


def line_key(menu_item_id, variation_id=None, add_on_counts=None):
    counts = add_on_counts or {}
    add_on_part = ','.join(
        f"{add_on_id}x{count}" for add_on_id, count in sorted((str(k), v) for k, v in counts.items())
    )
    return f"{menu_item_id}:{variation_id if variation_id is not None else 'default'}:{add_on_part}"


@dataclass
class CartLine:
    line_id: str
    menu_item_id: str
    name: str
    unit_total: Decimal
    quantity: int
    variation: Optional[dict] = None
    add_ons: List[dict] = field(default_factory=list)

    @property
    def subtotal(self):
        return to_money(self.unit_total * self.quantity)

    def to_dict(self):
        return {
            'line_id': self.line_id,
            'menu_item_id': self.menu_item_id,
            'name': self.name,
            'unit_total': str(self.unit_total),
            'quantity': self.quantity,
            'variation': self.variation,
            'add_ons': self.add_ons,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            line_id=data['line_id'],
            menu_item_id=data['menu_item_id'],
            name=data['name'],
            unit_total=Decimal(data['unit_total']),
            quantity=int(data['quantity']),
            variation=data.get('variation'),
            add_ons=list(data.get('add_ons') or []),
        )


class Cart:
    def __init__(self, lines=None):
        self._lines: Dict[str, CartLine] = {}
        for line in lines or []:
            self._lines[line.line_id] = line

    @property
    def lines(self):
        return list(self._lines.values())

    @property
    def is_empty(self):
        return not self._lines

    def get(self, line_id):
        return self._lines.get(line_id)

    def add(self, item, quantity=1, variation=None, add_ons=None, at=None):
        """Add ``quantity`` of a customised item and return the affected line."""
        quantity = int(quantity)
        if quantity <= 0:
            raise ValueError("Quantity must be at least 1")

        selections = normalize_add_ons(add_ons)
        key = line_key(
            item.id,
            variation.id if variation is not None else None,
            {add_on.id: count for add_on, count in selections},
        )

        line = self._lines.get(key)
        if line is not None:
            line.quantity += quantity
            return line

        line = CartLine(
            line_id=key,
            menu_item_id=str(item.id),
            name=item.name,
            unit_total=line_total(item, variation, selections, at=at),
            quantity=quantity,
            variation=(
                {'id': variation.id, 'name': variation.name, 'price': str(to_money(variation.price))}
                if variation is not None else None
            ),
            add_ons=[
                {'id': add_on.id, 'name': add_on.name, 'price': str(to_money(add_on.price)), 'quantity': count}
                for add_on, count in selections
            ],
        )
        self._lines[key] = line
        return line

    def update_quantity(self, line_id, quantity):
        if line_id not in self._lines:
            raise KeyError(line_id)
        quantity = int(quantity)
        if quantity <= 0:
            del self._lines[line_id]
            return None
        self._lines[line_id].quantity = quantity
        return self._lines[line_id]

    def remove(self, line_id):
        self._lines.pop(line_id, None)

    def clear(self):
        self._lines.clear()

    def total_items(self):
        return sum(line.quantity for line in self._lines.values())

    def total_price(self):
        return to_money(sum((line.unit_total * line.quantity for line in self._lines.values()),
                            Decimal('0.00')))

    # Session persistence

    @classmethod
    def load(cls, session):
        return cls([CartLine.from_dict(data) for data in session.get(SESSION_KEY, [])])

    def save(self, session):
        session[SESSION_KEY] = [line.to_dict() for line in self._lines.values()]
        session.modified = True

    def to_representation(self):
        return {
            'lines': [dict(line.to_dict(), subtotal=str(line.subtotal)) for line in self._lines.values()],
            'total_items': self.total_items(),
            'total_price': str(self.total_price()),
        }
