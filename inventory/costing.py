"""
Ingredient cost and margin for menu items.

Costs come from each material's current unit cost (the price of its last
purchase). Nothing here touches stock.
"""
from collections import namedtuple
from decimal import Decimal, ROUND_HALF_UP

from django.db.models import Count, F, Sum

from .models import Material, Purchase

FOUR_PLACES = Decimal('0.0001')
CENT = Decimal('0.01')

CostingSummary = namedtuple('CostingSummary', ['selling_price', 'cost_per_serving', 'margin', 'margin_percent'])
RecipeLine = namedtuple('RecipeLine', ['material_id', 'material', 'unit', 'unit_cost', 'quantity', 'line_cost'])


def _entries(menu_item):
    return menu_item.recipe_entries.select_related('material').all()


def recipe_breakdown(menu_item):
    """Per-ingredient cost of one serving."""
    lines = []
    for entry in _entries(menu_item):
        material = entry.material
        lines.append(RecipeLine(
            material_id=material.id,
            material=material.name,
            unit=material.unit,
            unit_cost=material.unit_cost,
            quantity=entry.quantity_used,
            line_cost=(material.unit_cost * entry.quantity_used).quantize(FOUR_PLACES, rounding=ROUND_HALF_UP),
        ))
    return lines


def cost_per_serving(menu_item):
    """Sum of unit cost x quantity over the recipe, rounded once to cents."""
    total = sum(
        (entry.material.unit_cost * entry.quantity_used for entry in _entries(menu_item)),
        Decimal('0'),
    )
    return total.quantize(CENT, rounding=ROUND_HALF_UP)


def costing_summary(menu_item):
    selling_price = Decimal(menu_item.base_price).quantize(CENT, rounding=ROUND_HALF_UP)
    cost = cost_per_serving(menu_item)
    margin = selling_price - cost
    if selling_price == 0:
        margin_percent = None
    else:
        margin_percent = (margin / selling_price * 100).quantize(CENT, rounding=ROUND_HALF_UP)
    return CostingSummary(selling_price, cost, margin, margin_percent)


def inventory_summary():
    """Totals for the inventory dashboard."""
    materials = Material.objects.all()
    value = sum((m.inventory_value for m in materials), Decimal('0'))
    purchases = Purchase.objects.aggregate(count=Count('id'), spent=Sum('total_paid'))
    return {
        'total_items': materials.count(),
        'total_value': value.quantize(CENT, rounding=ROUND_HALF_UP),
        'low_stock_count': materials.filter(stock_quantity__gt=0, stock_quantity__lte=F('low_stock_threshold')).count(),
        'out_of_stock_count': materials.filter(stock_quantity__lte=0).count(),
        'total_purchases': purchases['count'],
        'total_spent': purchases['spent'] or Decimal('0.00'),
    }
