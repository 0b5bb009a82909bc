from decimal import Decimal

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from authentication.models import CustomUser
from inventory.models import AddOn, Category, Material, MenuItem, RecipeEntry, Variation


@pytest.fixture(autouse=True)
def clear_cache():
    # Throttle history lives in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    return APIClient()


def _user(email, role, **extra):
    return CustomUser.objects.create_user(
        email=email, password='Str0ng-pass!', first_name='Test', last_name=role.title(), role=role, **extra
    )


@pytest.fixture
def manager(db):
    return _user('manager@kalye.test', CustomUser.ROLE_MANAGER)


@pytest.fixture
def cashier(db):
    return _user('cashier@kalye.test', CustomUser.ROLE_CASHIER)


@pytest.fixture
def kitchen_user(db):
    return _user('kitchen@kalye.test', CustomUser.ROLE_KITCHEN)


@pytest.fixture
def manager_client(manager):
    client = APIClient()
    client.force_authenticate(user=manager)
    return client


@pytest.fixture
def kitchen_client(kitchen_user):
    client = APIClient()
    client.force_authenticate(user=kitchen_user)
    return client


@pytest.fixture
def drinks(db):
    return Category.objects.create(code='drinks', name='Drinks', position=1)


@pytest.fixture
def latte(drinks):
    item = MenuItem.objects.create(category=drinks, name='Iced Latte', base_price=Decimal('120.00'))
    Variation.objects.create(menu_item=item, name='Regular', price=Decimal('120.00'), position=0)
    Variation.objects.create(menu_item=item, name='Large', price=Decimal('150.00'), position=1)
    AddOn.objects.create(menu_item=item, name='Extra Shot', category='espresso', price=Decimal('25.00'))
    AddOn.objects.create(menu_item=item, name='Oat Milk', category='milk', price=Decimal('30.00'))
    return item


@pytest.fixture
def cookie(db):
    """Plain item with no options"""
    return MenuItem.objects.create(name='Choco Cookie', base_price=Decimal('45.00'))


@pytest.fixture
def cheesecake(db):
    """Stock-tracked item"""
    return MenuItem.objects.create(
        name='Cheesecake', base_price=Decimal('160.00'),
        track_inventory=True, stock_quantity=3, low_stock_threshold=1,
    )


@pytest.fixture
def beans(db):
    return Material.objects.create(
        name='Espresso Beans', category='coffee', unit='g',
        unit_cost=Decimal('1.2000'), stock_quantity=Decimal('1000'), low_stock_threshold=Decimal('200'),
    )


@pytest.fixture
def milk(db):
    return Material.objects.create(
        name='Fresh Milk', category='dairy', unit='ml',
        unit_cost=Decimal('0.1000'), stock_quantity=Decimal('500'), low_stock_threshold=Decimal('1000'),
    )


@pytest.fixture
def latte_recipe(latte, beans, milk):
    RecipeEntry.objects.create(menu_item=latte, material=beans, quantity_used=Decimal('18'))
    RecipeEntry.objects.create(menu_item=latte, material=milk, quantity_used=Decimal('200'))
    return latte


def order_payload(*items, **overrides):
    payload = {
        'customer_name': 'Juan Dela Cruz',
        'contact_number': '09171234567',
        'service_type': 'dine-in',
        'table_number': '5',
        'payment_method': 'cash',
        'items': list(items),
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_order():
    return order_payload
