from decimal import Decimal

import pytest

from inventory.models import Material, MenuItem, Purchase, RecipeEntry

pytestmark = pytest.mark.django_db


class TestStorefrontMenu:
    def test_lists_available_items_with_options(self, api_client, latte, cookie):
        MenuItem.objects.create(name='Hidden', base_price=Decimal('10'), available=False)

        response = api_client.get('/inventory/menu/')

        assert response.status_code == 200
        by_name = {item['name']: item for item in response.data}
        assert set(by_name) == {'Iced Latte', 'Choco Cookie'}
        entry = by_name['Iced Latte']
        assert entry['requires_customization'] is True
        assert [v['name'] for v in entry['variations']] == ['Regular', 'Large']
        assert [g['category'] for g in entry['add_on_groups']] == ['espresso', 'milk']
        assert by_name['Choco Cookie']['requires_customization'] is False
        assert by_name['Choco Cookie']['category'] is None

    def test_effective_price_and_discount_flag(self, api_client, cookie):
        cookie.promo_price = Decimal('40.00')
        cookie.save()
        entry = api_client.get('/inventory/menu/').data[0]
        assert entry['effective_price'] == '40.00'
        assert entry['has_discount'] is True


class TestMenuItemAdmin:
    def test_create_with_options(self, manager_client, drinks):
        response = manager_client.post('/inventory/menu-items/', {
            'category': drinks.id, 'name': 'Matcha', 'base_price': '150.00',
            'variations': [{'name': '12oz', 'price': '150.00'}, {'name': '16oz', 'price': '170.00'}],
            'add_ons': [{'name': 'Pearls', 'category': 'toppings', 'price': '15.00'}],
        }, format='json')
        assert response.status_code == 201, response.data
        item = MenuItem.objects.get(name='Matcha')
        assert item.variations.count() == 2
        assert item.add_ons.get().category == 'toppings'

    def test_discount_window_must_be_ordered(self, manager_client):
        response = manager_client.post('/inventory/menu-items/', {
            'name': 'Mocha', 'base_price': '140.00',
            'discount_start_date': '2025-03-10T00:00:00Z', 'discount_end_date': '2025-03-01T00:00:00Z',
        }, format='json')
        assert response.status_code == 400

    def test_cashier_can_manage_kitchen_cannot(self, api_client, cashier, kitchen_client):
        api_client.force_authenticate(user=cashier)
        assert api_client.get('/inventory/menu-items/').status_code == 200
        assert kitchen_client.get('/inventory/menu-items/').status_code == 403


class TestMaterials:
    def test_crud(self, manager_client):
        response = manager_client.post('/inventory/materials/', {
            'name': 'Sugar', 'category': 'dry', 'unit': 'g', 'unit_cost': '0.05',
            'stock_quantity': '2000', 'low_stock_threshold': '500',
        }, format='json')
        assert response.status_code == 201
        assert response.data['stock_status'] == 'in'
        material_id = response.data['id']

        response = manager_client.patch(f'/inventory/materials/{material_id}/', {'stock_quantity': '100'}, format='json')
        assert response.data['stock_status'] == 'low'

        assert manager_client.delete(f'/inventory/materials/{material_id}/').status_code == 204
        assert not Material.objects.exists()

    def test_adjust_stock(self, manager_client, beans):
        response = manager_client.post(f'/inventory/materials/{beans.id}/adjust-stock/', {'delta': '-250'}, format='json')
        assert response.status_code == 200
        assert Decimal(response.data['stock_quantity']) == Decimal('750')

    def test_adjust_stock_floors_at_zero(self, manager_client, beans):
        manager_client.post(f'/inventory/materials/{beans.id}/adjust-stock/', {'delta': '-5000'}, format='json')
        beans.refresh_from_db()
        assert beans.stock_quantity == Decimal('0')

    def test_requires_back_office(self, api_client, beans):
        assert api_client.get('/inventory/materials/').status_code == 401


class TestPurchases:
    def test_purchase_restocks_material(self, manager_client, beans):
        response = manager_client.post('/inventory/purchases/', {
            'material': str(beans.id), 'quantity': '250', 'price_per_unit': '1.40',
        }, format='json')
        assert response.status_code == 201, response.data
        assert response.data['item_name'] == 'Espresso Beans'
        assert response.data['total_paid'] == '350.00'
        beans.refresh_from_db()
        assert beans.stock_quantity == Decimal('1250')
        assert beans.unit_cost == Decimal('1.40')

    def test_purchase_needs_material_or_name(self, manager_client):
        response = manager_client.post('/inventory/purchases/', {'quantity': '1', 'price_per_unit': '1'}, format='json')
        assert response.status_code == 400

    def test_delete_purchase_keeps_stock(self, manager_client, beans):
        purchase = Purchase.objects.create(material=beans, quantity=Decimal('10'), price_per_unit=Decimal('1'))
        assert manager_client.delete(f'/inventory/purchases/{purchase.id}/').status_code == 204
        beans.refresh_from_db()
        assert beans.stock_quantity == Decimal('1010')


class TestSuppliersAndRecipes:
    def test_supplier_crud(self, manager_client):
        response = manager_client.post('/inventory/suppliers/', {
            'item_name': 'Milk', 'category': 'dairy', 'supplier_name': 'Farm Fresh', 'contact': '0917-000-0000',
        }, format='json')
        assert response.status_code == 201
        supplier_id = response.data['id']
        response = manager_client.patch(f'/inventory/suppliers/{supplier_id}/', {'contact': 'farm@example.com'}, format='json')
        assert response.data['contact'] == 'farm@example.com'

    def test_recipes_filtered_by_menu_item(self, manager_client, latte_recipe, cookie, beans):
        RecipeEntry.objects.create(menu_item=cookie, material=beans, quantity_used=Decimal('1'))
        response = manager_client.get(f'/inventory/recipes/?menu_item={latte_recipe.id}')
        assert len(response.data) == 2
        assert {r['material_name'] for r in response.data} == {'Espresso Beans', 'Fresh Milk'}

    def test_duplicate_recipe_entry_rejected(self, manager_client, latte_recipe, beans):
        response = manager_client.post('/inventory/recipes/', {
            'menu_item': str(latte_recipe.id), 'material': str(beans.id), 'quantity_used': '5',
        }, format='json')
        assert response.status_code == 400

    def test_costing_endpoint(self, manager_client, latte_recipe):
        response = manager_client.get(f'/inventory/menu-items/{latte_recipe.id}/costing/')
        assert response.status_code == 200
        assert response.data['cost_per_serving'] == '41.60'
        assert response.data['margin'] == '78.40'
        assert response.data['margin_percent'] == '65.33'
        assert len(response.data['ingredients']) == 2

    def test_dashboard(self, manager_client, beans, milk):
        response = manager_client.get('/inventory/dashboard/')
        assert response.data['total_items'] == 2
        assert response.data['total_value'] == '1250.00'
        assert response.data['low_stock_count'] == 1
        assert [m['name'] for m in response.data['low_stock_materials']] == ['Fresh Milk']
