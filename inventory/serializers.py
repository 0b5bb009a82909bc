from decimal import Decimal

from django.db import transaction
from rest_framework import serializers

from orders.pricing import effective_price, has_discount
from .models import AddOn, Category, Material, MenuItem, Purchase, RecipeEntry, Supplier, Variation


class CategorySerializer(serializers.ModelSerializer):
    items_count = serializers.SerializerMethodField()

    class Meta:
        model = Category
        fields = ['id', 'code', 'name', 'icon', 'position', 'active', 'items_count']
        read_only_fields = ['items_count']

    def get_items_count(self, obj):
        return obj.items.filter(available=True).count()


class VariationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Variation
        fields = ['id', 'name', 'price', 'position']


class AddOnSerializer(serializers.ModelSerializer):
    class Meta:
        model = AddOn
        fields = ['id', 'name', 'category', 'price', 'position']


class StorefrontMenuItemSerializer(serializers.ModelSerializer):
    """Read-only menu entry for the storefront"""
    category = serializers.CharField(source='category.code', read_only=True, default=None)
    category_name = serializers.CharField(source='category.name', read_only=True, default=None)
    effective_price = serializers.SerializerMethodField()
    has_discount = serializers.SerializerMethodField()
    variations = VariationSerializer(many=True, read_only=True)
    add_on_groups = serializers.SerializerMethodField()
    requires_customization = serializers.SerializerMethodField()

    class Meta:
        model = MenuItem
        fields = [
            'id', 'name', 'description', 'image', 'category', 'category_name',
            'base_price', 'discount_price', 'effective_price', 'has_discount',
            'available', 'popular', 'track_inventory', 'stock_quantity', 'is_low_stock',
            'variations', 'add_on_groups', 'requires_customization',
        ]
        read_only_fields = fields

    def get_effective_price(self, obj):
        return str(effective_price(obj))

    def get_has_discount(self, obj):
        return has_discount(obj)

    def get_add_on_groups(self, obj):
        groups = {}
        for add_on in obj.add_ons.all():
            groups.setdefault(add_on.category, []).append(AddOnSerializer(add_on).data)
        return [{'category': category, 'add_ons': add_ons} for category, add_ons in groups.items()]

    def get_requires_customization(self, obj):
        return bool(obj.variations.all()) or bool(obj.add_ons.all())


class MenuItemSerializer(serializers.ModelSerializer):
    """Back-office create/update with nested variations and add-ons"""
    variations = VariationSerializer(many=True, required=False)
    add_ons = AddOnSerializer(many=True, required=False)
    effective_price = serializers.SerializerMethodField()

    class Meta:
        model = MenuItem
        fields = [
            'id', 'category', 'name', 'description', 'image', 'base_price',
            'discount_price', 'discount_active', 'discount_start_date', 'discount_end_date',
            'promo_price', 'effective_price', 'available', 'popular', 'track_inventory',
            'stock_quantity', 'low_stock_threshold', 'variations', 'add_ons',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_effective_price(self, obj):
        return str(effective_price(obj))

    def validate(self, attrs):
        start = attrs.get('discount_start_date', getattr(self.instance, 'discount_start_date', None))
        end = attrs.get('discount_end_date', getattr(self.instance, 'discount_end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError({'discount_end_date': "Discount must end after it starts"})
        if attrs.get('track_inventory') and attrs.get('stock_quantity') is None and not self.instance:
            attrs['stock_quantity'] = 0
        return attrs

    def _replace_options(self, menu_item, variations, add_ons):
        if variations is not None:
            menu_item.variations.all().delete()
            for data in variations:
                Variation.objects.create(menu_item=menu_item, **data)
        if add_ons is not None:
            menu_item.add_ons.all().delete()
            for data in add_ons:
                AddOn.objects.create(menu_item=menu_item, **data)

    @transaction.atomic
    def create(self, validated_data):
        variations = validated_data.pop('variations', [])
        add_ons = validated_data.pop('add_ons', [])
        menu_item = MenuItem.objects.create(**validated_data)
        self._replace_options(menu_item, variations, add_ons)
        return menu_item

    @transaction.atomic
    def update(self, instance, validated_data):
        variations = validated_data.pop('variations', None)
        add_ons = validated_data.pop('add_ons', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()
        self._replace_options(instance, variations, add_ons)
        return instance


class MaterialSerializer(serializers.ModelSerializer):
    stock_status = serializers.CharField(read_only=True)
    inventory_value = serializers.DecimalField(max_digits=16, decimal_places=2, read_only=True)

    class Meta:
        model = Material
        fields = [
            'id', 'name', 'category', 'unit', 'unit_cost', 'stock_quantity',
            'low_stock_threshold', 'stock_status', 'inventory_value',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class StockAdjustmentSerializer(serializers.Serializer):
    delta = serializers.DecimalField(max_digits=12, decimal_places=3)


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = ['id', 'item_name', 'category', 'supplier_name', 'contact', 'created_at']
        read_only_fields = ['created_at']


class PurchaseSerializer(serializers.ModelSerializer):
    unit = serializers.CharField(source='material.unit', read_only=True, default=None)

    class Meta:
        model = Purchase
        fields = [
            'id', 'material', 'item_name', 'unit', 'quantity', 'price_per_unit',
            'total_paid', 'purchase_date', 'created_at',
        ]
        read_only_fields = ['id', 'total_paid', 'created_at']
        extra_kwargs = {
            'item_name': {'required': False, 'allow_blank': True},
        }

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError("Quantity must be greater than zero")
        return value

    def validate(self, attrs):
        material = attrs.get('material')
        if material is None and not attrs.get('item_name'):
            raise serializers.ValidationError({'item_name': "Pick a material or enter an item name"})
        if material is not None and not attrs.get('item_name'):
            attrs['item_name'] = material.name
        return attrs


class RecipeEntrySerializer(serializers.ModelSerializer):
    material_name = serializers.CharField(source='material.name', read_only=True)
    unit = serializers.CharField(source='material.unit', read_only=True)
    unit_cost = serializers.DecimalField(source='material.unit_cost', max_digits=12, decimal_places=4, read_only=True)
    line_cost = serializers.SerializerMethodField()

    class Meta:
        model = RecipeEntry
        fields = ['id', 'menu_item', 'material', 'material_name', 'unit', 'quantity_used', 'unit_cost', 'line_cost']

    def get_line_cost(self, obj):
        return str((obj.material.unit_cost * obj.quantity_used).quantize(Decimal('0.0001')))

    def validate_quantity_used(self, value):
        if value <= 0:
            raise serializers.ValidationError("Quantity used must be greater than zero")
        return value


class RecipeLineSerializer(serializers.Serializer):
    material_id = serializers.UUIDField()
    material = serializers.CharField()
    unit = serializers.CharField()
    unit_cost = serializers.DecimalField(max_digits=12, decimal_places=4)
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3)
    line_cost = serializers.DecimalField(max_digits=14, decimal_places=4)


class CostingSerializer(serializers.Serializer):
    menu_item_id = serializers.UUIDField()
    name = serializers.CharField()
    selling_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    cost_per_serving = serializers.DecimalField(max_digits=12, decimal_places=2)
    margin = serializers.DecimalField(max_digits=12, decimal_places=2)
    margin_percent = serializers.DecimalField(max_digits=8, decimal_places=2, allow_null=True)
    ingredients = RecipeLineSerializer(many=True)
