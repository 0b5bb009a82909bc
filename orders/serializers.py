import logging
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from rest_framework import serializers

from inventory.models import MenuItem, Variation
from .exceptions import InsufficientStock
from .lifecycle import Status, creation_status, elapsed_label, next_kitchen_status, urgency
from .lifecycle import normalize as normalize_status
from .models import Order, OrderItem
from .pricing import CENT, line_total, to_money
from .session import ServiceSession, normalize_service_type

logger = logging.getLogger(__name__)


class AddOnSelectionSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class LineSelectionSerializer(serializers.Serializer):
    """
    One menu item with its customisation, as sent by the storefront.

    Validation resolves the ids into ``menu_item``, ``variation`` and
    ``add_on_selections`` (a list of ``(AddOn, count)``).
    """
    menu_item_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    variation_id = serializers.IntegerField(required=False, allow_null=True)
    add_ons = AddOnSelectionSerializer(many=True, required=False)

    def validate(self, attrs):
        try:
            menu_item = MenuItem.objects.get(id=attrs['menu_item_id'])
        except MenuItem.DoesNotExist:
            raise serializers.ValidationError({'menu_item_id': "Menu item not found"})

        # Tracked items that sold out are reported as insufficient stock later
        if not menu_item.available and not menu_item.track_inventory:
            raise serializers.ValidationError({'menu_item_id': f"{menu_item.name} is currently unavailable"})

        variation = None
        variation_id = attrs.get('variation_id')
        if variation_id is not None:
            try:
                variation = menu_item.variations.get(id=variation_id)
            except Variation.DoesNotExist:
                raise serializers.ValidationError({'variation_id': f"Variation not offered for {menu_item.name}"})

        selections = []
        requested = attrs.get('add_ons') or []
        if requested:
            offered = {a.id: a for a in menu_item.add_ons.filter(id__in=[r['id'] for r in requested])}
            for entry in requested:
                add_on = offered.get(entry['id'])
                if add_on is None:
                    raise serializers.ValidationError({'add_ons': f"Add-on {entry['id']} not offered for {menu_item.name}"})
                selections.append((add_on, entry['quantity']))

        attrs['menu_item'] = menu_item
        attrs['variation'] = variation
        attrs['add_on_selections'] = selections
        return attrs


class CartAddSerializer(LineSelectionSerializer):
    def validate(self, attrs):
        attrs = super().validate(attrs)
        customised = 'variation_id' in self.initial_data or 'add_ons' in self.initial_data
        menu_item = attrs['menu_item']
        if not customised and menu_item.requires_customization:
            raise serializers.ValidationError(
                f"{menu_item.name} has options. Choose a variation or add-ons before adding it to the cart."
            )
        return attrs


class CartUpdateSerializer(serializers.Serializer):
    # Zero or less removes the line
    quantity = serializers.IntegerField()


class ServiceSessionSerializer(serializers.Serializer):
    table_number = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=20)
    service_type = serializers.CharField(required=False, allow_null=True)

    def validate_service_type(self, value):
        try:
            return normalize_service_type(value)
        except ValueError:
            raise serializers.ValidationError("Choose dine-in, pickup or delivery")

    def to_representation(self, instance):
        if isinstance(instance, ServiceSession):
            return {
                'table_number': instance.table_number,
                'service_type': instance.service_type,
                'is_selected': instance.is_selected,
            }
        return super().to_representation(instance)


class OrderCreateSerializer(serializers.ModelSerializer):
    items = LineSelectionSerializer(many=True, write_only=True, allow_empty=False)
    service_type = serializers.CharField()
    # Optional client-side total, compared with the recomputed one
    total = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True,
                                     write_only=True)

    class Meta:
        model = Order
        fields = [
            'customer_name', 'contact_number', 'service_type', 'table_number',
            'address', 'pickup_time', 'party_size', 'dine_in_time',
            'payment_method', 'reference_number', 'notes', 'receipt_image',
            'items', 'total',
        ]
        extra_kwargs = {
            'contact_number': {'required': False, 'allow_blank': True},
        }

    def validate_customer_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Customer name is required")
        return value

    def validate_contact_number(self, value):
        return (value or '').strip()

    def validate_service_type(self, value):
        try:
            return normalize_service_type(value)
        except ValueError:
            raise serializers.ValidationError("Choose dine-in, pickup or delivery")

    def validate(self, attrs):
        if getattr(settings, 'ORDER_REQUIRE_CONTACT_NUMBER', True) and not attrs.get('contact_number'):
            raise serializers.ValidationError({'contact_number': "Contact number is required"})
        if not attrs.get('service_type'):
            raise serializers.ValidationError({'service_type': "Choose dine-in, pickup or delivery"})

        lines = []
        computed = Decimal('0.00')
        for entry in attrs['items']:
            unit_price = line_total(entry['menu_item'], entry['variation'], entry['add_on_selections'])
            subtotal = to_money(unit_price * entry['quantity'])
            computed += subtotal
            lines.append(dict(entry, unit_price=unit_price, subtotal=subtotal))

        client_total = attrs.pop('total', None)
        if client_total is not None and abs(to_money(client_total) - computed) > CENT:
            raise serializers.ValidationError({
                'total': f"Order total {client_total} does not match the current prices ({computed})"
            })

        attrs['items'] = lines
        attrs['computed_total'] = to_money(computed)
        return attrs

    def _reserve_stock(self, lines):
        """Check and decrement stock for tracked items. Runs inside the order transaction."""
        wanted = {}
        for line in lines:
            item = line['menu_item']
            if item.track_inventory:
                wanted[item.pk] = wanted.get(item.pk, 0) + line['quantity']
        if not wanted:
            return

        locked = {m.pk: m for m in MenuItem.objects.select_for_update().filter(pk__in=wanted)}
        for pk, quantity in wanted.items():
            item = locked[pk]
            available = item.stock_quantity or 0
            if quantity > available:
                raise InsufficientStock(item.name, available)

        for pk, quantity in wanted.items():
            item = locked[pk]
            item.stock_quantity = (item.stock_quantity or 0) - quantity
            fields = ['stock_quantity', 'updated_at']
            if item.stock_quantity <= 0:
                item.stock_quantity = 0
                item.available = False
                fields.append('available')
            item.save(update_fields=fields)
            logger.info("Stock for %s decremented by %s (now %s)", item.name, quantity, item.stock_quantity)

    @transaction.atomic
    def create(self, validated_data):
        lines = validated_data.pop('items')
        total = validated_data.pop('computed_total')
        request = self.context.get('request')

        self._reserve_stock(lines)

        order = Order.objects.create(
            status=creation_status(),
            total=total,
            ip_address=(request.META.get('REMOTE_ADDR') or None) if request else None,
            **validated_data
        )
        OrderItem.objects.bulk_create([
            OrderItem(
                order=order,
                menu_item=line['menu_item'],
                name=line['menu_item'].name,
                unit_price=line['unit_price'],
                quantity=line['quantity'],
                subtotal=line['subtotal'],
                variation=(
                    {'id': line['variation'].id, 'name': line['variation'].name,
                     'price': str(to_money(line['variation'].price))}
                    if line['variation'] is not None else None
                ),
                add_ons=[
                    {'id': add_on.id, 'name': add_on.name, 'price': str(to_money(add_on.price)), 'quantity': count}
                    for add_on, count in line['add_on_selections']
                ],
            )
            for line in lines
        ])
        return order


class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = ['id', 'menu_item', 'name', 'unit_price', 'quantity', 'subtotal', 'variation', 'add_ons']


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    short_id = serializers.CharField(read_only=True)
    service_type_display = serializers.CharField(source='get_service_type_display', read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'short_id', 'customer_name', 'contact_number', 'service_type',
            'service_type_display', 'table_number', 'address', 'pickup_time',
            'party_size', 'dine_in_time', 'payment_method', 'reference_number',
            'notes', 'receipt_image', 'total', 'status', 'items',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class KitchenOrderSerializer(OrderSerializer):
    elapsed = serializers.SerializerMethodField()
    urgency = serializers.SerializerMethodField()
    next_status = serializers.SerializerMethodField()

    class Meta(OrderSerializer.Meta):
        fields = [
            'id', 'short_id', 'customer_name', 'service_type', 'service_type_display',
            'table_number', 'notes', 'status', 'items', 'created_at',
            'elapsed', 'urgency', 'next_status',
        ]
        read_only_fields = fields

    def get_elapsed(self, obj):
        return elapsed_label(obj.created_at, self.context.get('now'))

    def get_urgency(self, obj):
        return urgency(obj.created_at, self.context.get('now'))

    def get_next_status(self, obj):
        return next_kitchen_status(obj.status)


class BoardOrderSerializer(serializers.ModelSerializer):
    """Public status board entry. No contact details."""
    short_id = serializers.CharField(read_only=True)

    class Meta:
        model = Order
        fields = ['short_id', 'customer_name', 'status', 'created_at']
        read_only_fields = fields


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.CharField()

    def validate_status(self, value):
        try:
            return normalize_status(value)
        except ValueError:
            raise serializers.ValidationError(f"Choose one of: {', '.join(Status.ALL)}")
