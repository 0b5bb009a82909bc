from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ['menu_item', 'name', 'unit_price', 'quantity', 'subtotal', 'variation', 'add_ons']


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['short_id', 'customer_name', 'service_type', 'status', 'total', 'created_at']
    list_filter = ['status', 'service_type', 'created_at']
    search_fields = ['customer_name', 'contact_number', 'address']
    readonly_fields = ['total', 'created_at', 'updated_at']
    inlines = [OrderItemInline]
