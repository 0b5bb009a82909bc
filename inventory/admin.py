from django.contrib import admin

from .models import AddOn, Category, Material, MenuItem, Purchase, RecipeEntry, Supplier, Variation


class VariationInline(admin.TabularInline):
    model = Variation
    extra = 0


class AddOnInline(admin.TabularInline):
    model = AddOn
    extra = 0


class RecipeEntryInline(admin.TabularInline):
    model = RecipeEntry
    extra = 0


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'position', 'active']


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'base_price', 'discount_price', 'available', 'track_inventory', 'stock_quantity']
    list_filter = ['category', 'available', 'popular', 'track_inventory']
    search_fields = ['name']
    inlines = [VariationInline, AddOnInline, RecipeEntryInline]


@admin.register(Material)
class MaterialAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'unit', 'unit_cost', 'stock_quantity', 'low_stock_threshold']
    search_fields = ['name', 'category']


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    list_display = ['item_name', 'quantity', 'price_per_unit', 'total_paid', 'purchase_date']
    readonly_fields = ['total_paid']


admin.site.register(Supplier)
