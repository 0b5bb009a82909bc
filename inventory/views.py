import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Prefetch
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from drf_yasg.utils import swagger_auto_schema
from rest_framework import filters, generics
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from authentication.permissions import IsBackOffice
from .costing import costing_summary, inventory_summary, recipe_breakdown
from .models import AddOn, Category, Material, MenuItem, Purchase, RecipeEntry, Supplier
from .serializers import (
    CategorySerializer, CostingSerializer, MaterialSerializer, MenuItemSerializer,
    PurchaseSerializer, RecipeEntrySerializer, StockAdjustmentSerializer,
    StorefrontMenuItemSerializer, SupplierSerializer,
)

logger = logging.getLogger(__name__)


class BackOfficeWriteMixin:
    """Anyone may read; managers and cashiers may write"""

    def get_permissions(self):
        if self.request.method in ('GET', 'HEAD', 'OPTIONS'):
            return [AllowAny()]
        return [IsBackOffice()]


# =============== MENU ===============

class StorefrontMenuView(generics.ListAPIView):
    """Available menu items with variations, grouped add-ons and effective price"""
    serializer_class = StorefrontMenuItemSerializer
    permission_classes = [AllowAny]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['category__code', 'popular']
    search_fields = ['name', 'description']

    def get_queryset(self):
        return (
            MenuItem.objects.filter(available=True)
            .select_related('category')
            .prefetch_related('variations', Prefetch('add_ons', queryset=AddOn.objects.order_by('category', 'position', 'id')))
        )


class CategoryListCreateView(BackOfficeWriteMixin, generics.ListCreateAPIView):
    queryset = Category.objects.all()
    serializer_class = CategorySerializer
    filterset_fields = ['active']


class CategoryRetrieveUpdateDestroyView(BackOfficeWriteMixin, generics.RetrieveUpdateDestroyAPIView):
    queryset = Category.objects.all()
    serializer_class = CategorySerializer


class MenuItemListCreateView(generics.ListCreateAPIView):
    """
    get: All menu items, including unavailable ones
    post: Create a menu item with its variations and add-ons
    """
    queryset = MenuItem.objects.select_related('category').prefetch_related('variations', 'add_ons')
    serializer_class = MenuItemSerializer
    permission_classes = [IsBackOffice]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['category', 'available', 'popular', 'track_inventory']
    search_fields = ['name', 'description']
    ordering_fields = ['name', 'base_price', 'created_at', 'stock_quantity']

    def perform_create(self, serializer):
        item = serializer.save()
        logger.info("Menu item %s created", item.name)


class MenuItemRetrieveUpdateDestroyView(generics.RetrieveUpdateDestroyAPIView):
    queryset = MenuItem.objects.select_related('category').prefetch_related('variations', 'add_ons')
    serializer_class = MenuItemSerializer
    permission_classes = [IsBackOffice]


@api_view(['GET'])
@permission_classes([IsBackOffice])
def menu_item_costing(request, pk):
    """Ingredient cost per serving and margin against the base price"""
    menu_item = get_object_or_404(MenuItem, pk=pk)
    summary = costing_summary(menu_item)
    serializer = CostingSerializer({
        'menu_item_id': menu_item.id,
        'name': menu_item.name,
        'selling_price': summary.selling_price,
        'cost_per_serving': summary.cost_per_serving,
        'margin': summary.margin,
        'margin_percent': summary.margin_percent,
        'ingredients': recipe_breakdown(menu_item),
    })
    return Response(serializer.data)


# =============== MATERIALS ===============

class MaterialListCreateView(generics.ListCreateAPIView):
    queryset = Material.objects.all()
    serializer_class = MaterialSerializer
    permission_classes = [IsBackOffice]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['category', 'unit']
    search_fields = ['name', 'category']
    ordering_fields = ['name', 'stock_quantity', 'unit_cost', 'updated_at']
    ordering = ['name']


class MaterialRetrieveUpdateDestroyView(generics.RetrieveUpdateDestroyAPIView):
    queryset = Material.objects.all()
    serializer_class = MaterialSerializer
    permission_classes = [IsBackOffice]


@swagger_auto_schema(method='post', request_body=StockAdjustmentSerializer, responses={200: MaterialSerializer})
@api_view(['POST'])
@permission_classes([IsBackOffice])
def adjust_material_stock(request, pk):
    """Add or remove stock by hand. Stock never goes below zero."""
    serializer = StockAdjustmentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    delta = serializer.validated_data['delta']

    with transaction.atomic():
        material = get_object_or_404(Material.objects.select_for_update(), pk=pk)
        before = material.stock_quantity
        material.stock_quantity = max(before + delta, Decimal('0'))
        material.save(update_fields=['stock_quantity', 'updated_at'])

    logger.info("Stock of %s adjusted by %s: %s -> %s", material.name, delta, before, material.stock_quantity)
    return Response(MaterialSerializer(material).data)


# =============== PURCHASES & SUPPLIERS ===============

class PurchaseListCreateView(generics.ListCreateAPIView):
    """
    post: Record a purchase. The material's stock goes up and its unit cost
    becomes this purchase's price per unit.
    """
    queryset = Purchase.objects.select_related('material')
    serializer_class = PurchaseSerializer
    permission_classes = [IsBackOffice]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['material', 'purchase_date']
    search_fields = ['item_name']
    ordering_fields = ['purchase_date', 'total_paid', 'created_at']
    ordering = ['-purchase_date', '-created_at']


class PurchaseDestroyView(generics.RetrieveDestroyAPIView):
    """Deleting a purchase keeps the stock it added"""
    queryset = Purchase.objects.select_related('material')
    serializer_class = PurchaseSerializer
    permission_classes = [IsBackOffice]


class SupplierListCreateView(generics.ListCreateAPIView):
    queryset = Supplier.objects.all()
    serializer_class = SupplierSerializer
    permission_classes = [IsBackOffice]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['category']
    search_fields = ['item_name', 'supplier_name', 'contact']
    ordering_fields = ['item_name', 'supplier_name', 'created_at']


class SupplierRetrieveUpdateDestroyView(generics.RetrieveUpdateDestroyAPIView):
    queryset = Supplier.objects.all()
    serializer_class = SupplierSerializer
    permission_classes = [IsBackOffice]


# =============== RECIPES ===============

class RecipeEntryListCreateView(generics.ListCreateAPIView):
    queryset = RecipeEntry.objects.select_related('material', 'menu_item')
    serializer_class = RecipeEntrySerializer
    permission_classes = [IsBackOffice]
    filterset_fields = ['menu_item', 'material']


class RecipeEntryDestroyView(generics.RetrieveDestroyAPIView):
    queryset = RecipeEntry.objects.select_related('material', 'menu_item')
    serializer_class = RecipeEntrySerializer
    permission_classes = [IsBackOffice]


# =============== DASHBOARD ===============

@api_view(['GET'])
@permission_classes([IsBackOffice])
def inventory_dashboard(request):
    """Material counts, stock value and purchase totals"""
    summary = inventory_summary()
    return Response({
        'total_items': summary['total_items'],
        'total_value': str(summary['total_value']),
        'low_stock_count': summary['low_stock_count'],
        'out_of_stock_count': summary['out_of_stock_count'],
        'total_purchases': summary['total_purchases'],
        'total_spent': str(summary['total_spent']),
        'low_stock_materials': MaterialSerializer(
            [m for m in Material.objects.all() if m.stock_status != Material.STATUS_IN], many=True
        ).data,
    })
