from django.urls import path
from . import views

app_name = 'inventory'

urlpatterns = [
    # Storefront
    path('menu/', views.StorefrontMenuView.as_view(), name='storefront-menu'),

    # Categories & menu items
    path('categories/', views.CategoryListCreateView.as_view(), name='category-list-create'),
    path('categories/<int:pk>/', views.CategoryRetrieveUpdateDestroyView.as_view(), name='category-detail'),
    path('menu-items/', views.MenuItemListCreateView.as_view(), name='menu-item-list-create'),
    path('menu-items/<uuid:pk>/', views.MenuItemRetrieveUpdateDestroyView.as_view(), name='menu-item-detail'),
    path('menu-items/<uuid:pk>/costing/', views.menu_item_costing, name='menu-item-costing'),

    # Materials
    path('materials/', views.MaterialListCreateView.as_view(), name='material-list-create'),
    path('materials/<uuid:pk>/', views.MaterialRetrieveUpdateDestroyView.as_view(), name='material-detail'),
    path('materials/<uuid:pk>/adjust-stock/', views.adjust_material_stock, name='material-adjust-stock'),

    # Purchases & suppliers
    path('purchases/', views.PurchaseListCreateView.as_view(), name='purchase-list-create'),
    path('purchases/<int:pk>/', views.PurchaseDestroyView.as_view(), name='purchase-detail'),
    path('suppliers/', views.SupplierListCreateView.as_view(), name='supplier-list-create'),
    path('suppliers/<int:pk>/', views.SupplierRetrieveUpdateDestroyView.as_view(), name='supplier-detail'),

    # Recipes
    path('recipes/', views.RecipeEntryListCreateView.as_view(), name='recipe-list-create'),
    path('recipes/<int:pk>/', views.RecipeEntryDestroyView.as_view(), name='recipe-detail'),

    # Dashboard
    path('dashboard/', views.inventory_dashboard, name='inventory-dashboard'),
]
