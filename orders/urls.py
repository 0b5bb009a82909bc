from django.urls import path
from . import views

app_name = 'orders'

urlpatterns = [
    # Cart & service session
    path('cart/', views.CartView.as_view(), name='cart'),
    path('cart/items/', views.CartItemCreateView.as_view(), name='cart-item-add'),
    path('cart/items/<str:line_id>/', views.CartItemDetailView.as_view(), name='cart-item-detail'),
    path('session/', views.ServiceSessionView.as_view(), name='service-session'),

    # Order submission & orders manager
    path('', views.OrderListCreateView.as_view(), name='order-list'),
    path('checkout/', views.CheckoutView.as_view(), name='checkout'),
    path('summary/', views.OrderSummaryView.as_view(), name='order-summary'),
    path('export/', views.OrderExportView.as_view(), name='order-export'),
    path('export/xlsx/', views.OrderExportView.as_view(), {'extension': 'xlsx'}, name='order-export-xlsx'),
    path('<uuid:pk>/', views.OrderDetailView.as_view(), name='order-detail'),
    path('<uuid:pk>/receipt/', views.order_receipt, name='order-receipt'),
    path('<uuid:pk>/receipt/pdf/', views.order_receipt_pdf, name='order-receipt-pdf'),
    path('<uuid:pk>/status/', views.update_order_status, name='order-status'),

    # Kitchen display & status board
    path('kitchen/', views.kitchen_display, name='kitchen-display'),
    path('<uuid:pk>/advance/', views.advance_order, name='order-advance'),
    path('board/', views.order_board, name='order-board'),
]
