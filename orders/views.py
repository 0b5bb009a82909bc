import logging
from collections import OrderedDict
from decimal import Decimal

from django.db.models import Sum
from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import filters, generics, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.permissions import IsBackOffice, IsKitchenStaff, actor_for_user
from .cart import Cart
from .exceptions import CheckoutInProgress, EmptyCart
from .exports import (
    completed_orders, export_filename, render_receipt, render_receipt_pdf, write_orders_csv, write_orders_xlsx,
)
from .filters import OrderFilter
from .lifecycle import (
    InvalidTransition, Status, apply_transition, kitchen_queue,
    next_kitchen_status, status_board,
)
from .models import Order, OrderItem
from .pricing import to_money
from .serializers import (
    BoardOrderSerializer, CartAddSerializer, CartUpdateSerializer, KitchenOrderSerializer,
    OrderCreateSerializer, OrderSerializer, OrderStatusSerializer, ServiceSessionSerializer,
)
from .session import ServiceSession
from .throttles import OrderRateThrottle

logger = logging.getLogger(__name__)

CHECKOUT_FLAG = 'checkout_in_progress'
XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

ITEM_PAYLOAD = openapi.Schema(
    type=openapi.TYPE_OBJECT,
    required=['menu_item_id', 'quantity'],
    properties={
        'menu_item_id': openapi.Schema(type=openapi.TYPE_STRING, format=openapi.FORMAT_UUID),
        'quantity': openapi.Schema(type=openapi.TYPE_INTEGER, minimum=1),
        'variation_id': openapi.Schema(type=openapi.TYPE_INTEGER),
        'add_ons': openapi.Schema(
            type=openapi.TYPE_ARRAY,
            items=openapi.Schema(
                type=openapi.TYPE_OBJECT,
                properties={
                    'id': openapi.Schema(type=openapi.TYPE_INTEGER),
                    'quantity': openapi.Schema(type=openapi.TYPE_INTEGER, minimum=1),
                }
            )
        ),
    }
)

CUSTOMER_FIELDS = {
    'customer_name': openapi.Schema(type=openapi.TYPE_STRING),
    'contact_number': openapi.Schema(type=openapi.TYPE_STRING),
    'service_type': openapi.Schema(type=openapi.TYPE_STRING, enum=['dine-in', 'pickup', 'delivery']),
    'table_number': openapi.Schema(type=openapi.TYPE_STRING),
    'address': openapi.Schema(type=openapi.TYPE_STRING),
    'pickup_time': openapi.Schema(type=openapi.TYPE_STRING),
    'party_size': openapi.Schema(type=openapi.TYPE_INTEGER),
    'payment_method': openapi.Schema(type=openapi.TYPE_STRING),
    'reference_number': openapi.Schema(type=openapi.TYPE_STRING),
    'notes': openapi.Schema(type=openapi.TYPE_STRING),
    'total': openapi.Schema(type=openapi.TYPE_STRING, description='Optional, checked against server prices'),
}


def _place_order(request, data):
    serializer = OrderCreateSerializer(data=data, context={'request': request})
    serializer.is_valid(raise_exception=True)
    order = serializer.save()
    logger.info("Order #%s placed by %s (%s items, total %s)",
                order.short_id, order.customer_name, order.items.count(), order.total)
    return order


# =============== CART ===============

class CartView(APIView):
    """View or clear the session cart"""
    permission_classes = [AllowAny]

    def get(self, request):
        return Response(Cart.load(request.session).to_representation())

    def delete(self, request):
        cart = Cart.load(request.session)
        cart.clear()
        cart.save(request.session)
        return Response(cart.to_representation())


class CartItemCreateView(APIView):
    """Add a customised item to the cart"""
    permission_classes = [AllowAny]

    @swagger_auto_schema(request_body=ITEM_PAYLOAD, responses={201: 'Cart with the affected line'})
    def post(self, request):
        serializer = CartAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        cart = Cart.load(request.session)
        line = cart.add(data['menu_item'], data['quantity'], data['variation'], data['add_on_selections'])
        cart.save(request.session)

        payload = cart.to_representation()
        payload['line_id'] = line.line_id
        return Response(payload, status=status.HTTP_201_CREATED)


class CartItemDetailView(APIView):
    """Change the quantity of a cart line or remove it"""
    permission_classes = [AllowAny]

    @swagger_auto_schema(request_body=CartUpdateSerializer)
    def patch(self, request, line_id):
        serializer = CartUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = Cart.load(request.session)
        try:
            cart.update_quantity(line_id, serializer.validated_data['quantity'])
        except KeyError:
            return Response({'error': 'Cart line not found'}, status=status.HTTP_404_NOT_FOUND)
        cart.save(request.session)
        return Response(cart.to_representation())

    def delete(self, request, line_id):
        cart = Cart.load(request.session)
        cart.remove(line_id)
        cart.save(request.session)
        return Response(cart.to_representation())


# =============== SERVICE SESSION ===============

class ServiceSessionView(APIView):
    """Table number and service type for this visit"""
    permission_classes = [AllowAny]

    @swagger_auto_schema(manual_parameters=[
        openapi.Parameter('table', openapi.IN_QUERY, description="Table number from the QR code",
                          type=openapi.TYPE_STRING),
    ])
    def get(self, request):
        session = ServiceSession.load(request.session)
        table = request.query_params.get('table')
        if table:
            session.update(table_number=table)
            session.save(request.session)
        return Response(ServiceSessionSerializer(session).data)

    @swagger_auto_schema(request_body=ServiceSessionSerializer)
    def put(self, request):
        serializer = ServiceSessionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        session = ServiceSession.load(request.session)
        if 'table_number' in data:
            session.table_number = (data['table_number'] or '').strip() or None
        if 'service_type' in data:
            session.service_type = data['service_type']
        session.save(request.session)
        return Response(ServiceSessionSerializer(session).data)

    def delete(self, request):
        session = ServiceSession.reset(request.session)
        return Response(ServiceSessionSerializer(session).data)


# =============== ORDER SUBMISSION ===============

class CheckoutView(APIView):
    """Submit the session cart as an order"""
    permission_classes = [AllowAny]
    throttle_classes = [OrderRateThrottle]
    order_submission = True

    @swagger_auto_schema(
        operation_description="Place an order from the session cart. Service type and table "
                              "default to the service session.",
        request_body=openapi.Schema(type=openapi.TYPE_OBJECT, required=['customer_name'],
                                    properties=CUSTOMER_FIELDS),
        responses={201: OrderSerializer, 400: 'Bad Request', 409: 'Insufficient stock', 429: 'Too many orders'}
    )
    def post(self, request):
        if request.session.get(CHECKOUT_FLAG):
            raise CheckoutInProgress()

        cart = Cart.load(request.session)
        if cart.is_empty:
            raise EmptyCart()

        service = ServiceSession.load(request.session)
        data = {key: request.data.get(key) for key in request.data.keys()}
        if service.service_type and not data.get('service_type'):
            data['service_type'] = service.service_type
        if service.table_number and not data.get('table_number'):
            data['table_number'] = service.table_number
        data['items'] = [
            {
                'menu_item_id': line.menu_item_id,
                'quantity': line.quantity,
                'variation_id': (line.variation or {}).get('id'),
                'add_ons': [{'id': a['id'], 'quantity': a['quantity']} for a in line.add_ons],
            }
            for line in cart.lines
        ]

        request.session[CHECKOUT_FLAG] = True
        request.session.save()
        try:
            order = _place_order(request, data)
        finally:
            request.session.pop(CHECKOUT_FLAG, None)
            request.session.save()

        cart.clear()
        cart.save(request.session)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class OrderListCreateView(generics.ListCreateAPIView):
    """
    GET: orders manager list (back office).
    POST: place an order with explicit items (anyone, rate limited).
    """
    queryset = Order.objects.prefetch_related('items')
    serializer_class = OrderSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = OrderFilter
    search_fields = ['customer_name', 'contact_number', 'id', 'address']
    ordering_fields = ['created_at', 'total', 'customer_name', 'status']
    ordering = ['-created_at']

    @property
    def order_submission(self):
        return self.request.method == 'POST'

    def get_permissions(self):
        if self.request.method == 'POST':
            return [AllowAny()]
        return [IsBackOffice()]

    def get_throttles(self):
        if self.request.method == 'POST':
            return [OrderRateThrottle()]
        return []

    @swagger_auto_schema(
        operation_description="Place an order",
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            required=['customer_name', 'service_type', 'items'],
            properties=dict(CUSTOMER_FIELDS, items=openapi.Schema(type=openapi.TYPE_ARRAY, items=ITEM_PAYLOAD)),
        ),
        responses={201: OrderSerializer, 400: 'Bad Request', 409: 'Insufficient stock', 429: 'Too many orders'}
    )
    def post(self, request, *args, **kwargs):
        order = _place_order(request, request.data)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('status', openapi.IN_QUERY, description="Filter by status ('all' for every status)", type=openapi.TYPE_STRING),
            openapi.Parameter('date_from', openapi.IN_QUERY, description="From date (YYYY-MM-DD), inclusive", type=openapi.TYPE_STRING),
            openapi.Parameter('date_to', openapi.IN_QUERY, description="To date (YYYY-MM-DD), inclusive", type=openapi.TYPE_STRING),
            openapi.Parameter('search', openapi.IN_QUERY, description="Name, contact, order id or address", type=openapi.TYPE_STRING),
        ]
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class OrderDetailView(generics.RetrieveAPIView):
    queryset = Order.objects.prefetch_related('items')
    serializer_class = OrderSerializer
    permission_classes = [IsKitchenStaff]


# =============== ORDERS MANAGER ===============

class OrderManagerMixin:
    """Filters shared by the orders list, summary and CSV export"""
    queryset = Order.objects.all()
    permission_classes = [IsBackOffice]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = OrderFilter
    search_fields = ['customer_name', 'contact_number', 'id', 'address']
    ordering_fields = ['created_at', 'total', 'customer_name', 'status']
    ordering = ['-created_at']


class OrderSummaryView(OrderManagerMixin, generics.GenericAPIView):
    """Sales totals and best sellers for the filtered orders"""

    def get(self, request):
        orders = self.filter_queryset(self.get_queryset())
        completed = orders.filter(status__iexact=Status.COMPLETED)
        totals = completed.aggregate(total_sales=Sum('total'))

        summary = OrderedDict()
        for item in OrderItem.objects.filter(order__in=completed):
            variation = (item.variation or {}).get('name')
            key = (item.name, variation)
            entry = summary.setdefault(key, {
                'name': item.name,
                'variation': variation,
                'quantity': 0,
                'total': Decimal('0.00'),
            })
            entry['quantity'] += item.quantity
            entry['total'] += item.subtotal

        items = sorted(summary.values(), key=lambda e: e['quantity'], reverse=True)
        return Response({
            'total_sales': str(to_money(totals['total_sales'])),
            'completed_orders': completed.count(),
            'item_summary': [dict(e, total=str(to_money(e['total']))) for e in items],
            'pending_today': Order.objects.filter(
                status=Status.PENDING, created_at__date=timezone.localdate()
            ).count(),
        })


class OrderExportView(OrderManagerMixin, generics.GenericAPIView):
    """Download completed orders in the filtered set as CSV, or as Excel on the xlsx route"""

    def get(self, request, extension='csv'):
        orders = completed_orders(self.filter_queryset(self.get_queryset()))
        if not orders:
            return Response({'detail': 'No completed orders to export.'})

        if extension == 'xlsx':
            response = HttpResponse(content_type=XLSX_CONTENT_TYPE)
            count = write_orders_xlsx(orders, response)
        else:
            response = HttpResponse(content_type='text/csv; charset=utf-8')
            count = write_orders_csv(orders, response)
        response['Content-Disposition'] = f'attachment; filename="{export_filename(extension=extension)}"'
        logger.info("Exported %s completed orders as %s", count, extension)
        return response


@api_view(['GET'])
@permission_classes([IsBackOffice])
def order_receipt(request, pk):
    """Printable 80mm receipt"""
    order = get_object_or_404(Order.objects.prefetch_related('items'), pk=pk)
    return HttpResponse(render_receipt(order), content_type='text/html; charset=utf-8')


@api_view(['GET'])
@permission_classes([IsBackOffice])
def order_receipt_pdf(request, pk):
    order = get_object_or_404(Order.objects.prefetch_related('items'), pk=pk)
    response = HttpResponse(render_receipt_pdf(order), content_type='application/pdf')
    response['Content-Disposition'] = f'inline; filename="receipt_{order.short_id}.pdf"'
    return response


# =============== STATUS CHANGES ===============

@swagger_auto_schema(method='patch', request_body=OrderStatusSerializer, responses={200: OrderSerializer})
@api_view(['PATCH'])
@permission_classes([IsBackOffice])
def update_order_status(request, pk):
    """Back-office status selector. Any status may be set."""
    order = get_object_or_404(Order, pk=pk)
    serializer = OrderStatusSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    apply_transition(order, serializer.validated_data['status'], actor_for_user(request.user))
    order.save(update_fields=['status', 'updated_at'])
    return Response(OrderSerializer(order).data)


@api_view(['GET'])
@permission_classes([IsKitchenStaff])
def kitchen_display(request):
    """Confirmed and preparing orders, oldest first"""
    orders = kitchen_queue(Order.objects.filter(status__in=Status.KITCHEN_VISIBLE).prefetch_related('items'))
    serializer = KitchenOrderSerializer(orders, many=True, context={'now': timezone.now()})
    return Response(serializer.data)


@api_view(['POST'])
@permission_classes([IsKitchenStaff])
def advance_order(request, pk):
    """Move an order one step along the kitchen flow"""
    order = get_object_or_404(Order, pk=pk)
    target = next_kitchen_status(order.status)
    if target is None:
        raise InvalidTransition(f"Order #{order.short_id} has no next kitchen step from {order.status}.")

    apply_transition(order, target, actor_for_user(request.user))
    order.save(update_fields=['status', 'updated_at'])
    return Response(KitchenOrderSerializer(order, context={'now': timezone.now()}).data)


@api_view(['GET'])
@permission_classes([AllowAny])
def order_board(request):
    """Public now-serving board"""
    board = status_board(Order.objects.filter(status__in=[Status.PREPARING, Status.READY]))
    return Response({
        key: BoardOrderSerializer(orders, many=True).data
        for key, orders in board.items()
    })
