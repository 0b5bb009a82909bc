from django.db import models
from inventory.models import MenuItem
from decimal import Decimal
import uuid

from .lifecycle import Status
from .session import DINE_IN, PICKUP, DELIVERY


class Order(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    customer_name = models.CharField(max_length=255)
    contact_number = models.CharField(max_length=30, blank=True)

    SERVICE_TYPE_CHOICES = (
        (DINE_IN, "Dine-In"),
        (PICKUP, "Takeout"),
        (DELIVERY, "Delivery"),
    )
    service_type = models.CharField(max_length=20, choices=SERVICE_TYPE_CHOICES, default=DINE_IN)
    table_number = models.CharField(max_length=20, null=True, blank=True)
    address = models.TextField(null=True, blank=True)
    pickup_time = models.CharField(max_length=50, null=True, blank=True)
    party_size = models.PositiveIntegerField(null=True, blank=True)
    dine_in_time = models.DateTimeField(null=True, blank=True)

    payment_method = models.CharField(max_length=50, default="cash")
    reference_number = models.CharField(max_length=100, null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    receipt_image = models.FileField(upload_to='receipts', null=True, blank=True)

    STATUS_CHOICES = (
        (Status.PENDING, "Pending"),
        (Status.CONFIRMED, "Confirmed"),
        (Status.PREPARING, "Preparing"),
        (Status.READY, "Ready"),
        (Status.COMPLETED, "Completed"),
        (Status.CANCELLED, "Cancelled"),
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=Status.PENDING)

    # Sum of item subtotals when the order was placed. Never recalculated.
    total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))

    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def short_id(self):
        return str(self.id)[-8:].upper()

    def __str__(self):
        return f"#{self.short_id} - {self.customer_name} ({self.status})"

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'created_at'], name='orders_orde_status_5a6f0c_idx'),
        ]


class OrderItem(models.Model):
    """Snapshot of one cart line taken when the order was submitted."""
    order = models.ForeignKey(Order, related_name='items', on_delete=models.CASCADE)
    menu_item = models.ForeignKey(MenuItem, on_delete=models.SET_NULL, null=True, blank=True, related_name='order_items')
    name = models.CharField(max_length=255)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField(default=1)
    subtotal = models.DecimalField(max_digits=10, decimal_places=2)
    variation = models.JSONField(null=True, blank=True)
    add_ons = models.JSONField(default=list, blank=True)

    @property
    def add_ons_label(self):
        labels = []
        for add_on in self.add_ons or []:
            count = add_on.get('quantity', 1)
            labels.append(f"{add_on['name']} x{count}" if count > 1 else add_on['name'])
        return ', '.join(labels)

    def __str__(self):
        return f"{self.quantity} x {self.name}"

    class Meta:
        ordering = ['id']
