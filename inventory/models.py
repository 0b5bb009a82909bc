from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from decimal import Decimal, ROUND_HALF_UP
import uuid


class TimeStampedModel(models.Model):
    """Base model with created_at and updated_at fields"""
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


# =============== MENU ===============

class Category(models.Model):
    code = models.SlugField(max_length=50, unique=True)
    name = models.CharField(max_length=100)
    icon = models.CharField(max_length=20, blank=True)
    position = models.IntegerField(default=0)
    active = models.BooleanField(default=True)

    def __str__(self):
        return self.name

    class Meta:
        verbose_name_plural = "Categories"
        ordering = ['position', 'name']


class MenuItem(TimeStampedModel):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    category = models.ForeignKey(Category, on_delete=models.SET_NULL, null=True, blank=True, related_name='items')
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    image = models.FileField(upload_to='menu_images', null=True, blank=True)

    base_price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0.00'))])

    # Explicit discount, optionally bounded by a date window
    discount_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True,
                                         validators=[MinValueValidator(Decimal('0.00'))])
    discount_active = models.BooleanField(default=False)
    discount_start_date = models.DateTimeField(null=True, blank=True)
    discount_end_date = models.DateTimeField(null=True, blank=True)

    # Promotional adjustment applied without the discount flag
    promo_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True,
                                      validators=[MinValueValidator(Decimal('0.00'))])

    available = models.BooleanField(default=True)
    popular = models.BooleanField(default=False)

    track_inventory = models.BooleanField(default=False)
    stock_quantity = models.IntegerField(null=True, blank=True)
    low_stock_threshold = models.IntegerField(default=0)

    def is_on_discount(self, at=None):
        if not self.discount_active or self.discount_price is None:
            return False
        at = at or timezone.now()
        if self.discount_start_date and at < self.discount_start_date:
            return False
        if self.discount_end_date and at > self.discount_end_date:
            return False
        return True

    @property
    def effective_price(self):
        from orders.pricing import effective_price
        return effective_price(self)

    @property
    def requires_customization(self):
        return self.variations.exists() or self.add_ons.exists()

    @property
    def is_low_stock(self):
        if not self.track_inventory or self.stock_quantity is None:
            return False
        return self.stock_quantity <= self.low_stock_threshold

    def __str__(self):
        return self.name

    class Meta:
        ordering = ['category__position', 'name']


class Variation(models.Model):
    """A size/format option. ``price`` is the full item price at this size."""
    menu_item = models.ForeignKey(MenuItem, on_delete=models.CASCADE, related_name='variations')
    name = models.CharField(max_length=100)
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0.00'))])
    position = models.IntegerField(default=0)

    def __str__(self):
        return f"{self.menu_item.name} - {self.name}"

    class Meta:
        ordering = ['position', 'id']


class AddOn(models.Model):
    menu_item = models.ForeignKey(MenuItem, on_delete=models.CASCADE, related_name='add_ons')
    name = models.CharField(max_length=100)
    category = models.CharField(max_length=50, default='extras')
    price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'),
                                validators=[MinValueValidator(Decimal('0.00'))])
    position = models.IntegerField(default=0)

    def __str__(self):
        return f"{self.menu_item.name} + {self.name}"

    class Meta:
        ordering = ['category', 'position', 'id']


# =============== RAW MATERIALS ===============

class Material(TimeStampedModel):
    UNIT_CHOICES = [
        ("pcs", "pcs"),
        ("g", "g"),
        ("kg", "kg"),
        ("ml", "ml"),
        ("L", "L"),
        ("pack", "pack"),
        ("box", "box"),
        ("bottle", "bottle"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    category = models.CharField(max_length=100, blank=True)
    unit = models.CharField(max_length=20, choices=UNIT_CHOICES, default="pcs")
    unit_cost = models.DecimalField(max_digits=12, decimal_places=4, default=Decimal('0'),
                                    validators=[MinValueValidator(Decimal('0'))])
    stock_quantity = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0'))
    low_stock_threshold = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0'))

    STATUS_OUT = 'out'
    STATUS_LOW = 'low'
    STATUS_IN = 'in'

    @property
    def stock_status(self):
        if self.stock_quantity <= 0:
            return self.STATUS_OUT
        if self.stock_quantity <= self.low_stock_threshold:
            return self.STATUS_LOW
        return self.STATUS_IN

    @property
    def inventory_value(self):
        return self.unit_cost * self.stock_quantity

    def __str__(self):
        return f"{self.name} ({self.unit})"

    class Meta:
        ordering = ['name']


class Supplier(TimeStampedModel):
    item_name = models.CharField(max_length=255)
    category = models.CharField(max_length=100, blank=True)
    supplier_name = models.CharField(max_length=255)
    contact = models.CharField(max_length=255, blank=True)

    def __str__(self):
        return f"{self.supplier_name} ({self.item_name})"

    class Meta:
        ordering = ['item_name']


class Purchase(models.Model):
    material = models.ForeignKey(Material, on_delete=models.SET_NULL, null=True, blank=True, related_name='purchases')
    item_name = models.CharField(max_length=255)
    quantity = models.DecimalField(max_digits=12, decimal_places=3, validators=[MinValueValidator(Decimal('0'))])
    price_per_unit = models.DecimalField(max_digits=12, decimal_places=4, validators=[MinValueValidator(Decimal('0'))])
    total_paid = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    purchase_date = models.DateField(default=timezone.localdate)
    created_at = models.DateTimeField(auto_now_add=True)

    def save(self, *args, **kwargs):
        self.total_paid = (Decimal(self.quantity) * Decimal(self.price_per_unit)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
        if self.material_id and not self.item_name:
            self.item_name = self.material.name
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.item_name} x{self.quantity} on {self.purchase_date}"

    class Meta:
        ordering = ['-purchase_date', '-created_at']


class RecipeEntry(models.Model):
    """One material consumed per serving of a menu item. Used for costing only."""
    menu_item = models.ForeignKey(MenuItem, on_delete=models.CASCADE, related_name='recipe_entries')
    material = models.ForeignKey(Material, on_delete=models.CASCADE, related_name='recipe_entries')
    quantity_used = models.DecimalField(max_digits=12, decimal_places=3, validators=[MinValueValidator(Decimal('0'))])

    def __str__(self):
        return f"{self.menu_item.name}: {self.quantity_used} {self.material.unit} {self.material.name}"

    class Meta:
        verbose_name_plural = "Recipe entries"
        unique_together = ['menu_item', 'material']
        ordering = ['id']
