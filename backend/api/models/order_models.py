import uuid
from django.db import models
from django.db.models import Max
from django.core.validators import MinValueValidator


class Order(models.Model):
    ORDER_STATUS_CHOICES = (
        ('pending_payment', 'Pending Payment'),
        ('paid', 'Paid'),
        ('confirmed', 'Confirmed'),
        ('preparing', 'Preparing'),
        ('ready', 'Ready'),
        ('out_for_delivery', 'Out for Delivery'),
        ('delivered', 'Delivered'),
        ('cancelled', 'Cancelled'),
    )

    ORIGIN_CHOICES = (
        ('online', 'Online'),
        ('pos', 'Point of Sale'),
        ('whatsapp', 'WhatsApp'),
        ('ifood', 'iFood'),
        ('marketplace', 'Marketplace'),
    )

    # Statuses that count as revenue in reports
    REVENUE_STATUSES = ('paid', 'confirmed', 'preparing', 'ready', 'out_for_delivery', 'delivered')
    TERMINAL_STATUSES = ('delivered', 'cancelled')

    STATUS_TIMESTAMP_FIELDS = {
        'paid': 'paid_at',
        'confirmed': 'confirmed_at',
        'preparing': 'preparing_at',
        'ready': 'ready_at',
        'out_for_delivery': 'out_for_delivery_at',
        'delivered': 'delivered_at',
        'cancelled': 'cancelled_at',
    }

    order_uuid = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    tenant = models.ForeignKey('api.Tenant', on_delete=models.CASCADE, related_name='orders')
    store = models.ForeignKey(
        'api.Store',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders'
    )
    table_session = models.ForeignKey(
        'api.TableSession',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders'
    )
    order_number = models.PositiveIntegerField(editable=False)
    origin = models.CharField(max_length=20, choices=ORIGIN_CHOICES, default='pos')
    status = models.CharField(max_length=20, choices=ORDER_STATUS_CHOICES, default='paid')

    # Customer
    customer_name = models.CharField(max_length=200, blank=True)
    customer_phone = models.CharField(max_length=20, blank=True)

    # Delivery
    is_delivery = models.BooleanField(default=False)
    delivery_address = models.CharField(max_length=255, blank=True)
    delivery_neighborhood = models.CharField(max_length=100, blank=True)
    delivery_city = models.CharField(max_length=100, blank=True)

    # Pricing
    subtotal = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    delivery_fee = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    discount = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    total = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])

    notes = models.TextField(blank=True)
    estimated_time_minutes = models.PositiveIntegerField(null=True, blank=True)
    cancellation_reason = models.CharField(max_length=255, blank=True)
    created_by = models.ForeignKey(
        'api.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_orders'
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    preparing_at = models.DateTimeField(null=True, blank=True)
    ready_at = models.DateTimeField(null=True, blank=True)
    out_for_delivery_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']
        unique_together = ['tenant', 'order_number']
        indexes = [
            models.Index(fields=['tenant', 'status'], name='orders_tenant_status_idx'),
            models.Index(fields=['tenant', 'created_at'], name='orders_tenant_created_at_idx'),
            models.Index(fields=['store', 'created_at'], name='orders_store_created_at_idx'),
        ]

    def __str__(self):
        return f"Order #{self.order_number} ({self.get_status_display()})"

    def save(self, *args, **kwargs):
        if not self.order_number:
            last = Order.objects.filter(tenant_id=self.tenant_id).aggregate(last=Max('order_number'))['last']
            self.order_number = (last or 0) + 1
        super().save(*args, **kwargs)

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES

    @property
    def customer_first_name(self):
        return self.customer_name.split()[0] if self.customer_name.strip() else ''


class OrderItem(models.Model):
    order = models.ForeignKey('api.Order', on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(
        'api.Product',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_items'
    )
    variation = models.ForeignKey(
        'api.ProductVariation',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_items'
    )
    product_name = models.CharField(max_length=200)
    variation_name = models.CharField(max_length=100, blank=True)
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    total_price = models.DecimalField(max_digits=10, decimal_places=2)
    notes = models.CharField(max_length=255, blank=True)

    class Meta:
        db_table = 'order_items'

    def __str__(self):
        return f"{self.quantity}x {self.product_name}"


class OrderItemAddon(models.Model):
    order_item = models.ForeignKey('api.OrderItem', on_delete=models.CASCADE, related_name='addons')
    addon = models.ForeignKey(
        'api.ProductAddon',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_item_addons'
    )
    addon_name = models.CharField(max_length=100)
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        db_table = 'order_item_addons'

    def __str__(self):
        return f"+{self.addon_name}"

    @property
    def total_price(self):
        return self.unit_price * self.quantity


class OrderStatusHistory(models.Model):
    order = models.ForeignKey('api.Order', on_delete=models.CASCADE, related_name='status_history')
    status = models.CharField(max_length=20, choices=Order.ORDER_STATUS_CHOICES)
    previous_status = models.CharField(max_length=20, blank=True)
    notes = models.CharField(max_length=255, blank=True)
    changed_by = models.ForeignKey(
        'api.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_status_changes'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'order_status_history'
        ordering = ['created_at', 'id']
        verbose_name_plural = 'Order status history'

    def __str__(self):
        return f"Order #{self.order.order_number}: {self.previous_status or '-'} -> {self.status}"


class Payment(models.Model):
    PAYMENT_METHOD_CHOICES = (
        ('cash', 'Cash'),
        ('pix', 'PIX'),
        ('credit_card', 'Credit Card'),
        ('debit_card', 'Debit Card'),
        ('voucher', 'Voucher'),
        ('mixed', 'Mixed'),
    )

    PAYMENT_STATUS_CHOICES = (
        ('pending', 'Pending'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
        ('refunded', 'Refunded'),
        ('cancelled', 'Cancelled'),
    )

    tenant = models.ForeignKey('api.Tenant', on_delete=models.CASCADE, related_name='payments')
    order = models.ForeignKey('api.Order', on_delete=models.CASCADE, related_name='payments')
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES)
    status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default='pending')
    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    transaction_id = models.CharField(max_length=100, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'payments'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['tenant', 'status', 'paid_at'], name='payments_tenant_status_pai_idx'),
        ]

    def __str__(self):
        return f"{self.get_payment_method_display()} {self.amount} ({self.status})"
