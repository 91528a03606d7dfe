from django.db import models


class Courier(models.Model):
    VEHICLE_CHOICES = (
        ('motorcycle', 'Motorcycle'),
        ('bicycle', 'Bicycle'),
        ('car', 'Car'),
        ('on_foot', 'On Foot'),
    )

    tenant = models.ForeignKey('api.Tenant', on_delete=models.CASCADE, related_name='couriers')
    user = models.OneToOneField(
        'api.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='courier_profile'
    )
    name = models.CharField(max_length=200)
    phone = models.CharField(max_length=20, blank=True)
    vehicle_type = models.CharField(max_length=20, choices=VEHICLE_CHOICES, default='motorcycle')
    vehicle_plate = models.CharField(max_length=10, blank=True)
    is_active = models.BooleanField(default=True)
    is_available = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'couriers'
        ordering = ['name']

    def __str__(self):
        return self.name


class Delivery(models.Model):
    STATUS_CHOICES = (
        ('pending', 'Pending'),
        ('assigned', 'Assigned'),
        ('picked_up', 'Picked Up'),
        ('in_route', 'In Route'),
        ('delivered', 'Delivered'),
        ('failed', 'Failed'),
    )

    TERMINAL_STATUSES = ('delivered', 'failed')

    tenant = models.ForeignKey('api.Tenant', on_delete=models.CASCADE, related_name='deliveries')
    order = models.OneToOneField('api.Order', on_delete=models.CASCADE, related_name='delivery')
    courier = models.ForeignKey(
        'api.Courier',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='deliveries'
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    address = models.CharField(max_length=255, blank=True)
    neighborhood = models.CharField(max_length=100, blank=True)
    city = models.CharField(max_length=100, blank=True)
    delivery_fee = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    notes = models.TextField(blank=True)
    failure_reason = models.CharField(max_length=255, blank=True)
    assigned_at = models.DateTimeField(null=True, blank=True)
    picked_up_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    failed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'deliveries'
        ordering = ['-created_at']
        verbose_name_plural = 'Deliveries'
        indexes = [
            models.Index(fields=['tenant', 'status'], name='deliveries_tenant_status_idx'),
            models.Index(fields=['courier', 'created_at'], name='deliveries_courier_created_idx'),
        ]

    def __str__(self):
        return f"Delivery for order #{self.order.order_number} ({self.status})"
