from django.db import models


class KitchenDisplayConfig(models.Model):
    DISPLAY_MODE_CHOICES = (
        ('grid', 'Grid'),
        ('list', 'List'),
        ('kanban', 'Kanban'),
    )

    tenant = models.OneToOneField('api.Tenant', on_delete=models.CASCADE, related_name='kitchen_config')
    display_mode = models.CharField(max_length=10, choices=DISPLAY_MODE_CHOICES, default='kanban')
    auto_advance = models.BooleanField(default=False)
    alert_threshold_minutes = models.PositiveIntegerField(default=15)
    show_customer_name = models.BooleanField(default=True)
    sound_enabled = models.BooleanField(default=True)
    group_by_category = models.BooleanField(default=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'kitchen_display_configs'

    def __str__(self):
        return f"Kitchen config - {self.tenant.name}"


class KitchenStation(models.Model):
    tenant = models.ForeignKey('api.Tenant', on_delete=models.CASCADE, related_name='kitchen_stations')
    store = models.ForeignKey(
        'api.Store',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='kitchen_stations'
    )
    name = models.CharField(max_length=100)
    categories = models.ManyToManyField('api.Category', blank=True, related_name='kitchen_stations')
    color = models.CharField(max_length=7, default='#f97316')
    display_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'kitchen_stations'
        ordering = ['display_order', 'name']
        indexes = [
            models.Index(fields=['tenant', 'is_active'], name='kitchen_stations_tenant_is_idx'),
        ]

    def __str__(self):
        return self.name


class KitchenTicket(models.Model):
    STATUS_CHOICES = (
        ('pending', 'Pending'),
        ('preparing', 'Preparing'),
        ('ready', 'Ready'),
        ('served', 'Served'),
        ('cancelled', 'Cancelled'),
    )

    OPEN_STATUSES = ('pending', 'preparing')

    tenant = models.ForeignKey('api.Tenant', on_delete=models.CASCADE, related_name='kitchen_tickets')
    order = models.ForeignKey('api.Order', on_delete=models.CASCADE, related_name='kitchen_tickets')
    order_item = models.OneToOneField('api.OrderItem', on_delete=models.CASCADE, related_name='kitchen_ticket')
    station = models.ForeignKey(
        'api.KitchenStation',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tickets'
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    priority = models.IntegerField(default=0)
    notes = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    bumped_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'kitchen_tickets'
        ordering = ['-priority', 'created_at']
        indexes = [
            models.Index(fields=['tenant', 'status'], name='kitchen_tickets_tenant_sta_idx'),
            models.Index(fields=['station', 'status'], name='kitchen_tickets_station_st_idx'),
        ]

    def __str__(self):
        return f"Ticket #{self.order.order_number} - {self.order_item.product_name} ({self.status})"

    @property
    def prep_time_minutes(self):
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds() / 60
        return None
