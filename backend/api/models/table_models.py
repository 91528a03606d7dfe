from django.db import models
from django.db.models import Q
from django.core.validators import MinValueValidator


class Table(models.Model):
    tenant = models.ForeignKey('api.Tenant', on_delete=models.CASCADE, related_name='tables')
    store = models.ForeignKey(
        'api.Store',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tables'
    )
    number = models.PositiveIntegerField()
    name = models.CharField(max_length=50, blank=True)
    capacity = models.PositiveIntegerField(default=4)
    qr_code_url = models.URLField(max_length=500, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'tables'
        ordering = ['number']
        unique_together = ['tenant', 'number']

    def __str__(self):
        return self.name or f"Mesa {self.number}"

    @property
    def active_session(self):
        return self.sessions.filter(status='open').first()

    def menu_url(self, base_url):
        return f"{base_url.rstrip('/')}/{self.tenant.slug}?table={self.number}"

    def generate_qr_code(self, base_url):
        """Generate QR code pointing to the public menu for this table"""
        import qrcode
        from io import BytesIO
        import base64

        qr = qrcode.QRCode(version=1, box_size=10, border=5)
        qr.add_data(self.menu_url(base_url))
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")
        buffer = BytesIO()
        img.save(buffer, format='PNG')

        qr_code_base64 = base64.b64encode(buffer.getvalue()).decode()
        return f"data:image/png;base64,{qr_code_base64}"


class TableSession(models.Model):
    STATUS_CHOICES = (
        ('open', 'Open'),
        ('closed', 'Closed'),
        ('cancelled', 'Cancelled'),
    )

    tenant = models.ForeignKey('api.Tenant', on_delete=models.CASCADE, related_name='table_sessions')
    table = models.ForeignKey('api.Table', on_delete=models.CASCADE, related_name='sessions')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='open')
    customer_name = models.CharField(max_length=200, blank=True)
    guests_count = models.PositiveIntegerField(default=1)
    subtotal = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    discount = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    total = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    payment_method = models.CharField(max_length=20, blank=True)
    notes = models.TextField(blank=True)
    opened_by = models.ForeignKey(
        'api.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='opened_table_sessions'
    )
    closed_by = models.ForeignKey(
        'api.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='closed_table_sessions'
    )
    opened_at = models.DateTimeField(auto_now_add=True)
    closed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'table_sessions'
        ordering = ['-opened_at']
        constraints = [
            models.UniqueConstraint(
                fields=['table'],
                condition=Q(status='open'),
                name='unique_open_session_per_table'
            ),
        ]

    def __str__(self):
        return f"{self.table} - {self.get_status_display()}"


class TableSessionItem(models.Model):
    STATUS_CHOICES = (
        ('pending', 'Pending'),
        ('preparing', 'Preparing'),
        ('delivered', 'Delivered'),
        ('cancelled', 'Cancelled'),
    )

    session = models.ForeignKey('api.TableSession', on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(
        'api.Product',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='table_session_items'
    )
    variation = models.ForeignKey(
        'api.ProductVariation',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='table_session_items'
    )
    product_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    total_price = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    notes = models.CharField(max_length=255, blank=True)
    added_by = models.ForeignKey(
        'api.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='table_session_items'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'table_session_items'
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"{self.quantity}x {self.product_name}"


class ServiceCall(models.Model):
    CALL_TYPE_CHOICES = (
        ('waiter', 'Waiter'),
        ('bill', 'Bill'),
        ('cash_payment', 'Cash Payment'),
        ('assistance', 'Assistance'),
    )

    STATUS_CHOICES = (
        ('pending', 'Pending'),
        ('acknowledged', 'Acknowledged'),
        ('in_progress', 'In Progress'),
        ('resolved', 'Resolved'),
        ('escalated', 'Escalated'),
    )

    OPEN_STATUSES = ('pending', 'acknowledged', 'in_progress', 'escalated')

    tenant = models.ForeignKey('api.Tenant', on_delete=models.CASCADE, related_name='service_calls')
    table = models.ForeignKey(
        'api.Table',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='service_calls'
    )
    session = models.ForeignKey(
        'api.TableSession',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='service_calls'
    )
    call_type = models.CharField(max_length=20, choices=CALL_TYPE_CHOICES, default='waiter')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    priority = models.PositiveSmallIntegerField(default=0)
    notes = models.CharField(max_length=255, blank=True)
    acknowledged_by = models.ForeignKey(
        'api.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='acknowledged_service_calls'
    )
    acknowledged_at = models.DateTimeField(null=True, blank=True)
    response_time_seconds = models.PositiveIntegerField(null=True, blank=True)
    resolved_by = models.ForeignKey(
        'api.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='resolved_service_calls'
    )
    resolved_at = models.DateTimeField(null=True, blank=True)
    escalated_at = models.DateTimeField(null=True, blank=True)
    escalation_level = models.PositiveSmallIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'service_calls'
        ordering = ['-priority', 'created_at']
        indexes = [
            models.Index(fields=['tenant', 'status'], name='service_cal_tenant_status_idx'),
        ]

    def __str__(self):
        return f"{self.get_call_type_display()} - {self.table or 'balcão'}"
