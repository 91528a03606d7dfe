from django.db import models
from django.utils import timezone


MODULE_CHOICES = (
    ('pos', 'Point of Sale'),
    ('kitchen_display', 'Kitchen Display'),
    ('delivery', 'Delivery'),
    ('stock', 'Stock Control'),
    ('reports_advanced', 'Advanced Reports'),
    ('cmv_reports', 'CMV Reports'),
    ('multi_store', 'Multi Store'),
    ('tables', 'Tables'),
    ('white_label', 'White Label'),
)

ALL_MODULES = [key for key, _ in MODULE_CHOICES]


class SubscriptionPlan(models.Model):
    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=50, unique=True)
    description = models.TextField(blank=True)
    monthly_price = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    # Empty limit means unlimited
    max_users = models.PositiveIntegerField(null=True, blank=True)
    max_products = models.PositiveIntegerField(null=True, blank=True)
    max_orders_per_month = models.PositiveIntegerField(null=True, blank=True)
    max_stores = models.PositiveIntegerField(null=True, blank=True)

    modules = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)
    display_order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'subscription_plans'
        ordering = ['display_order', 'monthly_price']

    def __str__(self):
        return self.name


class Subscription(models.Model):
    STATUS_CHOICES = (
        ('trialing', 'Trialing'),
        ('active', 'Active'),
        ('past_due', 'Past Due'),
        ('canceled', 'Canceled'),
        ('unpaid', 'Unpaid'),
    )

    tenant = models.OneToOneField('api.Tenant', on_delete=models.CASCADE, related_name='subscription')
    plan = models.ForeignKey(
        'api.SubscriptionPlan',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='subscriptions'
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='trialing')
    current_period_start = models.DateTimeField(null=True, blank=True)
    current_period_end = models.DateTimeField(null=True, blank=True)
    trial_ends_at = models.DateTimeField(null=True, blank=True)
    canceled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'subscriptions'
        indexes = [
            models.Index(fields=['status', 'trial_ends_at'], name='subscriptions_status_trial_idx'),
        ]

    def __str__(self):
        return f"{self.tenant.name} - {self.get_status_display()}"

    @property
    def is_trial_expired(self):
        return (
            self.status == 'trialing'
            and self.trial_ends_at is not None
            and self.trial_ends_at < timezone.now()
        )

    def enabled_modules(self):
        if self.status == 'trialing':
            return list(ALL_MODULES)
        if self.status == 'active' and self.plan:
            return [module for module in self.plan.modules if module in ALL_MODULES]
        return []

    def has_module(self, key):
        return key in self.enabled_modules()
