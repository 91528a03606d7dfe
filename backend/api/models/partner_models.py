import secrets
from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator


def generate_verification_token():
    return f"foodhub-verify-{secrets.token_hex(16)}"


class Partner(models.Model):
    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=100, unique=True)
    email = models.EmailField()
    phone = models.CharField(max_length=20, blank=True, null=True)
    document = models.CharField(max_length=30, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    max_tenants = models.PositiveIntegerField(default=10)
    max_users_per_tenant = models.PositiveIntegerField(default=5)
    revenue_share_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(100)]
    )
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'partners'
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def tenant_count(self):
        return self.partner_tenants.exclude(status='canceled').count()

    def can_add_tenant(self):
        return self.tenant_count < self.max_tenants


class PartnerBranding(models.Model):
    partner = models.OneToOneField('api.Partner', on_delete=models.CASCADE, related_name='branding')
    platform_name = models.CharField(max_length=100, blank=True, null=True)
    logo_url = models.URLField(blank=True, null=True)
    favicon_url = models.URLField(blank=True, null=True)
    primary_color = models.CharField(max_length=7, blank=True, null=True)
    secondary_color = models.CharField(max_length=7, blank=True, null=True)
    accent_color = models.CharField(max_length=7, blank=True, null=True)
    support_email = models.EmailField(blank=True, null=True)
    support_phone = models.CharField(max_length=20, blank=True, null=True)
    terms_url = models.URLField(blank=True, null=True)
    privacy_url = models.URLField(blank=True, null=True)
    hero_title = models.CharField(max_length=200, blank=True, null=True)
    hero_subtitle = models.CharField(max_length=300, blank=True, null=True)
    powered_by_enabled = models.BooleanField(default=True)
    powered_by_text = models.CharField(max_length=100, blank=True, null=True)
    footer_text = models.CharField(max_length=255, blank=True, null=True)
    meta_title = models.CharField(max_length=100, blank=True, null=True)
    meta_description = models.CharField(max_length=300, blank=True, null=True)
    og_image_url = models.URLField(blank=True, null=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'partner_branding'

    def __str__(self):
        return f"Branding - {self.partner.name}"


class PartnerDomain(models.Model):
    DOMAIN_TYPE_CHOICES = (
        ('app', 'Application'),
        ('marketing', 'Marketing'),
    )

    partner = models.ForeignKey('api.Partner', on_delete=models.CASCADE, related_name='domains')
    domain = models.CharField(max_length=255, unique=True)
    domain_type = models.CharField(max_length=20, choices=DOMAIN_TYPE_CHOICES, default='app')
    is_primary = models.BooleanField(default=False)
    is_verified = models.BooleanField(default=False)
    verification_token = models.CharField(max_length=100, default=generate_verification_token)
    verified_at = models.DateTimeField(null=True, blank=True)
    ssl_status = models.CharField(max_length=20, default='pending')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'partner_domains'
        ordering = ['-is_primary', 'domain']
        indexes = [
            models.Index(fields=['domain', 'is_verified'], name='partner_domains_domain_is__idx'),
        ]

    def __str__(self):
        return self.domain

    def save(self, *args, **kwargs):
        self.domain = self.domain.strip().lower().rstrip('.')
        super().save(*args, **kwargs)


class PartnerPlan(models.Model):
    partner = models.ForeignKey('api.Partner', on_delete=models.CASCADE, related_name='plans')
    base_plan = models.ForeignKey(
        'api.SubscriptionPlan',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='partner_plans'
    )
    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=50)
    description = models.TextField(blank=True, null=True)
    monthly_price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    currency = models.CharField(max_length=3, default='BRL')
    max_users = models.PositiveIntegerField(null=True, blank=True)
    max_products = models.PositiveIntegerField(null=True, blank=True)
    max_orders_per_month = models.PositiveIntegerField(null=True, blank=True)
    included_modules = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)
    display_order = models.IntegerField(default=0)

    class Meta:
        db_table = 'partner_plans'
        ordering = ['display_order', 'monthly_price']
        unique_together = ['partner', 'slug']

    def __str__(self):
        return f"{self.partner.name} - {self.name}"


class PartnerTenant(models.Model):
    STATUS_CHOICES = (
        ('active', 'Active'),
        ('suspended', 'Suspended'),
        ('canceled', 'Canceled'),
    )

    partner = models.ForeignKey('api.Partner', on_delete=models.CASCADE, related_name='partner_tenants')
    tenant = models.OneToOneField('api.Tenant', on_delete=models.CASCADE, related_name='partner_link')
    partner_plan = models.ForeignKey(
        'api.PartnerPlan',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tenants'
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')
    joined_at = models.DateTimeField(auto_now_add=True)
    next_billing_date = models.DateField(null=True, blank=True)
    billing_notes = models.TextField(blank=True, null=True)

    class Meta:
        db_table = 'partner_tenants'
        ordering = ['-joined_at']

    def __str__(self):
        return f"{self.partner.name} -> {self.tenant.name}"
