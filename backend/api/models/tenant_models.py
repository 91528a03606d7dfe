from django.contrib.auth.models import AbstractUser
from django.db import models
from django.core.validators import RegexValidator


class Tenant(models.Model):
    BUSINESS_CATEGORY_CHOICES = (
        ('restaurant', 'Restaurant'),
        ('pizzeria', 'Pizzeria'),
        ('burger', 'Burger Shop'),
        ('bakery', 'Bakery'),
        ('cafe', 'Cafe'),
        ('market', 'Market'),
        ('other', 'Other'),
    )

    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=120, unique=True)
    business_category = models.CharField(max_length=20, choices=BUSINESS_CATEGORY_CHOICES, default='restaurant')
    logo_url = models.URLField(blank=True, null=True)
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    is_active = models.BooleanField(default=True)
    partner = models.ForeignKey(
        'api.Partner',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tenants'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tenants'
        ordering = ['name']
        indexes = [
            models.Index(fields=['slug'], name='tenants_slug_idx'),
            models.Index(fields=['is_active'], name='tenants_is_active_idx'),
        ]

    def __str__(self):
        return self.name

    @property
    def headquarters(self):
        return self.stores.filter(is_headquarters=True).first()


class Store(models.Model):
    STORE_TYPE_CHOICES = (
        ('headquarters', 'Headquarters'),
        ('branch', 'Branch'),
        ('franchise', 'Franchise'),
    )

    tenant = models.ForeignKey('api.Tenant', on_delete=models.CASCADE, related_name='stores')
    name = models.CharField(max_length=200)
    code = models.CharField(max_length=20)
    store_type = models.CharField(max_length=20, choices=STORE_TYPE_CHOICES, default='branch')

    address = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=50, blank=True)
    zip_code = models.CharField(max_length=20, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    manager_name = models.CharField(max_length=200, blank=True)
    timezone = models.CharField(max_length=64, default='America/Sao_Paulo')
    business_hours = models.JSONField(default=dict, blank=True)  # {'mon': {'open': '08:00', 'close': '22:00'}}

    is_active = models.BooleanField(default=True)
    is_open = models.BooleanField(default=True)
    is_headquarters = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'stores'
        ordering = ['-is_headquarters', 'name']
        unique_together = ['tenant', 'code']
        indexes = [
            models.Index(fields=['tenant', 'is_active'], name='stores_tenant_is_active_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.code})"

    def save(self, *args, **kwargs):
        # The first store of a tenant is its headquarters
        if self.pk is None and not Store.objects.filter(tenant_id=self.tenant_id).exists():
            self.is_headquarters = True
            self.store_type = 'headquarters'
        super().save(*args, **kwargs)


class User(AbstractUser):
    ROLE_CHOICES = (
        ('super_admin', 'Super Admin'),
        ('admin', 'Administrator'),
        ('manager', 'Manager'),
        ('cashier', 'Cashier'),
        ('kitchen', 'Kitchen'),
        ('stock', 'Stock'),
        ('delivery', 'Delivery'),
    )

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='admin')
    email = models.EmailField(unique=True, db_index=True)
    phone_number = models.CharField(
        max_length=20,
        blank=True,
        null=True,
        validators=[RegexValidator(r'^\+?1?\d{9,15}$', 'Enter a valid phone number.')]
    )
    tenant = models.ForeignKey(
        'api.Tenant',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='users'
    )
    store = models.ForeignKey(
        'api.Store',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='active_users'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['email'], name='users_email_idx'),
            models.Index(fields=['tenant', 'role'], name='users_tenant_role_idx'),
        ]

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"

    @property
    def is_super_admin(self):
        return self.role == 'super_admin' or self.is_superuser

    @property
    def is_tenant_admin(self):
        return self.role in ('admin', 'super_admin')
