from decimal import Decimal
from django.db import models
from django.core.validators import MinValueValidator


class Category(models.Model):
    tenant = models.ForeignKey('api.Tenant', on_delete=models.CASCADE, related_name='categories')
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    display_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'categories'
        ordering = ['display_order', 'name']
        verbose_name_plural = 'Categories'

    def __str__(self):
        return self.name


class Product(models.Model):
    tenant = models.ForeignKey('api.Tenant', on_delete=models.CASCADE, related_name='products')
    category = models.ForeignKey(
        'api.Category',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='products'
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    sku = models.CharField(max_length=50, blank=True)
    base_price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    image_url = models.URLField(blank=True, null=True)
    is_available = models.BooleanField(default=True)
    is_active = models.BooleanField(default=True)
    display_order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'products'
        ordering = ['display_order', 'name']
        indexes = [
            models.Index(fields=['tenant', 'is_available'], name='products_tenant_is_availab_idx'),
            models.Index(fields=['tenant', 'category'], name='products_tenant_category_idx'),
        ]

    def __str__(self):
        return self.name

    def get_price(self, store=None, variation=None):
        """
        Effective unit price: store override when present, else base price,
        plus the variation modifier.
        """
        price = self.base_price
        if store is not None:
            override = self.store_settings.filter(store=store, price_override__isnull=False).first()
            if override:
                price = override.price_override
        if variation is not None:
            price += variation.price_modifier
        return Decimal(price)

    def is_available_at(self, store=None):
        """False when the product or its setting for the store is switched off."""
        if not self.is_available:
            return False
        if store is None:
            return True
        return not self.store_settings.filter(store=store, is_available=False).exists()


class ProductVariation(models.Model):
    product = models.ForeignKey('api.Product', on_delete=models.CASCADE, related_name='variations')
    name = models.CharField(max_length=100)
    price_modifier = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'product_variations'
        ordering = ['price_modifier', 'name']

    def __str__(self):
        return f"{self.product.name} - {self.name}"


class ProductAddon(models.Model):
    product = models.ForeignKey('api.Product', on_delete=models.CASCADE, related_name='addons')
    name = models.CharField(max_length=100)
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'product_addons'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} (+{self.price})"


class StoreProduct(models.Model):
    store = models.ForeignKey('api.Store', on_delete=models.CASCADE, related_name='store_products')
    product = models.ForeignKey('api.Product', on_delete=models.CASCADE, related_name='store_settings')
    price_override = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    is_available = models.BooleanField(default=True)
    stock_quantity = models.IntegerField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'store_products'
        unique_together = ['store', 'product']

    def __str__(self):
        return f"{self.product.name} @ {self.store.name}"

    @property
    def effective_price(self):
        return self.price_override if self.price_override is not None else self.product.base_price
