from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import (
    Category, Courier, Delivery, Ingredient, KitchenDisplayConfig, KitchenStation, KitchenTicket, Order, OrderItem,
    OrderStatusHistory, Partner, PartnerBranding, PartnerDomain, PartnerPlan, PartnerTenant, Payment, Product,
    ProductAddon, ProductVariation, Recipe, RecipeItem, SalesGoal, ServiceCall, StockMovement, Store, StoreProduct, Subscription,
    SubscriptionPlan, Table, TableSession, TableSessionItem, Tenant, User
)

# Register your models here.
@admin.register(User)
class CustomUserAdmin(UserAdmin):
    list_display = ('username', 'email', 'first_name', 'last_name', 'role', 'tenant', 'is_active', 'created_at')
    list_filter = ('role', 'is_staff', 'is_active', 'created_at')
    list_select_related = ('tenant',)
    search_fields = ('username', 'email', 'first_name', 'last_name', 'tenant__name')
    ordering = ('-created_at',)
    fieldsets = UserAdmin.fieldsets + (
        ('Tenant Information',
         {'fields': ('role', 'tenant', 'store', 'phone_number', 'created_at')}),
    )
    readonly_fields = ('created_at',)

    add_fieldsets = UserAdmin.add_fieldsets + (
        ('Tenant Information', {
            'fields': ('role', 'tenant', 'phone_number', 'email', 'first_name', 'last_name')
        }),
    )


class StoreInline(admin.TabularInline):
    model = Store
    extra = 0
    fields = ['name', 'code', 'store_type', 'is_active', 'is_open']


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'business_category', 'partner', 'is_active', 'created_at']
    list_filter = ['is_active', 'business_category', 'partner']
    search_fields = ['name', 'slug', 'email']
    inlines = [StoreInline]


@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'tenant', 'store_type', 'is_headquarters', 'is_active', 'is_open']
    list_select_related = ['tenant']
    list_filter = ['store_type', 'is_active', 'is_open']
    search_fields = ['name', 'code', 'tenant__name']


@admin.register(SubscriptionPlan)
class SubscriptionPlanAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'monthly_price', 'max_users', 'max_products', 'is_active', 'display_order']
    list_editable = ['is_active', 'display_order']


@admin.register(Subscription)
class SubscriptionAdmin(admin.ModelAdmin):
    list_display = ['tenant', 'plan', 'status', 'trial_ends_at', 'current_period_end']
    list_select_related = ['tenant', 'plan']
    list_filter = ['status', 'plan']
    search_fields = ['tenant__name']


class ProductVariationInline(admin.TabularInline):
    model = ProductVariation
    extra = 0


class ProductAddonInline(admin.TabularInline):
    model = ProductAddon
    extra = 0


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'tenant', 'display_order', 'is_active']
    list_filter = ['is_active']
    search_fields = ['name', 'tenant__name']
    list_editable = ['display_order', 'is_active']


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'tenant', 'category', 'base_price', 'is_available', 'is_active']
    list_select_related = ['tenant', 'category']
    list_filter = ['is_available', 'is_active']
    search_fields = ['name', 'sku', 'tenant__name']
    inlines = [ProductVariationInline, ProductAddonInline]


@admin.register(StoreProduct)
class StoreProductAdmin(admin.ModelAdmin):
    list_display = ['product', 'store', 'price_override', 'is_available', 'stock_quantity']
    list_select_related = ['product', 'store']


@admin.register(Ingredient)
class IngredientAdmin(admin.ModelAdmin):
    list_display = ['name', 'tenant', 'unit', 'current_stock', 'min_stock', 'cost_per_unit', 'is_active']
    list_filter = ['unit', 'is_active']
    search_fields = ['name', 'tenant__name']
    # Stock changes go through movements
    readonly_fields = ['current_stock']


class RecipeItemInline(admin.TabularInline):
    model = RecipeItem
    extra = 0


@admin.register(Recipe)
class RecipeAdmin(admin.ModelAdmin):
    list_display = ['product', 'variation', 'tenant', 'is_active']
    list_select_related = ['product', 'variation', 'tenant']
    inlines = [RecipeItemInline]


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ['ingredient', 'movement_type', 'quantity', 'previous_stock', 'new_stock', 'order', 'created_at']
    list_select_related = ['ingredient', 'order']
    list_filter = ['movement_type', 'created_at']
    search_fields = ['ingredient__name', 'reason']

    def has_change_permission(self, request, obj=None):
        return False


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ['product_name', 'variation_name', 'quantity', 'unit_price', 'total_price']


class OrderStatusHistoryInline(admin.TabularInline):
    model = OrderStatusHistory
    extra = 0
    readonly_fields = ['status', 'previous_status', 'notes', 'changed_by', 'created_at']


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['order_number', 'tenant', 'store', 'origin', 'status', 'total', 'is_delivery', 'created_at']
    list_select_related = ['tenant', 'store']
    list_filter = ['status', 'origin', 'is_delivery', 'created_at']
    search_fields = ['order_number', 'customer_name', 'customer_phone', 'tenant__name']
    readonly_fields = ['order_uuid', 'order_number', 'created_at', 'updated_at']
    inlines = [OrderItemInline, OrderStatusHistoryInline]


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['order', 'payment_method', 'status', 'amount', 'paid_at']
    list_filter = ['payment_method', 'status']


@admin.register(KitchenDisplayConfig)
class KitchenDisplayConfigAdmin(admin.ModelAdmin):
    list_display = ['tenant', 'display_mode', 'auto_advance', 'alert_threshold_minutes']


@admin.register(KitchenStation)
class KitchenStationAdmin(admin.ModelAdmin):
    list_display = ['name', 'tenant', 'display_order', 'is_active']
    filter_horizontal = ['categories']


@admin.register(KitchenTicket)
class KitchenTicketAdmin(admin.ModelAdmin):
    list_display = ['order', 'order_item', 'station', 'status', 'priority', 'created_at']
    list_select_related = ['order', 'order_item', 'station']
    list_filter = ['status', 'station']


class TableSessionItemInline(admin.TabularInline):
    model = TableSessionItem
    extra = 0


@admin.register(Table)
class TableAdmin(admin.ModelAdmin):
    list_display = ['number', 'name', 'tenant', 'store', 'capacity', 'is_active']
    list_filter = ['is_active']
    search_fields = ['name', 'tenant__name']


@admin.register(TableSession)
class TableSessionAdmin(admin.ModelAdmin):
    list_display = ['table', 'status', 'customer_name', 'total', 'opened_at', 'closed_at']
    list_filter = ['status']
    inlines = [TableSessionItemInline]


@admin.register(ServiceCall)
class ServiceCallAdmin(admin.ModelAdmin):
    list_display = ['call_type', 'table', 'tenant', 'status', 'escalation_level', 'response_time_seconds', 'created_at']
    list_select_related = ['table', 'tenant']
    list_filter = ['status', 'call_type']


@admin.register(SalesGoal)
class SalesGoalAdmin(admin.ModelAdmin):
    list_display = ['tenant', 'goal_type', 'target_amount', 'start_date', 'end_date', 'is_active']
    list_filter = ['goal_type', 'is_active']
    search_fields = ['tenant__name']


@admin.register(Courier)
class CourierAdmin(admin.ModelAdmin):
    list_display = ['name', 'tenant', 'phone', 'vehicle_type', 'is_active', 'is_available']
    list_filter = ['is_active', 'is_available']


@admin.register(Delivery)
class DeliveryAdmin(admin.ModelAdmin):
    list_display = ['order', 'courier', 'status', 'neighborhood', 'assigned_at', 'delivered_at']
    list_select_related = ['order', 'courier']
    list_filter = ['status']


class PartnerDomainInline(admin.TabularInline):
    model = PartnerDomain
    extra = 0
    readonly_fields = ['verification_token', 'verified_at']


@admin.register(Partner)
class PartnerAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'email', 'max_tenants', 'revenue_share_percent', 'is_active']
    list_filter = ['is_active']
    search_fields = ['name', 'slug', 'email']
    inlines = [PartnerDomainInline]


@admin.register(PartnerBranding)
class PartnerBrandingAdmin(admin.ModelAdmin):
    list_display = ['partner', 'platform_name', 'primary_color', 'updated_at']
    search_fields = ['partner__name', 'platform_name']


@admin.register(PartnerPlan)
class PartnerPlanAdmin(admin.ModelAdmin):
    list_display = ['name', 'partner', 'base_plan', 'monthly_price', 'currency', 'is_active']
    list_filter = ['partner', 'is_active']


@admin.register(PartnerTenant)
class PartnerTenantAdmin(admin.ModelAdmin):
    list_display = ['partner', 'tenant', 'partner_plan', 'status', 'joined_at']
    list_filter = ['status', 'partner']
