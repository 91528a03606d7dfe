from .tenant_models import Tenant, Store, User
from .subscription_models import SubscriptionPlan, Subscription, MODULE_CHOICES, ALL_MODULES
from .catalog_models import Category, Product, ProductVariation, ProductAddon, StoreProduct
from .stock_models import Ingredient, Recipe, RecipeItem, StockMovement
from .order_models import Order, OrderItem, OrderItemAddon, OrderStatusHistory, Payment
from .kitchen_models import KitchenDisplayConfig, KitchenStation, KitchenTicket
from .table_models import Table, TableSession, TableSessionItem, ServiceCall
from .delivery_models import Courier, Delivery
from .partner_models import Partner, PartnerBranding, PartnerDomain, PartnerPlan, PartnerTenant
from .goal_models import SalesGoal


__all__ = [ 'Tenant', 'Store', 'User', 'SubscriptionPlan', 'Subscription', 'MODULE_CHOICES', 'ALL_MODULES', 'Category', 'Product', 'ProductVariation', 'ProductAddon', 'StoreProduct', 'Ingredient', 'Recipe', 'RecipeItem', 'StockMovement', 'Order', 'OrderItem', 'OrderItemAddon', 'OrderStatusHistory', 'Payment', 'KitchenDisplayConfig', 'KitchenStation', 'KitchenTicket', 'Table', 'TableSession', 'TableSessionItem', 'ServiceCall', 'Courier', 'Delivery', 'Partner', 'PartnerBranding', 'PartnerDomain', 'PartnerPlan', 'PartnerTenant', 'SalesGoal' ]
