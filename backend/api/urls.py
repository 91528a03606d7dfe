from rest_framework import routers
from django.urls import include, path
from .views import (
    LoginView, TokenView, SignupView, LogoutView, CurrentUserView, SubscriptionView, SubscriptionPlanListView, StoreViewSet, TenantUserViewSet, health_check,
    CategoryViewSet, ProductViewSet, StoreProductViewSet, PublicMenuView, IngredientViewSet, RecipeViewSet, StockMovementViewSet,
    OrderViewSet, PublicOrderTrackingView, KitchenViewSet, KitchenStationViewSet, TableViewSet, TableSessionViewSet,
    ServiceCallViewSet, PublicServiceCallView,
    DeliveryViewSet, CourierViewSet, CourierTodayView, CourierStatsView, ReportViewSet,
    PartnerViewSet, PartnerDomainViewSet, BrandingView, PublicPlansView
)
from rest_framework_simplejwt.views import TokenRefreshView

router = routers.DefaultRouter()

# Tenancy
router.register(r'stores', StoreViewSet, basename='stores')
router.register(r'users', TenantUserViewSet, basename='users')

# Catalog
router.register(r'categories', CategoryViewSet, basename='categories')
router.register(r'products', ProductViewSet, basename='products')
router.register(r'store-products', StoreProductViewSet, basename='store-products')

# Stock
router.register(r'stock/ingredients', IngredientViewSet, basename='ingredients')
router.register(r'stock/recipes', RecipeViewSet, basename='recipes')
router.register(r'stock/movements', StockMovementViewSet, basename='stock-movements')

# Orders and kitchen
router.register(r'orders', OrderViewSet, basename='orders')
router.register(r'kitchen/stations', KitchenStationViewSet, basename='kitchen-stations')
router.register(r'kitchen', KitchenViewSet, basename='kitchen')

# Tables
router.register(r'tables', TableViewSet, basename='tables')
router.register(r'table-sessions', TableSessionViewSet, basename='table-sessions')
router.register(r'service-calls', ServiceCallViewSet, basename='service-calls')

# Deliveries
router.register(r'deliveries', DeliveryViewSet, basename='deliveries')
router.register(r'couriers', CourierViewSet, basename='couriers')

# Reports
router.register(r'reports', ReportViewSet, basename='reports')

# Partner program
router.register(r'partners', PartnerViewSet, basename='partners')
router.register(r'partner-domains', PartnerDomainViewSet, basename='partner-domains')


urlpatterns = [
    # Include router URLs
    path('api/', include(router.urls)),

    # database check
    path('api/health/', health_check, name='health_check'),

    # subscription
    path('api/subscription/', SubscriptionView.as_view(), name='subscription'),
    path('api/plans/', SubscriptionPlanListView.as_view(), name='plans'),

    # courier app
    path('api/courier/today/', CourierTodayView.as_view(), name='courier_today'),
    path('api/courier/stats/', CourierStatsView.as_view(), name='courier_stats'),

    #authentication
    path('auth/signup/', SignupView.as_view(), name='signup'),
    path('auth/login/', LoginView.as_view(), name='login'),
    path('auth/logout/', LogoutView.as_view(), name='logout'),
    path('auth/me/', CurrentUserView.as_view(), name='current_user'),
    path('auth/token/', TokenView.as_view(), name='token_obtain_pair'),
    path('auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # public, no authentication
    path('public/menu/<slug:tenant_slug>/', PublicMenuView.as_view(), name='public_menu'),
    path('public/track/<slug:tenant_slug>/<int:order_number>/', PublicOrderTrackingView.as_view(), name='public_tracking'),
    path('public/service-calls/<slug:tenant_slug>/', PublicServiceCallView.as_view(), name='public_service_call'),
    path('public/branding/', BrandingView.as_view(), name='public_branding'),
    path('public/plans/', PublicPlansView.as_view(), name='public_plans'),
]
