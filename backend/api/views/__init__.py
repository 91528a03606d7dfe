from .tenantViews import LoginView, TokenView, SignupView, LogoutView, CurrentUserView, SubscriptionView, SubscriptionPlanListView, StoreViewSet, TenantUserViewSet, health_check
from .catalogViews import CategoryViewSet, ProductViewSet, StoreProductViewSet, PublicMenuView
from .stockViews import IngredientViewSet, RecipeViewSet, StockMovementViewSet
from .orderViews import OrderViewSet, PublicOrderTrackingView
from .kitchenViews import KitchenViewSet, KitchenStationViewSet
from .tableViews import TableViewSet, TableSessionViewSet, ServiceCallViewSet, PublicServiceCallView
from .deliveryViews import DeliveryViewSet, CourierViewSet, CourierTodayView, CourierStatsView
from .reportViews import ReportViewSet
from .partnerViews import PartnerViewSet, PartnerDomainViewSet, BrandingView, PublicPlansView
