from .tenantSerializers import TenantSerializer, StoreSerializer, SubscriptionPlanSerializer, SubscriptionSerializer, TenantUserSerializer, CurrentUserSerializer, SignupSerializer, LoginSerializer, TenantTokenObtainPairSerializer
from .catalogSerializers import TenantOwnedRelatedField, CategorySerializer, ProductVariationSerializer, ProductAddonSerializer, ProductSerializer, StoreProductSerializer, PublicProductSerializer
from .stockSerializers import IngredientSerializer, RecipeItemSerializer, RecipeSerializer, StockMovementSerializer, RegisterMovementSerializer
from .orderSerializers import OrderItemAddonSerializer, OrderItemSerializer, OrderStatusHistorySerializer, PaymentSerializer, OrderSerializer, OrderListSerializer, OrderCreateSerializer, OrderStatusUpdateSerializer, OrderCancelSerializer
from .kitchenSerializers import KitchenDisplayConfigSerializer, KitchenStationSerializer, KitchenTicketSerializer, TicketStatusSerializer, TicketPrioritySerializer
from .tableSerializers import TableSerializer, TableSessionSerializer, TableSessionItemSerializer, OpenSessionSerializer, AddSessionItemSerializer, SessionItemStatusSerializer, CloseSessionSerializer, ServiceCallSerializer, PublicServiceCallSerializer, ResolveServiceCallSerializer
from .deliverySerializers import CourierSerializer, DeliverySerializer, AssignCourierSerializer, DeliveryStatusSerializer
from .partnerSerializers import PartnerSerializer, PartnerBrandingSerializer, PartnerDomainSerializer, PartnerPlanSerializer, PublicPartnerPlanSerializer, PartnerTenantSerializer
from .reportSerializers import ReportPeriodSerializer, ExportRequestSerializer, SalesGoalSerializer
