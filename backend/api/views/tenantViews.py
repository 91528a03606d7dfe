import logging

from django.contrib.auth import authenticate, login, logout
from django.db import connection, DatabaseError
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView

from ..exceptions import ModuleNotEnabled
from ..mixins import TenantScopedMixin
from ..models import Store, SubscriptionPlan, User
from ..permissions import IsTenantAdmin, IsTenantMember, TENANT_PERMISSIONS
from ..serializers import (
    CurrentUserSerializer,
    LoginSerializer,
    SignupSerializer,
    StoreSerializer,
    SubscriptionPlanSerializer,
    TenantTokenObtainPairSerializer,
    TenantUserSerializer,
)
from ..services.subscription_service import SubscriptionService
from ..services.tenant_service import TenantService
from ..throttles import AuthThrottle

logger = logging.getLogger(__name__)


def token_response(user, message, status_code=status.HTTP_200_OK):
    refresh = RefreshToken.for_user(user)
    return Response({
        'message': message,
        'user': CurrentUserSerializer(user).data,
        'tokens': {
            'access': str(refresh.access_token),
            'refresh': str(refresh)
        }
    }, status=status_code)


class LoginView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [AuthThrottle]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        username = serializer.validated_data['username']
        password = serializer.validated_data['password']

        user = authenticate(request, username=username, password=password)
        if user is None:
            logger.info(f"Failed login for {username}")
            return Response({'error': 'Invalid credentials'}, status=status.HTTP_401_UNAUTHORIZED)

        if user.tenant_id and not user.tenant.is_active:
            return Response({'error': 'This account is disabled.'}, status=status.HTTP_403_FORBIDDEN)

        # Also create session for browser compatibility
        login(request, user)
        return token_response(user, 'Login successful')


class TokenView(TokenObtainPairView):
    serializer_class = TenantTokenObtainPairSerializer
    throttle_classes = [AuthThrottle]


class SignupView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [AuthThrottle]

    def post(self, request):
        serializer = SignupSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        tenant, user, store = TenantService.signup(
            serializer.validated_data,
            partner_resolution=getattr(request, 'partner_resolution', None),
        )
        return token_response(user, 'Account created', status.HTTP_201_CREATED)


class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        logout(request)
        return Response({'message': 'Logged out'}, status=status.HTTP_205_RESET_CONTENT)


class CurrentUserView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(CurrentUserSerializer(request.user).data)


class SubscriptionView(APIView):
    permission_classes = [IsAuthenticated, IsTenantMember]

    def get(self, request):
        from ..serializers import SubscriptionSerializer

        subscription = SubscriptionService.get_subscription(request.user.tenant)
        if subscription is None:
            return Response({'error': 'No subscription found'}, status=status.HTTP_404_NOT_FOUND)
        return Response(SubscriptionSerializer(subscription).data)


class SubscriptionPlanListView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        plans = SubscriptionPlan.objects.filter(is_active=True)
        return Response(SubscriptionPlanSerializer(plans, many=True).data)


class StoreViewSet(TenantScopedMixin, viewsets.ModelViewSet):
    """
    Stores of the tenant. The first store is the headquarters and cannot
    be deleted; more than one store needs the multi_store module.
    """
    queryset = Store.objects.all()
    serializer_class = StoreSerializer
    permission_classes = TENANT_PERMISSIONS
    permission_area = 'settings'
    read_areas = ('pos', 'orders', 'products', 'stock', 'reports', 'kitchen', 'tables', 'deliveries')
    filterset_fields = ['is_active', 'store_type']

    def perform_create(self, serializer):
        tenant = self.get_tenant()
        if tenant.stores.exists() and not SubscriptionService.tenant_has_module(tenant, 'multi_store'):
            raise ModuleNotEnabled('multi_store')
        SubscriptionService.check_limit(tenant, 'stores')
        serializer.save(tenant=tenant)

    def destroy(self, request, *args, **kwargs):
        store = self.get_object()
        if store.is_headquarters:
            return Response(
                {'error': 'The headquarters store cannot be deleted.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        logger.info(f"Store {store.code} deleted from tenant {store.tenant_id} by {request.user.pk}")
        return super().destroy(request, *args, **kwargs)

    @action(detail=True, methods=['post'])
    def toggle(self, request, pk=None):
        store = self.get_object()
        if store.is_headquarters and store.is_active:
            return Response(
                {'error': 'The headquarters store cannot be deactivated.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        store.is_active = not store.is_active
        store.save(update_fields=['is_active', 'updated_at'])
        return Response(self.get_serializer(store).data)

    @action(detail=True, methods=['post'])
    def toggle_open(self, request, pk=None):
        store = self.get_object()
        store.is_open = not store.is_open
        store.save(update_fields=['is_open', 'updated_at'])
        return Response(self.get_serializer(store).data)

    @action(detail=True, methods=['post'])
    def select(self, request, pk=None):
        """Make this store the caller's active store."""
        store = self.get_object()
        request.user.store = store
        request.user.save(update_fields=['store'])
        return Response(self.get_serializer(store).data)

    @action(detail=False, methods=['get'])
    def stats(self, request):
        return Response(TenantService.get_store_stats(self.get_tenant()))


class TenantUserViewSet(TenantScopedMixin, viewsets.ModelViewSet):
    """
    Users of the caller's tenant, managed by admins and managers.
    Deleting a user deactivates it.
    """
    queryset = User.objects.all().order_by('first_name', 'username')
    serializer_class = TenantUserSerializer
    permission_classes = [IsAuthenticated, IsTenantMember, IsTenantAdmin]
    filterset_fields = ['role', 'is_active', 'store']

    def _admin_guard(self, request, target=None):
        """
        Managers cannot grant the admin role nor touch existing admins.
        Nobody resets another admin's password here.
        """
        if request.user.role == 'manager':
            if request.data.get('role') == 'admin':
                return Response({'error': 'Managers cannot grant the admin role.'}, status=status.HTTP_403_FORBIDDEN)
            if target is not None and target.role == 'admin':
                return Response({'error': 'Managers cannot change admin accounts.'}, status=status.HTTP_403_FORBIDDEN)
        if (target is not None and target.role == 'admin' and target.pk != request.user.pk
                and request.data.get('password')):
            return Response(
                {'error': 'Admins change their own password.'},
                status=status.HTTP_403_FORBIDDEN
            )
        return None

    def create(self, request, *args, **kwargs):
        denied = self._admin_guard(request)
        if denied is not None:
            return denied
        SubscriptionService.check_limit(self.get_tenant(), 'users')
        return super().create(request, *args, **kwargs)

    def update(self, request, *args, **kwargs):
        denied = self._admin_guard(request, self.get_object())
        if denied is not None:
            return denied
        return super().update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        user = self.get_object()
        if user.pk == request.user.pk:
            return Response({'error': 'You cannot deactivate yourself.'}, status=status.HTTP_400_BAD_REQUEST)
        denied = self._admin_guard(request, user)
        if denied is not None:
            return denied
        user.is_active = False
        user.save(update_fields=['is_active'])
        logger.info(f"User {user.pk} deactivated by {request.user.pk}")
        return Response(status=status.HTTP_204_NO_CONTENT)


@csrf_exempt
def health_check(request):
    try:
        # Test database connection
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            db_connected = True
    except DatabaseError:
        db_connected = False

    return JsonResponse({
        'status': 'healthy' if db_connected else 'degraded',
        'database_connected': db_connected,
        'database_engine': connection.vendor,
    })
