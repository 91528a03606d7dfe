from django.shortcuts import get_object_or_404
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from django_filters.rest_framework import DjangoFilterBackend

from ..mixins import TenantScopedMixin
from ..models import Category, Product, Store, StoreProduct, Table, Tenant
from ..permissions import TENANT_PERMISSIONS
from ..serializers import (
    CategorySerializer,
    ProductSerializer,
    PublicProductSerializer,
    StoreProductSerializer,
)
from ..services.subscription_service import SubscriptionService
from ..throttles import PublicEndpointThrottle


class CategoryViewSet(TenantScopedMixin, viewsets.ModelViewSet):
    queryset = Category.objects.all()
    serializer_class = CategorySerializer
    permission_classes = TENANT_PERMISSIONS
    permission_area = 'products'
    read_areas = ('pos', 'orders', 'kitchen', 'tables')
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['is_active']
    search_fields = ['name']


class ProductViewSet(TenantScopedMixin, viewsets.ModelViewSet):
    queryset = Product.objects.select_related('category').prefetch_related('variations', 'addons')
    serializer_class = ProductSerializer
    permission_classes = TENANT_PERMISSIONS
    permission_area = 'products'
    read_areas = ('pos', 'orders', 'tables', 'stock')
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['category', 'is_available', 'is_active']
    search_fields = ['name', 'sku']
    ordering_fields = ['name', 'base_price', 'display_order']

    def perform_create(self, serializer):
        SubscriptionService.check_limit(self.get_tenant(), 'products')
        serializer.save(tenant=self.get_tenant())

    @action(detail=True, methods=['post'])
    def toggle_availability(self, request, pk=None):
        product = self.get_object()
        product.is_available = not product.is_available
        product.save(update_fields=['is_available', 'updated_at'])
        return Response(self.get_serializer(product).data)


class StoreProductViewSet(TenantScopedMixin, viewsets.ModelViewSet):
    """Per-store price overrides and availability."""
    queryset = StoreProduct.objects.select_related('product', 'store')
    serializer_class = StoreProductSerializer
    permission_classes = TENANT_PERMISSIONS
    permission_area = 'products'
    required_module = 'multi_store'
    tenant_field = 'store__tenant'
    filterset_fields = ['store', 'product', 'is_available']

    def perform_create(self, serializer):
        serializer.save()


class PublicMenuView(APIView):
    """
    Public menu of a tenant: active, available products grouped by category.
    `?table=<number>` or `?store=<id>` hides products switched off for that store.
    """
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [PublicEndpointThrottle]

    def get_store(self, request, tenant):
        table_number = request.query_params.get('table')
        store_id = request.query_params.get('store')
        if table_number and table_number.isdigit():
            table = Table.objects.filter(tenant=tenant, number=table_number).select_related('store').first()
            if table is not None:
                return table.store
        if store_id and store_id.isdigit():
            return Store.objects.filter(tenant=tenant, pk=store_id, is_active=True).first()
        return None

    def get(self, request, tenant_slug):
        tenant = get_object_or_404(Tenant, slug=tenant_slug, is_active=True)
        products = (
            Product.objects
            .filter(tenant=tenant, is_active=True, is_available=True)
            .select_related('category')
            .prefetch_related('variations', 'addons')
        )
        store = self.get_store(request, tenant)
        if store is not None:
            switched_off = StoreProduct.objects.filter(store=store, is_available=False).values('product_id')
            products = products.exclude(pk__in=switched_off)

        categories = []
        for category in Category.objects.filter(tenant=tenant, is_active=True):
            category_products = [product for product in products if product.category_id == category.pk]
            if category_products:
                categories.append({
                    'id': category.pk,
                    'name': category.name,
                    'products': PublicProductSerializer(category_products, many=True).data,
                })

        uncategorized = [product for product in products if product.category_id is None]
        if uncategorized:
            categories.append({
                'id': None,
                'name': 'Outros',
                'products': PublicProductSerializer(uncategorized, many=True).data,
            })

        return Response({
            'tenant': {'name': tenant.name, 'slug': tenant.slug, 'logo_url': tenant.logo_url},
            'table': request.query_params.get('table'),
            'categories': categories,
        }, status=status.HTTP_200_OK)
