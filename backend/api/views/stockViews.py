import logging

from django.db.models import F
from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters import rest_framework as django_filters
from django_filters.rest_framework import DjangoFilterBackend

from ..mixins import TenantScopedMixin
from ..models import Ingredient, Recipe, StockMovement
from ..permissions import TENANT_PERMISSIONS
from ..serializers import (
    IngredientSerializer,
    RecipeSerializer,
    RegisterMovementSerializer,
    StockMovementSerializer,
)
from ..services.stock_service import StockService

logger = logging.getLogger(__name__)


class StockAccessMixin:
    permission_classes = TENANT_PERMISSIONS
    permission_area = 'stock'
    required_module = 'stock'


class IngredientViewSet(StockAccessMixin, TenantScopedMixin, viewsets.ModelViewSet):
    queryset = Ingredient.objects.all()
    serializer_class = IngredientSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['unit', 'is_active']
    search_fields = ['name']

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.request.query_params.get('low_stock') in ('1', 'true'):
            queryset = queryset.filter(current_stock__lte=F('min_stock'))
        return queryset

    def destroy(self, request, *args, **kwargs):
        ingredient = self.get_object()
        if ingredient.recipe_items.exists() or ingredient.movements.exists():
            # Keep the ledger intact; hide the ingredient instead
            ingredient.is_active = False
            ingredient.save(update_fields=['is_active', 'updated_at'])
            return Response(status=status.HTTP_204_NO_CONTENT)
        return super().destroy(request, *args, **kwargs)

    @action(detail=True, methods=['get'])
    def movements(self, request, pk=None):
        ingredient = self.get_object()
        queryset = ingredient.movements.select_related('created_by', 'order')[:100]
        return Response(StockMovementSerializer(queryset, many=True).data)

    @action(detail=False, methods=['get'])
    def summary(self, request):
        return Response(StockService.get_stock_summary(self.get_tenant()))


class RecipeViewSet(StockAccessMixin, TenantScopedMixin, viewsets.ModelViewSet):
    queryset = Recipe.objects.select_related('product', 'variation').prefetch_related('items__ingredient')
    serializer_class = RecipeSerializer
    read_areas = ('products',)
    filterset_fields = ['product', 'variation', 'is_active']


class StockMovementFilter(django_filters.FilterSet):
    date_from = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    date_to = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = StockMovement
        fields = ['ingredient', 'movement_type', 'order']


class StockMovementViewSet(StockAccessMixin, TenantScopedMixin, mixins.ListModelMixin,
                           mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Read-only ledger. New movements go through `register`.
    """
    queryset = StockMovement.objects.select_related('ingredient', 'created_by', 'order')
    serializer_class = StockMovementSerializer
    filterset_class = StockMovementFilter

    @action(detail=False, methods=['post'])
    def register(self, request):
        serializer = RegisterMovementSerializer(data=request.data, context=self.get_serializer_context())
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        movement = StockService.register_movement(
            data['ingredient'],
            data['movement_type'],
            data['quantity'],
            reason=data.get('reason', ''),
            user=request.user,
            unit_cost=data.get('unit_cost'),
        )
        logger.info(
            f"Manual stock {movement.movement_type} on ingredient {movement.ingredient_id} "
            f"by user {request.user.pk}: {movement.previous_stock} -> {movement.new_stock}"
        )
        return Response(StockMovementSerializer(movement).data, status=status.HTTP_201_CREATED)
