import logging

from django.conf import settings
from django.shortcuts import get_object_or_404
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from ..mixins import TenantScopedMixin
from ..models import ServiceCall, Table, TableSession, Tenant
from ..permissions import TENANT_PERMISSIONS
from ..serializers import (
    AddSessionItemSerializer,
    CloseSessionSerializer,
    OpenSessionSerializer,
    OrderSerializer,
    PublicServiceCallSerializer,
    ResolveServiceCallSerializer,
    ServiceCallSerializer,
    SessionItemStatusSerializer,
    TableSerializer,
    TableSessionItemSerializer,
    TableSessionSerializer,
)
from ..services.service_call_service import ServiceCallService
from ..services.table_session_service import TableSessionService
from ..throttles import PublicEndpointThrottle

logger = logging.getLogger(__name__)


class TableAccessMixin:
    permission_classes = TENANT_PERMISSIONS
    permission_area = 'tables'
    required_module = 'tables'


class TableViewSet(TableAccessMixin, TenantScopedMixin, viewsets.ModelViewSet):
    """
    Tables of the tenant. Deleting a table deactivates it so past sessions
    keep their reference.
    """
    queryset = Table.objects.select_related('store')
    serializer_class = TableSerializer
    filterset_fields = ['is_active', 'store']

    def get_queryset(self):
        queryset = super().get_queryset().order_by('number')
        store = self.get_active_store()
        if store is not None:
            queryset = queryset.filter(store=store)
        return queryset

    def destroy(self, request, *args, **kwargs):
        table = self.get_object()
        if table.active_session is not None:
            return Response(
                {'error': 'Close the open session before removing the table.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        table.is_active = False
        table.save(update_fields=['is_active'])
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'])
    def open_session(self, request, pk=None):
        table = self.get_object()
        if not table.is_active:
            return Response({'error': 'Table is inactive.'}, status=status.HTTP_400_BAD_REQUEST)

        serializer = OpenSessionSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        session = TableSessionService.open_session(table, user=request.user, **serializer.validated_data)
        return Response(TableSessionSerializer(session).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['get'])
    def history(self, request, pk=None):
        sessions = TableSessionService.get_history(self.get_object())
        return Response(TableSessionSerializer(sessions, many=True).data)

    @action(detail=True, methods=['get', 'post'])
    def qr_code(self, request, pk=None):
        """
        GET renders a preview, optionally for `?base_url=`. POST stores the
        menu URL built from PUBLIC_MENU_BASE_URL on the table.
        """
        table = self.get_object()
        if request.method == 'POST':
            base_url = settings.PUBLIC_MENU_BASE_URL
            table.qr_code_url = table.menu_url(base_url)
            table.save(update_fields=['qr_code_url'])
        else:
            base_url = request.query_params.get('base_url') or settings.PUBLIC_MENU_BASE_URL
        menu_url = table.menu_url(base_url)
        return Response({
            'table': table.number,
            'menu_url': menu_url,
            'qr_code': table.generate_qr_code(base_url),
        })


class TableSessionViewSet(TableAccessMixin, TenantScopedMixin, mixins.ListModelMixin,
                          mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    queryset = TableSession.objects.select_related('table').prefetch_related('items')
    serializer_class = TableSessionSerializer
    filterset_fields = ['status', 'table']

    def _session_response(self, session, status_code=status.HTTP_200_OK):
        session = self.get_queryset().get(pk=session.pk)
        return Response(self.get_serializer(session).data, status=status_code)

    @action(detail=True, methods=['post'])
    def add_item(self, request, pk=None):
        session = self.get_object()
        serializer = AddSessionItemSerializer(data=request.data, context=self.get_serializer_context())
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        TableSessionService.add_item(session, user=request.user, **serializer.validated_data)
        return self._session_response(session, status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], url_path=r'items/(?P<item_id>\d+)/status')
    def item_status(self, request, pk=None, item_id=None):
        session = self.get_object()
        item = get_object_or_404(session.items, pk=item_id)
        serializer = SessionItemStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        item = TableSessionService.update_item_status(item, serializer.validated_data['status'])
        return Response(TableSessionItemSerializer(item).data)

    @action(detail=True, methods=['delete'], url_path=r'items/(?P<item_id>\d+)')
    def remove_item(self, request, pk=None, item_id=None):
        session = self.get_object()
        item = get_object_or_404(session.items, pk=item_id)
        TableSessionService.remove_item(item)
        return self._session_response(session)

    @action(detail=True, methods=['post'])
    def close(self, request, pk=None):
        session = self.get_object()
        serializer = CloseSessionSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        session, order = TableSessionService.close_session(
            session,
            user=request.user,
            discount=serializer.validated_data['discount'],
            payment_method=serializer.validated_data.get('payment_method'),
        )
        return Response({
            'session': TableSessionSerializer(self.get_queryset().get(pk=session.pk)).data,
            'order': OrderSerializer(order).data if order else None,
        })

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        session = TableSessionService.cancel_session(self.get_object(), user=request.user)
        return self._session_response(session)


class ServiceCallViewSet(TableAccessMixin, TenantScopedMixin, mixins.ListModelMixin,
                         mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Calls raised from the tables. `?open=1` lists everything not yet
    resolved, highest priority first.
    """
    queryset = ServiceCall.objects.select_related('table')
    serializer_class = ServiceCallSerializer
    filterset_fields = ['status', 'call_type', 'table']

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.request.query_params.get('open') in ('1', 'true'):
            queryset = queryset.filter(status__in=ServiceCall.OPEN_STATUSES)
        return queryset

    @action(detail=True, methods=['post'])
    def acknowledge(self, request, pk=None):
        call = ServiceCallService.acknowledge(self.get_object(), user=request.user)
        return Response(self.get_serializer(call).data)

    @action(detail=True, methods=['post'])
    def start(self, request, pk=None):
        call = ServiceCallService.start(self.get_object(), user=request.user)
        return Response(self.get_serializer(call).data)

    @action(detail=True, methods=['post'])
    def resolve(self, request, pk=None):
        call = self.get_object()
        serializer = ResolveServiceCallSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        call = ServiceCallService.resolve(call, user=request.user, notes=serializer.validated_data['notes'])
        return Response(self.get_serializer(call).data)

    @action(detail=True, methods=['post'])
    def escalate(self, request, pk=None):
        call = ServiceCallService.escalate(self.get_object())
        return Response(self.get_serializer(call).data)


class PublicServiceCallView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [PublicEndpointThrottle]

    def post(self, request, tenant_slug):
        tenant = get_object_or_404(Tenant, slug=tenant_slug, is_active=True)
        serializer = PublicServiceCallSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        try:
            call, created = ServiceCallService.create_public_call(
                tenant, data['table'], data['call_type'], notes=data['notes']
            )
        except Table.DoesNotExist:
            return Response({'error': 'Table not found'}, status=status.HTTP_404_NOT_FOUND)

        return Response(
            {
                'id': call.pk,
                'table': data['table'],
                'call_type': call.call_type,
                'status': call.status,
                'created_at': call.created_at,
            },
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )
