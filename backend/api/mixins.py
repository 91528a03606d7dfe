import logging

from rest_framework.exceptions import PermissionDenied

from .exceptions import TenantRequired

logger = logging.getLogger(__name__)


class TenantScopedMixin:
    """
    Restricts a viewset to rows of the caller's tenant and stamps the tenant
    on created rows. Super admins may address another tenant with ?tenant=<id>.
    """
    tenant_field = 'tenant'

    def get_tenant(self):
        if hasattr(self, '_tenant'):
            return self._tenant

        from .models import Tenant
        user = self.request.user
        tenant = user.tenant
        if user.is_super_admin:
            tenant_id = self.request.query_params.get('tenant')
            if tenant_id:
                tenant = Tenant.objects.filter(pk=tenant_id).first()
        if tenant is None:
            raise TenantRequired()
        self._tenant = tenant
        return tenant

    def get_active_store(self):
        """
        Store selected through the X-Store-ID header, None when absent.
        """
        if hasattr(self, '_active_store'):
            return self._active_store

        from .models import Store
        store_id = self.request.headers.get('X-Store-ID')
        store = None
        if store_id:
            store = Store.objects.filter(pk=store_id, tenant=self.get_tenant()).first() if store_id.isdigit() else None
            if store is None:
                logger.warning(
                    f"User {self.request.user.pk} sent X-Store-ID {store_id} outside tenant {self.get_tenant().pk}"
                )
                raise PermissionDenied('Store does not belong to your tenant.')
        self._active_store = store
        return store

    def get_queryset(self):
        queryset = super().get_queryset()
        return queryset.filter(**{self.tenant_field: self.get_tenant()})

    def perform_create(self, serializer):
        serializer.save(**{self.tenant_field: self.get_tenant()})

    def get_serializer_context(self):
        context = super().get_serializer_context()
        if getattr(self.request, 'user', None) and self.request.user.is_authenticated:
            context['tenant'] = self.get_tenant()
        return context
