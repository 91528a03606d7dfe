from rest_framework import permissions
from rest_framework.permissions import BasePermission

from .exceptions import ModuleNotEnabled, TenantRequired


# Screens each role may reach; admin and super_admin reach everything.
ROLE_AREAS = {
    'manager': {'orders', 'products', 'stock', 'reports', 'settings'},
    'cashier': {'pos', 'orders', 'tables'},
    'kitchen': {'kitchen'},
    'stock': {'stock', 'products'},
    'delivery': {'deliveries'},
}


ALL_AREAS = ('pos', 'orders', 'products', 'stock', 'reports', 'settings', 'kitchen', 'tables', 'deliveries')


def role_has_area(user, area):
    if user.is_super_admin or user.role == 'admin':
        return True
    return area in ROLE_AREAS.get(user.role, set())


def allowed_areas(user):
    if user.is_super_admin or user.role == 'admin':
        return list(ALL_AREAS)
    return sorted(ROLE_AREAS.get(user.role, set()))


class IsSuperAdmin(BasePermission):
    """
    Platform operators only.
    """
    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_super_admin)


class IsTenantMember(BasePermission):
    """
    User must belong to a tenant; super admins act on any tenant.
    """
    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        if request.user.is_super_admin:
            return True
        if request.user.tenant_id is None or not request.user.tenant.is_active:
            raise TenantRequired()
        return True

    def has_object_permission(self, request, view, obj):
        if request.user.is_super_admin:
            return True
        tenant_id = getattr(obj, 'tenant_id', None)
        return tenant_id is None or tenant_id == request.user.tenant_id


class HasAreaAccess(BasePermission):
    """
    Checks the view's `permission_area` against the role map.
    Views may widen access for read-only requests with `read_areas`.
    """
    message = 'Your role does not have access to this area.'

    def has_permission(self, request, view):
        area = getattr(view, 'permission_area', None)
        if area is None:
            return True
        user = request.user
        if role_has_area(user, area):
            return True
        if request.method in permissions.SAFE_METHODS:
            return any(role_has_area(user, extra) for extra in getattr(view, 'read_areas', ()))
        return False


class IsTenantAdmin(BasePermission):
    """
    Admins and managers manage users and settings of their own tenant.
    """
    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and (user.is_super_admin or user.role in ('admin', 'manager')))


class HasModuleAccess(BasePermission):
    """
    Rejects tenants whose subscription does not include `view.required_module`.
    """
    def has_permission(self, request, view):
        module = getattr(view, 'required_module', None)
        if module is None or request.user.is_super_admin:
            return True

        from .services.subscription_service import SubscriptionService
        if not SubscriptionService.tenant_has_module(request.user.tenant, module):
            raise ModuleNotEnabled(module)
        return True


class IsCourier(BasePermission):
    def has_permission(self, request, view):
        return bool(
            request.user
            and request.user.is_authenticated
            and hasattr(request.user, 'courier_profile')
        )


TENANT_PERMISSIONS = [permissions.IsAuthenticated, IsTenantMember, HasAreaAccess, HasModuleAccess]
