from rest_framework import status
from rest_framework.exceptions import APIException


class InvalidStatusTransition(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Invalid status transition.'
    default_code = 'invalid_status_transition'

    def __init__(self, current=None, target=None, detail=None):
        if detail is None and current is not None:
            detail = f"Cannot change status from '{current}' to '{target}'."
        super().__init__(detail)


class SessionAlreadyOpen(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'This table already has an open session.'
    default_code = 'session_already_open'


class SessionNotOpen(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'This table session is not open.'
    default_code = 'session_not_open'


class PlanLimitExceeded(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Your subscription plan limit has been reached.'
    default_code = 'plan_limit_exceeded'


class ModuleNotEnabled(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'This module is not enabled for your subscription.'
    default_code = 'module_not_enabled'

    def __init__(self, module=None):
        detail = f"Module '{module}' is not enabled for your subscription." if module else None
        super().__init__(detail)


class TenantRequired(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'A tenant account is required for this action.'
    default_code = 'tenant_required'


class PartnerLimitExceeded(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Partner tenant limit reached.'
    default_code = 'partner_limit_exceeded'
