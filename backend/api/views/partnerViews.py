import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from ..models import Partner, PartnerBranding, PartnerDomain, SubscriptionPlan, Tenant
from ..permissions import IsSuperAdmin
from ..serializers import (
    PartnerBrandingSerializer,
    PartnerDomainSerializer,
    PartnerPlanSerializer,
    PartnerSerializer,
    PartnerTenantSerializer,
    PublicPartnerPlanSerializer,
    SubscriptionPlanSerializer,
)
from ..services.partner_service import PartnerService
from ..throttles import PublicEndpointThrottle

logger = logging.getLogger(__name__)


def request_resolution(request):
    resolution = getattr(request, 'partner_resolution', None)
    if resolution is None:
        return PartnerService.resolve(request.get_host())
    return dict(resolution)


class PartnerViewSet(viewsets.ModelViewSet):
    """
    Partner program administration, platform operators only.
    """
    queryset = Partner.objects.select_related('branding')
    serializer_class = PartnerSerializer
    permission_classes = [IsSuperAdmin]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['is_active']
    search_fields = ['name', 'slug', 'email']

    @action(detail=True, methods=['get', 'put', 'patch'])
    def branding(self, request, pk=None):
        partner = self.get_object()
        branding, _ = PartnerBranding.objects.get_or_create(partner=partner)
        if request.method == 'GET':
            return Response(PartnerBrandingSerializer(branding).data)

        serializer = PartnerBrandingSerializer(branding, data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer.save()
        return Response(serializer.data)

    @action(detail=True, methods=['get', 'post'])
    def domains(self, request, pk=None):
        partner = self.get_object()
        if request.method == 'GET':
            return Response(PartnerDomainSerializer(partner.domains.all(), many=True).data)

        serializer = PartnerDomainSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        if PartnerDomain.objects.filter(domain=serializer.validated_data['domain']).exists():
            return Response({'error': 'Domain already registered.'}, status=status.HTTP_400_BAD_REQUEST)

        domain = serializer.save(partner=partner, is_primary=not partner.domains.exists())
        logger.info(f"Domain {domain.domain} added to partner {partner.slug}")
        return Response(PartnerDomainSerializer(domain).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['get', 'post'])
    def tenants(self, request, pk=None):
        partner = self.get_object()
        if request.method == 'GET':
            links = partner.partner_tenants.select_related('tenant', 'partner_plan')
            return Response(PartnerTenantSerializer(links, many=True).data)

        tenant = Tenant.objects.filter(pk=request.data.get('tenant')).first()
        if tenant is None:
            return Response({'error': 'Tenant not found'}, status=status.HTTP_404_NOT_FOUND)
        if hasattr(tenant, 'partner_link'):
            return Response({'error': 'Tenant already belongs to a partner.'}, status=status.HTTP_400_BAD_REQUEST)

        partner_plan = None
        if request.data.get('partner_plan'):
            partner_plan = partner.plans.filter(pk=request.data['partner_plan']).first()
            if partner_plan is None:
                return Response({'error': 'Plan not found for this partner'}, status=status.HTTP_404_NOT_FOUND)

        link = PartnerService.attach_tenant(partner, tenant, partner_plan=partner_plan)
        return Response(PartnerTenantSerializer(link).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['get', 'post'])
    def plans(self, request, pk=None):
        partner = self.get_object()
        if request.method == 'GET':
            return Response(PartnerPlanSerializer(partner.plans.all(), many=True).data)

        serializer = PartnerPlanSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        if partner.plans.filter(slug=serializer.validated_data['slug']).exists():
            return Response({'error': 'Plan slug already used by this partner.'}, status=status.HTTP_400_BAD_REQUEST)
        plan = serializer.save(partner=partner)
        return Response(PartnerPlanSerializer(plan).data, status=status.HTTP_201_CREATED)


class PartnerDomainViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, mixins.UpdateModelMixin,
                           mixins.DestroyModelMixin, viewsets.GenericViewSet):
    queryset = PartnerDomain.objects.select_related('partner')
    serializer_class = PartnerDomainSerializer
    permission_classes = [IsSuperAdmin]
    filterset_fields = ['partner', 'domain_type', 'is_verified']

    @action(detail=True, methods=['post'])
    def verify(self, request, pk=None):
        domain = self.get_object()
        verified, message = PartnerService.verify_domain(domain)
        response_status = status.HTTP_200_OK if verified else status.HTTP_400_BAD_REQUEST
        return Response({
            'verified': verified,
            'message': message,
            'domain': PartnerDomainSerializer(domain).data,
        }, status=response_status)

    @action(detail=True, methods=['post'])
    def set_primary(self, request, pk=None):
        domain = PartnerService.set_primary_domain(self.get_object())
        return Response(PartnerDomainSerializer(domain).data)


class BrandingView(APIView):
    """Branding resolved from the request hostname."""
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [PublicEndpointThrottle]

    def get(self, request):
        return Response(request_resolution(request))


class PublicPlansView(APIView):
    """
    Plans offered on this hostname: the partner's plans on a partner domain,
    the platform plans otherwise.
    """
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [PublicEndpointThrottle]

    def get(self, request):
        resolution = request_resolution(request)
        partner = None
        if resolution['is_partner_domain']:
            partner = Partner.objects.filter(pk=resolution['partner']['id'], is_active=True).first()
        if partner is not None:
            plans = PublicPartnerPlanSerializer(PartnerService.public_plans(partner), many=True).data
        else:
            plans = SubscriptionPlanSerializer(SubscriptionPlan.objects.filter(is_active=True), many=True).data
        return Response({
            'partner': resolution['partner'],
            'plans': plans,
        })
