import re

from rest_framework import serializers

from ..models import Partner, PartnerBranding, PartnerDomain, PartnerPlan, PartnerTenant

DOMAIN_RE = re.compile(r'^(?=.{1,253}$)([a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,63}$')
HEX_COLOR_RE = re.compile(r'^#[0-9a-fA-F]{6}$')


class PartnerBrandingSerializer(serializers.ModelSerializer):
    class Meta:
        model = PartnerBranding
        exclude = ['id', 'partner']
        read_only_fields = ['updated_at']

    def validate(self, attrs):
        for field in ('primary_color', 'secondary_color', 'accent_color'):
            value = attrs.get(field)
            if value and not HEX_COLOR_RE.match(value):
                raise serializers.ValidationError({field: 'Use a #RRGGBB color.'})
        return attrs


class PartnerSerializer(serializers.ModelSerializer):
    tenant_count = serializers.IntegerField(read_only=True)
    branding = PartnerBrandingSerializer(read_only=True)

    class Meta:
        model = Partner
        fields = [
            'id', 'name', 'slug', 'email', 'phone', 'document', 'is_active', 'max_tenants',
            'max_users_per_tenant', 'revenue_share_percent', 'notes', 'tenant_count',
            'branding', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class PartnerDomainSerializer(serializers.ModelSerializer):
    verification_url = serializers.SerializerMethodField()

    class Meta:
        model = PartnerDomain
        fields = [
            'id', 'domain', 'domain_type', 'is_primary', 'is_verified', 'verification_token',
            'verification_url', 'verified_at', 'ssl_status', 'created_at'
        ]
        read_only_fields = ['id', 'is_primary', 'is_verified', 'verification_token', 'verified_at', 'ssl_status', 'created_at']

    def get_verification_url(self, obj):
        from ..services.partner_service import PartnerService
        return PartnerService.verification_url(obj)

    def validate_domain(self, value):
        from ..services.partner_service import is_platform_domain, normalize_hostname

        value = normalize_hostname(value)
        if not DOMAIN_RE.match(value):
            raise serializers.ValidationError('Enter a valid domain name.')
        if is_platform_domain(value):
            raise serializers.ValidationError('Platform domains cannot be used by partners.')
        if self.instance is not None and value != self.instance.domain:
            raise serializers.ValidationError('The hostname cannot be changed; add a new domain instead.')
        return value


class PartnerPlanSerializer(serializers.ModelSerializer):
    class Meta:
        model = PartnerPlan
        fields = [
            'id', 'base_plan', 'name', 'slug', 'description', 'monthly_price', 'currency',
            'max_users', 'max_products', 'max_orders_per_month', 'included_modules',
            'is_active', 'display_order'
        ]
        read_only_fields = ['id']


class PublicPartnerPlanSerializer(serializers.ModelSerializer):
    class Meta:
        model = PartnerPlan
        fields = [
            'id', 'name', 'slug', 'description', 'monthly_price', 'currency',
            'max_users', 'max_products', 'max_orders_per_month', 'included_modules'
        ]


class PartnerTenantSerializer(serializers.ModelSerializer):
    tenant_name = serializers.CharField(source='tenant.name', read_only=True)
    tenant_slug = serializers.CharField(source='tenant.slug', read_only=True)
    plan_name = serializers.CharField(source='partner_plan.name', read_only=True, default=None)

    class Meta:
        model = PartnerTenant
        fields = [
            'id', 'tenant', 'tenant_name', 'tenant_slug', 'partner_plan', 'plan_name',
            'status', 'joined_at', 'next_billing_date', 'billing_notes'
        ]
        read_only_fields = ['id', 'joined_at']
