from django.contrib.auth.password_validation import validate_password
from rest_framework import exceptions, serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from ..models import Store, Subscription, SubscriptionPlan, Tenant, User
from ..permissions import allowed_areas
from ..services.subscription_service import SubscriptionService


class TenantSerializer(serializers.ModelSerializer):
    class Meta:
        model = Tenant
        fields = ['id', 'name', 'slug', 'business_category', 'logo_url', 'phone', 'email', 'is_active', 'partner', 'created_at']
        read_only_fields = ['id', 'slug', 'is_active', 'partner', 'created_at']


class StoreSerializer(serializers.ModelSerializer):
    class Meta:
        model = Store
        fields = [
            'id', 'name', 'code', 'store_type', 'address', 'city', 'state', 'zip_code',
            'phone', 'email', 'manager_name', 'timezone', 'business_hours',
            'is_active', 'is_open', 'is_headquarters', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'is_headquarters', 'created_at', 'updated_at']

    def validate_code(self, value):
        value = value.strip().upper()
        tenant = self.context.get('tenant')
        queryset = Store.objects.filter(tenant=tenant, code=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if tenant is not None and queryset.exists():
            raise serializers.ValidationError('A store with this code already exists.')
        return value

    def validate_store_type(self, value):
        if value == 'headquarters' and (self.instance is None or not self.instance.is_headquarters):
            raise serializers.ValidationError('The headquarters store is assigned automatically.')
        return value


class SubscriptionPlanSerializer(serializers.ModelSerializer):
    class Meta:
        model = SubscriptionPlan
        fields = [
            'id', 'name', 'slug', 'description', 'monthly_price', 'max_users', 'max_products',
            'max_orders_per_month', 'max_stores', 'modules', 'is_active', 'display_order'
        ]


class SubscriptionSerializer(serializers.ModelSerializer):
    plan = SubscriptionPlanSerializer(read_only=True)
    enabled_modules = serializers.SerializerMethodField()

    class Meta:
        model = Subscription
        fields = [
            'id', 'plan', 'status', 'current_period_start', 'current_period_end',
            'trial_ends_at', 'canceled_at', 'enabled_modules'
        ]

    def get_enabled_modules(self, obj):
        return obj.enabled_modules()


class TenantUserSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, required=False, validators=[validate_password])

    class Meta:
        model = User
        fields = [
            'id', 'username', 'email', 'first_name', 'last_name', 'phone_number',
            'role', 'store', 'is_active', 'password', 'date_joined'
        ]
        read_only_fields = ['id', 'date_joined']

    def validate_role(self, value):
        if value == 'super_admin':
            raise serializers.ValidationError('This role cannot be assigned here.')
        return value

    def validate_store(self, value):
        tenant = self.context.get('tenant')
        if value is not None and tenant is not None and value.tenant_id != tenant.pk:
            raise serializers.ValidationError('Store does not belong to your tenant.')
        return value

    def validate(self, attrs):
        if self.instance is None and not attrs.get('password'):
            raise serializers.ValidationError({'password': 'This field is required.'})
        return attrs

    def create(self, validated_data):
        password = validated_data.pop('password')
        return User.objects.create_user(password=password, **validated_data)

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        instance = super().update(instance, validated_data)
        if password:
            instance.set_password(password)
            instance.save(update_fields=['password'])
        return instance


class CurrentUserSerializer(serializers.ModelSerializer):
    tenant = TenantSerializer(read_only=True)
    store = StoreSerializer(read_only=True)
    subscription = serializers.SerializerMethodField()
    enabled_modules = serializers.SerializerMethodField()
    allowed_areas = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id', 'username', 'email', 'first_name', 'last_name', 'role',
            'tenant', 'store', 'subscription', 'enabled_modules', 'allowed_areas'
        ]

    def get_subscription(self, obj):
        subscription = SubscriptionService.get_subscription(obj.tenant)
        return SubscriptionSerializer(subscription).data if subscription else None

    def get_enabled_modules(self, obj):
        return SubscriptionService.enabled_modules(obj.tenant)

    def get_allowed_areas(self, obj):
        return allowed_areas(obj)


class SignupSerializer(serializers.Serializer):
    business_name = serializers.CharField(max_length=200)
    business_category = serializers.ChoiceField(choices=Tenant.BUSINESS_CATEGORY_CHOICES, default='restaurant')
    store_name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    password = serializers.CharField(write_only=True, validators=[validate_password])

    def validate_email(self, value):
        value = value.lower()
        if User.objects.filter(email__iexact=value).exists() or User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError('An account with this email already exists.')
        return value


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)


class TenantTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Token pair for API clients; disabled tenants get no tokens."""

    def validate(self, attrs):
        data = super().validate(attrs)
        if self.user.tenant_id and not self.user.tenant.is_active:
            raise exceptions.PermissionDenied('This account is disabled.')
        return data
