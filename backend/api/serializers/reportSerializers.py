from rest_framework import serializers

from ..models import SalesGoal


class ReportPeriodSerializer(serializers.Serializer):
    days = serializers.IntegerField(min_value=1, max_value=365, default=7)
    store = serializers.IntegerField(required=False, allow_null=True)


class ExportRequestSerializer(serializers.Serializer):
    REPORT_TYPE_CHOICES = (
        ('sales', 'Sales'),
        ('cmv', 'CMV'),
    )

    FORMAT_CHOICES = (
        ('csv', 'CSV'),
        ('excel', 'Excel'),
        ('pdf', 'PDF'),
    )

    report_type = serializers.ChoiceField(choices=REPORT_TYPE_CHOICES)
    format = serializers.ChoiceField(choices=FORMAT_CHOICES, default='csv')
    days = serializers.IntegerField(min_value=1, max_value=365, default=30)


class SalesGoalSerializer(serializers.ModelSerializer):
    class Meta:
        model = SalesGoal
        fields = ['id', 'goal_type', 'target_amount', 'start_date', 'end_date', 'is_active', 'created_by', 'created_at']
        read_only_fields = ['id', 'start_date', 'end_date', 'is_active', 'created_by', 'created_at']

    def validate_target_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError('The target must be greater than zero.')
        return value
