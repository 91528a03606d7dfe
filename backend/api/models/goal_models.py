from django.db import models
from django.core.validators import MinValueValidator


class SalesGoal(models.Model):
    GOAL_TYPE_CHOICES = (
        ('daily', 'Daily'),
        ('weekly', 'Weekly'),
    )

    tenant = models.ForeignKey('api.Tenant', on_delete=models.CASCADE, related_name='sales_goals')
    goal_type = models.CharField(max_length=10, choices=GOAL_TYPE_CHOICES)
    target_amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    start_date = models.DateField()
    end_date = models.DateField()
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(
        'api.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sales_goals'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'sales_goals'
        ordering = ['-start_date']

    def __str__(self):
        return f"{self.get_goal_type_display()} goal {self.target_amount} ({self.start_date})"

    def covers(self, day):
        return self.start_date <= day <= self.end_date
