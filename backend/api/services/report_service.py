import logging
from collections import OrderedDict
from datetime import timedelta
from decimal import Decimal

from django.db import transaction
from django.db.models import Count, F, Sum
from django.utils import timezone

from ..models import Ingredient, Order, OrderItem, Payment, SalesGoal
from .stock_service import StockService

logger = logging.getLogger(__name__)


PAYMENT_METHOD_LABELS = dict(Payment.PAYMENT_METHOD_CHOICES)
ORIGIN_LABELS = dict(Order.ORIGIN_CHOICES)
WEEKDAY_LABELS = ['Segunda', 'Terça', 'Quarta', 'Quinta', 'Sexta', 'Sábado', 'Domingo']
PENDING_ORDER_STATUSES = ('pending_payment', 'paid', 'confirmed', 'preparing')


def period_start(days):
    """Local midnight `days - 1` days ago, so `days=1` means today."""
    days = max(1, int(days))
    today = timezone.localtime().replace(hour=0, minute=0, second=0, microsecond=0)
    return today - timedelta(days=days - 1)


def percentage(part, whole):
    if not whole:
        return Decimal('0')
    return round(Decimal(part) / Decimal(whole) * 100, 2)


def goal_period(goal_type, day=None):
    """First and last local date of the goal period containing `day`; weeks run Monday to Sunday."""
    day = day or timezone.localdate()
    if goal_type == 'weekly':
        start = day - timedelta(days=day.weekday())
        return start, start + timedelta(days=6)
    return day, day


class ReportService:

    @staticmethod
    def revenue_orders(tenant, days, store=None):
        orders = Order.objects.filter(
            tenant=tenant,
            status__in=Order.REVENUE_STATUSES,
            created_at__gte=period_start(days),
        )
        if store is not None:
            orders = orders.filter(store=store)
        return orders

    @staticmethod
    def sales_report(tenant, days=7, store=None):
        """
        Approved payments grouped by method and by local paid date, with
        every day of the period present in the series.
        """
        start = period_start(days)
        payments = Payment.objects.filter(tenant=tenant, status='approved', paid_at__gte=start)
        if store is not None:
            payments = payments.filter(order__store=store)

        by_method = [
            {
                'method': row['payment_method'],
                'label': PAYMENT_METHOD_LABELS.get(row['payment_method'], row['payment_method']),
                'total': row['total'],
                'count': row['count'],
            }
            for row in payments.values('payment_method').annotate(total=Sum('amount'), count=Count('id')).order_by('-total')
        ]

        daily = OrderedDict()
        for offset in range(max(1, int(days))):
            day = (start + timedelta(days=offset)).date()
            daily[day] = {'date': day.isoformat(), 'total': Decimal('0'), 'orders': 0}

        order_ids = set()
        total_revenue = Decimal('0')
        for payment in payments.only('amount', 'paid_at', 'order_id'):
            day = timezone.localtime(payment.paid_at).date()
            if day in daily:
                daily[day]['total'] += payment.amount
                if payment.order_id not in order_ids:
                    daily[day]['orders'] += 1
            order_ids.add(payment.order_id)
            total_revenue += payment.amount

        order_count = len(order_ids)
        return {
            'period_days': int(days),
            'start_date': start.date().isoformat(),
            'total_revenue': total_revenue,
            'order_count': order_count,
            'average_ticket': round(total_revenue / order_count, 2) if order_count else Decimal('0'),
            'by_payment_method': by_method,
            'daily': list(daily.values()),
        }

    @staticmethod
    def cmv_report(tenant, days=30, store=None):
        """
        Cost of goods sold per product from recipe costs, sorted by revenue.
        """
        orders = ReportService.revenue_orders(tenant, days, store)
        items = OrderItem.objects.filter(order__in=orders)

        unit_costs = {}
        products = OrderedDict()
        for item in items.only('product_id', 'variation_id', 'product_name', 'quantity', 'total_price'):
            key = (item.product_id, item.variation_id)
            if key not in unit_costs:
                recipe = StockService.find_recipe(item.product_id, item.variation_id) if item.product_id else None
                unit_costs[key] = recipe.unit_cost if recipe else Decimal('0')

            row = products.setdefault(item.product_id or item.product_name, {
                'product_id': item.product_id,
                'product_name': item.product_name,
                'quantity': 0,
                'revenue': Decimal('0'),
                'cost': Decimal('0'),
                'has_recipe': False,
            })
            row['quantity'] += item.quantity
            row['revenue'] += item.total_price
            row['cost'] += unit_costs[key] * item.quantity
            row['has_recipe'] = row['has_recipe'] or unit_costs[key] > 0

        rows = []
        for row in products.values():
            row['cost'] = round(row['cost'], 2)
            row['profit'] = row['revenue'] - row['cost']
            row['margin_percent'] = percentage(row['profit'], row['revenue'])
            rows.append(row)
        rows.sort(key=lambda r: r['revenue'], reverse=True)

        total_revenue = sum((row['revenue'] for row in rows), Decimal('0'))
        total_cost = sum((row['cost'] for row in rows), Decimal('0'))
        return {
            'period_days': int(days),
            'products': rows,
            'total_revenue': total_revenue,
            'total_cost': total_cost,
            'total_profit': total_revenue - total_cost,
            'margin_percent': percentage(total_revenue - total_cost, total_revenue),
        }

    @staticmethod
    def top_products(tenant, days=30, limit=10, store=None):
        orders = ReportService.revenue_orders(tenant, days, store)
        return list(
            OrderItem.objects
            .filter(order__in=orders)
            .values('product_id', 'product_name')
            .annotate(quantity=Sum('quantity'), revenue=Sum('total_price'))
            .order_by('-quantity', '-revenue')[:limit]
        )

    @staticmethod
    def hourly_distribution(tenant, days=30, store=None):
        buckets = [{'hour': hour, 'orders': 0, 'revenue': Decimal('0')} for hour in range(24)]
        for order in ReportService.revenue_orders(tenant, days, store).only('created_at', 'total'):
            bucket = buckets[timezone.localtime(order.created_at).hour]
            bucket['orders'] += 1
            bucket['revenue'] += order.total
        return buckets

    @staticmethod
    def weekday_distribution(tenant, days=30, store=None):
        buckets = [
            {'weekday': index, 'label': label, 'orders': 0, 'revenue': Decimal('0')}
            for index, label in enumerate(WEEKDAY_LABELS)
        ]
        for order in ReportService.revenue_orders(tenant, days, store).only('created_at', 'total'):
            bucket = buckets[timezone.localtime(order.created_at).weekday()]
            bucket['orders'] += 1
            bucket['revenue'] += order.total
        return buckets

    @staticmethod
    def origin_breakdown(tenant, days=30, store=None):
        rows = (
            ReportService.revenue_orders(tenant, days, store)
            .values('origin')
            .annotate(orders=Count('id'), revenue=Sum('total'))
            .order_by('-revenue')
        )
        return [{**row, 'label': ORIGIN_LABELS.get(row['origin'], row['origin'])} for row in rows]

    @staticmethod
    def dashboard_stats(tenant, store=None):
        today_orders = ReportService.revenue_orders(tenant, 1, store)
        pending = Order.objects.filter(tenant=tenant, status__in=PENDING_ORDER_STATUSES)
        if store is not None:
            pending = pending.filter(store=store)

        return {
            'today_sales': today_orders.aggregate(total=Sum('total'))['total'] or Decimal('0'),
            'today_orders': today_orders.count(),
            'pending_orders': pending.count(),
            'low_stock_items': Ingredient.objects.filter(
                tenant=tenant, is_active=True, current_stock__lte=F('min_stock')
            ).count(),
            'goals': ReportService.goals_progress(tenant),
        }

    @staticmethod
    def set_goal(tenant, goal_type, target_amount, user=None):
        """
        Replace the active goal of this type with one covering the current
        day or week.
        """
        start, end = goal_period(goal_type)
        with transaction.atomic():
            SalesGoal.objects.filter(tenant=tenant, goal_type=goal_type, is_active=True).update(is_active=False)
            goal = SalesGoal.objects.create(
                tenant=tenant,
                goal_type=goal_type,
                target_amount=target_amount,
                start_date=start,
                end_date=end,
                created_by=user,
            )
        logger.info(f"{goal_type.capitalize()} sales goal {target_amount} set for tenant {tenant.pk}")
        return goal

    @staticmethod
    def goal_progress(tenant, goal_type):
        """
        Approved payments of the current period against the active goal.
        Without a goal the current amount is still reported.
        """
        today = timezone.localdate()
        start, end = goal_period(goal_type, today)
        current = Payment.objects.filter(
            tenant=tenant,
            status='approved',
            paid_at__date__gte=start,
            paid_at__date__lte=end,
        ).aggregate(total=Sum('amount'))['total'] or Decimal('0')

        goal = SalesGoal.objects.filter(
            tenant=tenant, goal_type=goal_type, is_active=True, start_date__lte=today, end_date__gte=today
        ).first()
        if goal is None:
            return {'goal': None, 'current_amount': current, 'percentage': Decimal('0'), 'remaining': Decimal('0')}

        return {
            'goal': {
                'id': goal.pk,
                'target_amount': goal.target_amount,
                'start_date': goal.start_date.isoformat(),
                'end_date': goal.end_date.isoformat(),
            },
            'current_amount': current,
            'percentage': min(percentage(current, goal.target_amount), Decimal('100')),
            'remaining': max(goal.target_amount - current, Decimal('0')),
        }

    @staticmethod
    def goals_progress(tenant):
        return {goal_type: ReportService.goal_progress(tenant, goal_type) for goal_type, _ in SalesGoal.GOAL_TYPE_CHOICES}

    @staticmethod
    def export_table(report_type, report):
        """
        Flatten a report into (title, columns, rows) for CSV, Excel or PDF.
        """
        if report_type == 'sales':
            columns = ['Data', 'Pedidos', 'Total']
            rows = [[day['date'], day['orders'], day['total']] for day in report['daily']]
            title = f"Relatório de vendas - últimos {report['period_days']} dias"
        elif report_type == 'cmv':
            columns = ['Produto', 'Quantidade', 'Receita', 'Custo', 'Lucro', 'Margem %']
            rows = [
                [row['product_name'], row['quantity'], row['revenue'], row['cost'], row['profit'], row['margin_percent']]
                for row in report['products']
            ]
            title = f"Relatório de CMV - últimos {report['period_days']} dias"
        else:
            raise ValueError(f"Unknown report type '{report_type}'")
        return title, columns, rows
