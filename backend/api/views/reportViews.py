import csv
import logging
from datetime import datetime
from io import BytesIO

import pandas as pd
from django.http import HttpResponse
from django.template.loader import render_to_string
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from xhtml2pdf import pisa

from ..mixins import TenantScopedMixin
from ..models import Order, Store
from ..permissions import TENANT_PERMISSIONS
from ..serializers import ExportRequestSerializer, ReportPeriodSerializer, SalesGoalSerializer
from ..services.report_service import ReportService

logger = logging.getLogger(__name__)


# Report actions gated behind a subscription module
REPORT_MODULES = {
    'cmv': 'cmv_reports',
    'top_products': 'reports_advanced',
    'hourly': 'reports_advanced',
    'weekday': 'reports_advanced',
    'origins': 'reports_advanced',
}


class ReportViewSet(TenantScopedMixin, viewsets.GenericViewSet):
    """
    Sales, CMV and distribution reports over the last N days, plus export
    of the sales and CMV reports to CSV, Excel or PDF.
    """
    queryset = Order.objects.all()
    permission_classes = TENANT_PERMISSIONS
    permission_area = 'reports'

    @property
    def required_module(self):
        if self.action == 'export':
            report_type = self.request.data.get('report_type') if self.request else None
            return 'cmv_reports' if report_type == 'cmv' else None
        return REPORT_MODULES.get(self.action)

    def _period(self, request, default_days=7):
        serializer = ReportPeriodSerializer(data={
            'days': request.query_params.get('days', default_days),
            'store': request.query_params.get('store') or None,
        })
        serializer.is_valid(raise_exception=True)

        store = self.get_active_store()
        store_id = serializer.validated_data.get('store')
        if store_id:
            store = Store.objects.filter(pk=store_id, tenant=self.get_tenant()).first()
            if store is None:
                raise PermissionDenied('Store does not belong to your tenant.')
        return serializer.validated_data['days'], store

    @action(detail=False, methods=['get'])
    def dashboard(self, request):
        return Response(ReportService.dashboard_stats(self.get_tenant(), store=self.get_active_store()))

    @action(detail=False, methods=['get', 'post'])
    def goals(self, request):
        """GET reports daily and weekly progress; POST replaces the goal of a type."""
        tenant = self.get_tenant()
        if request.method == 'POST':
            serializer = SalesGoalSerializer(data=request.data)
            if not serializer.is_valid():
                return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

            goal = ReportService.set_goal(
                tenant,
                serializer.validated_data['goal_type'],
                serializer.validated_data['target_amount'],
                user=request.user,
            )
            return Response(SalesGoalSerializer(goal).data, status=status.HTTP_201_CREATED)
        return Response(ReportService.goals_progress(tenant))

    @action(detail=False, methods=['get'])
    def sales(self, request):
        days, store = self._period(request)
        return Response(ReportService.sales_report(self.get_tenant(), days=days, store=store))

    @action(detail=False, methods=['get'])
    def cmv(self, request):
        days, store = self._period(request, default_days=30)
        return Response(ReportService.cmv_report(self.get_tenant(), days=days, store=store))

    @action(detail=False, methods=['get'])
    def top_products(self, request):
        days, store = self._period(request, default_days=30)
        limit = request.query_params.get('limit', '10')
        limit = int(limit) if limit.isdigit() else 10
        return Response(ReportService.top_products(self.get_tenant(), days=days, limit=limit, store=store))

    @action(detail=False, methods=['get'])
    def hourly(self, request):
        days, store = self._period(request, default_days=30)
        return Response(ReportService.hourly_distribution(self.get_tenant(), days=days, store=store))

    @action(detail=False, methods=['get'])
    def weekday(self, request):
        days, store = self._period(request, default_days=30)
        return Response(ReportService.weekday_distribution(self.get_tenant(), days=days, store=store))

    @action(detail=False, methods=['get'])
    def origins(self, request):
        days, store = self._period(request, default_days=30)
        return Response(ReportService.origin_breakdown(self.get_tenant(), days=days, store=store))

    @action(detail=False, methods=['post'])
    def export(self, request):
        serializer = ExportRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        report_type = data['report_type']
        tenant = self.get_tenant()
        store = self.get_active_store()

        if report_type == 'sales':
            report = ReportService.sales_report(tenant, days=data['days'], store=store)
        else:
            report = ReportService.cmv_report(tenant, days=data['days'], store=store)

        title, columns, rows = ReportService.export_table(report_type, report)
        logger.info(f"Export {report_type}/{data['format']} for tenant {tenant.slug} by user {request.user.pk}")

        export_format = data['format']
        if export_format == 'csv':
            return self._export_to_csv(columns, rows, report_type)
        elif export_format == 'pdf':
            return self._export_to_pdf(title, columns, rows, report, report_type, tenant)
        elif export_format == 'excel':
            return self._export_to_excel(columns, rows, report_type)

        return Response({'error': 'Invalid export format'}, status=status.HTTP_400_BAD_REQUEST)

    def _filename(self, report_type, extension):
        return f'{report_type}_{datetime.now().strftime("%Y%m%d")}.{extension}'

    def _export_to_csv(self, columns, rows, report_type):
        response = HttpResponse(content_type='text/csv')
        response['Content-Disposition'] = f'attachment; filename="{self._filename(report_type, "csv")}"'

        writer = csv.writer(response)
        writer.writerow(columns)
        writer.writerows(rows)
        return response

    def _export_to_pdf(self, title, columns, rows, report, report_type, tenant):
        """Export data to PDF format using xhtml2pdf"""
        html_string = render_to_string('reports/report_pdf.html', {
            'title': title,
            'tenant': tenant,
            'columns': columns,
            'rows': rows,
            'report': report,
            'generated_at': datetime.now(),
        })

        result = BytesIO()
        pdf = pisa.pisaDocument(BytesIO(html_string.encode("UTF-8")), result)
        if pdf.err:
            logger.error(f"PDF generation failed for {report_type} ({tenant.slug})")
            return Response({'error': 'PDF generation failed'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        response = HttpResponse(result.getvalue(), content_type='application/pdf')
        response['Content-Disposition'] = f'attachment; filename="{self._filename(report_type, "pdf")}"'
        return response

    def _export_to_excel(self, columns, rows, report_type):
        df = pd.DataFrame(rows, columns=columns)
        output = BytesIO()

        with pd.ExcelWriter(output, engine='openpyxl') as writer:
            df.to_excel(writer, sheet_name=report_type, index=False)

        output.seek(0)
        response = HttpResponse(
            output.getvalue(),
            content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        )
        response['Content-Disposition'] = f'attachment; filename="{self._filename(report_type, "xlsx")}"'
        return response
