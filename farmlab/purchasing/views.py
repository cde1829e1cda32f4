import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404

from farmlab.core.filters import apply_filters
from farmlab.core.pagination import paginated_response
from farmlab.core.utils import create_audit_log
from .filters import InvoiceFilter
from .models import SupplierInvoice
from .serializers import SupplierInvoiceSerializer

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def invoice_list_create(request):
    """List supplier invoices or record a new one"""
    if request.method == 'GET':
        queryset = apply_filters(
            InvoiceFilter, request,
            SupplierInvoice.objects.select_related('supplier', 'created_by').prefetch_related('lines')
        )
        return paginated_response(request, queryset.order_by('-created_at'), SupplierInvoiceSerializer)
    else:
        serializer = SupplierInvoiceSerializer(data=request.data)
        if serializer.is_valid():
            invoice = serializer.save(created_by=request.user)
            create_audit_log(
                request, 'invoice_create', 'SupplierInvoice', invoice.pk,
                changes={'grand_total': str(invoice.grand_total), 'lines': invoice.lines.count()},
                object_name=str(invoice)
            )
            logger.info(f"Invoice {invoice} recorded for {invoice.supplier_enterprise}: {invoice.grand_total}")
            return Response(SupplierInvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def invoice_detail(request, pk):
    """Retrieve or delete a supplier invoice"""
    invoice = get_object_or_404(SupplierInvoice, pk=pk)

    if request.method == 'GET':
        serializer = SupplierInvoiceSerializer(invoice)
        return Response(serializer.data)
    else:  # DELETE
        create_audit_log(request, 'delete', 'SupplierInvoice', invoice.pk, object_name=str(invoice))
        invoice.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
