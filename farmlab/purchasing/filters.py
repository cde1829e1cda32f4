import django_filters
from .models import SupplierInvoice


class InvoiceFilter(django_filters.FilterSet):
    """Supplier and invoice date range"""

    supplier = django_filters.NumberFilter(field_name='supplier_id')
    date_from = django_filters.DateFilter(field_name='invoice_date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='invoice_date', lookup_expr='lte')

    class Meta:
        model = SupplierInvoice
        fields = ['supplier', 'date_from', 'date_to']
