from django.contrib import admin
from .models import SupplierInvoice, InvoiceLine


class InvoiceLineInline(admin.TabularInline):
    model = InvoiceLine
    extra = 0
    readonly_fields = ['price_per_kilogram', 'total_price']


@admin.register(SupplierInvoice)
class SupplierInvoiceAdmin(admin.ModelAdmin):
    list_display = ['invoice_number', 'supplier_enterprise', 'invoice_date', 'grand_total', 'created_at']
    list_filter = ['invoice_date', 'created_at']
    search_fields = ['invoice_number', 'supplier_name', 'supplier_enterprise']
    ordering = ['-created_at']
    inlines = [InvoiceLineInline]
